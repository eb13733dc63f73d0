"""
Conversation State Manager

Owns the lifecycle of assistant conversations: creation, selection (history
plus a fresh grounding document), sending, renaming and deletion.

Per conversation the state moves idle -> loading -> ready -> generating ->
ready. Sending is refused while the same conversation is loading or already
generating, and an in-flight reply can be cancelled between attempts. A
failed or cancelled reply leaves the user's message persisted.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..errors import (
    ValidationFailedError,
    RecordNotFoundError,
    OperationInProgressError,
    GroundingLoadingError,
)
from ..events import EventPublisher, EventType, get_event_publisher
from ..generation import GenerationClient, GenerationCancelledError
from ..grounding import GroundingDocument, enforce_grounding_limit
from ..llm import get_model_for_task
from ..models import Conversation, Message, MessageRole, Persona, Project
from ..prompts import ASSISTANT_KIND
from ..services.records import (
    get_project,
    get_persona,
    get_conversation,
    list_messages,
    load_grounding,
)
from ..tracer import trace_section, trace_input, trace_step, trace_call, trace_result, trace_output
from .assembler import PromptAssembler, get_prompt_assembler

logger = logging.getLogger(__name__)


class ConversationState(str, Enum):
    """Per-conversation activity state."""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    GENERATING = "generating"


class ConversationActivity:
    """
    Process-wide record of what each conversation is doing.

    Transitions happen synchronously (no await between check and set), so
    two overlapping requests for one conversation cannot both start. Only
    conversations that are loading or generating are tracked; a settled
    conversation is dropped and reads as idle again.
    """

    def __init__(self):
        self._states: Dict[str, ConversationState] = {}
        self._cancels: Dict[str, asyncio.Event] = {}

    def state(self, conversation_id: str) -> ConversationState:
        return self._states.get(conversation_id, ConversationState.IDLE)

    def begin_loading(self, conversation_id: str) -> None:
        if self.state(conversation_id) == ConversationState.GENERATING:
            raise OperationInProgressError("A reply is still being generated for this conversation")
        self._states[conversation_id] = ConversationState.LOADING

    def begin_generating(self, conversation_id: str, cancel: Optional[asyncio.Event] = None) -> asyncio.Event:
        """Mark a reply in flight and return the token that cancels it."""
        state = self.state(conversation_id)
        if state == ConversationState.GENERATING:
            raise OperationInProgressError("A message is already being sent in this conversation")
        if state == ConversationState.LOADING:
            raise GroundingLoadingError("Please wait for project context to load before sending a message")
        self._states[conversation_id] = ConversationState.GENERATING
        token = cancel if cancel is not None else asyncio.Event()
        self._cancels[conversation_id] = token
        return token

    def cancel(self, conversation_id: str) -> bool:
        """Ask the in-flight reply to stop before its next attempt. False if none is running."""
        token = self._cancels.get(conversation_id)
        if token is None:
            return False
        token.set()
        return True

    def finish_loading(self, conversation_id: str) -> None:
        # A reply may have started once an overlapping load settled
        if self.state(conversation_id) == ConversationState.LOADING:
            self._states.pop(conversation_id, None)

    def mark_ready(self, conversation_id: str) -> None:
        self._states.pop(conversation_id, None)
        self._cancels.pop(conversation_id, None)

    def forget(self, conversation_id: str) -> None:
        self.mark_ready(conversation_id)

    def __len__(self) -> int:
        return len(self._states)


_activity: Optional[ConversationActivity] = None


def get_conversation_activity() -> ConversationActivity:
    """Get or create the global activity registry."""
    global _activity
    if _activity is None:
        _activity = ConversationActivity()
    return _activity


@dataclass
class ConversationView:
    """A selected conversation with everything needed to display and continue it."""
    conversation: Conversation
    project: Optional[Project]
    persona: Optional[Persona]
    messages: List[Message]
    grounding: GroundingDocument
    state: ConversationState

    @property
    def project_missing(self) -> bool:
        return self.project is None


@dataclass
class SendResult:
    """Outcome of sending a message. messages is always re-read from storage."""
    messages: List[Message]
    reply: Optional[Message] = None
    reply_failed: bool = False
    error: Optional[str] = None


class ConversationManager:
    """Conversation operations for one user within one database session."""

    def __init__(
        self,
        db: AsyncSession,
        user_id: str,
        generator: GenerationClient,
        assembler: Optional[PromptAssembler] = None,
        activity: Optional[ConversationActivity] = None,
        publisher: Optional[EventPublisher] = None,
    ):
        self.db = db
        self.user_id = user_id
        self.generator = generator
        self.assembler = assembler or get_prompt_assembler()
        self.activity = activity or get_conversation_activity()
        self.publisher = publisher or get_event_publisher()

    async def _require(self, conversation_id: str) -> Conversation:
        conversation = await get_conversation(self.db, self.user_id, conversation_id)
        if conversation is None:
            raise RecordNotFoundError("Conversation", conversation_id)
        return conversation

    async def _persona_for(self, conversation: Conversation) -> Optional[Persona]:
        if not conversation.persona_id:
            return None
        persona = await get_persona(self.db, self.user_id, conversation.persona_id)
        if persona is None:
            logger.warning(
                f"Persona {conversation.persona_id} of conversation {conversation.id} not found; "
                "continuing without role framing"
            )
        return persona

    async def create_conversation(
        self,
        project_id: Optional[str],
        title: Optional[str],
        persona_id: Optional[str] = None,
    ) -> Conversation:
        """Create an empty conversation for a project the user owns."""
        title = (title or "").strip()
        if not title:
            raise ValidationFailedError("A conversation title is required")
        if not project_id:
            raise ValidationFailedError("Select a project before starting a conversation")

        if await get_project(self.db, self.user_id, project_id) is None:
            raise RecordNotFoundError("Project", project_id)
        if persona_id and await get_persona(self.db, self.user_id, persona_id) is None:
            raise RecordNotFoundError("Persona", persona_id)

        conversation = Conversation(
            user_id=self.user_id,
            project_id=project_id,
            persona_id=persona_id,
            title=title,
        )
        self.db.add(conversation)
        await self.db.commit()
        await self.db.refresh(conversation)

        logger.info(f"Created conversation {conversation.id} for project {project_id}")
        return conversation

    async def list_conversations(self, project_id: Optional[str] = None) -> List[Conversation]:
        """The user's conversations, most recently active first."""
        stmt = select(Conversation).where(Conversation.user_id == self.user_id)
        if project_id:
            stmt = stmt.where(Conversation.project_id == project_id)
        result = await self.db.execute(stmt.order_by(Conversation.updated_at.desc()))
        return list(result.scalars().all())

    async def select_conversation(self, conversation_id: str) -> ConversationView:
        """
        Load history and refresh grounding for a conversation.

        A missing project record is tolerated: the view carries project=None
        and the grounding items are still used. Selecting a conversation whose
        reply is still generating returns the stored history and leaves the
        in-flight state untouched.
        """
        conversation = await self._require(conversation_id)

        if self.activity.state(conversation_id) == ConversationState.GENERATING:
            return await self._load_view(conversation, ConversationState.GENERATING)

        self.activity.begin_loading(conversation_id)
        await self.publisher.publish(conversation_id, EventType.CONTEXT_LOADING, "Loading project context...")
        try:
            view = await self._load_view(conversation, ConversationState.READY)
        finally:
            self.activity.finish_loading(conversation_id)

        await self.publisher.publish(
            conversation_id,
            EventType.READY,
            "Ready",
            data={"context_items": view.grounding.item_count},
        )
        return view

    async def _load_view(self, conversation: Conversation, state: ConversationState) -> ConversationView:
        project = await get_project(self.db, self.user_id, conversation.project_id)
        if project is None:
            logger.warning(
                f"Project {conversation.project_id} for conversation {conversation.id} not found; "
                "using context items only"
            )
        persona = await self._persona_for(conversation)
        grounding = await load_grounding(self.db, conversation.project_id)
        messages = await list_messages(self.db, conversation.id)
        return ConversationView(
            conversation=conversation,
            project=project,
            persona=persona,
            messages=messages,
            grounding=grounding,
            state=state,
        )

    async def send_message(
        self,
        conversation_id: str,
        text: Optional[str],
        cancel: Optional[asyncio.Event] = None,
    ) -> Optional[SendResult]:
        """
        Send a user message and generate the assistant reply.

        Empty or whitespace-only text is a no-op and returns None. The user
        message is committed before generation starts; if generation fails
        or is cancelled it stays, and the result is flagged reply_failed.
        """
        text = (text or "").strip()
        if not text:
            return None

        conversation = await self._require(conversation_id)

        trace_section("Conversation Message")
        trace_input("engine.conversation", "conversation_id", conversation_id)
        trace_input("engine.conversation", "message", text)

        token = self.activity.begin_generating(conversation_id, cancel)
        await self.publisher.publish(conversation_id, EventType.GENERATING, "Generating reply...")
        try:
            result = await self._send(conversation, text, token)
        finally:
            self.activity.mark_ready(conversation_id)

        if result.reply_failed:
            await self.publisher.publish(
                conversation_id, EventType.REPLY_FAILED, "Assistant reply failed", data={"error": result.error}
            )
        else:
            await self.publisher.publish(
                conversation_id, EventType.REPLY_SAVED, "Reply saved", data={"message_id": result.reply.id}
            )
        return result

    async def _send(
        self,
        conversation: Conversation,
        text: str,
        cancel: Optional[asyncio.Event],
    ) -> SendResult:
        # Grounding is read at send time so items added since selection count
        trace_step("engine.conversation", "Reading project, persona and context items")
        project = await get_project(self.db, self.user_id, conversation.project_id)
        persona = await self._persona_for(conversation)
        grounding = await load_grounding(self.db, conversation.project_id)
        enforce_grounding_limit(grounding, settings.grounding_max_chars)
        history = await list_messages(self.db, conversation.id)

        trace_step("engine.conversation", "Persisting user message")
        user_message = Message(
            conversation_id=conversation.id,
            role=MessageRole.USER,
            content=text,
            created_at=datetime.utcnow(),
        )
        self.db.add(user_message)
        await self.db.commit()

        prompt = self.assembler.build_prompt(
            ASSISTANT_KIND,
            project,
            persona,
            grounding,
            history=history,
            user_instruction=text,
            project_id=conversation.project_id,
        )

        trace_call("engine.conversation", "GenerationClient.generate", f"{len(prompt)} chars")
        try:
            reply_text = await self.generator.generate(
                prompt,
                model=get_model_for_task("conversation_reply"),
                cancel=cancel,
            )
        except GenerationCancelledError:
            logger.info(f"Assistant reply cancelled for conversation {conversation.id}")
            trace_result("engine.conversation", "GenerationClient.generate", False, "cancelled")
            return await self._reply_failed(
                conversation, "The reply was cancelled. Your message was saved."
            )
        except Exception as e:
            logger.error(f"Assistant reply failed for conversation {conversation.id}: {e}")
            trace_result("engine.conversation", "GenerationClient.generate", False, str(e))
            return await self._reply_failed(
                conversation, "The assistant reply failed. Your message was saved; please try again."
            )
        trace_result("engine.conversation", "GenerationClient.generate", True, reply_text)

        # Ordering is by created_at; never let the reply sort before the question
        reply_at = max(datetime.utcnow(), user_message.created_at + timedelta(microseconds=1))
        reply = Message(
            conversation_id=conversation.id,
            role=MessageRole.ASSISTANT,
            content=reply_text,
            created_at=reply_at,
        )
        self.db.add(reply)
        conversation.updated_at = reply_at
        await self.db.commit()

        messages = await list_messages(self.db, conversation.id)
        trace_output("engine.conversation", "message_count", len(messages))
        return SendResult(messages=messages, reply=reply)

    async def _reply_failed(self, conversation: Conversation, error: str) -> SendResult:
        conversation.updated_at = datetime.utcnow()
        await self.db.commit()
        return SendResult(
            messages=await list_messages(self.db, conversation.id),
            reply_failed=True,
            error=error,
        )

    async def cancel_reply(self, conversation_id: str) -> bool:
        """
        Cancel the reply being generated for a conversation.

        The running attempt finishes; no further attempt starts. Returns
        False when nothing is generating.
        """
        await self._require(conversation_id)
        cancelled = self.activity.cancel(conversation_id)
        if cancelled:
            logger.info(f"Cancellation requested for conversation {conversation_id}")
        return cancelled

    async def rename_conversation(self, conversation_id: str, title: Optional[str]) -> Conversation:
        """Rename a conversation the user owns."""
        title = (title or "").strip()
        if not title:
            raise ValidationFailedError("A conversation title is required")

        conversation = await self._require(conversation_id)
        conversation.title = title
        await self.db.commit()
        await self.db.refresh(conversation)
        return conversation

    async def delete_conversation(self, conversation_id: str) -> None:
        """Delete a conversation and its messages. There is no undo."""
        conversation = await self._require(conversation_id)
        if self.activity.state(conversation_id) == ConversationState.GENERATING:
            raise OperationInProgressError("Wait for the current reply before deleting this conversation")

        await self.db.execute(delete(Message).where(Message.conversation_id == conversation_id))
        await self.db.delete(conversation)
        await self.db.commit()

        self.activity.forget(conversation_id)
        await self.publisher.close_all(conversation_id)
        logger.info(f"Deleted conversation {conversation_id}")
