"""
Conversations API

Endpoints for the context assistant: multi-turn, project-grounded threads.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..engine.assembler import PromptAssembler
from ..engine.conversation import ConversationActivity, ConversationManager
from ..events import get_event_publisher
from ..generation import GenerationClient
from ..schemas.conversation import (
    ConversationCreate,
    ConversationRename,
    ConversationResponse,
    ConversationListResponse,
    ConversationDetailResponse,
    MessageResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from ..services.records import get_conversation
from .deps import (
    DOMAIN_ERRORS,
    get_current_user_id,
    get_generator,
    get_assembler,
    get_activity,
    to_http_error,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])


def get_manager(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    generator: GenerationClient = Depends(get_generator),
    assembler: PromptAssembler = Depends(get_assembler),
    activity: ConversationActivity = Depends(get_activity),
) -> ConversationManager:
    return ConversationManager(db, user_id, generator, assembler=assembler, activity=activity)


@router.post("", response_model=ConversationResponse)
async def create_conversation(
    data: ConversationCreate,
    manager: ConversationManager = Depends(get_manager),
):
    """Start a conversation about one of the caller's projects."""
    try:
        conversation = await manager.create_conversation(data.project_id, data.title, data.persona_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return ConversationResponse.model_validate(conversation)


@router.get("", response_model=ConversationListResponse)
async def list_conversations(
    project_id: Optional[str] = None,
    manager: ConversationManager = Depends(get_manager),
):
    """List conversations, most recently active first."""
    conversations = await manager.list_conversations(project_id)
    return ConversationListResponse(
        conversations=[ConversationResponse.model_validate(c) for c in conversations],
        total=len(conversations),
    )


@router.get("/{conversation_id}", response_model=ConversationDetailResponse)
async def select_conversation(
    conversation_id: str,
    manager: ConversationManager = Depends(get_manager),
):
    """
    Open a conversation.

    Reloads history and refreshes the project's grounding. A deleted project
    is reported through project_missing rather than as an error.
    """
    try:
        view = await manager.select_conversation(conversation_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e

    return ConversationDetailResponse(
        conversation=ConversationResponse.model_validate(view.conversation),
        messages=[MessageResponse.model_validate(m) for m in view.messages],
        project_name=view.project.name if view.project else None,
        project_missing=view.project_missing,
        persona_name=view.persona.persona_name if view.persona else None,
        context_item_count=view.grounding.item_count,
        context_available=view.grounding.available,
        context_warning=view.grounding.warning,
        state=view.state.value,
    )


@router.post("/{conversation_id}/messages", response_model=SendMessageResponse)
async def send_message(
    conversation_id: str,
    data: SendMessageRequest,
    manager: ConversationManager = Depends(get_manager),
):
    """
    Send a message and wait for the assistant reply.

    A failed reply is not an HTTP error: the user message is stored and the
    response carries reply_failed with the stored history.
    """
    try:
        result = await manager.send_message(conversation_id, data.message)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e

    if result is None:
        raise HTTPException(status_code=400, detail="Message is empty")

    return SendMessageResponse(
        messages=[MessageResponse.model_validate(m) for m in result.messages],
        reply=MessageResponse.model_validate(result.reply) if result.reply else None,
        reply_failed=result.reply_failed,
        error=result.error,
    )


@router.post("/{conversation_id}/cancel")
async def cancel_reply(
    conversation_id: str,
    manager: ConversationManager = Depends(get_manager),
):
    """
    Cancel the reply in flight.

    The pending send returns reply_failed once its current attempt ends.
    cancelled is false when no reply was generating.
    """
    try:
        cancelled = await manager.cancel_reply(conversation_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return {"conversation_id": conversation_id, "cancelled": cancelled}


@router.patch("/{conversation_id}", response_model=ConversationResponse)
async def rename_conversation(
    conversation_id: str,
    data: ConversationRename,
    manager: ConversationManager = Depends(get_manager),
):
    try:
        conversation = await manager.rename_conversation(conversation_id, data.title)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return ConversationResponse.model_validate(conversation)


@router.delete("/{conversation_id}")
async def delete_conversation(
    conversation_id: str,
    manager: ConversationManager = Depends(get_manager),
):
    """Delete a conversation and all of its messages."""
    try:
        await manager.delete_conversation(conversation_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return {"status": "deleted", "conversation_id": conversation_id}


@router.get("/{conversation_id}/events")
async def stream_events(
    conversation_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Stream conversation state changes using Server-Sent Events.

    Events: context_loading, ready, generating, reply_saved, reply_failed.
    """
    if await get_conversation(db, user_id, conversation_id) is None:
        raise HTTPException(status_code=404, detail="Conversation not found")

    publisher = get_event_publisher()

    async def event_generator():
        async for event in publisher.subscribe(conversation_id):
            if await request.is_disconnected():
                break
            yield event

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        }
    )
