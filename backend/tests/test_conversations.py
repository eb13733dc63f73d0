"""Tests for the conversation manager."""
import asyncio

import pytest

from leadlens.engine.conversation import ConversationManager, ConversationState
from leadlens.errors import (
    ValidationFailedError,
    RecordNotFoundError,
    OperationInProgressError,
    GroundingLoadingError,
)
from leadlens.generation import GenerationClient
from leadlens.models import ContextItem, ContentKind, MessageRole
from leadlens.services.records import list_messages
from leadlens.prompts.rules import PERSONA_MARKER

from .conftest import FakeProvider, ALWAYS


@pytest.fixture
def manager(db, generator, activity, publisher):
    return ConversationManager(db, "user-1", generator, activity=activity, publisher=publisher)


@pytest.fixture
async def conversation(manager, project, context_items):
    return await manager.create_conversation(project.id, "Discovery prep")


class TestCreate:
    async def test_create_requires_title(self, manager, project):
        with pytest.raises(ValidationFailedError):
            await manager.create_conversation(project.id, "   ")

    async def test_create_requires_project(self, manager):
        with pytest.raises(ValidationFailedError):
            await manager.create_conversation(None, "Title")

    async def test_create_rejects_other_users_project(self, db, generator, project):
        other = ConversationManager(db, "user-2", generator)
        with pytest.raises(RecordNotFoundError):
            await other.create_conversation(project.id, "Title")

    async def test_create_rejects_unknown_persona(self, manager, project):
        with pytest.raises(RecordNotFoundError):
            await manager.create_conversation(project.id, "Title", persona_id="missing")

    async def test_new_conversation_is_empty(self, db, conversation):
        assert conversation.title == "Discovery prep"
        assert await list_messages(db, conversation.id) == []


class TestSend:
    async def test_empty_message_is_a_no_op(self, db, manager, conversation, primary):
        assert await manager.send_message(conversation.id, "   ") is None
        assert primary.calls == 0
        assert await list_messages(db, conversation.id) == []

    async def test_success_appends_user_then_assistant(self, manager, conversation, primary):
        result = await manager.send_message(conversation.id, "What does Acme care about?")

        assert not result.reply_failed
        assert [m.role for m in result.messages] == [MessageRole.USER, MessageRole.ASSISTANT]
        assert result.messages[0].content == "What does Acme care about?"
        assert result.messages[1].content == "primary reply"
        assert result.messages[1].created_at > result.messages[0].created_at
        assert result.reply.id == result.messages[1].id

        prompt = primary.prompts[0]
        assert "Current User Message: What does Acme care about?" in prompt
        assert "cut picking errors by 30 percent" in prompt
        assert PERSONA_MARKER not in prompt

    async def test_history_is_included_on_second_turn(self, manager, conversation, primary):
        await manager.send_message(conversation.id, "First question")
        await manager.send_message(conversation.id, "Second question")

        second_prompt = primary.prompts[1]
        assert "User: First question" in second_prompt
        assert "Assistant: primary reply" in second_prompt

    async def test_failure_keeps_user_message_last(self, db, project, context_items, activity, publisher):
        client = GenerationClient(
            FakeProvider("primary", fail_times=ALWAYS),
            FakeProvider("secondary", fail_times=ALWAYS),
            default_model="m",
        )
        manager = ConversationManager(db, "user-1", client, activity=activity, publisher=publisher)
        conversation = await manager.create_conversation(project.id, "Flaky")

        result = await manager.send_message(conversation.id, "Hello?")

        assert result.reply_failed
        assert result.reply is None
        assert result.error
        assert [m.role for m in result.messages] == [MessageRole.USER]
        assert activity.state(conversation.id) == ConversationState.IDLE
        assert len(activity) == 0

    async def test_cancel_stops_reply_and_keeps_user_message(
        self, db, session_factory, project, context_items, activity, publisher
    ):
        primary = FakeProvider("primary", fail_times=ALWAYS, delay=0.1)
        secondary = FakeProvider("secondary")
        client = GenerationClient(primary, secondary, default_model="m")
        manager = ConversationManager(db, "user-1", client, activity=activity, publisher=publisher)
        conversation = await manager.create_conversation(project.id, "Long reply")

        sending = asyncio.create_task(manager.send_message(conversation.id, "Write a long plan"))
        while primary.calls == 0:
            await asyncio.sleep(0.01)

        async with session_factory() as other_db:
            other = ConversationManager(other_db, "user-1", client, activity=activity, publisher=publisher)
            assert await other.cancel_reply(conversation.id) is True

        result = await sending
        assert result.reply_failed
        assert "cancelled" in result.error
        assert [m.role for m in result.messages] == [MessageRole.USER]
        assert primary.calls == 1
        assert secondary.calls == 0
        assert len(activity) == 0

    async def test_cancel_with_nothing_generating(self, manager, conversation):
        assert await manager.cancel_reply(conversation.id) is False

    async def test_cancel_unknown_conversation(self, manager):
        with pytest.raises(RecordNotFoundError):
            await manager.cancel_reply("nope")

    async def test_grounding_is_read_at_send_time(self, db, manager, conversation, project, primary):
        await manager.select_conversation(conversation.id)

        db.add(ContextItem(
            project_id=project.id,
            content_type=ContentKind.TEXT,
            content="Budget approved for Q4.",
        ))
        await db.commit()

        await manager.send_message(conversation.id, "Any budget news?")
        assert "Budget approved for Q4." in primary.prompts[0]

    async def test_send_rejected_while_generating(self, manager, conversation, activity):
        activity.begin_generating(conversation.id)
        with pytest.raises(OperationInProgressError):
            await manager.send_message(conversation.id, "Again")

    async def test_send_rejected_while_loading(self, manager, conversation, activity):
        activity.begin_loading(conversation.id)
        with pytest.raises(GroundingLoadingError):
            await manager.send_message(conversation.id, "Too soon")

    async def test_persona_framing_is_used(self, manager, project, context_items, persona, primary):
        conversation = await manager.create_conversation(project.id, "With persona", persona_id=persona.id)
        await manager.send_message(conversation.id, "Draft an intro")

        assert PERSONA_MARKER in primary.prompts[0]
        assert "Account Executive" in primary.prompts[0]

    async def test_send_touches_updated_at(self, manager, conversation):
        before = conversation.updated_at
        await manager.send_message(conversation.id, "Ping")
        conversations = await manager.list_conversations()
        assert conversations[0].updated_at >= before


class TestSelect:
    async def test_select_loads_grounding_and_history(self, manager, conversation):
        await manager.send_message(conversation.id, "Hi")
        view = await manager.select_conversation(conversation.id)

        assert view.project.name == "Acme Robotics"
        assert view.grounding.item_count == 2
        assert len(view.messages) == 2
        assert view.state == ConversationState.READY

    async def test_select_while_generating_leaves_state_alone(self, manager, conversation, activity, publisher):
        await manager.send_message(conversation.id, "Hi")
        activity.begin_generating(conversation.id)

        view = await manager.select_conversation(conversation.id)

        assert len(view.messages) == 2
        assert view.grounding.item_count == 2
        assert view.state == ConversationState.GENERATING
        assert activity.state(conversation.id) == ConversationState.GENERATING
        assert publisher.latest(conversation.id) is None

    async def test_select_tolerates_deleted_project(self, db, manager, conversation, project, primary):
        await db.delete(project)
        await db.commit()

        view = await manager.select_conversation(conversation.id)
        assert view.project_missing
        assert not view.grounding.available

        result = await manager.send_message(conversation.id, "Still there?")
        assert not result.reply_failed
        assert '"Unknown Project"' in primary.prompts[0]

    async def test_select_publishes_state_events(self, manager, conversation, publisher):
        events = []
        stream = publisher.subscribe(conversation.id)
        events.append(await stream.__anext__())

        await manager.select_conversation(conversation.id)
        events.append(await stream.__anext__())
        events.append(await stream.__anext__())
        await stream.aclose()

        assert "connected" in events[0]
        assert "context_loading" in events[1]
        assert "ready" in events[2]

    async def test_select_unknown_conversation(self, manager):
        with pytest.raises(RecordNotFoundError):
            await manager.select_conversation("nope")


class TestRenameDelete:
    async def test_rename(self, manager, conversation):
        renamed = await manager.rename_conversation(conversation.id, "  Renamed  ")
        assert renamed.title == "Renamed"

    async def test_rename_requires_title(self, manager, conversation):
        with pytest.raises(ValidationFailedError):
            await manager.rename_conversation(conversation.id, "")

    async def test_delete_removes_messages(self, db, manager, conversation):
        await manager.send_message(conversation.id, "Hi")
        await manager.delete_conversation(conversation.id)

        assert await list_messages(db, conversation.id) == []
        with pytest.raises(RecordNotFoundError):
            await manager.select_conversation(conversation.id)

    async def test_delete_refused_while_generating(self, manager, conversation, activity):
        activity.begin_generating(conversation.id)
        with pytest.raises(OperationInProgressError):
            await manager.delete_conversation(conversation.id)

    async def test_list_is_scoped_to_project(self, manager, conversation, project):
        assert [c.id for c in await manager.list_conversations(project.id)] == [conversation.id]
        assert await manager.list_conversations("other-project") == []


async def test_assistant_without_context_discloses_insufficiency(db, activity, publisher):
    from leadlens.models import Project
    from leadlens.prompts.rules import NO_CONTEXT_NOTICE

    project = Project(user_id="user-1", name="Blank Co")
    db.add(project)
    await db.commit()

    stub = FakeProvider("primary", reply="I don't have enough information")
    manager = ConversationManager(
        db, "user-1", GenerationClient(stub, default_model="m"), activity=activity, publisher=publisher,
    )
    conversation = await manager.create_conversation(project.id, "Empty")

    result = await manager.send_message(conversation.id, "what does this company do?")

    assert NO_CONTEXT_NOTICE in stub.prompts[0]
    assert result.messages[-1].content == "I don't have enough information"
