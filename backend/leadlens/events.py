"""
Conversation Event Stream

Server-Sent Events for conversation state transitions: grounding loading,
ready, generating, reply saved and reply failed. A subscriber that connects
late is sent the most recent transition first, so it never has to guess
whether a reply is already in flight. Channels of settled conversations
with no subscribers are dropped; a stream that replays nothing means the
conversation is idle.
"""
import asyncio
import json
import logging
from dataclasses import dataclass, asdict, field
from datetime import datetime
from enum import Enum
from typing import AsyncGenerator, Dict, List, Optional

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Conversation event types."""
    CONTEXT_LOADING = "context_loading"
    READY = "ready"
    GENERATING = "generating"
    REPLY_SAVED = "reply_saved"
    REPLY_FAILED = "reply_failed"


# After these nothing is in flight; a channel with no subscribers left is dropped
SETTLED_EVENTS = frozenset({EventType.READY.value, EventType.REPLY_SAVED.value, EventType.REPLY_FAILED.value})


@dataclass
class ConversationEvent:
    """One state transition of a conversation."""
    event_type: str
    message: str
    conversation_id: str
    data: Optional[Dict] = None
    timestamp: str = field(default_factory=lambda: datetime.utcnow().isoformat())

    def to_sse(self) -> str:
        return f"data: {json.dumps(asdict(self))}\n\n"


def _connected_frame(conversation_id: str) -> str:
    payload = {
        "event_type": "connected",
        "message": "Connected to event stream",
        "conversation_id": conversation_id,
    }
    return f"data: {json.dumps(payload)}\n\n"


@dataclass
class _Channel:
    queues: List[asyncio.Queue] = field(default_factory=list)
    last: Optional[ConversationEvent] = None

    @property
    def idle(self) -> bool:
        return not self.queues and (self.last is None or self.last.event_type in SETTLED_EVENTS)


class EventPublisher:
    """
    Fan-out of conversation events to SSE subscribers.

    Usage:
        publisher = get_event_publisher()

        # In the SSE endpoint
        async for frame in publisher.subscribe(conversation_id):
            yield frame

        # In the conversation manager
        await publisher.publish(conversation_id, EventType.GENERATING, "Generating reply...")
    """

    def __init__(self):
        self._channels: Dict[str, _Channel] = {}
        self._lock = asyncio.Lock()

    def latest(self, conversation_id: str) -> Optional[ConversationEvent]:
        """Most recent event published for a conversation, if any."""
        channel = self._channels.get(conversation_id)
        return channel.last if channel else None

    async def subscribe(self, conversation_id: str) -> AsyncGenerator[str, None]:
        """Yield SSE frames for one conversation until it is closed."""
        queue: asyncio.Queue = asyncio.Queue()
        async with self._lock:
            channel = self._channels.setdefault(conversation_id, _Channel())
            channel.queues.append(queue)
            replay = channel.last

        try:
            yield _connected_frame(conversation_id)
            if replay is not None:
                yield replay.to_sse()

            while True:
                event = await queue.get()
                if event is None:  # closed
                    break
                yield event.to_sse()
        finally:
            async with self._lock:
                channel = self._channels.get(conversation_id)
                if channel is not None:
                    if queue in channel.queues:
                        channel.queues.remove(queue)
                    if channel.idle:
                        del self._channels[conversation_id]

    async def publish(
        self,
        conversation_id: str,
        event_type: EventType,
        message: str,
        data: Optional[Dict] = None,
    ) -> None:
        """Record the event as the conversation's latest and send it to every subscriber."""
        event = ConversationEvent(
            event_type=event_type.value,
            message=message,
            conversation_id=conversation_id,
            data=data,
        )
        async with self._lock:
            channel = self._channels.setdefault(conversation_id, _Channel())
            channel.last = event
            queues = list(channel.queues)
            if channel.idle:
                del self._channels[conversation_id]

        for queue in queues:
            queue.put_nowait(event)
        logger.debug(f"{event.event_type} for conversation {conversation_id} -> {len(queues)} subscribers")

    async def close_all(self, conversation_id: str) -> None:
        """End every stream of a conversation and forget its history."""
        async with self._lock:
            channel = self._channels.pop(conversation_id, None)
        if channel is not None:
            for queue in channel.queues:
                queue.put_nowait(None)


_publisher: Optional[EventPublisher] = None


def get_event_publisher() -> EventPublisher:
    """Get or create the global event publisher."""
    global _publisher
    if _publisher is None:
        _publisher = EventPublisher()
    return _publisher
