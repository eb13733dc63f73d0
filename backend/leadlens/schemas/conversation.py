"""
Conversation Schemas

Pydantic models for the context assistant API.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from ..models import MessageRole


class ConversationCreate(BaseModel):
    """Request to start a conversation."""
    project_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=255)
    persona_id: Optional[str] = None

    model_config = {"extra": "forbid"}


class ConversationRename(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)

    model_config = {"extra": "forbid"}


class SendMessageRequest(BaseModel):
    """A user turn. Blank text is accepted and ignored."""
    message: str = ""

    model_config = {"extra": "forbid"}


class MessageResponse(BaseModel):
    id: str
    role: MessageRole
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ConversationResponse(BaseModel):
    """Conversation header returned from API."""
    id: str
    project_id: str
    persona_id: Optional[str] = None
    title: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ConversationListResponse(BaseModel):
    conversations: List[ConversationResponse]
    total: int


class ConversationDetailResponse(BaseModel):
    """A selected conversation with its history and grounding status."""
    conversation: ConversationResponse
    messages: List[MessageResponse]
    project_name: Optional[str] = None
    project_missing: bool = False
    persona_name: Optional[str] = None
    context_item_count: int = 0
    context_available: bool = False
    context_warning: Optional[str] = None
    state: str


class SendMessageResponse(BaseModel):
    """
    Result of a send.

    `messages` is the stored history after the send. When `reply_failed` is
    set the user message is kept and `error` explains what happened.
    """
    messages: List[MessageResponse]
    reply: Optional[MessageResponse] = None
    reply_failed: bool = False
    error: Optional[str] = None
