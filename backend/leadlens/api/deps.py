"""
API Dependencies

Request identity, shared pipeline components and domain error translation.
"""
import logging
from typing import Optional

from fastapi import Header, HTTPException

from ..engine.assembler import PromptAssembler, get_prompt_assembler
from ..engine.conversation import ConversationActivity, get_conversation_activity
from ..engine.tools import WorkspaceRegistry, get_workspace_registry
from ..errors import (
    LeadLensError,
    ValidationFailedError,
    RecordNotFoundError,
    OperationInProgressError,
    GroundingLoadingError,
    GroundingTooLargeError,
)
from ..generation import GenerationClient, GenerationCancelledError, get_generation_client
from ..llm import LLMError

logger = logging.getLogger(__name__)

# Errors routes translate with to_http_error
DOMAIN_ERRORS = (LeadLensError, LLMError)


async def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """The caller's identity, issued by the OAuth provider in front of the service."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def get_generator() -> GenerationClient:
    return get_generation_client()


def get_assembler() -> PromptAssembler:
    return get_prompt_assembler()


def get_registry() -> WorkspaceRegistry:
    return get_workspace_registry()


def get_activity() -> ConversationActivity:
    return get_conversation_activity()


def to_http_error(exc: Exception) -> HTTPException:
    """Map a domain or generation error onto the HTTP status the client sees."""
    if isinstance(exc, ValidationFailedError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=404, detail=f"{exc.record_type} not found")
    if isinstance(exc, (OperationInProgressError, GroundingLoadingError)):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, GroundingTooLargeError):
        return HTTPException(status_code=413, detail=str(exc))
    if isinstance(exc, GenerationCancelledError):
        return HTTPException(status_code=409, detail="Generation was cancelled")
    if isinstance(exc, LLMError):
        logger.error(f"Generation failed: {exc}")
        return HTTPException(status_code=502, detail="Generation failed. Please try again.")
    return HTTPException(status_code=400, detail=str(exc))
