"""
LLM Router

Provider factory and task-to-model routing.
"""
import logging

from .base import LLMProvider
from .openai_provider import OpenAIProvider
from .gemini_provider import GeminiProvider
from ..config import settings

logger = logging.getLogger(__name__)


def create_provider(api_key: str, tier: str) -> LLMProvider:
    """Create a provider for the configured backend bound to one credential."""
    if settings.llm_provider == "openai":
        logger.info(f"Initializing OpenAI provider ({tier})")
        return OpenAIProvider(api_key=api_key, tier=tier)
    if settings.llm_provider == "gemini":
        logger.info(f"Initializing Gemini provider ({tier})")
        return GeminiProvider(api_key=api_key, tier=tier)
    raise ValueError(f"Unknown LLM provider: {settings.llm_provider}")


# Task to model purpose mapping
TASK_PURPOSES = {
    "grounded_generation": "generation",
    "conversation_reply": "generation",
    "context_summary": "summary",
}


def get_model_for_task(task: str) -> str:
    """Get the model name for a given task."""
    return settings.get_model(TASK_PURPOSES.get(task, "generation"))
