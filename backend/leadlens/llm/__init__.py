# LLM Providers
from .base import LLMProvider, LLMError, LLMRateLimitError, LLMTimeoutError
from .openai_provider import OpenAIProvider
from .gemini_provider import GeminiProvider
from .router import create_provider, get_model_for_task

__all__ = [
    "LLMProvider",
    "LLMError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "OpenAIProvider",
    "GeminiProvider",
    "create_provider",
    "get_model_for_task",
]
