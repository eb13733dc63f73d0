"""
LLM Provider Base Class

Abstract interface that every text-generation backend implements.
A provider instance is bound to exactly one credential; the attempt and
fallback policy lives in generation.client, not here.
"""
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator


class LLMError(Exception):
    """Base exception for LLM errors."""
    pass


class LLMRateLimitError(LLMError):
    """Rate limit or quota exceeded."""
    pass


class LLMTimeoutError(LLMError):
    """A single attempt exceeded its deadline."""
    pass


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    All generation calls go through this interface, allowing
    provider switching without changing pipeline logic.
    """

    #: Label used in logs ("primary" / "secondary")
    tier: str = "primary"

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        model: str,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> str:
        """
        Generate text from a prompt.

        Args:
            prompt: The full prompt
            model: Model name to use
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature

        Returns:
            Generated text, verbatim

        Raises:
            LLMError: on any failure of the remote call
        """
        pass

    @asynccontextmanager
    async def reserve(self) -> AsyncIterator[None]:
        """
        Hold whatever the provider needs before a call may start.

        GenerationClient enters this before starting the attempt deadline,
        so time spent queueing is not charged to the attempt. The default
        reserves nothing.
        """
        yield

    @staticmethod
    def classify_error(provider_name: str, exc: Exception) -> LLMError:
        """Map an SDK exception onto the LLM error hierarchy."""
        error_str = str(exc).lower()
        if "quota" in error_str or "rate" in error_str or "429" in error_str:
            return LLMRateLimitError(f"{provider_name} rate limit: {exc}")
        return LLMError(f"{provider_name} error: {exc}")
