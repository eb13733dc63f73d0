"""
Generation Client

Wraps a single remote text-generation call in the credential-tier policy:
up to N immediate attempts against the primary credential, then exactly one
attempt against the secondary credential. Each attempt has its own deadline
and a caller-supplied cancellation token is checked before every attempt.
"""
import asyncio
import logging
from typing import Optional

from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_none,
    retry_if_exception_type,
    retry_if_not_exception_type,
)

from ..llm.base import LLMProvider, LLMError, LLMTimeoutError

logger = logging.getLogger(__name__)


class GenerationFailedError(LLMError):
    """Both credential tiers are exhausted. __cause__ is the last failure."""
    pass


class GenerationCancelledError(LLMError):
    """The caller cancelled the generation between attempts."""
    pass


class GenerationClient:
    """
    Shared generation entry point for every tool surface.

    The client is stateless between calls; it returns the provider text
    verbatim and performs no validation of content, length or format.
    """

    def __init__(
        self,
        primary: LLMProvider,
        secondary: Optional[LLMProvider] = None,
        *,
        default_model: str,
        primary_attempts: int = 3,
        attempt_timeout: Optional[float] = 60.0,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ):
        if primary_attempts < 1:
            raise ValueError("primary_attempts must be at least 1")
        self.primary = primary
        self.secondary = secondary
        self.default_model = default_model
        self.primary_attempts = primary_attempts
        self.attempt_timeout = attempt_timeout
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(
        self,
        prompt: str,
        model: Optional[str] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> str:
        """
        Generate text for a fully assembled prompt.

        Args:
            prompt: The prompt text
            model: Model override (defaults to the client's default model)
            cancel: Optional token; once set, no further attempt is started

        Returns:
            The generated text

        Raises:
            GenerationCancelledError: the token was set before an attempt
            GenerationFailedError: every attempt on both tiers failed
        """
        model = model or self.default_model

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.primary_attempts),
                wait=wait_none(),
                retry=(
                    retry_if_exception_type(Exception)
                    & retry_if_not_exception_type(GenerationCancelledError)
                ),
                reraise=True,
            ):
                with attempt:
                    return await self._attempt(
                        self.primary,
                        prompt,
                        model,
                        cancel,
                        attempt.retry_state.attempt_number,
                    )
        except GenerationCancelledError:
            raise
        except Exception as primary_error:
            last_primary_error = primary_error

        if self.secondary is None:
            logger.error(
                f"Primary credential failed {self.primary_attempts} times and no backup is configured"
            )
            raise GenerationFailedError(
                f"Generation failed and no backup credential is configured: {last_primary_error}"
            ) from last_primary_error

        logger.warning("Switching to backup credential after primary tier was exhausted")
        try:
            return await self._attempt(self.secondary, prompt, model, cancel, 1)
        except GenerationCancelledError:
            raise
        except Exception as secondary_error:
            logger.error(f"Backup credential also failed: {secondary_error}")
            raise GenerationFailedError(
                f"Generation failed on both credential tiers: {secondary_error}"
            ) from secondary_error

    async def _attempt(
        self,
        provider: LLMProvider,
        prompt: str,
        model: str,
        cancel: Optional[asyncio.Event],
        attempt_number: int,
    ) -> str:
        """
        Run one attempt against one provider, bounded by the attempt deadline.

        The deadline starts once the provider is reserved.
        """
        if cancel is not None and cancel.is_set():
            raise GenerationCancelledError("Generation cancelled")

        try:
            async with provider.reserve():
                return await asyncio.wait_for(
                    provider.generate_text(
                        prompt=prompt,
                        model=model,
                        max_tokens=self.max_tokens,
                        temperature=self.temperature,
                    ),
                    timeout=self.attempt_timeout,
                )
        except asyncio.TimeoutError as e:
            logger.warning(
                f"{provider.tier} attempt {attempt_number} timed out after {self.attempt_timeout}s"
            )
            raise LLMTimeoutError(
                f"{provider.tier} attempt exceeded {self.attempt_timeout}s"
            ) from e
        except Exception as e:
            logger.warning(f"{provider.tier} attempt {attempt_number} failed: {e}")
            raise
