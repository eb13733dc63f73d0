"""
Google Gemini LLM Provider

Implementation using Google's Generative AI SDK.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import google.generativeai as genai

from .base import LLMProvider

logger = logging.getLogger(__name__)

# genai.configure() sets a process-wide key. Calls are serialized so the
# key configured for one tier is the key used by that tier's request.
# The lock is taken in reserve(), outside the attempt deadline.
_configure_lock = asyncio.Lock()


class GeminiProvider(LLMProvider):
    """Google Gemini API implementation bound to one API key."""

    def __init__(self, api_key: str, tier: str = "primary"):
        if not api_key:
            raise ValueError(f"A Gemini API key is required for the {tier} credential tier")
        self.api_key = api_key
        self.tier = tier

    @asynccontextmanager
    async def reserve(self) -> AsyncIterator[None]:
        async with _configure_lock:
            yield

    async def generate_text(
        self,
        prompt: str,
        model: str,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> str:
        """Generate text using Gemini Generative API. Callers hold reserve()."""
        try:
            generation_config = genai.GenerationConfig(
                max_output_tokens=max_tokens,
                temperature=temperature,
            )

            genai.configure(api_key=self.api_key)
            gen_model = genai.GenerativeModel(model_name=model)
            response = await gen_model.generate_content_async(
                prompt,
                generation_config=generation_config,
            )

            return response.text or ""

        except Exception as e:
            raise self.classify_error("Gemini", e) from e
