"""
OpenAI LLM Provider

Implementation using OpenAI's Chat Completions API.
"""
import logging

from openai import AsyncOpenAI

from .base import LLMProvider

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI API implementation bound to one API key."""

    def __init__(self, api_key: str, tier: str = "primary"):
        if not api_key:
            raise ValueError(f"An OpenAI API key is required for the {tier} credential tier")
        self.tier = tier
        # SDK-level retries are disabled; GenerationClient owns the attempt policy
        self.client = AsyncOpenAI(api_key=api_key, max_retries=0)

    async def generate_text(
        self,
        prompt: str,
        model: str,
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> str:
        """Generate text using OpenAI Chat Completions API."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=temperature,
            )

            return response.choices[0].message.content or ""

        except Exception as e:
            raise self.classify_error("OpenAI", e) from e
