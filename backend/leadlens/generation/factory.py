"""
Generation Client Factory

Builds the process-wide GenerationClient from the configured credential tiers.
"""
from typing import Optional
import logging

from ..config import settings
from ..llm.router import create_provider
from .client import GenerationClient

logger = logging.getLogger(__name__)


# Singleton client instance
_client_instance: Optional[GenerationClient] = None


def get_generation_client() -> GenerationClient:
    """
    Get or create the shared generation client.

    The primary credential is required; the backup credential is optional.
    """
    global _client_instance

    if _client_instance is None:
        settings.validate_provider_key()
        primary_key, backup_key = settings.get_credentials()

        logger.info(
            f"Using {settings.llm_provider} with backup credential "
            f"{'configured' if backup_key else 'not configured'}"
        )
        _client_instance = GenerationClient(
            primary=create_provider(primary_key, "primary"),
            secondary=create_provider(backup_key, "secondary") if backup_key else None,
            default_model=settings.get_model("generation"),
            primary_attempts=settings.generation_primary_attempts,
            attempt_timeout=settings.generation_attempt_timeout_seconds,
            max_tokens=settings.generation_max_tokens,
            temperature=settings.generation_temperature,
        )

    return _client_instance
