"""
LeadLens Configuration

Environment-based configuration with fail-fast validation.
Credentials are tiered: a primary key per provider and an optional backup
key used only after the primary tier is exhausted.
"""
from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # LLM Provider Selection
    llm_provider: Literal["gemini", "openai"] = "gemini"

    # Credential tiers
    gemini_api_key: str = ""
    gemini_api_key_backup: str = ""
    openai_api_key: str = ""
    openai_api_key_backup: str = ""

    # Database
    database_url: str = "sqlite+aiosqlite:///./leadlens.db"

    # Debug mode (verbose low-level logging)
    debug: bool = False

    # Follow-through mode (structured step-by-step execution tracing)
    follow_through: bool = False

    # Model configurations
    gemini_generation_model: str = "gemini-2.5-flash"
    gemini_summary_model: str = "gemini-2.0-flash"
    openai_generation_model: str = "gpt-4o"
    openai_summary_model: str = "gpt-4o-mini"

    # Generation policy
    generation_primary_attempts: int = 3
    generation_attempt_timeout_seconds: float = 60.0
    generation_max_tokens: int = 4096
    generation_temperature: float = 0.7

    # 0 disables the ceiling
    grounding_max_chars: int = 0

    # Write one-shot tool output to generated_artifacts as well as the session cache
    persist_generated_artifacts: bool = False

    @field_validator(
        "gemini_api_key",
        "gemini_api_key_backup",
        "openai_api_key",
        "openai_api_key_backup",
        mode="before",
    )
    @classmethod
    def validate_not_placeholder(cls, v: str) -> str:
        """Ensure API keys are not placeholder values."""
        if v and "your-" in v.lower():
            return ""
        return v

    def validate_provider_key(self) -> None:
        """Validate that the primary API key for the selected provider is set."""
        if self.llm_provider == "openai" and not self.openai_api_key:
            raise ValueError(
                "OPENAI_API_KEY environment variable is required when LLM_PROVIDER=openai. "
                "Please set it in your .env file or environment."
            )
        if self.llm_provider == "gemini" and not self.gemini_api_key:
            raise ValueError(
                "GEMINI_API_KEY environment variable is required when LLM_PROVIDER=gemini. "
                "Please set it in your .env file or environment."
            )

    def get_credentials(self) -> tuple[str, Optional[str]]:
        """Return (primary, backup) keys for the current provider."""
        if self.llm_provider == "openai":
            return self.openai_api_key, self.openai_api_key_backup or None
        return self.gemini_api_key, self.gemini_api_key_backup or None

    def get_model(self, purpose: Literal["generation", "summary"]) -> str:
        """Get the model name for a purpose and the current provider."""
        if self.llm_provider == "openai":
            return {
                "generation": self.openai_generation_model,
                "summary": self.openai_summary_model,
            }[purpose]
        return {
            "generation": self.gemini_generation_model,
            "summary": self.gemini_summary_model,
        }[purpose]


# Global settings instance
settings = Settings()
