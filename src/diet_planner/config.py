"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    gemini_api_key: str | None = None
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.5-flash"
    openai_api_key: str | None = None
    openai_endpoint: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-4o-mini"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    settings_path: str = "~/.diet_planner/settings.json"
    request_timeout_seconds: float = 120
    generation_timeout_seconds: float | None = 300
    temperature: float = 0.4
    max_output_tokens: int = 4096
    max_retries: int = 2
    transient_backoff_seconds: float = 0.8
    decode_backoff_seconds: float = 0.6
    reference_max_entries: int = 20
    reference_char_limit: int = 1800
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def uses_supabase(self) -> bool:
        """Return True when settings should be persisted to Supabase."""
        return bool(self.supabase_url and self.supabase_service_key)
