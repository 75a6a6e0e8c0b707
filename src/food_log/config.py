"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    suggestion_debounce_ms: int = 300
    suggestion_min_length: int = 2
    suggestion_limit: int = 10
    default_calorie_target: float = 2000.0
    default_protein_target: float = 100.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def suggestion_debounce_seconds(self) -> float:
        return self.suggestion_debounce_ms / 1000
