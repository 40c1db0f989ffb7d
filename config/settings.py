"""Application settings and configuration management."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/flowforge.db")
    LLM_CONFIG_PATH: str = Field(default="app_config.json")

    INTERVIEW_MAX_TOKENS: int = Field(default=1024, ge=1)
    REFLECTION_MAX_TOKENS: int = Field(default=1024, ge=1)
    ENHANCEMENT_MAX_TOKENS: int = Field(default=4096, ge=1)

    BACKFILL_DELAY_SECONDS: float = Field(default=1.0, ge=0.0)
    DEFAULT_COACH_NAME: str = "your coach"

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
