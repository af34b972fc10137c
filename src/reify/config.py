"""reify configuration management."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="REIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Evaluation nesting bound; deeper schemas reject instead of overflowing the stack
    max_depth: int = Field(default=128, ge=1, le=256)

    # Diagnostics
    render_limit: int = Field(default=200, ge=16)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
