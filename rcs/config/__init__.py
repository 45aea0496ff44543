"""
Configuration package for RCS.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None
    WARNING_LEVEL: int = Field(default=2, ge=0, le=4)
    PYTHON_INTERPRETER: str = "/usr/bin/env python3"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
