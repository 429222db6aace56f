"""
Configuration settings for the Schooney record console.

Uses Pydantic Settings to load environment variables for logging, the
daily e-mail quota, sample data and the local state/export paths.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="JSON_LOGS")

    # School / reporting
    school_name: str = Field("SISB Schooney", alias="SCHOOL_NAME")

    # Views and mailing
    daily_email_limit: int = Field(500, alias="DAILY_EMAIL_LIMIT", gt=0)
    mock_seed: int = Field(42, alias="MOCK_SEED")

    # Local state (stands in for browser storage) and download target
    state_file: Path = Field(Path(".schooney/state.json"), alias="STATE_FILE")
    export_dir: Path = Field(Path("exports"), alias="EXPORT_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
