"""Raw environment values used by the services.

``config.yaml`` remains the source of truth for the running services; this
model exposes the handful of environment variables the CLI checks before
starting a process.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    database_uri: str | None = Field(default=None, validation_alias="DATABASE_URI")
    config_path: str = Field(default="config.yaml", validation_alias="BOOKSTORE_CONFIG")
