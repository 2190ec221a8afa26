"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field

ServiceName = Literal["frontend", "get", "post", "put", "delete"]


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """MongoDB connection configuration model."""

    uri: str = Field(default="", description="MongoDB connection URI")
    name: str = Field(default="exercise-1", description="Database name")
    collection: str = Field(default="information", description="Book collection name")
    connect_timeout_ms: int = Field(
        default=10000, description="Connection and server selection timeout"
    )
    max_pool_size: int = Field(default=100, description="Connection pool size")

    @computed_field
    @property
    def redacted_uri(self) -> str:
        """The connection URI with any password masked, safe for logging."""
        scheme, sep, rest = self.uri.partition("://")
        if not sep or "@" not in rest:
            return self.uri
        credentials, host = rest.rsplit("@", 1)
        user = credentials.split(":", 1)[0]
        return f"{scheme}://{user}:***@{host}"


class ServiceConfig(BaseModel):
    """Listener configuration for one service process."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(description="Listen port")


class ServicesConfig(BaseModel):
    """Per-service listener configuration."""

    frontend: ServiceConfig = Field(default_factory=lambda: ServiceConfig(port=3030))
    get: ServiceConfig = Field(default_factory=lambda: ServiceConfig(port=3031))
    post: ServiceConfig = Field(default_factory=lambda: ServiceConfig(port=3032))
    put: ServiceConfig = Field(default_factory=lambda: ServiceConfig(port=3033))
    delete: ServiceConfig = Field(default_factory=lambda: ServiceConfig(port=3034))

    def for_service(self, service: ServiceName) -> ServiceConfig:
        return getattr(self, service)


class BooksConfig(BaseModel):
    """Behaviour of the book endpoints."""

    duplicate_policy: Literal["exact", "subset"] = Field(
        default="exact",
        description=(
            "exact: a book is a duplicate only when every field matches an existing "
            "one; subset: any existing book matching the non-empty submitted fields "
            "counts as a duplicate"
        ),
    )
    seed_on_startup: bool = Field(
        default=True, description="Insert the sample books when missing"
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    templates_dir: str | None = Field(
        default=None, description="Override directory for frontend templates"
    )

    @property
    def debug(self) -> bool:
        return self.environment != "production"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    services: ServicesConfig = Field(
        default_factory=ServicesConfig, description="Service listener configuration"
    )
    books: BooksConfig = Field(
        default_factory=BooksConfig, description="Book endpoint behaviour"
    )
