"""
Application configuration utilities.

This module defines the ``Settings`` class used throughout the service for
environment variables.  Values may also come from a ``.env`` file in the
working directory.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration loaded from environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # HTTP server configuration
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)

    log_level: str = "INFO"

    # Comma separated list; empty means any origin
    cors_origins: str = ""

    # Default process/runtime collectors
    default_metrics_enabled: bool = True
    metrics_namespace: str = ""

    def allowed_origins(self) -> list[str]:
        """Return the CORS origin list, falling back to ``["*"]``."""
        origins = [origin.strip() for origin in self.cors_origins.split(",")]
        return [origin for origin in origins if origin] or ["*"]


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Return a cached instance of ``Settings``.

    Using a cache ensures that environment variables are only read once.
    """
    return Settings()
