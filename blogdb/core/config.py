"""
Centralized configuration management using Pydantic Settings.

This module provides type-safe configuration for the MongoDB connection
and logging, loading settings from environment variables and .env files.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Credentials belong in the connection string of a gitignored .env file.
    """

    # MongoDB Configuration
    mongodb_url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string (host:port, optional credentials)"
    )
    mongodb_server_selection_timeout_ms: int = Field(
        default=30000,
        gt=0,
        description="Driver server selection timeout in milliseconds (driver default: 30000)"
    )
    check_connection_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for a connectivity check round trip"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_json: bool = Field(
        default=True,
        description="Emit JSON log lines (False for plain text during development)"
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    @field_validator("mongodb_url")
    @classmethod
    def validate_mongodb_url(cls, v: str) -> str:
        """
        Validate MongoDB connection string format.

        Ensures the URL is not empty and uses a scheme the driver accepts.
        """
        if not v or v.strip() == "":
            raise ValueError("MONGODB_URL is required and cannot be empty")

        valid_schemes = ["mongodb", "mongodb+srv"]
        if not any(v.startswith(scheme + "://") for scheme in valid_schemes):
            raise ValueError(
                f"MONGODB_URL must start with one of: "
                f"{', '.join(s + '://' for s in valid_schemes)}. "
                f"Got: {v[:20]}..."
            )

        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level and reject unknown names."""
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of: {', '.join(VALID_LOG_LEVELS)}. Got: {v}"
            )
        return level


@lru_cache
def get_settings() -> Settings:
    """
    Return the process-wide settings instance.

    Cached so environment parsing happens once; call
    ``get_settings.cache_clear()`` in tests after changing the environment.
    """
    return Settings()
