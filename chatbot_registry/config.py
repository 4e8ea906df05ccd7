"""
Centralized Configuration Management

This module loads and validates the registry configuration from environment
variables and .env files, grouped into nested sections with their own
environment prefixes.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IdentifierPolicy(str, Enum):
    """How a registry treats identifiers on submitted entities."""

    LENIENT = "lenient"  # accept duplicates and unregistered recipients
    STRICT = "strict"  # reject them with a named RegistryError


class RegistryConfig(BaseSettings):
    """Registry behaviour configuration."""

    model_config = SettingsConfigDict(env_prefix="REGISTRY_")

    identifier_policy: IdentifierPolicy = IdentifierPolicy.LENIENT

    # Mailbox capacity; 0 means unbounded. A full bounded mailbox rejects
    # new commands with MailboxFullError instead of blocking the sender.
    tracker_queue_size: int = Field(default=0, ge=0)
    store_queue_size: int = Field(default=0, ge=0)

    # Process already-queued commands before the listener stops
    drain_on_shutdown: bool = True


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    format: Literal["text", "json"] = "text"
    file: Optional[str] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()


class AppConfig(BaseSettings):
    """
    Application configuration with nested sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def create_settings() -> AppConfig:
    """Create settings instance from environment variables and .env files only."""
    return AppConfig()


def get_settings() -> AppConfig:
    """Get a freshly loaded settings instance."""
    return create_settings()
