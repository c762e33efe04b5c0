"""
Configuration settings for the memory book service.

This module handles environment variable loading and configuration management
using Pydantic for validation and type safety.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Memory book configuration settings.

    All settings can be overridden via environment variables.
    """

    # Memory Source (spreadsheet endpoint) Configuration
    memory_source_url: str = Field(
        default="",
        description="URL of the spreadsheet-backed endpoint serving memories and accepting guesses"
    )
    memory_source_timeout: int = Field(
        default=30,
        description="Timeout in seconds for memory source requests"
    )
    memory_source_retries: int = Field(
        default=0,
        description="Retry attempts for failed memory source reads (guess writes are never retried)"
    )

    # Game Configuration
    honoree_name: str = Field(
        default="Beth",
        description="Name of the person the memory book is about"
    )

    # Image Hosting
    image_host: str = Field(
        default="lh3.googleusercontent.com",
        description="Host serving directly embeddable images"
    )
    image_width: int = Field(
        default=800,
        description="Width parameter appended to resolved image URLs"
    )

    # Identity Cache
    identity_storage_key: str = Field(
        default="memory-book-user",
        description="Fixed key the player identity is cached under"
    )
    identity_cache_backend: Literal["session", "file"] = Field(
        default="session",
        description="Where the player identity is cached (session or file)"
    )
    identity_cache_dir: str = Field(
        default=".memory_book",
        description="Directory for the file identity cache"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="text",
        description="Logging format (json or text)"
    )
    log_file: str = Field(
        default="logs/memory_book.log",
        description="Log file path used outside debug mode (empty disables file logging)"
    )
    log_rotation: str = Field(
        default="1 day",
        description="When the log file is rotated"
    )
    log_retention: str = Field(
        default="30 days",
        description="How long rotated log files are kept"
    )
    debug_mode: bool = Field(
        default=True,
        description="Enable debug mode"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Configured settings instance
    """
    return Settings()
