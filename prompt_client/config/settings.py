"""
Configuration settings for the prompt gallery client.

Values come from environment variables (case-insensitive) or a ``.env`` file,
validated by pydantic-settings.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Prompt gallery client configuration settings.

    All settings can be overridden via environment variables.
    """

    # Prompt service API
    api_base_url: str = Field(
        default="http://localhost:4000",
        description="Base URL of the prompt gallery service"
    )
    api_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for API requests"
    )
    api_retries: int = Field(
        default=1,
        description="Retry attempts for failed GET requests (mutations are never retried)"
    )

    # Browsing behaviour
    search_debounce_seconds: float = Field(
        default=0.3,
        description="Quiet period after the last search keystroke before the listing is requested"
    )
    vote_ledger_path: Optional[Path] = Field(
        default=Path.home() / ".prompt_gallery" / "votes.json",
        description="Where the local record of cast votes is kept; unset keeps it in memory"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode (verbose tracebacks)"
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
