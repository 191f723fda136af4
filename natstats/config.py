"""
natstats Configuration Module

Centralized configuration management using pydantic-settings.
Loads settings from environment variables and .env files.
"""

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Find the project root (where .env is located)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Analysis Configuration
    # ==========================================================================
    long_lifetime_threshold_seconds: int = Field(
        default=3600,  # 1 hour
        gt=0,
        description="Remaining lifetime above which a translation counts as long",
    )
    header_token: str = Field(
        default="Pro",
        description="Prefix of the column header line in translation dumps",
    )
    read_chunk_size: int = Field(
        default=64 * 1024,
        gt=0,
        description="Bytes read from the input stream per pull",
    )
    progress_batch_size: int = Field(
        default=1000,
        gt=0,
        description="Number of records between progress updates",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )

    @field_validator("header_token")
    @classmethod
    def ensure_header_token(cls, v: str) -> str:
        """Reject an empty header token."""
        if not v:
            raise ValueError("header_token must not be empty")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        return v.upper() if isinstance(v, str) else v

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @property
    def long_lifetime_threshold(self) -> timedelta:
        return timedelta(seconds=self.long_lifetime_threshold_seconds)

    @property
    def header_bytes(self) -> bytes:
        return self.header_token.encode("utf-8")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
