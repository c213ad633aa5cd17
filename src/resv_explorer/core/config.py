"""Configuration management for resv-explorer.

This module provides configuration classes using pydantic-settings
for environment variable management and validation.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be configured via environment variables with
    the RESV_EXPLORER_ prefix.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        history_key: Top-level array holding reservation history entries.
        bucket_granularity: Default time bucket size for the CLI.
        names_file: Optional default path to an author id to name mapping.
        log_retention_days: Days after which transaction logs are purged.
        channel_selector: Distribution channel used for availability requests.
        inflation_factor: Multiplier applied by the rate-inflation payload builder.

    Example:
        >>> # export RESV_EXPLORER_LOG_LEVEL=DEBUG
        >>> settings = Settings()
        >>> print(settings.log_level)
        'DEBUG'

    Environment Variables:
        RESV_EXPLORER_LOG_LEVEL: Logging level (default: WARNING)
        RESV_EXPLORER_HISTORY_KEY: History array key (default: reservationsHistories)
        RESV_EXPLORER_BUCKET_GRANULARITY: hour, day or week (default: day)
        RESV_EXPLORER_NAMES_FILE: Author name mapping file (optional)
        RESV_EXPLORER_LOG_RETENTION_DAYS: Log retention window (default: 90)
        RESV_EXPLORER_CHANNEL_SELECTOR: EXPEDIA or DERBYSOFT (default: DERBYSOFT)
        RESV_EXPLORER_INFLATION_FACTOR: Rate multiplier (default: 1.5)
    """

    model_config = SettingsConfigDict(
        env_prefix="RESV_EXPLORER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    history_key: str = Field(
        default="reservationsHistories",
        min_length=1,
        description="Top-level array holding reservation history entries",
    )
    bucket_granularity: Literal["hour", "day", "week"] = Field(
        default="day",
        description="Default time bucket size",
    )
    names_file: str | None = Field(
        default=None,
        description="Optional path to an author id to display-name mapping",
    )
    log_retention_days: int = Field(
        default=90,
        ge=1,
        description="Days after which transaction logs are purged",
    )
    channel_selector: str = Field(
        default="DERBYSOFT",
        description="Distribution channel used for availability requests",
    )
    inflation_factor: float = Field(
        default=1.5,
        gt=0,
        description="Multiplier applied to sell and fulfillment amounts",
    )
