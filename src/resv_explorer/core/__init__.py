"""Core module for resv-explorer.

This module contains the exceptions, configuration and timestamp
helpers used throughout the library.
"""

from __future__ import annotations

from resv_explorer.core.config import Settings
from resv_explorer.core.exceptions import (
    ConfigurationError,
    DocumentLoadError,
    NameMapError,
    PayloadError,
    ResvExplorerError,
)
from resv_explorer.core.timestamps import (
    NO_TIMESTAMP_KEY,
    BucketGranularity,
    bucket_key,
    parse_timestamp,
    parse_timestamp_ms,
)

__all__ = [
    "NO_TIMESTAMP_KEY",
    "BucketGranularity",
    "ConfigurationError",
    "DocumentLoadError",
    "NameMapError",
    "PayloadError",
    "ResvExplorerError",
    "Settings",
    "bucket_key",
    "parse_timestamp",
    "parse_timestamp_ms",
]
