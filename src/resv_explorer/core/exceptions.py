"""Custom exceptions for resv-explorer.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from ResvExplorerError for easy catching.

The extraction and grouping core never raises for a parsed document;
these exceptions are only used at the I/O and configuration boundary.
"""

from __future__ import annotations


class ResvExplorerError(Exception):
    """Base exception for all resv-explorer errors.

    Example:
        >>> try:
        ...     document = load_document("history.json")
        ... except ResvExplorerError as e:
        ...     print(f"resv-explorer error: {e}")
    """


class DocumentLoadError(ResvExplorerError):
    """Raised when a JSON response document cannot be read or parsed.

    Example:
        >>> raise DocumentLoadError("Invalid JSON in history.json: Expecting value")
    """


class ConfigurationError(ResvExplorerError):
    """Raised when configuration is invalid or missing.

    This covers grouping presets that cannot be loaded or that
    carry values outside the supported options.

    Example:
        >>> raise ConfigurationError("Unknown bucket granularity: month")
    """


class NameMapError(ResvExplorerError):
    """Raised when an author id to display-name mapping is invalid.

    Example:
        >>> raise NameMapError("Name map must be a JSON object, got list")
    """


class PayloadError(ResvExplorerError):
    """Raised when a response cannot be turned into a replay payload.

    Example:
        >>> raise PayloadError("Reservation has no products to inflate")
    """
