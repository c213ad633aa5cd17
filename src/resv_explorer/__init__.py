"""resv-explorer: inspection toolkit for hotel reservation API responses."""

from __future__ import annotations

from resv_explorer.availability import AvailabilitySummary, summarize_availability
from resv_explorer.channels import (
    ChannelParametersSummary,
    MessageTraceSummary,
    summarize_channel_parameters,
    summarize_message_traces,
)
from resv_explorer.core.exceptions import (
    ConfigurationError,
    DocumentLoadError,
    NameMapError,
    PayloadError,
    ResvExplorerError,
)
from resv_explorer.deltas import (
    DeltaView,
    FilterCriteria,
    GroupingConfig,
    NameResolver,
    PatchOperation,
    apply_filters,
    build_view,
    explore,
    extract_patch_operations,
)
from resv_explorer.loaders import load_document, parse_document
from resv_explorer.reservations import (
    InflationResult,
    ReservationSummary,
    inflate_reservation,
    summarize_reservation,
)

__version__ = "0.1.0"
__all__ = [
    # Delta explorer
    "DeltaView",
    "FilterCriteria",
    "GroupingConfig",
    "NameResolver",
    "PatchOperation",
    "apply_filters",
    "build_view",
    "explore",
    "extract_patch_operations",
    # Errors
    "ConfigurationError",
    "DocumentLoadError",
    "NameMapError",
    "PayloadError",
    "ResvExplorerError",
    # Loaders
    "load_document",
    "parse_document",
    # Reservation summary and payloads
    "InflationResult",
    "ReservationSummary",
    "inflate_reservation",
    "summarize_reservation",
    # Availability and channels
    "AvailabilitySummary",
    "ChannelParametersSummary",
    "MessageTraceSummary",
    "summarize_availability",
    "summarize_channel_parameters",
    "summarize_message_traces",
    # Version
    "__version__",
]
