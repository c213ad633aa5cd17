"""Reservation history delta exploration for resv-explorer.

This module finds patch operations anywhere in a reservation history
response, filters them, and groups them by signature, change session
and time bucket.

Example:
    >>> from resv_explorer.deltas import FilterCriteria, GroupingConfig, explore
    >>>
    >>> operations, view = explore(
    ...     document,
    ...     FilterCriteria(paths={"/status"}),
    ...     GroupingConfig(session_grouping=True, sort_by_time=True),
    ... )
    >>> print(view.summary())
    '42 ops, 6 shown, 3 groups, 3 sessions'
"""

from __future__ import annotations

from resv_explorer.deltas.explorer import explore
from resv_explorer.deltas.extractor import extract_patch_operations, walk
from resv_explorer.deltas.filters import apply_filters
from resv_explorer.deltas.grouping import build_view, group_signatures, loose_signature, strict_signature
from resv_explorer.deltas.models import (
    NULL_AUTHOR,
    UNSET,
    Bucket,
    DeltaView,
    FilterCriteria,
    GroupingConfig,
    PatchOperation,
    Session,
    SignatureGroup,
)
from resv_explorer.deltas.names import NameResolver
from resv_explorer.deltas.stats import author_counts, path_counts

__all__ = [
    "NULL_AUTHOR",
    "UNSET",
    "Bucket",
    "DeltaView",
    "FilterCriteria",
    "GroupingConfig",
    "NameResolver",
    "PatchOperation",
    "Session",
    "SignatureGroup",
    "apply_filters",
    "author_counts",
    "build_view",
    "explore",
    "extract_patch_operations",
    "group_signatures",
    "loose_signature",
    "path_counts",
    "strict_signature",
    "walk",
]
