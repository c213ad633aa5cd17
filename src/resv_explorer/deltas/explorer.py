"""One-call pipeline from a history document to a grouped delta view."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from resv_explorer.deltas.extractor import DEFAULT_HISTORY_KEY, extract_patch_operations
from resv_explorer.deltas.filters import apply_filters
from resv_explorer.deltas.grouping import build_view

if TYPE_CHECKING:
    from resv_explorer.deltas.models import DeltaView, FilterCriteria, GroupingConfig, PatchOperation


def explore(
    document: Any,
    criteria: FilterCriteria | None = None,
    config: GroupingConfig | None = None,
    *,
    history_key: str = DEFAULT_HISTORY_KEY,
) -> tuple[list[PatchOperation], DeltaView]:
    """Extract, filter and group the patch operations of a document.

    Args:
        document: Parsed reservation history response.
        criteria: Filters applied before grouping.
        config: Grouping options.
        history_key: Top-level history array used for context enrichment.

    Returns:
        Tuple of (all extracted operations, grouped view of the filtered ones).
        The full list is returned so callers can build unfiltered statistics.

    Example:
        >>> operations, view = explore(document, FilterCriteria(path_search="status"))
        >>> view.counts()
        {'total': 8, 'shown': 3, 'groups': 2, 'sessions': 1}
    """
    operations = extract_patch_operations(document, history_key=history_key)
    filtered = apply_filters(operations, criteria)
    return operations, build_view(filtered, config, total=len(operations))
