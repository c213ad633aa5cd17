"""Filter predicates for extracted patch operations.

All predicates treat an empty constraint as pass-through and are
combined with logical AND by apply_filters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from resv_explorer.deltas.models import FilterCriteria, PatchOperation


def matches_paths(operation: PatchOperation, paths: frozenset[str]) -> bool:
    """Exact path match against an allowed set."""
    return not paths or operation.path in paths


def matches_authors(operation: PatchOperation, authors: frozenset[str]) -> bool:
    """Exact author id match; "(null)" selects operations without an author."""
    return not authors or operation.author_key in authors


def matches_search(operation: PatchOperation, search: str) -> bool:
    """Case-insensitive path substring match."""
    needle = search.strip().lower()
    return not needle or needle in operation.path.lower()


def matches(operation: PatchOperation, criteria: FilterCriteria) -> bool:
    """Check an operation against every filter dimension."""
    return (
        matches_paths(operation, criteria.paths)
        and matches_authors(operation, criteria.authors)
        and matches_search(operation, criteria.path_search)
    )


def apply_filters(
    operations: Iterable[PatchOperation],
    criteria: FilterCriteria | None = None,
) -> list[PatchOperation]:
    """Keep the operations that satisfy all criteria, in their original order.

    Args:
        operations: Extracted operations.
        criteria: Filters to apply. None means no filtering.

    Returns:
        Filtered operations.
    """
    if criteria is None or criteria.is_empty:
        return list(operations)
    return [operation for operation in operations if matches(operation, criteria)]
