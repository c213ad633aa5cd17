"""Distribution statistics over extracted patch operations.

These feed the path histogram and the filter option lists. They are
computed from the full, unfiltered operation list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from resv_explorer.deltas.models import PatchOperation


def _count_in_order(keys: Iterable[str]) -> list[tuple[str, int]]:
    counts: dict[str, int] = {}
    for key in keys:
        counts[key] = counts.get(key, 0) + 1
    return list(counts.items())


def path_counts(operations: Iterable[PatchOperation]) -> list[tuple[str, int]]:
    """Count operations per path, in first-seen path order.

    Example:
        >>> path_counts(ops)
        [('/status', 3), ('/roomType', 1)]
    """
    return _count_in_order(operation.path for operation in operations)


def author_counts(operations: Iterable[PatchOperation]) -> list[tuple[str, int]]:
    """Count operations per lastModifiedByID, in first-seen order.

    Operations without an author are counted under "(null)".
    """
    return _count_in_order(operation.author_key for operation in operations)


def histogram_widths(counts: list[tuple[str, int]]) -> list[tuple[str, int, int]]:
    """Attach a bar width percentage to each count.

    Widths are relative to the largest count (treated as at least 1)
    and rounded to the nearest integer.

    Returns:
        (label, count, width_percent) triples.
    """
    largest = max([1, *(count for _, count in counts)])
    # Rounds half up
    return [(label, count, int(count * 100 / largest + 0.5)) for label, count in counts]
