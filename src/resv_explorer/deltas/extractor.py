"""Patch operation extraction from reservation history documents.

This module walks an arbitrary JSON document and collects every object
that looks like a patch operation (string ``op`` and string ``path``),
annotated with its location, its appearance order, and the
lastModified/lastModifiedByID of the history entry it belongs to.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import Any

from resv_explorer.core.timestamps import parse_timestamp_ms
from resv_explorer.deltas.models import UNSET, PatchOperation

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_KEY = "reservationsHistories"


def walk(document: Any) -> Iterator[tuple[Any, str]]:
    """Yield every node of a JSON document with its pointer, in pre-order.

    Array elements are visited by index and object members in key order.
    A parent is always yielded before any of its descendants.

    Args:
        document: Parsed JSON value.

    Yields:
        (node, pointer) pairs, e.g. ``(..., "$.items[0].name")``.
    """
    stack: list[tuple[Any, str]] = [(document, "$")]
    while stack:
        node, pointer = stack.pop()
        yield node, pointer

        if isinstance(node, list):
            for index in range(len(node) - 1, -1, -1):
                stack.append((node[index], f"{pointer}[{index}]"))
        elif isinstance(node, dict):
            for key in reversed(list(node)):
                stack.append((node[key], f"{pointer}.{key}"))


def is_patch_operation(node: Any) -> bool:
    """Check whether a node has the shape of a patch operation."""
    return isinstance(node, dict) and isinstance(node.get("op"), str) and isinstance(node.get("path"), str)


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


class _HistoryContext:
    """Looks up the history entry a pointer belongs to.

    The entry is found by matching ``<history_key>[<index>]`` in the pointer
    and indexing the top-level array of that name. Operations nested below
    some other array that happens to share the name resolve against the
    top-level array all the same.
    """

    def __init__(self, document: Any, history_key: str) -> None:
        self._pattern = re.compile(re.escape(history_key) + r"\[(\d+)\]")
        entries = document.get(history_key) if isinstance(document, dict) else None
        self._entries: list[Any] = entries if isinstance(entries, list) else []
        self._cache: dict[int, tuple[str | None, int | None, str | None]] = {}

    def resolve(self, pointer: str) -> tuple[str | None, int | None, str | None]:
        """Return (lastModified, parsed ms, lastModifiedByID) for a pointer."""
        match = self._pattern.search(pointer)
        if not match:
            return None, None, None

        index = int(match.group(1))
        if index not in self._cache:
            entry = self._entries[index] if index < len(self._entries) else None
            if isinstance(entry, dict):
                last_modified = _string_or_none(entry.get("lastModified"))
                self._cache[index] = (
                    last_modified,
                    parse_timestamp_ms(last_modified),
                    _string_or_none(entry.get("lastModifiedByID")),
                )
            else:
                self._cache[index] = (None, None, None)
        return self._cache[index]


def extract_patch_operations(
    document: Any,
    *,
    history_key: str = DEFAULT_HISTORY_KEY,
) -> list[PatchOperation]:
    """Extract annotated patch operations in appearance order.

    Matched objects are still descended into, so a patch whose value
    embeds another patch yields both, parent first. The input is never
    modified and no input shape makes this function raise.

    Args:
        document: Parsed JSON response, typically with a top-level
            ``reservationsHistories`` array.
        history_key: Name of the top-level history array used for
            lastModified/lastModifiedByID enrichment.

    Returns:
        PatchOperation records with strictly increasing sequence numbers.

    Example:
        >>> ops = extract_patch_operations(
        ...     {"reservationsHistories": [{"lastModifiedByID": "u1",
        ...       "deltaHistory": [{"op": "replace", "path": "/status"}]}]}
        ... )
        >>> ops[0].pointer
        '$.reservationsHistories[0].deltaHistory[0]'
    """
    context = _HistoryContext(document, history_key)
    operations: list[PatchOperation] = []

    for node, pointer in walk(document):
        if not is_patch_operation(node):
            continue

        last_modified, last_modified_ms, author = context.resolve(pointer)
        operations.append(
            PatchOperation(
                op=node["op"],
                path=node["path"],
                pointer=pointer,
                sequence=len(operations),
                from_value=node.get("fromValue", UNSET),
                value=node.get("value", UNSET),
                last_modified=last_modified,
                last_modified_ms=last_modified_ms,
                last_modified_by_id=author,
            )
        )

    logger.debug(f"Extracted {len(operations)} patch operations")
    return operations
