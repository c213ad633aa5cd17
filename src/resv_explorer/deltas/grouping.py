"""Grouping of patch operations into signatures, sessions and time buckets.

This module provides build_view, which turns a filtered list of
operations into the nested bucket -> session -> signature structure
consumed by reporters.

Every layer is built with a single linear pass that keeps keys in
first-seen order. Time sorting, when enabled, is descending by
timestamp with missing timestamps treated as the earliest and ties
broken by appearance order.
"""

from __future__ import annotations

import json
import logging
import math
from typing import TYPE_CHECKING, Any, Literal, TypeVar

from resv_explorer.core.timestamps import NO_TIMESTAMP_KEY, BucketGranularity, bucket_key
from resv_explorer.deltas.models import (
    NO_SESSION_KEY,
    UNSET,
    Bucket,
    DeltaView,
    GroupingConfig,
    Session,
    SignatureGroup,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from resv_explorer.deltas.models import PatchOperation

logger = logging.getLogger(__name__)

SIGNATURE_SEPARATOR = " | "

_Timed = TypeVar("_Timed", Session, Bucket)


def _plain_numbers(value: Any) -> Any:
    """Render whole floats as integers and non-finite floats as null, at any depth."""
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value) if value.is_integer() and abs(value) < 1e21 else value
    if isinstance(value, dict):
        return {key: _plain_numbers(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain_numbers(item) for item in value]
    return value


def stringify_value(value: Any) -> str:
    """Render a patch value for use in a signature.

    Strings are used as-is, null becomes "null", an absent value
    becomes "undefined", and anything else is compact JSON. Numbers
    follow JSON number semantics, so 1 and 1.0 render alike.
    """
    if value is UNSET:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    try:
        return json.dumps(_plain_numbers(value), separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def loose_signature(operation: PatchOperation) -> str:
    """Signature on op + path."""
    return SIGNATURE_SEPARATOR.join([operation.op.upper(), operation.path])


def strict_signature(operation: PatchOperation) -> str:
    """Signature on op + path + fromValue + value."""
    return SIGNATURE_SEPARATOR.join(
        [
            operation.op.upper(),
            operation.path,
            stringify_value(operation.from_value),
            stringify_value(operation.value),
        ]
    )


def group_signatures(
    operations: Sequence[PatchOperation],
    mode: Literal["strict", "loose"] = "strict",
) -> list[SignatureGroup]:
    """Partition operations by signature, keeping first-appearance order.

    Args:
        operations: Operations in appearance order.
        mode: "strict" or "loose" signature.

    Returns:
        Signature groups ordered by their first member.
    """
    signature = loose_signature if mode == "loose" else strict_signature
    groups: dict[str, SignatureGroup] = {}

    for operation in operations:
        key = signature(operation)
        if key not in groups:
            groups[key] = SignatureGroup(key=key)
        groups[key].items.append(operation)

    return sorted(groups.values(), key=lambda group: group.first_sequence)


def group_sessions(operations: Sequence[PatchOperation]) -> list[Session]:
    """Partition operations by exact lastModified string.

    Operations without a lastModified share the ``(no lastModified)`` session.
    """
    sessions: dict[str, Session] = {}

    for operation in operations:
        key = operation.last_modified or NO_TIMESTAMP_KEY
        if key not in sessions:
            sessions[key] = Session(
                key=key,
                first_sequence=operation.sequence,
                timestamp_ms=operation.last_modified_ms,
                last_modified=operation.last_modified,
                last_modified_by_id=operation.last_modified_by_id,
            )
        sessions[key].items.append(operation)

    return sorted(sessions.values(), key=lambda session: session.first_sequence)


def single_session(operations: Sequence[PatchOperation]) -> list[Session]:
    """Wrap all operations in one catch-all session.

    Returns no session at all for an empty input.
    """
    if not operations:
        return []
    return [
        Session(
            key=NO_SESSION_KEY,
            first_sequence=operations[0].sequence,
            items=list(operations),
        )
    ]


def group_buckets(sessions: Sequence[Session], granularity: BucketGranularity) -> list[Bucket]:
    """Partition sessions into UTC time buckets.

    A bucket's timestamp is the earliest non-null timestamp among its
    sessions. Sessions keep the order in which they were passed.

    Args:
        sessions: Sessions to distribute.
        granularity: hour, day or week.

    Returns:
        Buckets ordered by their earliest session appearance.
    """
    buckets: dict[str, Bucket] = {}

    for session in sessions:
        key = bucket_key(session.timestamp_ms, granularity)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = Bucket(key=key, first_sequence=session.first_sequence, timestamp_ms=session.timestamp_ms)
            buckets[key] = bucket
        else:
            bucket.first_sequence = min(bucket.first_sequence, session.first_sequence)
            if session.timestamp_ms is not None and (
                bucket.timestamp_ms is None or session.timestamp_ms < bucket.timestamp_ms
            ):
                bucket.timestamp_ms = session.timestamp_ms
        bucket.sessions.append(session)

    return sorted(buckets.values(), key=lambda bucket: bucket.first_sequence)


def sort_by_time(entries: Sequence[_Timed]) -> list[_Timed]:
    """Sort sessions or buckets newest first.

    Entries without a timestamp sort as the earliest; ties keep
    appearance order.
    """
    return sorted(
        entries,
        key=lambda entry: (
            entry.timestamp_ms is None,
            -(entry.timestamp_ms or 0),
            entry.first_sequence,
        ),
    )


def build_view(
    operations: Sequence[PatchOperation],
    config: GroupingConfig | None = None,
    *,
    total: int | None = None,
) -> DeltaView:
    """Build the grouped view of a filtered list of operations.

    Args:
        operations: Filtered operations in appearance order.
        config: Grouping options. Defaults to strict grouping with no
            session or bucket layer.
        total: Number of operations before filtering. Defaults to
            len(operations).

    Returns:
        DeltaView with sessions (and buckets, if enabled) in display order.

    Example:
        >>> view = build_view(ops, GroupingConfig(session_grouping=True, sort_by_time=True))
        >>> print(view.summary())
        '12 ops, 12 shown, 5 groups, 3 sessions'
    """
    config = config or GroupingConfig()
    operations = list(operations)

    sessions = group_sessions(operations) if config.session_grouping else single_session(operations)
    if config.sort_by_time:
        sessions = sort_by_time(sessions)

    for session in sessions:
        session.groups = group_signatures(session.items, config.grouping_mode)

    buckets: list[Bucket] | None = None
    if config.bucket_grouping:
        buckets = group_buckets(sessions, config.bucket_granularity)
        if config.sort_by_time:
            buckets = sort_by_time(buckets)

    view = DeltaView(
        config=config,
        operations=operations,
        sessions=sessions,
        buckets=buckets,
        total=len(operations) if total is None else total,
    )
    logger.debug(f"Built delta view: {view.summary()}")
    return view
