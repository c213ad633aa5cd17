"""Timestamp parsing and formatting for reservation API payloads.

The distribution API emits ISO 8601 timestamps with a compact offset
suffix (``2025-12-27T21:11:26.014+0000``). This module normalizes such
values, converts them to epoch milliseconds, and derives the UTC
hour/day/week bucket labels used when grouping change sessions.

Parsing never raises: anything that cannot be understood yields None.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

BucketGranularity = Literal["hour", "day", "week"]

NO_TIMESTAMP_KEY = "(no lastModified)"

_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")
_OFFSET_PARTS = re.compile(r"([+-])(\d{2})(\d{2})$")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def normalize_offset(value: str) -> str:
    """Rewrite a trailing ``+HHMM`` offset as ``+HH:MM``.

    Example:
        >>> normalize_offset("2025-12-27T21:11:26.014+0000")
        '2025-12-27T21:11:26.014+00:00'
    """
    return _COMPACT_OFFSET.sub(r"\1:\2", value)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an API timestamp into an aware datetime.

    Values without an offset are taken as UTC.

    Args:
        value: Raw timestamp, usually a string.

    Returns:
        Aware datetime, or None if the value is missing or unparseable.
    """
    if not value or not isinstance(value, str):
        return None

    text = normalize_offset(value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    # Offsets can push instants near year 1 or 9999 outside the datetime range
    try:
        parsed.astimezone(timezone.utc)
    except OverflowError:
        return None
    return parsed


def to_epoch_ms(moment: datetime) -> int:
    """Convert an aware datetime to integer epoch milliseconds."""
    return (moment - _EPOCH) // _ONE_MS


def parse_timestamp_ms(value: Any) -> int | None:
    """Parse an API timestamp into epoch milliseconds.

    Example:
        >>> parse_timestamp_ms("2025-01-01T00:00:00+0000")
        1735689600000
        >>> parse_timestamp_ms("not a date") is None
        True
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return to_epoch_ms(parsed)


def bucket_key(timestamp_ms: int | None, granularity: BucketGranularity) -> str:
    """Label the UTC hour, day or ISO week containing a timestamp.

    Weeks start on Monday.

    Args:
        timestamp_ms: Epoch milliseconds, or None.
        granularity: Bucket size.

    Returns:
        ``YYYY-MM-DD HH:00Z``, ``YYYY-MM-DDZ`` or ``Week of YYYY-MM-DDZ``;
        the no-timestamp sentinel when timestamp_ms is None.
    """
    if timestamp_ms is None:
        return NO_TIMESTAMP_KEY

    try:
        moment = _EPOCH + timedelta(milliseconds=timestamp_ms)
    except OverflowError:
        return NO_TIMESTAMP_KEY

    if granularity == "hour":
        return moment.strftime("%Y-%m-%d %H:00Z")
    if granularity == "day":
        return moment.strftime("%Y-%m-%dZ")
    if granularity == "week":
        monday = moment.date() - timedelta(days=moment.weekday())
        return f"Week of {monday.isoformat()}Z"
    return "(no bucket)"


def _wall_clock(iso: str) -> datetime | None:
    """Parse a timestamp that carries an explicit compact offset."""
    if not _OFFSET_PARTS.search(iso):
        return None
    return parse_timestamp(iso)


def utc_offset_label(iso: str | None) -> str:
    """Return ``UTC+HHMM`` for a compact-offset timestamp, else ``UTC``."""
    if not iso or not isinstance(iso, str):
        return "UTC"
    match = re.search(r"([+-]\d{4})$", iso)
    return f"UTC{match.group(1)}" if match else "UTC"


def full_date_line(iso: str | None) -> str:
    """Render a timestamp with its local wall-clock date and time.

    Example:
        >>> full_date_line("2025-03-14T18:30:00.000+0100")
        '2025-03-14T18:30:00.000+0100 ❗ Friday, March 14 2025 ❗ 18:30 UTC+0100'
    """
    if not iso or not isinstance(iso, str):
        return "N/A"

    local = _wall_clock(iso)
    if local is None:
        date_str, time_str = "N/A", ""
    else:
        date_str = local.strftime("%A, %B %d %Y")
        time_str = local.strftime("%H:%M")

    return f"{iso} ❗ {date_str} ❗ {time_str} {utc_offset_label(iso)}"


def hour_stamp(iso: str | None) -> str:
    """Format a timestamp as ``YY/MM/DD/HH`` in its own offset.

    This matches the hourly partition layout of the transaction log archive.
    """
    if not iso or not isinstance(iso, str):
        return "N/A"
    local = _wall_clock(iso)
    if local is None:
        return "N/A"
    return local.strftime("%y/%m/%d/%H")


def creation_line(
    iso: str | None,
    *,
    now: datetime | None = None,
    retention_days: int = 90,
) -> str:
    """Render a creation or cancellation timestamp with its log hour.

    Appends a purge warning when the instant is older than the
    transaction log retention window.

    Args:
        iso: Raw timestamp.
        now: Reference time. Defaults to the current UTC time.
        retention_days: Log retention window in days.

    Returns:
        Formatted line, or "N/A" when iso is missing.
    """
    if not iso or not isinstance(iso, str):
        return "N/A"

    base = f"{iso} ❗ {hour_stamp(iso)}"

    moment = parse_timestamp(iso)
    current = now or datetime.now(timezone.utc)
    if moment is not None and current - moment > timedelta(days=retention_days):
        return f"{base} ⚠️ Logs Purged"
    return base
