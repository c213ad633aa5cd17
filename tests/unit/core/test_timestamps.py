"""Tests for timestamp parsing and formatting."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import time_machine

from resv_explorer.core.timestamps import (
    NO_TIMESTAMP_KEY,
    BucketGranularity,
    bucket_key,
    creation_line,
    full_date_line,
    hour_stamp,
    normalize_offset,
    parse_timestamp,
    parse_timestamp_ms,
    to_epoch_ms,
    utc_offset_label,
)

NEW_YEAR_2025_MS = 1735689600000


class TestNormalizeOffset:
    """Tests for compact offset normalization."""

    def test_compact_offset_gets_colon(self) -> None:
        """+HHMM is rewritten as +HH:MM."""
        assert normalize_offset("2025-12-27T21:11:26.014+0000") == "2025-12-27T21:11:26.014+00:00"

    def test_negative_offset(self) -> None:
        """Negative offsets are rewritten too."""
        assert normalize_offset("2025-01-01T00:00:00-0530") == "2025-01-01T00:00:00-05:30"

    def test_already_normalized_unchanged(self) -> None:
        """Values with a colon offset are left alone."""
        assert normalize_offset("2025-01-01T00:00:00+01:00") == "2025-01-01T00:00:00+01:00"


class TestParseTimestamp:
    """Tests for timestamp parsing."""

    def test_compact_offset(self) -> None:
        """Compact offsets are understood."""
        assert parse_timestamp_ms("2025-01-01T00:00:00+0000") == NEW_YEAR_2025_MS

    def test_offset_is_applied(self) -> None:
        """A +0100 wall clock maps to the same UTC instant."""
        assert parse_timestamp_ms("2025-01-01T01:00:00.000+0100") == NEW_YEAR_2025_MS

    def test_zulu_suffix(self) -> None:
        """A Z suffix means UTC."""
        assert parse_timestamp_ms("2025-01-01T00:00:00Z") == NEW_YEAR_2025_MS

    def test_naive_is_utc(self) -> None:
        """Timestamps without an offset are taken as UTC."""
        parsed = parse_timestamp("2025-01-01T00:00:00")

        assert parsed is not None
        assert parsed.tzinfo == timezone.utc
        assert to_epoch_ms(parsed) == NEW_YEAR_2025_MS

    def test_milliseconds_kept(self) -> None:
        """Fractional seconds contribute milliseconds."""
        assert parse_timestamp_ms("2025-01-01T00:00:00.014+0000") == NEW_YEAR_2025_MS + 14

    @pytest.mark.parametrize("value", [None, "", "not a date", 42, ["2025-01-01"], {"a": 1}])
    def test_unparseable_is_none(self, value: object) -> None:
        """Anything unparseable yields None instead of raising."""
        assert parse_timestamp_ms(value) is None

    @pytest.mark.parametrize(
        "value",
        ["9999-12-31T23:30:00-0100", "0001-01-01T00:30:00+0100"],
        ids=["after-year-9999", "before-year-1"],
    )
    def test_outside_utc_range_is_none(self, value: str) -> None:
        """Instants that fall outside the datetime range in UTC yield None."""
        assert parse_timestamp(value) is None
        assert parse_timestamp_ms(value) is None

    def test_range_edges_still_parse(self) -> None:
        """The first and last representable UTC instants parse normally."""
        assert parse_timestamp_ms("0001-01-01T00:00:00+0000") is not None
        assert parse_timestamp_ms("9999-12-31T23:59:59+0000") is not None


class TestBucketKey:
    """Tests for UTC bucket labels."""

    def test_hour(self) -> None:
        """Hour buckets truncate to the UTC hour."""
        ms = parse_timestamp_ms("2025-01-01T01:30:00+0100")

        assert bucket_key(ms, "hour") == "2025-01-01 00:00Z"

    def test_day(self) -> None:
        """Day buckets use the UTC date."""
        ms = parse_timestamp_ms("2025-01-01T23:30:00-0200")

        assert bucket_key(ms, "day") == "2025-01-02Z"

    def test_week_starts_monday(self) -> None:
        """Week buckets are labelled with the Monday of the week."""
        assert bucket_key(NEW_YEAR_2025_MS, "week") == "Week of 2024-12-30Z"

    def test_week_on_monday(self) -> None:
        """A Monday labels its own week."""
        ms = parse_timestamp_ms("2024-12-30T00:00:00+0000")

        assert bucket_key(ms, "week") == "Week of 2024-12-30Z"

    def test_missing_timestamp(self) -> None:
        """None maps to the no-timestamp sentinel."""
        assert bucket_key(None, "day") == NO_TIMESTAMP_KEY

    def test_unknown_granularity(self) -> None:
        """Unknown granularity yields a placeholder label."""
        assert bucket_key(NEW_YEAR_2025_MS, "month") == "(no bucket)"  # type: ignore[arg-type]

    @pytest.mark.parametrize("granularity", ["hour", "day", "week"])
    def test_out_of_range_timestamp(self, granularity: BucketGranularity) -> None:
        """Epoch values beyond the datetime range map to the sentinel."""
        year_10000_ms = parse_timestamp_ms("9999-12-31T00:00:00+0000") + 2 * 86_400_000  # type: ignore[operator]
        year_0_ms = parse_timestamp_ms("0001-01-01T00:00:00+0000") - 86_400_000  # type: ignore[operator]

        assert bucket_key(year_10000_ms, granularity) == NO_TIMESTAMP_KEY
        assert bucket_key(year_0_ms, granularity) == NO_TIMESTAMP_KEY

    def test_first_representable_week(self) -> None:
        """0001-01-01 is a Monday and labels its own week."""
        ms = parse_timestamp_ms("0001-01-01T00:30:00+0000")

        assert bucket_key(ms, "week") == "Week of 0001-01-01Z"


class TestDateLines:
    """Tests for human-readable date lines."""

    def test_full_date_line(self) -> None:
        """The wall clock of the original offset is shown."""
        line = full_date_line("2025-03-14T18:30:00.000+0100")

        assert line == "2025-03-14T18:30:00.000+0100 ❗ Friday, March 14 2025 ❗ 18:30 UTC+0100"

    def test_full_date_line_missing(self) -> None:
        """Missing dates render as N/A."""
        assert full_date_line(None) == "N/A"

    def test_full_date_line_without_compact_offset(self) -> None:
        """Dates without a compact offset keep the raw value."""
        assert full_date_line("2025-03-14") == "2025-03-14 ❗ N/A ❗  UTC"

    def test_utc_offset_label(self) -> None:
        """Offsets are shown in compact form."""
        assert utc_offset_label("2025-03-14T18:30:00-0500") == "UTC-0500"
        assert utc_offset_label("2025-03-14") == "UTC"

    def test_hour_stamp(self) -> None:
        """Hour stamps follow the log archive layout."""
        assert hour_stamp("2025-03-14T18:30:00.000+0100") == "25/03/14/18"
        assert hour_stamp("garbage") == "N/A"


class TestCreationLine:
    """Tests for creation date lines with the log purge warning."""

    def test_recent_has_no_warning(self) -> None:
        """Timestamps inside the retention window carry no warning."""
        now = datetime(2025, 2, 1, tzinfo=timezone.utc)

        line = creation_line("2025-01-10T08:15:00.000+0000", now=now)

        assert line == "2025-01-10T08:15:00.000+0000 ❗ 25/01/10/08"

    def test_old_is_purged(self) -> None:
        """Timestamps older than the window are flagged."""
        now = datetime(2025, 6, 1, tzinfo=timezone.utc)

        line = creation_line("2025-01-10T08:15:00.000+0000", now=now)

        assert line.endswith("⚠️ Logs Purged")

    def test_custom_retention(self) -> None:
        """The retention window is configurable."""
        moment = datetime(2025, 1, 10, 8, 15, tzinfo=timezone.utc)

        line = creation_line("2025-01-10T08:15:00.000+0000", now=moment + timedelta(days=8), retention_days=7)

        assert "Logs Purged" in line

    @time_machine.travel("2025-02-01 00:00:00", tick=False)
    def test_defaults_to_current_time(self) -> None:
        """Without now, the current UTC time is used."""
        assert "Logs Purged" not in creation_line("2025-01-10T08:15:00.000+0000")

    @time_machine.travel("2026-01-01 00:00:00", tick=False)
    def test_current_time_purged(self) -> None:
        """A year-old timestamp is purged at the current time."""
        assert "Logs Purged" in creation_line("2025-01-10T08:15:00.000+0000")

    def test_missing(self) -> None:
        """Missing timestamps render as N/A."""
        assert creation_line(None) == "N/A"
