"""Tests for console reporter."""

from __future__ import annotations

import io
from datetime import datetime, timezone
from typing import Any

import pytest

from resv_explorer.availability import AvailabilitySummary, summarize_availability
from resv_explorer.channels import (
    ChannelParametersSummary,
    MessageTraceSummary,
    summarize_channel_parameters,
    summarize_message_traces,
)
from resv_explorer.deltas import FilterCriteria, GroupingConfig, NameResolver, explore
from resv_explorer.deltas.stats import path_counts
from resv_explorer.reporters.console import ConsoleReporter
from resv_explorer.reservations import summarize_reservation


@pytest.fixture
def history_document() -> dict[str, Any]:
    """Reservation history with three sessions and one entry without lastModified.

    Extracted operations, in sequence order:
        0  replace /status       HOLD -> BOOK    2025-01-01T10:00  u1
        1  add     /products/0   {productID}     2025-01-01T10:00  u1
        2  replace /status       BOOK -> CANCEL  2025-01-02T09:30  u2
        3  replace /roomType     DBL -> TWN      2025-01-02T09:30  u2
        4  replace /status       HOLD -> BOOK    2025-01-02T09:30  u2
        5  remove  /comments/0                   (none)            (none)
    """
    return {
        "reservationsHistories": [
            {
                "lastModified": "2025-01-01T10:00:00.000+0000",
                "lastModifiedByID": "u1",
                "deltaHistory": [
                    {"op": "replace", "path": "/status", "fromValue": "HOLD", "value": "BOOK"},
                    {"op": "add", "path": "/products/0", "value": {"productID": "P1"}},
                ],
            },
            {
                "lastModified": "2025-01-02T09:30:00.000+0000",
                "lastModifiedByID": "u2",
                "deltaHistory": [
                    {"op": "replace", "path": "/status", "fromValue": "BOOK", "value": "CANCEL"},
                    {"op": "replace", "path": "/roomType", "fromValue": "DBL", "value": "TWN"},
                ],
            },
            {
                "lastModified": "2025-01-02T09:30:00.000+0000",
                "lastModifiedByID": "u2",
                "deltaHistory": [
                    {"op": "replace", "path": "/status", "fromValue": "HOLD", "value": "BOOK"},
                ],
            },
            {
                "deltaHistory": [
                    {"op": "remove", "path": "/comments/0"},
                ],
            },
        ]
    }


@pytest.fixture
def reservation_document() -> dict[str, Any]:
    """Reservation response with every summarized section populated."""
    calendar = {
        "beginDate": "2025-03-14",
        "departureDate": "2025-03-15",
        "amount": "120.5",
        "currencyCode": "EUR",
        "adults": 2,
        "children": 1,
        "creationDate": "2025-01-10T08:15:00.000+0000",
        "productID": "P1",
        "priceID": "PR1",
        "externalPriceCode": "BAR",
        "status": "BOOK",
        "reservationID": "9f1c-uuid",
    }
    return {
        "reservation": {
            "id": "9f1c-uuid",
            "reservationNumber": "R-1001",
            "externalReservationNumber": "TO-55",
            "status": "BOOK",
            "reservationType": "INDIVIDUAL",
            "externalAgreementCode": "CORP1",
            "customer": {"externalCustomerReference": " BN1234 "},
            "checkinDate": "2025-03-14T15:00:00.000+0100",
            "checkoutDate": "2025-03-16T11:00:00.000+0100",
            "creationDate": "2025-01-10T08:15:00.000+0000",
            "cancelDate": "2025-02-01T12:00:00.000+0000",
            "creationChannelCodeList": ["WEB", "GDS"],
            "products": [
                {
                    "productCalendar": [
                        calendar,
                        {**calendar, "beginDate": "2025-03-15", "departureDate": "2025-03-16", "status": "CANCEL"},
                    ]
                }
            ],
            "parties": [
                {"firstName": "Ada", "name": "Lovelace", "partyType": "ADULT", "primaryYN": "Y"},
                {"firstName": "Tim", "name": "Lovelace", "partyType": "CHILD", "udfValues": {"CHILD_AGE": "7"}},
            ],
            "authorizations": [
                {
                    "authorizationType": "CC",
                    "authorizationReason": "GUARANTEE",
                    "lastModified": "2025-01-10T08:16:00.000+0000",
                    "inactivated": False,
                }
            ],
            "udfValues": {"CREATION_USER_ID": "x", "EPS_RETRIEVE_LINK": "y", "LOYALTY": "GOLD"},
        }
    }


@pytest.fixture
def output() -> io.StringIO:
    """Captured output stream."""
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO) -> ConsoleReporter:
    """Console reporter without colors and with one known author."""
    return ConsoleReporter(use_colors=False, names=NameResolver({"u1": "John Doe"}), output=output)


@pytest.fixture
def availability_summary() -> AvailabilitySummary:
    """Availability with one refundable rate plan of one night."""
    return summarize_availability(
        {
            "locationAvailabilityList": [
                {
                    "destinationLocationCode": "BN1234",
                    "destinationLocationDescription": "Harbor <Hotel>",
                    "beginDate": "2025-03-14",
                    "endDate": "2025-03-15",
                    "duration": 1,
                    "currencyCode": "EUR",
                    "availabilityList": [
                        {
                            "priceCode": "BAR",
                            "priceDescription": "Best Available",
                            "refundable": True,
                            "averagePriceAmount": 1234.5,
                            "currencyCode": "EUR",
                            "priceCalendar": [{"priceDateTime": "2025-03-14", "availability": {"priceAmount": 130}}],
                            "policies": [{"type": "CANCEL", "code": "C1", "dueDateTime": "2025-03-12"}],
                        }
                    ],
                }
            ]
        }
    )


@pytest.fixture
def parameters_summary() -> ChannelParametersSummary:
    """Two parameters on one channel, one holding a JSON value."""
    return summarize_channel_parameters(
        {
            "channelParameters": [
                {"id": 1, "channelID": "20", "parameterName": "RATE_MAP", "parameterValue": '{"BAR": "<RACK>"}'},
                {"id": 2, "channelID": "20", "parameterName": "TIMEOUT", "parameterValue": "30", "inactivated": True},
            ]
        }
    )


@pytest.fixture
def traces_summary() -> MessageTraceSummary:
    """One outbound trace with a contact name."""
    return summarize_message_traces(
        {
            "messageTraces": [
                {
                    "timestamp": "2025-01-02T09:30:00Z",
                    "channelCode": "SUPPLY_HILTON",
                    "channelID": "7",
                    "direction": "OUTBOUND",
                    "messageType": "BOOK",
                    "fkReference": "R-1001",
                    "messageData": {"contactPerson": {"firstName": "Ada"}},
                }
            ]
        }
    )


class TestConsoleReporterInit:
    """Tests for ConsoleReporter initialization."""

    def test_colors_disabled_for_non_tty(self, output: io.StringIO) -> None:
        """Colors are only used on terminals."""
        assert not ConsoleReporter(use_colors=True, output=output).use_colors

    def test_default_names(self) -> None:
        assert len(ConsoleReporter().names) == 0


class TestReportDeltaView:
    """Tests for delta view output."""

    def test_counts_line(self, reporter: ConsoleReporter, output: io.StringIO, history_document: dict[str, Any]) -> None:
        _, view = explore(history_document, FilterCriteria(paths={"/status"}))

        reporter.report_delta_view(view)

        assert "Delta/Patch Explorer" in output.getvalue()
        assert "6 ops · 3 shown · 2 groups · 1 sessions" in output.getvalue()

    def test_strict_groups(self, reporter: ConsoleReporter, output: io.StringIO, history_document: dict[str, Any]) -> None:
        """Groups show verb, path, values, context and occurrences."""
        _, view = explore(history_document)

        reporter.report_delta_view(view)

        lines = output.getvalue().splitlines()
        assert "  1. REPLACE /status  ×2" in lines
        assert "     from HOLD" in lines
        assert "     to   BOOK" in lines
        assert "     lastModifiedBy John Doe" in lines
        assert "     seq:0 seq:4" in lines

    def test_loose_hides_values(self, reporter: ConsoleReporter, output: io.StringIO, history_document: dict[str, Any]) -> None:
        _, view = explore(history_document, config=GroupingConfig(grouping_mode="loose"))

        reporter.report_delta_view(view)

        assert "  1. REPLACE /status  ×3" in output.getvalue().splitlines()
        assert "from HOLD" not in output.getvalue()

    def test_sessions(self, reporter: ConsoleReporter, output: io.StringIO, history_document: dict[str, Any]) -> None:
        """Session headers show lastModified and the resolved author."""
        _, view = explore(history_document, config=GroupingConfig(session_grouping=True))

        reporter.report_delta_view(view)

        text = output.getvalue()
        assert "🧬 Session: 2025-01-01T10:00:00.000+0000  (2)" in text
        assert "By: John Doe" in text
        assert "By: u2" in text
        assert "🧬 Session: (no lastModified)  (1)" in text
        assert "By: (null)" in text

    def test_buckets(self, reporter: ConsoleReporter, output: io.StringIO, history_document: dict[str, Any]) -> None:
        config = GroupingConfig(session_grouping=True, bucket_grouping=True, sort_by_time=True)
        _, view = explore(history_document, config=config)

        reporter.report_delta_view(view)

        text = output.getvalue()
        assert text.index("🕒 2025-01-02Z  (3)") < text.index("🕒 2025-01-01Z  (2)")
        assert "Bucket type: day" in text

    def test_empty(self, reporter: ConsoleReporter, output: io.StringIO) -> None:
        _, view = explore({})

        reporter.report_delta_view(view)

        assert "No patch operations to display." in output.getvalue()


class TestReportPathHistogram:
    """Tests for path histogram output."""

    def test_bars(self, reporter: ConsoleReporter, output: io.StringIO, history_document: dict[str, Any]) -> None:
        operations, _ = explore(history_document)

        reporter.report_path_histogram(path_counts(operations))

        lines = output.getvalue().splitlines()
        status = next(line for line in lines if "/status" in line)
        room = next(line for line in lines if "/roomType" in line)
        assert status.count("█") == 30
        assert room.count("█") == 10
        assert status.endswith("   3")

    def test_empty(self, reporter: ConsoleReporter, output: io.StringIO) -> None:
        reporter.report_path_histogram([])

        assert "No patch operations found." in output.getvalue()


class TestReportReservation:
    """Tests for reservation summary output."""

    def test_summary(self, reporter: ConsoleReporter, output: io.StringIO, reservation_document: dict[str, Any]) -> None:
        summary = summarize_reservation(reservation_document)

        reporter.report_reservation(summary, now=datetime(2025, 2, 15, tzinfo=timezone.utc))

        text = output.getvalue()
        assert "✅ Reservation Summary" in text
        assert "R-1001" in text
        assert "✅ BOOK" in text
        assert "BN1234" in text
        assert "WEB 🚇 GDS" in text
        assert "Logs Purged" not in text
        assert "⭐️ Ada Lovelace (ADULT)" in text
        assert "age 7" in text
        assert "LOYALTY: GOLD" in text
        assert "CREATION_USER_ID" not in text

    def test_missing_id_warning(self, reporter: ConsoleReporter, output: io.StringIO) -> None:
        reporter.report_reservation(summarize_reservation({}))

        assert "Reservation ID could not be resolved" in output.getvalue()


class TestReportAvailability:
    """Tests for availability output."""

    def test_summary(self, reporter: ConsoleReporter, output: io.StringIO, availability_summary: AvailabilitySummary) -> None:
        reporter.report_availability(availability_summary)

        text = output.getvalue()
        assert "Availability · Harbor <Hotel>" in text
        assert "BN1234" in text
        assert "BAR  Best Available" in text
        assert "refundable · exclusive · avg €1,234.50" in text
        assert "Mar 14, 2025" in text
        assert "CANCEL (C1)" in text
        assert "Due: Mar 12, 2025" in text

    def test_no_rates(self, reporter: ConsoleReporter, output: io.StringIO) -> None:
        reporter.report_availability(summarize_availability({}))

        assert "No rate plans returned." in output.getvalue()


class TestReportChannelParameters:
    """Tests for channel parameter output."""

    def test_groups(self, reporter: ConsoleReporter, output: io.StringIO, parameters_summary: ChannelParametersSummary) -> None:
        reporter.report_channel_parameters(parameters_summary)

        text = output.getvalue()
        assert "Total: 2 · Channels: 1" in text
        assert "channelID: 20  (2 params · 1 inactive)" in text
        assert "TIMEOUT = 30  inactive" in text
        assert '"BAR": "<RACK>"' in text

    def test_empty(self, reporter: ConsoleReporter, output: io.StringIO, parameters_summary: ChannelParametersSummary) -> None:
        reporter.report_channel_parameters(parameters_summary.filtered(channel_id="99"))

        assert "No channel parameters to display." in output.getvalue()


class TestReportMessageTraces:
    """Tests for message trace output."""

    def test_traces(self, reporter: ConsoleReporter, output: io.StringIO, traces_summary: MessageTraceSummary) -> None:
        reporter.report_message_traces(traces_summary)

        text = output.getvalue()
        assert "Channels (1)" in text
        assert "🏨 SUPPLY_HILTON  7" in text
        assert "🏨 OUTBOUND  BOOK  R-1001(Ada)" in text
        assert '"firstName": "Ada"' in text

    def test_empty(self, reporter: ConsoleReporter, output: io.StringIO) -> None:
        reporter.report_message_traces(summarize_message_traces({}))

        text = output.getvalue()
        assert "No channels found in messageTraces." in text
        assert "No messageTraces found in response." in text
