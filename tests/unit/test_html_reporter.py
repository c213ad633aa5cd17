"""Tests for HTML reporter."""

from __future__ import annotations

from pathlib import Path
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
from resv_explorer.reporters.html import HTMLReporter
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
def reporter() -> HTMLReporter:
    """HTML reporter with one known author."""
    return HTMLReporter(names=NameResolver({"u1": "John Doe"}))


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


class TestEscapeHtml:
    """Tests for HTML escaping."""

    def test_special_characters(self, reporter: HTMLReporter) -> None:
        assert reporter._escape_html("<a href=\"x\">'&'</a>") == (
            "&lt;a href=&quot;x&quot;&gt;&#x27;&amp;&#x27;&lt;/a&gt;"
        )

    def test_none(self, reporter: HTMLReporter) -> None:
        assert reporter._escape_html(None) == ""


class TestReportDeltaView:
    """Tests for the Delta/Patch Explorer page."""

    def test_page_structure(self, reporter: HTMLReporter, history_document: dict[str, Any]) -> None:
        _, view = explore(history_document)

        html = reporter.report_delta_view(view)

        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Delta/Patch Explorer</title>" in html
        assert "<b>6</b> ops" in html
        assert "<b>5</b> groups" in html
        assert "Raw list (ordered by appearance)" in html
        assert "Counts per path" in html

    def test_occurrences_carry_pointer(self, reporter: HTMLReporter, history_document: dict[str, Any]) -> None:
        _, view = explore(history_document)

        html = reporter.report_delta_view(view)

        assert '<span class="pill" title="$.reservationsHistories[0].deltaHistory[0]">seq:0</span>' in html
        assert '<span class="pill" title="$.reservationsHistories[2].deltaHistory[0]">seq:4</span>' in html

    def test_strict_shows_values(self, reporter: HTMLReporter, history_document: dict[str, Any]) -> None:
        _, view = explore(history_document)

        html = reporter.report_delta_view(view)

        assert '<span class="k">from</span> <code>HOLD</code>' in html
        assert "<code>John Doe</code>" in html

    def test_loose_hides_values(self, reporter: HTMLReporter, history_document: dict[str, Any]) -> None:
        _, view = explore(history_document, config=GroupingConfig(grouping_mode="loose"))

        html = reporter.report_delta_view(view)

        assert '<span class="k">from</span>' not in html
        assert "Grouping: op + path" in html

    def test_bucket_and_session_headers(self, reporter: HTMLReporter, history_document: dict[str, Any]) -> None:
        config = GroupingConfig(session_grouping=True, bucket_grouping=True, bucket_granularity="week")
        _, view = explore(history_document, config=config)

        html = reporter.report_delta_view(view)

        assert "🕒 Week of 2024-12-30Z" in html
        assert "Bucket type: <code>week</code>" in html
        assert "🧬 Session: 2025-01-02T09:30:00.000+0000" in html
        assert "By: <code>u2</code>" in html

    def test_histogram_uses_all_operations(self, reporter: HTMLReporter, history_document: dict[str, Any]) -> None:
        """Filtered-out paths still appear in the histogram."""
        operations, view = explore(history_document, FilterCriteria(paths={"/status"}))

        html = reporter.report_delta_view(view, all_operations=operations)

        assert '<div class="bar-label">/roomType</div>' in html
        assert 'style="width:100%"' in html
        assert 'style="width:33%"' in html

    def test_escapes_document_text(self, reporter: HTMLReporter) -> None:
        _, view = explore([{"op": "replace", "path": "/<script>", "value": "a&b"}])

        html = reporter.report_delta_view(view)

        assert "/<script>" not in html
        assert "/&lt;script&gt;" in html
        assert "a&amp;b" in html

    def test_empty_state(self, reporter: HTMLReporter) -> None:
        _, view = explore({})

        html = reporter.report_delta_view(view)

        assert "No patch operations to display." in html
        assert "No patch operations found." in html
        assert "<b>0</b> sessions" in html

    def test_report_to_file(self, reporter: HTMLReporter, tmp_path: Path, history_document: dict[str, Any]) -> None:
        operations, view = explore(history_document)
        path = tmp_path / "out" / "deltas.html"

        reporter.report_to_file(view, path, all_operations=operations)

        assert path.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")


class TestReportReservation:
    """Tests for the reservation summary page."""

    def test_summary_page(self, reporter: HTMLReporter, reservation_document: dict[str, Any]) -> None:
        html = reporter.report_reservation(summarize_reservation(reservation_document))

        assert "<title>Reservation Summary</title>" in html
        assert "R-1001" in html
        assert "BN1234" in html
        assert "Product Calendar Details" in html
        assert "<td>120.50</td>" in html
        assert "<b>2</b> products" in html

    def test_no_products(self, reporter: HTMLReporter) -> None:
        html = reporter.report_reservation(summarize_reservation({"reservation": {}}))

        assert "No product calendar entries." in html


class TestReportAvailability:
    """Tests for the availability page."""

    def test_page(self, reporter: HTMLReporter, availability_summary: AvailabilitySummary) -> None:
        html = reporter.report_availability(availability_summary)

        assert "<title>Availability · Harbor &lt;Hotel&gt;</title>" in html
        assert "Mar 14, 2025 → Mar 15, 2025 (1 nights)" in html
        assert "€1,234.50" in html
        assert "Nightly Prices · Code BAR · Best Available" in html
        assert "Due: Mar 12, 2025" in html
        assert "<b>Yes</b>" in html

    def test_no_rates(self, reporter: HTMLReporter) -> None:
        html = reporter.report_availability(summarize_availability({}))

        assert "No rate plans returned." in html


class TestReportChannelParameters:
    """Tests for the channel parameters page."""

    def test_page(self, reporter: HTMLReporter, parameters_summary: ChannelParametersSummary) -> None:
        html = reporter.report_channel_parameters(parameters_summary)

        assert "channelID: 20" in html
        assert "1 inactive" in html
        assert 'id="group-search"' in html
        assert html.count('<tr class="group-row">') == 2
        assert "&lt;RACK&gt;" in html
        assert "<RACK>" not in html

    def test_empty(self, reporter: HTMLReporter, parameters_summary: ChannelParametersSummary) -> None:
        html = reporter.report_channel_parameters(parameters_summary.filtered("nothing here"))

        assert "No channel parameters to display." in html


class TestReportMessageTraces:
    """Tests for the message traces page."""

    def test_page(self, reporter: HTMLReporter, traces_summary: MessageTraceSummary) -> None:
        html = reporter.report_message_traces(traces_summary)

        assert "Channels (1)" in html
        assert "🏨 SUPPLY_HILTON" in html
        assert "R-1001(Ada)" in html
        assert "<details>" in html
        assert "&quot;firstName&quot;" in html

    def test_empty(self, reporter: HTMLReporter) -> None:
        html = reporter.report_message_traces(summarize_message_traces({"messageTraces": []}))

        assert "No channels found in messageTraces." in html
        assert "No messageTraces found in response." in html
