"""Tests for the rate inflation payload builder."""

from __future__ import annotations

import copy
import logging
from typing import Any

import pytest

from resv_explorer.core.exceptions import PayloadError
from resv_explorer.reservations.inflation import PRODUCT_SELL_FIELDS, inflate_reservation


@pytest.fixture
def reservation_document() -> dict[str, Any]:
    """Reservation with a main product, a second product and reservation summaries."""
    return {
        "reservation": {
            "id": "9f1c-uuid",
            "products": [
                {
                    "amount": 100,
                    "totalAmount": 200,
                    "fulfillmentAmount": 80,
                    "fulfillmentTaxAmount": "8.5",
                    "fulfillmentTotalAmount": "n/a",
                    "productCalendar": [
                        {"amount": 100, "fulfillmentAmount": 80},
                        {"amount": 100},
                    ],
                },
                {"amount": 50},
            ],
            "reservationSummaries": {"roomProductSubTotal": 100, "total": 120},
        }
    }


class TestInflateReservation:
    """Tests for inflate_reservation."""

    def test_amounts(self, reservation_document: dict[str, Any]) -> None:
        result = inflate_reservation(reservation_document, 1.5)

        assert result.reservation_id == "9f1c-uuid"
        assert result.factor == 1.5
        assert result.base_amount == 100
        assert result.inflated_amount == 150

    def test_sell_fields_set_on_main_product(self, reservation_document: dict[str, Any]) -> None:
        product = inflate_reservation(reservation_document, 1.5).payload["products"][0]

        assert all(product[field] == 150 for field in PRODUCT_SELL_FIELDS)

    def test_fulfillment_fields_scaled(
        self, reservation_document: dict[str, Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            product = inflate_reservation(reservation_document, 1.5).payload["products"][0]

        assert product["fulfillmentAmount"] == 120
        assert product["fulfillmentTaxAmount"] == 12.75
        assert product["fulfillmentTotalAmount"] == "n/a"
        assert "fulfillmentTotalAmount" in caplog.text
        assert "fulfillmentTotalTaxAmount" not in product

    def test_only_first_calendar_line(self, reservation_document: dict[str, Any]) -> None:
        calendar = inflate_reservation(reservation_document, 1.5).payload["products"][0]["productCalendar"]

        assert calendar[0]["amount"] == 150
        assert calendar[0]["totalAmount"] == 150
        assert calendar[0]["fulfillmentAmount"] == 120
        assert calendar[1] == {"amount": 100}

    def test_other_products_untouched(self, reservation_document: dict[str, Any]) -> None:
        assert inflate_reservation(reservation_document, 1.5).payload["products"][1] == {"amount": 50}

    def test_room_subtotal(self, reservation_document: dict[str, Any]) -> None:
        summaries = inflate_reservation(reservation_document, 1.5).payload["reservationSummaries"]

        assert summaries == {"roomProductSubTotal": 150, "total": 120}

    def test_input_not_modified(self, reservation_document: dict[str, Any]) -> None:
        original = copy.deepcopy(reservation_document)

        inflate_reservation(reservation_document, 2)

        assert reservation_document == original

    def test_total_amount_when_amount_is_zero(self) -> None:
        document = {"reservation": {"products": [{"amount": 0, "totalAmount": 80}]}}

        result = inflate_reservation(document, 2)

        assert result.base_amount == 80
        assert result.inflated_amount == 160
        assert result.reservation_id is None
        assert "reservationSummaries" not in result.payload

    def test_string_amount_rounded(self) -> None:
        result = inflate_reservation({"reservation": {"products": [{"amount": "120.5"}]}})

        assert result.inflated_amount == 180.75

    @pytest.mark.parametrize(
        ("document", "message"),
        [
            ({}, "no reservation"),
            ([], "no reservation"),
            ({"reservation": {"products": []}}, "no products"),
            ({"reservation": {"products": ["x"]}}, "no products"),
            ({"reservation": {"products": [{"amount": "abc"}]}}, "no numeric amount"),
            ({"reservation": {"products": [{}]}}, "no numeric amount"),
        ],
        ids=["empty", "not-an-object", "no-products", "product-not-object", "text-amount", "no-amount"],
    )
    def test_invalid(self, document: Any, message: str) -> None:
        with pytest.raises(PayloadError, match=message):
            inflate_reservation(document)
