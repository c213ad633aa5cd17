"""Reservation confirmation summary.

This module condenses a reservation response (``{"reservation": {...}}``)
into the fields an operator checks first: identifiers, status, stay
dates, product calendar lines, parties, authorizations and UDF values.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from resv_explorer.core.timestamps import creation_line, full_date_line
from resv_explorer.reservations.aliases import (
    CANCELLATION_DATE_ALIASES,
    NOT_AVAILABLE,
    resolve_field,
    resolve_hotel_code,
    resolve_reservation_id,
)

logger = logging.getLogger(__name__)

STATUS_EMOJI = {"BOOK": "✅", "CANCEL": "❌"}
DEFAULT_STATUS_EMOJI = "⚪️"

# Internal UDF keys not shown to operators
HIDDEN_UDF_KEYS = frozenset({"CREATION_USER_ID", "EPS_RETRIEVE_LINK"})


def status_emoji(status: str | None) -> str:
    """Emoji for a booking status."""
    return STATUS_EMOJI.get(status or "", DEFAULT_STATUS_EMOJI)


def _text(value: Any, default: str = NOT_AVAILABLE) -> str:
    if value is None or value == "":
        return default
    return str(value)


def _timestamp(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _number(value: Any, default: float = 0.0) -> float:
    try:
        return float(value) if value not in (None, "") else default
    except (TypeError, ValueError):
        return default


def _count(value: Any) -> int:
    try:
        return int(value) if value not in (None, "") else 0
    except (TypeError, ValueError):
        return 0


def _dicts(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class ProductCalendarEntry(BaseModel):
    """One night or stay line of a reserved product."""

    model_config = {"frozen": True}

    index: str = Field(..., description="Product and calendar position, e.g. '1.2'")
    begin_date: str = NOT_AVAILABLE
    departure_date: str = NOT_AVAILABLE
    amount: float = 0.0
    currency: str = NOT_AVAILABLE
    adults: int = 0
    children: int = 0
    creation_date: str = NOT_AVAILABLE
    product_id: str = NOT_AVAILABLE
    price_id: str = NOT_AVAILABLE
    external_price_code: str = NOT_AVAILABLE
    status: str = NOT_AVAILABLE
    reservation_id: str | None = None

    @property
    def emoji(self) -> str:
        return status_emoji(self.status)


class Party(BaseModel):
    """A guest attached to the reservation."""

    model_config = {"frozen": True}

    index: int
    first_name: str = ""
    last_name: str = ""
    party_type: str = ""
    primary: bool = False
    child_age: str = ""
    fk_reference: str = ""
    fk_id: str = ""


class Authorization(BaseModel):
    """A payment or guarantee authorization."""

    model_config = {"frozen": True}

    index: int
    authorization_type: str = NOT_AVAILABLE
    authorization_reason: str = ""
    last_modified: str = NOT_AVAILABLE
    inactivated: bool = False


class ReservationSummary(BaseModel):
    """Operator-facing summary of a reservation.

    Attributes:
        reservation_number: Property-level reservation number.
        reservation_id: Reservation UUID, resolved through legacy fallbacks.
        external_reservation_number: Channel (tour operator) order number.
        status: Booking status (BOOK, CANCEL, ...).
        reservation_type: Reservation type code.
        external_agreement_code: Corporate profile agreement code.
        hotel_code: External customer reference of the hotel.
        checkin_date: Raw check-in timestamp.
        checkout_date: Raw check-out timestamp.
        creation_date: Raw creation timestamp.
        cancellation_date: Raw cancellation timestamp, from any alias.
        creation_channels: Channel codes that created the reservation.
        products: Product calendar lines.
        parties: Guests.
        authorizations: Authorizations.
        udf_values: User-defined fields, minus internal keys.
    """

    model_config = {"frozen": True}

    reservation_number: str = NOT_AVAILABLE
    reservation_id: str = NOT_AVAILABLE
    external_reservation_number: str = NOT_AVAILABLE
    status: str = NOT_AVAILABLE
    reservation_type: str = NOT_AVAILABLE
    external_agreement_code: str = NOT_AVAILABLE
    hotel_code: str = NOT_AVAILABLE
    checkin_date: str | None = None
    checkout_date: str | None = None
    creation_date: str | None = None
    cancellation_date: str | None = None
    creation_channels: list[str] = Field(default_factory=list)
    products: list[ProductCalendarEntry] = Field(default_factory=list)
    parties: list[Party] = Field(default_factory=list)
    authorizations: list[Authorization] = Field(default_factory=list)
    udf_values: dict[str, Any] = Field(default_factory=dict)

    @property
    def status_emoji(self) -> str:
        return status_emoji(self.status)

    @property
    def has_reservation_id(self) -> bool:
        return self.reservation_id != NOT_AVAILABLE

    def checkin_line(self) -> str:
        return full_date_line(self.checkin_date)

    def checkout_line(self) -> str:
        return full_date_line(self.checkout_date)

    def creation_line(self, now: datetime | None = None, retention_days: int = 90) -> str:
        """Creation timestamp with its log hour and purge warning."""
        return creation_line(self.creation_date, now=now, retention_days=retention_days)

    def cancellation_line(self, now: datetime | None = None, retention_days: int = 90) -> str:
        """Cancellation timestamp with its log hour and purge warning."""
        return creation_line(self.cancellation_date, now=now, retention_days=retention_days)

    def counts(self) -> dict[str, int]:
        """Number of products, parties, authorizations and UDF values."""
        return {
            "products": len(self.products),
            "parties": len(self.parties),
            "authorizations": len(self.authorizations),
            "udf": len(self.udf_values),
        }


def _product_entries(reservation: dict[str, Any]) -> list[ProductCalendarEntry]:
    entries: list[ProductCalendarEntry] = []
    for i, product in enumerate(_dicts(reservation.get("products")), 1):
        for j, calendar in enumerate(_dicts(product.get("productCalendar")), 1):
            reservation_id = calendar.get("reservationID")
            entries.append(
                ProductCalendarEntry(
                    index=f"{i}.{j}",
                    begin_date=_text(calendar.get("beginDate")),
                    departure_date=_text(calendar.get("departureDate")),
                    amount=_number(calendar.get("amount")),
                    currency=_text(calendar.get("currencyCode")),
                    adults=_count(calendar.get("adults")),
                    children=_count(calendar.get("children")),
                    creation_date=_text(calendar.get("creationDate")),
                    product_id=_text(calendar.get("productID")),
                    price_id=_text(calendar.get("priceID")),
                    external_price_code=_text(calendar.get("externalPriceCode")),
                    status=_text(calendar.get("status")),
                    reservation_id=str(reservation_id) if reservation_id else None,
                )
            )
    return entries


def _parties(reservation: dict[str, Any]) -> list[Party]:
    parties: list[Party] = []
    for i, party in enumerate(_dicts(reservation.get("parties")), 1):
        udf = party.get("udfValues") if isinstance(party.get("udfValues"), dict) else {}
        parties.append(
            Party(
                index=i,
                first_name=_text(party.get("firstName"), ""),
                last_name=_text(party.get("name"), ""),
                party_type=_text(party.get("partyType"), ""),
                primary=party.get("primaryYN") == "Y",
                child_age=_text(udf.get("CHILD_AGE"), ""),
                fk_reference=_text(party.get("fkReference"), ""),
                fk_id=_text(party.get("fkID"), ""),
            )
        )
    return parties


def _authorizations(reservation: dict[str, Any]) -> list[Authorization]:
    return [
        Authorization(
            index=i,
            authorization_type=_text(auth.get("authorizationType")),
            authorization_reason=_text(auth.get("authorizationReason"), ""),
            last_modified=_text(auth.get("lastModified")),
            inactivated=bool(auth.get("inactivated")),
        )
        for i, auth in enumerate(_dicts(reservation.get("authorizations")), 1)
    ]


def summarize_reservation(document: Any) -> ReservationSummary:
    """Build a ReservationSummary from a reservation response.

    Missing or malformed sections degrade to "N/A" or empty lists.

    Args:
        document: Parsed response with a top-level ``reservation`` object.

    Returns:
        The reservation summary.

    Example:
        >>> summary = summarize_reservation(load_document("reservation.json"))
        >>> summary.status_emoji, summary.status
        ('✅', 'BOOK')
    """
    reservation = document.get("reservation") if isinstance(document, dict) else None
    if not isinstance(reservation, dict):
        logger.warning("Response has no reservation object")
        reservation = {}

    udf = reservation.get("udfValues") if isinstance(reservation.get("udfValues"), dict) else {}
    channels = reservation.get("creationChannelCodeList")

    summary = ReservationSummary(
        reservation_number=_text(reservation.get("reservationNumber")),
        reservation_id=resolve_reservation_id(reservation),
        external_reservation_number=_text(reservation.get("externalReservationNumber")),
        status=_text(reservation.get("status")),
        reservation_type=_text(reservation.get("reservationType")),
        external_agreement_code=_text(reservation.get("externalAgreementCode")),
        hotel_code=resolve_hotel_code(reservation),
        checkin_date=_timestamp(reservation.get("checkinDate")),
        checkout_date=_timestamp(reservation.get("checkoutDate")),
        creation_date=_timestamp(reservation.get("creationDate")),
        cancellation_date=_timestamp(resolve_field(reservation, CANCELLATION_DATE_ALIASES)),
        creation_channels=[str(code) for code in channels] if isinstance(channels, list) else [],
        products=_product_entries(reservation),
        parties=_parties(reservation),
        authorizations=_authorizations(reservation),
        udf_values={key: value for key, value in udf.items() if key not in HIDDEN_UDF_KEYS},
    )
    logger.debug(f"Summarized reservation {summary.reservation_id}: {summary.counts()}")
    return summary
