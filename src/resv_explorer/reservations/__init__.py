"""Reservation response summaries and payload builders for resv-explorer.

Example:
    >>> from resv_explorer.reservations import summarize_reservation
    >>>
    >>> summary = summarize_reservation(document)
    >>> print(summary.reservation_id, summary.status)
"""

from __future__ import annotations

from resv_explorer.reservations.aliases import (
    CANCELLATION_DATE_ALIASES,
    find_key,
    resolve_field,
    resolve_hotel_code,
    resolve_reservation_id,
)
from resv_explorer.reservations.inflation import (
    DEFAULT_INFLATION_FACTOR,
    FULFILLMENT_FIELDS,
    InflationResult,
    inflate_reservation,
)
from resv_explorer.reservations.summary import (
    Authorization,
    Party,
    ProductCalendarEntry,
    ReservationSummary,
    summarize_reservation,
)

__all__ = [
    "CANCELLATION_DATE_ALIASES",
    "DEFAULT_INFLATION_FACTOR",
    "FULFILLMENT_FIELDS",
    "Authorization",
    "InflationResult",
    "Party",
    "ProductCalendarEntry",
    "ReservationSummary",
    "find_key",
    "inflate_reservation",
    "resolve_field",
    "resolve_hotel_code",
    "resolve_reservation_id",
    "summarize_reservation",
]
