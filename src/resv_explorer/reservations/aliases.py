"""Field alias resolution for reservation payloads.

The reservation API spells some concepts several ways across versions
and channels. Each concept is described once here as an ordered list of
candidate field names, resolved by first non-empty match.

Tolerant read policy:
    - Cancellation date: cancellationDate, cancelationDate, cancelledDate, cancelDate
    - Reservation id: id, comments[0].reservationID,
      products[].productCalendar[].reservationID, reservationID
    - Hotel code: externalCustomerReference, customer.externalCustomerReference,
      then any nested externalCustomerReference
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from typing import Any

NOT_AVAILABLE = "N/A"

CANCELLATION_DATE_ALIASES = ("cancellationDate", "cancelationDate", "cancelledDate", "cancelDate")

HOTEL_CODE_KEY = "externalCustomerReference"
_HOTEL_CODE_IN_TEXT = re.compile(r'"externalCustomerReference"\s*:\s*"([^"]+)"', re.IGNORECASE)
_HOTEL_CODE_SHAPE = re.compile(r'"(BN\d{3,6})"')

_MISSING = object()


def is_empty(value: Any) -> bool:
    """Whether a field value counts as not provided."""
    return value is None or value == "" or value == [] or value == {}


def resolve_field(record: Any, candidates: Sequence[str], default: Any = None) -> Any:
    """Return the first non-empty value among candidate field names.

    Example:
        >>> resolve_field({"cancelDate": "2025-02-01"}, CANCELLATION_DATE_ALIASES)
        '2025-02-01'
    """
    if not isinstance(record, dict):
        return default
    for name in candidates:
        value = record.get(name)
        if not is_empty(value):
            return value
    return default


def find_key(obj: Any, key: str, max_depth: int = 8) -> Any:
    """Depth-limited search for the first occurrence of a key.

    Objects are checked for the key before their members are searched.

    Returns:
        The value found, or None.
    """
    found = _find_key(obj, key, max_depth)
    return None if found is _MISSING else found


def _find_key(obj: Any, key: str, depth: int) -> Any:
    if depth < 0 or not isinstance(obj, (dict, list)):
        return _MISSING

    if isinstance(obj, list):
        for item in obj:
            found = _find_key(item, key, depth - 1)
            if found is not _MISSING:
                return found
        return _MISSING

    if key in obj:
        return obj[key]
    for value in obj.values():
        found = _find_key(value, key, depth - 1)
        if found is not _MISSING:
            return found
    return _MISSING


def _first_product_calendar_id(reservation: dict[str, Any]) -> Any:
    products = reservation.get("products")
    if not isinstance(products, list):
        return None
    for product in products:
        calendars = product.get("productCalendar") if isinstance(product, dict) else None
        if not isinstance(calendars, list):
            continue
        for calendar in calendars:
            if isinstance(calendar, dict) and not is_empty(calendar.get("reservationID")):
                return calendar["reservationID"]
    return None


def resolve_reservation_id(reservation: Any) -> str:
    """Resolve the reservation UUID, falling back through legacy locations.

    Returns:
        The id as a string, or "N/A".
    """
    if not isinstance(reservation, dict):
        return NOT_AVAILABLE

    primary = reservation.get("id")
    if not is_empty(primary) and str(primary).strip():
        return str(primary).strip()

    comments = reservation.get("comments")
    if isinstance(comments, list) and comments and isinstance(comments[0], dict):
        comment_id = comments[0].get("reservationID")
        if not is_empty(comment_id):
            return str(comment_id)

    calendar_id = _first_product_calendar_id(reservation)
    if calendar_id is not None:
        return str(calendar_id)

    legacy = reservation.get("reservationID")
    if not is_empty(legacy):
        return str(legacy)
    return NOT_AVAILABLE


def resolve_hotel_code(reservation: Any) -> str:
    """Resolve the hotel code (externalCustomerReference) of a reservation.

    Falls back to a nested search, then to a textual scan for a
    ``BNnnnn``-shaped code.

    Returns:
        The trimmed hotel code, or "N/A".
    """
    if not isinstance(reservation, dict):
        return NOT_AVAILABLE

    customer = reservation.get("customer")
    code = resolve_field(reservation, (HOTEL_CODE_KEY,))
    if code is None and isinstance(customer, dict):
        code = resolve_field(customer, (HOTEL_CODE_KEY,))
    if is_empty(code):
        code = find_key(reservation, HOTEL_CODE_KEY)
    if is_empty(code):
        text = json.dumps(reservation, default=str)
        match = _HOTEL_CODE_IN_TEXT.search(text) or _HOTEL_CODE_SHAPE.search(text)
        code = match.group(1) if match else None

    if is_empty(code):
        return NOT_AVAILABLE
    return str(code).strip() or NOT_AVAILABLE
