"""Rate inflation payload builder.

Builds the body of a reservation rewrite in which the main product's sell
price and fulfillment amounts are multiplied by a factor. The input
response is never modified; the payload is a deep copy of its
``reservation`` object.

Only the first product and its first product calendar line are changed,
plus ``reservationSummaries.roomProductSubTotal``.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from pydantic import BaseModel, Field

from resv_explorer.core.exceptions import PayloadError

logger = logging.getLogger(__name__)

DEFAULT_INFLATION_FACTOR = 1.5

PRODUCT_SELL_FIELDS = ("amount", "amountFromPrice", "subTotal", "totalAmount", "totalAmountFromPrice")
CALENDAR_SELL_FIELDS = ("amount", "amountFromPrice", "totalAmount")
FULFILLMENT_FIELDS = (
    "fulfillmentAmount",
    "fulfillmentAmountFromPrice",
    "fulfillmentTotalAmount",
    "fulfillmentTotalAmountFromPrice",
    "fulfillmentTaxAmount",
    "fulfillmentTotalTaxAmount",
)


class InflationResult(BaseModel):
    """A rewritten reservation body and the amounts it was built from."""

    model_config = {"frozen": True}

    reservation_id: str | None = None
    factor: float
    base_amount: float
    inflated_amount: float
    payload: dict[str, Any] = Field(default_factory=dict)


def _to_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _scale_field(record: dict[str, Any], field: str, factor: float) -> None:
    if record.get(field) is None:
        return
    number = _to_number(record[field])
    if number is None:
        logger.warning(f"Skipping non-numeric {field}: {record[field]!r}")
        return
    record[field] = round(number * factor, 2)


def inflate_reservation(document: Any, factor: float = DEFAULT_INFLATION_FACTOR) -> InflationResult:
    """Build a reservation body with the main product's rates inflated.

    The base amount is the first product's ``amount``, or its
    ``totalAmount`` when ``amount`` is missing or zero. Sell price fields
    are set to the inflated base; fulfillment fields are each multiplied
    by the factor.

    Args:
        document: Parsed response with a top-level ``reservation`` object.
        factor: Multiplier applied to the amounts.

    Returns:
        The inflation result holding the rewritten reservation.

    Raises:
        PayloadError: If there is no reservation, no product, or no
            numeric base amount.

    Example:
        >>> result = inflate_reservation(load_document("reservation.json"))
        >>> result.base_amount, result.inflated_amount
        (120.5, 180.75)
    """
    reservation = document.get("reservation") if isinstance(document, dict) else None
    if not isinstance(reservation, dict):
        raise PayloadError("Response has no reservation object")

    payload = copy.deepcopy(reservation)
    products = payload.get("products")
    if not isinstance(products, list) or not products or not isinstance(products[0], dict):
        raise PayloadError("Reservation has no products to inflate")
    product = products[0]

    base_amount = _to_number(product.get("amount") or product.get("totalAmount"))
    if base_amount is None:
        raise PayloadError("Main product has no numeric amount or totalAmount")
    inflated = round(base_amount * factor, 2)

    for field in PRODUCT_SELL_FIELDS:
        product[field] = inflated
    for field in FULFILLMENT_FIELDS:
        _scale_field(product, field, factor)

    calendar = product.get("productCalendar")
    if isinstance(calendar, list) and calendar and isinstance(calendar[0], dict):
        for field in CALENDAR_SELL_FIELDS:
            calendar[0][field] = inflated
        for field in FULFILLMENT_FIELDS:
            _scale_field(calendar[0], field, factor)

    if isinstance(payload.get("reservationSummaries"), dict):
        payload["reservationSummaries"]["roomProductSubTotal"] = inflated

    reservation_id = payload.get("id")
    logger.info(f"Inflated reservation {reservation_id}: {base_amount} -> {inflated} (x{factor})")
    return InflationResult(
        reservation_id=str(reservation_id) if reservation_id else None,
        factor=factor,
        base_amount=base_amount,
        inflated_amount=inflated,
        payload=payload,
    )
