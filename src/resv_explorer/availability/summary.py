"""Availability search dashboard.

This module condenses an availability response
(``{"locationAvailabilityList": [{...}]}``) into a stay summary and a
list of rate plans, each with its nightly prices and policies.

Only the first location is read. Amounts that are not numbers are kept
as None and displayed as a dash.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from resv_explorer.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DASH = "—"
DEFAULT_CURRENCY = "USD"
DEFAULT_PRODUCT_TYPE = "ROOM"

# Channel selector -> channelCode for availability requests
CHANNEL_CODES = {
    "EXPEDIA": "SUPPLY_SRH_EAN",
    "DERBYSOFT": "DERBYSOFT_SUPPLY_SEAMLESS",
}
REQUEST_AFFILIATE = "BONOTEL"

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "CA$",
    "AUD": "A$",
    "MXN": "MX$",
}


def request_parameters(selector: str) -> dict[str, str]:
    """Request variables for an availability search on one channel.

    Args:
        selector: Channel selector, EXPEDIA or DERBYSOFT.

    Returns:
        ``affiliate`` and ``channelCode`` values.

    Raises:
        ConfigurationError: If the selector is unknown.

    Example:
        >>> request_parameters("EXPEDIA")
        {'affiliate': 'BONOTEL', 'channelCode': 'SUPPLY_SRH_EAN'}
    """
    channel_code = CHANNEL_CODES.get(selector)
    if channel_code is None:
        raise ConfigurationError(f"Invalid channel selection: {selector}")
    return {"affiliate": REQUEST_AFFILIATE, "channelCode": channel_code}


def format_money(amount: float | None, currency: str | None = DEFAULT_CURRENCY) -> str:
    """Format an amount with its currency symbol and two decimals.

    Example:
        >>> format_money(1234.5, "EUR")
        '€1,234.50'
        >>> format_money(None)
        '—'
    """
    if amount is None:
        return DASH
    code = currency or DEFAULT_CURRENCY
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_date(value: str | None) -> str:
    """Format ``YYYY-MM-DD`` or an ISO timestamp as ``Mar 14, 2025``.

    Values that cannot be parsed are returned unchanged.
    """
    if not value:
        return DASH
    try:
        parsed = datetime.fromisoformat(value[:10] if len(value) >= 10 else value)
    except ValueError:
        return value
    return parsed.strftime("%b %d, %Y")


def _safe(value: Any, default: str = DASH) -> str:
    if value is None or value == "":
        return default
    return str(value)


def _amount(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _dicts(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class NightlyPrice(BaseModel):
    """Price of one night of a rate plan."""

    model_config = {"frozen": True}

    date: str = DASH
    price_amount: float | None = None
    base_price_amount: float | None = None
    tax_total: float | None = None
    subtotal: float | None = None
    total: float | None = None
    currency: str = DEFAULT_CURRENCY
    refundable: bool = False
    price_code: str = DASH
    price_description: str = DASH
    remaining: Any = None
    time_zone: str = ""


class RatePolicy(BaseModel):
    """A cancellation, deposit or guarantee policy of a rate plan."""

    model_config = {"frozen": True}

    type: str = DASH
    code: str = DASH
    rule: str = DASH
    amount: float | None = None
    currency: str = DEFAULT_CURRENCY
    description: str = DASH
    due: str = DASH

    @property
    def due_line(self) -> str:
        return f"Due: {format_date(self.due)}" if self.due != DASH else ""


class RatePlan(BaseModel):
    """One rate plan returned for the searched stay.

    Attributes:
        price_code: Rate plan code.
        price_description: Rate plan name.
        refundable: Whether the rate is refundable.
        inclusive: Whether taxes are included in the price.
        average_price: Average nightly price.
        min_price: Lowest nightly price.
        max_price: Highest nightly price.
        total: Stay total.
        nights: Nightly prices in response order.
        policies: Rate policies.
    """

    model_config = {"frozen": True}

    price_code: str = DASH
    price_description: str = DASH
    refundable: bool = False
    inclusive: bool = False
    average_price: float | None = None
    min_price: float | None = None
    max_price: float | None = None
    currency: str = DEFAULT_CURRENCY
    total: float | None = None
    tax_total: float | None = None
    subtotal: float | None = None
    remaining: Any = None
    quantity: Any = None
    product_code: str = ""
    product_description: str = ""
    policies: list[RatePolicy] = Field(default_factory=list)
    nights: list[NightlyPrice] = Field(default_factory=list)

    def money(self, amount: float | None) -> str:
        """Format an amount in this rate plan's currency."""
        return format_money(amount, self.currency)


class AvailabilitySummary(BaseModel):
    """Stay summary and rate plans of an availability response."""

    model_config = {"frozen": True}

    hotel_code: str = DASH
    hotel_name: str = DASH
    begin_date: str = DASH
    end_date: str = DASH
    duration: str = DASH
    currency: str = DEFAULT_CURRENCY
    remaining: str = DASH
    min_price: float | None = None
    min_price_code: str = DASH
    max_price: float | None = None
    max_price_code: str = DASH
    transaction_id: str = DASH
    timestamp: str = DASH
    product_type: str = DEFAULT_PRODUCT_TYPE
    rates: list[RatePlan] = Field(default_factory=list)

    def stay_line(self) -> str:
        return f"{format_date(self.begin_date)} → {format_date(self.end_date)} ({self.duration} nights)"

    def counts(self) -> dict[str, int]:
        """Number of rate plans, nightly prices and policies."""
        return {
            "rates": len(self.rates),
            "nights": sum(len(rate.nights) for rate in self.rates),
            "policies": sum(len(rate.policies) for rate in self.rates),
        }


def _nightly_prices(rate: dict[str, Any], location: dict[str, Any]) -> list[NightlyPrice]:
    currency = _safe(rate.get("currencyCode") or location.get("currencyCode"), DEFAULT_CURRENCY)
    nights: list[NightlyPrice] = []
    for entry in _dicts(rate.get("priceCalendar")):
        price = entry.get("availability") if isinstance(entry.get("availability"), dict) else {}
        nights.append(
            NightlyPrice(
                date=_safe(entry.get("priceDateTime")),
                price_amount=_amount(price.get("priceAmount")),
                base_price_amount=_amount(price.get("basePriceAmount")),
                tax_total=_amount(price.get("taxTotal")),
                subtotal=_amount(price.get("subtotal")),
                total=_amount(price.get("total")),
                currency=_safe(price.get("currencyCode"), currency),
                refundable=bool(price.get("refundable")),
                price_code=_safe(price.get("priceCode") or rate.get("priceCode")),
                price_description=_safe(price.get("priceDescription") or rate.get("priceDescription")),
                remaining=price.get("remaining"),
                time_zone=_safe(price.get("timeZone") or rate.get("timeZone") or location.get("timeZone"), ""),
            )
        )
    return nights


def _policies(rate: dict[str, Any]) -> list[RatePolicy]:
    return [
        RatePolicy(
            type=_safe(policy.get("type")),
            code=_safe(policy.get("code")),
            rule=_safe(policy.get("amountRule")),
            amount=_amount(policy.get("amount")),
            currency=_safe(policy.get("currencyCode") or rate.get("currencyCode"), DEFAULT_CURRENCY),
            description=_safe(policy.get("description")),
            due=_safe(policy.get("dueDateTime")),
        )
        for policy in _dicts(rate.get("policies"))
    ]


def _rate_plan(rate: dict[str, Any], location: dict[str, Any]) -> RatePlan:
    return RatePlan(
        price_code=_safe(rate.get("priceCode")),
        price_description=_safe(rate.get("priceDescription")),
        refundable=bool(rate.get("refundable")),
        inclusive=bool(rate.get("priceInclusive")),
        average_price=_amount(rate.get("averagePriceAmount")),
        min_price=_amount(rate.get("minPriceAmount")),
        max_price=_amount(rate.get("maxPriceAmount")),
        currency=_safe(rate.get("currencyCode") or location.get("currencyCode"), DEFAULT_CURRENCY),
        total=_amount(rate.get("total")),
        tax_total=_amount(rate.get("taxTotal")),
        subtotal=_amount(rate.get("subtotal")),
        remaining=rate.get("remaining"),
        quantity=rate.get("quantity"),
        product_code=_safe(rate.get("productCode"), ""),
        product_description=_safe(rate.get("productDescription"), ""),
        policies=_policies(rate),
        nights=_nightly_prices(rate, location),
    )


def summarize_availability(document: Any) -> AvailabilitySummary:
    """Build an AvailabilitySummary from an availability response.

    Rate plans are sorted by price code. A response without locations
    gives an empty summary.

    Args:
        document: Parsed response with a ``locationAvailabilityList`` array.

    Returns:
        The availability summary.

    Example:
        >>> summary = summarize_availability(load_document("availability.json"))
        >>> [rate.price_code for rate in summary.rates]
        ['BAR', 'NRF']
    """
    locations = _dicts(document.get("locationAvailabilityList")) if isinstance(document, dict) else []
    location = locations[0] if locations else {}
    if not location:
        logger.warning("Response has no locationAvailabilityList entry")

    rates = sorted(
        (_rate_plan(rate, location) for rate in _dicts(location.get("availabilityList"))),
        key=lambda plan: (plan.price_code.casefold(), plan.price_code),
    )

    summary = AvailabilitySummary(
        hotel_code=_safe(location.get("destinationLocationCode")),
        hotel_name=_safe(location.get("destinationLocationDescription")),
        begin_date=_safe(location.get("beginDate")),
        end_date=_safe(location.get("endDate")),
        duration=_safe(location.get("duration")),
        currency=_safe(location.get("currencyCode"), DEFAULT_CURRENCY),
        remaining=_safe(location.get("remaining")),
        min_price=_amount(location.get("minPriceAmount")),
        min_price_code=_safe(location.get("minPriceCode")),
        max_price=_amount(location.get("maxPriceAmount")),
        max_price_code=_safe(location.get("maxPriceCode")),
        transaction_id=_safe(location.get("transactionID")),
        timestamp=_safe(location.get("timestamp")),
        product_type=_safe(location.get("productType"), DEFAULT_PRODUCT_TYPE),
        rates=rates,
    )
    logger.debug(f"Summarized availability for {summary.hotel_code}: {summary.counts()}")
    return summary
