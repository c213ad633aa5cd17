"""Availability search dashboards for resv-explorer.

Example:
    >>> from resv_explorer.availability import summarize_availability
    >>>
    >>> summary = summarize_availability(document)
    >>> for rate in summary.rates:
    ...     print(rate.price_code, rate.money(rate.average_price))
"""

from __future__ import annotations

from resv_explorer.availability.summary import (
    CHANNEL_CODES,
    AvailabilitySummary,
    NightlyPrice,
    RatePlan,
    RatePolicy,
    format_date,
    format_money,
    request_parameters,
    summarize_availability,
)

__all__ = [
    "CHANNEL_CODES",
    "AvailabilitySummary",
    "NightlyPrice",
    "RatePlan",
    "RatePolicy",
    "format_date",
    "format_money",
    "request_parameters",
    "summarize_availability",
]
