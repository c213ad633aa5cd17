"""Channel parameter explorer.

This module groups the records of a channel parameters response
(``{"channelParameters": [...]}``) by channelID and derives the distinct
channel, customer, fkReference and parameter name lists shown above them.

Parameter values often hold JSON documents stored as strings; such
values are parsed so they can be displayed pretty-printed.
"""

from __future__ import annotations

import json
import logging
from datetime import timezone
from typing import Any

from pydantic import BaseModel, Field

from resv_explorer.core.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

DASH = "—"

# Sort position for parameters without an orderBy
UNORDERED = 999999


def parse_json_value(value: Any) -> Any:
    """Parse a parameter value that holds a JSON object, array or string.

    Returns:
        The parsed value, or None when the value is not a string or does
        not look like JSON.

    Example:
        >>> parse_json_value('{"enabled": true}')
        {'enabled': True}
        >>> parse_json_value("42") is None
        True
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text or text[0] not in '{["':
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def _display(value: Any) -> str:
    if value is None or value == "":
        return DASH
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _order(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return UNORDERED
    try:
        return float(value)
    except (TypeError, ValueError):
        return UNORDERED


def _distinct(values: list[Any]) -> list[str]:
    return list(dict.fromkeys(str(value) for value in values if value))


class ChannelParameter(BaseModel):
    """A single channel parameter record.

    Text fields keep the raw value; use ``display()`` for the dash
    placeholder on missing values.
    """

    model_config = {"frozen": True}

    id: Any = None
    channel_id: Any = None
    customer_id: Any = None
    fk_reference: Any = None
    fk_id: Any = None
    external_reference: Any = None
    parameter_name: Any = None
    parameter_value: Any = None
    parameter_type: Any = None
    short_description: Any = None
    long_description: Any = None
    order_by: Any = None
    begin_date: Any = None
    last_modified: Any = None
    last_modified_by_id: Any = None
    parent_id: Any = None
    system_flag: bool = False
    inactivated: bool = False

    @property
    def parsed_value(self) -> Any:
        return parse_json_value(self.parameter_value)

    @property
    def pretty_value(self) -> str:
        """Parameter value as indented JSON, parsed first when it holds JSON."""
        parsed = self.parsed_value
        target = parsed if parsed is not None else self.parameter_value
        try:
            return json.dumps(target, indent=2, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(target)

    def display(self, field: str) -> str:
        """A field rendered for display, with a dash for missing values."""
        return _display(getattr(self, field))

    def matches_query(self, query: str) -> bool:
        """Whether any searchable field contains the lower-cased query."""
        return any(
            query in _display(value).lower()
            for value in (
                self.parameter_name,
                self.parameter_value,
                self.channel_id,
                self.customer_id,
                self.fk_reference,
            )
        )

    def sort_key(self) -> tuple[float, str, str]:
        return (_order(self.order_by), str(self.parameter_name or ""), str(self.id or ""))


class ChannelGroup(BaseModel):
    """Parameters of one channelID, sorted by orderBy then parameterName."""

    model_config = {"frozen": True}

    channel_id: str
    items: list[ChannelParameter] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def inactive_count(self) -> int:
        return sum(1 for item in self.items if item.inactivated)

    @property
    def has_system_flag(self) -> bool:
        return any(item.system_flag for item in self.items)


class ChannelParametersSummary(BaseModel):
    """Channel parameters grouped by channel, with distinct value lists.

    Attributes:
        total: Number of parameter records in the response.
        channel_ids: Distinct channel ids, sorted.
        customer_ids: Distinct customer ids in first-seen order.
        fk_references: Distinct fkReference values in first-seen order.
        parameter_names: Distinct parameter names in first-seen order.
        most_recent_last_modified: Latest lastModified as UTC ISO 8601,
            or None when no record carries a parseable one.
        groups: Channel groups sorted by channel id.
    """

    model_config = {"frozen": True}

    total: int = 0
    channel_ids: list[str] = Field(default_factory=list)
    customer_ids: list[str] = Field(default_factory=list)
    fk_references: list[str] = Field(default_factory=list)
    parameter_names: list[str] = Field(default_factory=list)
    most_recent_last_modified: str | None = None
    groups: list[ChannelGroup] = Field(default_factory=list)

    def counts(self) -> dict[str, int]:
        """Record total and the size of each distinct list."""
        return {
            "total": self.total,
            "channels": len(self.channel_ids),
            "customers": len(self.customer_ids),
            "fk_references": len(self.fk_references),
            "parameter_names": len(self.parameter_names),
        }

    def filtered(
        self,
        query: str = "",
        channel_id: str | None = None,
        inactivated: bool | None = None,
    ) -> ChannelParametersSummary:
        """Keep only the parameters matching every given condition.

        Groups left empty are dropped. Totals and distinct lists still
        describe the whole response.

        Args:
            query: Case-insensitive substring of the parameter name, value,
                channel id, customer id or fkReference.
            channel_id: Exact channel id.
            inactivated: True for inactive parameters only, False for
                active ones only, None for both.

        Returns:
            A new summary with the matching groups.
        """
        needle = query.strip().lower()
        groups: list[ChannelGroup] = []
        for group in self.groups:
            if channel_id and group.channel_id != channel_id:
                continue
            items = [
                item
                for item in group.items
                if (not needle or item.matches_query(needle))
                and (inactivated is None or item.inactivated == inactivated)
            ]
            if items:
                groups.append(ChannelGroup(channel_id=group.channel_id, items=items))
        return self.model_copy(update={"groups": groups})


def _most_recent(records: list[dict[str, Any]]) -> str | None:
    moments = [moment for moment in (parse_timestamp(record.get("lastModified")) for record in records) if moment]
    if not moments:
        return None
    latest = max(moments).astimezone(timezone.utc)
    return latest.strftime("%Y-%m-%dT%H:%M:%S.") + f"{latest.microsecond // 1000:03d}Z"


def _parameter(record: dict[str, Any]) -> ChannelParameter:
    return ChannelParameter(
        id=record.get("id"),
        channel_id=record.get("channelID"),
        customer_id=record.get("customerID"),
        fk_reference=record.get("fkReference"),
        fk_id=record.get("fkID"),
        external_reference=record.get("externalReference"),
        parameter_name=record.get("parameterName"),
        parameter_value=record.get("parameterValue"),
        parameter_type=record.get("parameterType"),
        short_description=record.get("shortDescription"),
        long_description=record.get("longDescription"),
        order_by=record.get("orderBy"),
        begin_date=record.get("beginDate"),
        last_modified=record.get("lastModified"),
        last_modified_by_id=record.get("lastModifiedByID"),
        parent_id=record.get("parentID"),
        system_flag=bool(record.get("systemFlag")),
        inactivated=bool(record.get("inactivated")),
    )


def summarize_channel_parameters(document: Any) -> ChannelParametersSummary:
    """Build a ChannelParametersSummary from a channel parameters response.

    Args:
        document: Parsed response with a ``channelParameters`` array.

    Returns:
        The grouped summary. Records without a channelID are grouped
        under a dash.

    Example:
        >>> summary = summarize_channel_parameters(load_document("params.json"))
        >>> summary.counts()
        {'total': 12, 'channels': 2, 'customers': 1, 'fk_references': 3, 'parameter_names': 9}
    """
    raw = document.get("channelParameters") if isinstance(document, dict) else None
    if not isinstance(raw, list):
        logger.warning("Response has no channelParameters array")
        raw = []
    records = [record for record in raw if isinstance(record, dict)]

    by_channel: dict[str, list[ChannelParameter]] = {}
    for record in records:
        key = str(record.get("channelID") or DASH)
        by_channel.setdefault(key, []).append(_parameter(record))

    groups = [
        ChannelGroup(channel_id=key, items=sorted(by_channel[key], key=ChannelParameter.sort_key))
        for key in sorted(by_channel)
    ]

    summary = ChannelParametersSummary(
        total=len(records),
        channel_ids=sorted(_distinct([record.get("channelID") for record in records])),
        customer_ids=_distinct([record.get("customerID") for record in records]),
        fk_references=_distinct([record.get("fkReference") for record in records]),
        parameter_names=_distinct([record.get("parameterName") for record in records]),
        most_recent_last_modified=_most_recent(records),
        groups=groups,
    )
    logger.debug(f"Grouped channel parameters: {summary.counts()}")
    return summary
