"""Message trace viewer.

This module reads a message traces response (``{"messageTraces": [...]}``)
and lists the distinct channels involved plus one row per trace, with the
message payload pretty-printed.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
EMPTY_MESSAGE = "∅"

CHANNEL_EMOJIS = {
    "SUPPLY_HILTON": "🏨",
    "SUPPLY_EAN": "🌎",
    "SUPPLY_HOTELBEDS": "🛏️",
    "SUPPLY_DERBYSOFT": "🎯",
    "DERBYSOFT_SUPPLY": "🎯",
    "DERBYSOFT_SUPPLY_SEAMLESS": "♾️",
    "SUPPLY_HBSI": "🛰️",
    "SUPPLY_EMERGING": "🚀",
    "SUPPLY_BONOTEL": "🧳",
    "SUPPLY_AGODA": "💼",
    "SUPPLY_BOOKING": "📘",
    "SUPPLY_TRAVELCLICK": "🕹️",
    "SUPPLY_RATEGAIN": "📡",
    "SUPPLY_SITEMINDER": "🔗",
    "SUPPLY_EXPEDIA": "🌀",
    "SUPPLY_TEST": "⚙️",
    NOT_AVAILABLE: "❓",
}
UNKNOWN_CHANNEL_EMOJI = "❔"


def channel_emoji(code: str | None) -> str:
    """Emoji for a channel code."""
    return CHANNEL_EMOJIS.get(code or "", UNKNOWN_CHANNEL_EMOJI)


def pretty_message_data(value: Any) -> str:
    """Render message data as indented JSON where possible.

    Strings holding JSON are parsed first. Anything that cannot be
    rendered as JSON is shown as plain text.

    Example:
        >>> print(pretty_message_data('{"a": 1}'))
        {
          "a": 1
        }
    """
    if value is None:
        return EMPTY_MESSAGE
    if isinstance(value, str):
        try:
            return json.dumps(json.loads(value.strip()), indent=2, ensure_ascii=False)
        except ValueError:
            return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, ensure_ascii=False, default=str)
    return str(value)


def contact_first_name(message_data: Any) -> str:
    """First name of the message's contact person, or an empty string."""
    if isinstance(message_data, str):
        try:
            message_data = json.loads(message_data)
        except ValueError:
            return ""
    if not isinstance(message_data, dict):
        return ""
    contact = message_data.get("contactPerson")
    if not isinstance(contact, dict):
        return ""
    first_name = contact.get("firstName")
    return str(first_name) if first_name else ""


class Channel(BaseModel):
    """A channel seen in the traces, with the first channel id it used."""

    model_config = {"frozen": True}

    code: str
    id: str

    @property
    def emoji(self) -> str:
        return channel_emoji(self.code)


class MessageTrace(BaseModel):
    """One exchanged message."""

    model_config = {"frozen": True}

    timestamp: str = NOT_AVAILABLE
    channel_code: str | None = None
    direction: str = NOT_AVAILABLE
    message_type: str = NOT_AVAILABLE
    fk_reference: str = NOT_AVAILABLE
    first_name: str = ""
    message_data: str = EMPTY_MESSAGE

    @property
    def direction_label(self) -> str:
        return f"{channel_emoji(self.channel_code)} {self.direction}"

    @property
    def fk_reference_label(self) -> str:
        """fkReference with the contact first name in parentheses, if known."""
        if self.first_name:
            return f"{self.fk_reference}({self.first_name})"
        return self.fk_reference


class MessageTraceSummary(BaseModel):
    """Distinct channels and message rows of a message traces response."""

    model_config = {"frozen": True}

    channels: list[Channel] = Field(default_factory=list)
    traces: list[MessageTrace] = Field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {"channels": len(self.channels), "traces": len(self.traces)}


def _text(value: Any) -> str:
    return str(value) if value else NOT_AVAILABLE


def summarize_message_traces(document: Any) -> MessageTraceSummary:
    """Build a MessageTraceSummary from a message traces response.

    Channels are listed in first-seen order; each keeps the channelID of
    its first trace.

    Args:
        document: Parsed response with a ``messageTraces`` array.

    Returns:
        The message trace summary.
    """
    raw = document.get("messageTraces") if isinstance(document, dict) else None
    if not isinstance(raw, list):
        logger.warning("Response has no messageTraces array")
        raw = []
    records = [record for record in raw if isinstance(record, dict)]

    channels: dict[str, str] = {}
    for record in records:
        channels.setdefault(_text(record.get("channelCode")), _text(record.get("channelID")))

    traces = [
        MessageTrace(
            timestamp=_text(record.get("timestamp")),
            channel_code=str(record["channelCode"]) if record.get("channelCode") else None,
            direction=_text(record.get("direction")),
            message_type=_text(record.get("messageType")),
            fk_reference=_text(record.get("fkReference")),
            first_name=contact_first_name(record.get("messageData")),
            message_data=pretty_message_data(record.get("messageData")),
        )
        for record in records
    ]

    summary = MessageTraceSummary(
        channels=[Channel(code=code, id=channel_id) for code, channel_id in channels.items()],
        traces=traces,
    )
    logger.debug(f"Read message traces: {summary.counts()}")
    return summary
