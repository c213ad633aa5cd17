"""Channel configuration and message exchange views for resv-explorer.

Example:
    >>> from resv_explorer.channels import summarize_channel_parameters
    >>>
    >>> summary = summarize_channel_parameters(document)
    >>> for group in summary.groups:
    ...     print(group.channel_id, group.count)
"""

from __future__ import annotations

from resv_explorer.channels.parameters import (
    ChannelGroup,
    ChannelParameter,
    ChannelParametersSummary,
    parse_json_value,
    summarize_channel_parameters,
)
from resv_explorer.channels.traces import (
    CHANNEL_EMOJIS,
    Channel,
    MessageTrace,
    MessageTraceSummary,
    channel_emoji,
    contact_first_name,
    pretty_message_data,
    summarize_message_traces,
)

__all__ = [
    "CHANNEL_EMOJIS",
    "Channel",
    "ChannelGroup",
    "ChannelParameter",
    "ChannelParametersSummary",
    "MessageTrace",
    "MessageTraceSummary",
    "channel_emoji",
    "contact_first_name",
    "parse_json_value",
    "pretty_message_data",
    "summarize_channel_parameters",
    "summarize_message_traces",
]
