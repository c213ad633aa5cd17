"""JSON reporter for resv-explorer.

This module provides JSON output for delta views, raw operation lists,
reservation, availability and channel summaries, and replay payloads,
suitable for scripting and CI checks.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from resv_explorer.availability.summary import AvailabilitySummary
    from resv_explorer.channels.parameters import ChannelParametersSummary
    from resv_explorer.channels.traces import MessageTraceSummary
    from resv_explorer.deltas.models import DeltaView, PatchOperation
    from resv_explorer.reservations.inflation import InflationResult
    from resv_explorer.reservations.summary import ReservationSummary


class JSONReporter:
    """Reporter that outputs resv-explorer results as JSON.

    Attributes:
        indent: JSON indentation level (None for compact).

    Example:
        >>> reporter = JSONReporter()
        >>> print(reporter.report_delta_view(view))
        {
          "timestamp": "2025-01-15T10:30:00+00:00",
          "counts": {"total": 12, "shown": 9, "groups": 4, "sessions": 2},
          ...
        }
    """

    def __init__(self, indent: int | None = 2) -> None:
        """Initialize JSONReporter.

        Args:
            indent: JSON indentation level. Defaults to 2. Use None for compact output.
        """
        self.indent = indent

    def _get_timestamp(self) -> str:
        """Get current timestamp in ISO 8601 format."""
        return datetime.now(timezone.utc).isoformat(timespec="seconds")

    def _dumps(self, data: Any) -> str:
        return json.dumps(data, indent=self.indent, ensure_ascii=False, default=str)

    def _view_to_dict(
        self,
        view: DeltaView,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Convert a DeltaView to a report dictionary.

        The filtered operations are included in appearance order.
        """
        data = {"timestamp": self._get_timestamp(), **view.to_dict()}
        data["operations"] = [operation.to_dict() for operation in view.operations]
        data["metadata"] = metadata or {}
        return data

    def report_delta_view(
        self,
        view: DeltaView,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Generate JSON report for a delta view.

        Args:
            view: The grouped view to report.
            metadata: Optional metadata to include in the report.

        Returns:
            JSON string representation of the view.
        """
        return self._dumps(self._view_to_dict(view, metadata))

    def report_to_file(
        self,
        view: DeltaView,
        path: Path | str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Write JSON report for a delta view to a file.

        Args:
            view: The grouped view to report.
            path: Path to the output file.
            metadata: Optional metadata to include in the report.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.report_delta_view(view, metadata), encoding="utf-8")

    def report_operations(self, operations: list[PatchOperation]) -> str:
        """Generate the raw JSON list of operations, in appearance order.

        Args:
            operations: Operations to serialize, usually the filtered list.

        Returns:
            JSON array string.
        """
        return self._dumps([operation.to_dict() for operation in operations])

    def report_path_counts(self, counts: list[tuple[str, int]]) -> str:
        """Generate JSON for per-path operation counts.

        Args:
            counts: (path, count) pairs in first-seen order.

        Returns:
            JSON string with a ``paths`` array.
        """
        return self._dumps(
            {
                "timestamp": self._get_timestamp(),
                "paths": [{"path": path, "count": count} for path, count in counts],
            }
        )

    def report_reservation(self, summary: ReservationSummary) -> str:
        """Generate JSON report for a reservation summary.

        Args:
            summary: The reservation summary.

        Returns:
            JSON string with the summary fields and section counts.
        """
        return self._dumps(
            {
                "timestamp": self._get_timestamp(),
                "reservation": summary.model_dump(mode="json"),
                "counts": summary.counts(),
            }
        )

    def report_availability(self, summary: AvailabilitySummary, request: dict[str, str] | None = None) -> str:
        """Generate JSON report for an availability summary.

        Args:
            summary: The availability summary.
            request: Optional request variables the search was made with.

        Returns:
            JSON string with the stay summary, rate plans and counts.
        """
        report: dict[str, Any] = {"timestamp": self._get_timestamp()}
        if request:
            report["request"] = request
        report["availability"] = summary.model_dump(mode="json")
        report["counts"] = summary.counts()
        return self._dumps(report)

    def report_channel_parameters(self, summary: ChannelParametersSummary) -> str:
        """Generate JSON report for grouped channel parameters.

        Parameter values that hold JSON are included parsed, under
        ``parsed_value``.
        """
        data = summary.model_dump(mode="json")
        for group, dumped in zip(summary.groups, data["groups"]):
            for item, dumped_item in zip(group.items, dumped["items"]):
                dumped_item["parsed_value"] = item.parsed_value
        return self._dumps(
            {
                "timestamp": self._get_timestamp(),
                "channel_parameters": data,
                "counts": summary.counts(),
            }
        )

    def report_message_traces(self, summary: MessageTraceSummary) -> str:
        """Generate JSON report for message traces."""
        return self._dumps(
            {
                "timestamp": self._get_timestamp(),
                "channels": [channel.model_dump() for channel in summary.channels],
                "traces": [trace.model_dump() for trace in summary.traces],
                "counts": summary.counts(),
            }
        )

    def report_payload(self, result: InflationResult) -> str:
        """Generate the rewritten reservation body, without report metadata.

        Args:
            result: The inflation result.

        Returns:
            JSON string of the reservation payload.
        """
        return self._dumps(result.payload)
