"""Console reporter for resv-explorer.

This module provides terminal output for delta views, path histograms,
reservation, availability and channel summaries, with optional ANSI colors.
"""

from __future__ import annotations

import sys
from datetime import datetime
from typing import TYPE_CHECKING, TextIO

from resv_explorer.availability.summary import format_date, format_money
from resv_explorer.core.timestamps import NO_TIMESTAMP_KEY
from resv_explorer.deltas.grouping import stringify_value
from resv_explorer.deltas.names import NameResolver
from resv_explorer.deltas.stats import histogram_widths

if TYPE_CHECKING:
    from resv_explorer.availability.summary import AvailabilitySummary
    from resv_explorer.channels.parameters import ChannelParametersSummary
    from resv_explorer.channels.traces import MessageTraceSummary
    from resv_explorer.deltas.models import DeltaView, Session, SignatureGroup
    from resv_explorer.reservations.summary import ReservationSummary


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"


HISTOGRAM_BAR_WIDTH = 30


class ConsoleReporter:
    """Reporter that outputs delta views and summaries to the terminal.

    Attributes:
        use_colors: Whether to use ANSI colors in output.
        names: Resolver for lastModifiedByID display names.
        output: Output stream (defaults to stdout).

    Example:
        >>> reporter = ConsoleReporter()
        >>> reporter.report_delta_view(view)
          Delta/Patch Explorer
          12 ops · 9 shown · 4 groups · 2 sessions

          🧬 Session: 2025-12-27T21:11:26.014+0000  (5)
             By: John Doe
            1. REPLACE /status  ×2
               from HOLD
               to   BOOK
               seq:0 seq:3
    """

    def __init__(
        self,
        use_colors: bool = True,
        names: NameResolver | None = None,
        output: TextIO | None = None,
    ) -> None:
        """Initialize ConsoleReporter.

        Args:
            use_colors: Whether to use ANSI colors. Defaults to True.
            names: Author name resolver. Defaults to an empty mapping.
            output: Output stream. Defaults to sys.stdout.
        """
        self.use_colors = use_colors and _supports_color(output or sys.stdout)
        self.names = names or NameResolver()
        self.output = output or sys.stdout

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if self.use_colors:
            return f"{color}{text}{Colors.RESET}"
        return text

    def _print(self, text: str = "") -> None:
        """Print text to output stream."""
        print(text, file=self.output)

    def report_delta_view(self, view: DeltaView, title: str = "Delta/Patch Explorer") -> None:
        """Report a grouped delta view.

        Depending on the view's grouping options the output is nested
        buckets -> sessions -> signature groups, or sessions -> groups.

        Args:
            view: The view to report.
            title: Title printed above the counts.
        """
        self._print()
        self._print(self._color(f"  {title}", Colors.BOLD + Colors.CYAN))
        counts = view.counts()
        self._print(
            self._color(
                f"  {counts['total']} ops · {counts['shown']} shown · "
                f"{counts['groups']} groups · {counts['sessions']} sessions",
                Colors.DIM,
            )
        )

        if not view.sessions:
            self._print()
            self._print("  No patch operations to display.")
            return

        loose = view.config.grouping_mode == "loose"
        show_sessions = view.config.session_grouping

        if view.buckets is not None:
            for bucket in view.buckets:
                self._print()
                self._print(self._color(f"  🕒 {bucket.key}  ({bucket.operation_count})", Colors.BOLD))
                self._print(self._color(f"     Bucket type: {view.config.bucket_granularity}", Colors.DIM))
                for session in bucket.sessions:
                    self._print_session_header(session, show_sessions, indent="    ")
                    self._print_groups(session.groups, loose, indent="      ")
        else:
            for session in view.sessions:
                if show_sessions:
                    self._print_session_header(session, True, indent="  ")
                self._print_groups(session.groups, loose, indent="    " if show_sessions else "  ")

        self._print()

    def _print_session_header(self, session: Session, show_sessions: bool, indent: str) -> None:
        self._print()
        if not show_sessions:
            self._print(self._color(f"{indent}{session.key}  ({len(session.items)})", Colors.BOLD))
            return
        label = session.last_modified or NO_TIMESTAMP_KEY
        self._print(self._color(f"{indent}🧬 Session: {label}  ({len(session.items)})", Colors.BOLD))
        self._print(self._color(f"{indent}   By: {self.names.resolve(session.last_modified_by_id)}", Colors.DIM))

    def _print_groups(self, groups: list[SignatureGroup], loose: bool, indent: str) -> None:
        for i, group in enumerate(groups, 1):
            head = f"{i}. {group.op.upper()} {group.path}"
            self._print(f"{indent}{self._color(head, Colors.BOLD)}  ×{len(group.items)}")
            detail = indent + " " * (len(str(i)) + 2)
            if not loose:
                self._print(f"{detail}{self._color('from', Colors.DIM)} {stringify_value(group.from_value)}")
                self._print(f"{detail}{self._color('to  ', Colors.DIM)} {stringify_value(group.value)}")
            self._print(f"{detail}{self._color('lastModified', Colors.DIM)} {group.last_modified or NO_TIMESTAMP_KEY}")
            self._print(
                f"{detail}{self._color('lastModifiedBy', Colors.DIM)} {self.names.resolve(group.last_modified_by_id)}"
            )
            occurrences = " ".join(f"seq:{item.sequence}" for item in group.items)
            self._print(f"{detail}{self._color(occurrences, Colors.BLUE)}")

    def report_path_histogram(self, counts: list[tuple[str, int]], title: str = "Counts per path") -> None:
        """Report the number of operations per path as a bar chart.

        Args:
            counts: (path, count) pairs, usually from path_counts().
            title: Title for the chart.
        """
        self._print()
        self._print(self._color(f"  {title}", Colors.BOLD))
        if not counts:
            self._print("  No patch operations found.")
            return

        label_width = max(len(label) for label, _ in counts)
        for label, count, width in histogram_widths(counts):
            bar = "█" * max(1, round(width * HISTOGRAM_BAR_WIDTH / 100)) if count else ""
            self._print(
                f"  {label:<{label_width}}  {self._color(f'{bar:<{HISTOGRAM_BAR_WIDTH}}', Colors.CYAN)}  {count:>4}"
            )
        self._print()

    def report_reservation(
        self,
        summary: ReservationSummary,
        now: datetime | None = None,
        retention_days: int = 90,
    ) -> None:
        """Report a reservation summary.

        Args:
            summary: The reservation summary.
            now: Reference time for the log purge warning.
            retention_days: Log retention window in days.
        """
        self.print_header("✅ Reservation Summary")

        rows = [
            ("🔢 Reservation Number", summary.reservation_number),
            ("🆔 Reservation ID", summary.reservation_id),
            ("🔗 External Resv #", summary.external_reservation_number),
            ("🔖 Status", f"{summary.status_emoji} {summary.status}"),
            ("📘 Type", summary.reservation_type),
            ("📄 Corporate Profile", summary.external_agreement_code),
            ("🏨 Hotel", summary.hotel_code),
            ("📅 Check-in", summary.checkin_line()),
            ("📆 Check-out", summary.checkout_line()),
            ("🕓 Creation Date", summary.creation_line(now, retention_days)),
            ("🛑 Cancellation Date", summary.cancellation_line(now, retention_days)),
            ("🌐 Creation Channels", " 🚇 ".join(summary.creation_channels) or "N/A"),
        ]
        label_width = max(len(label) for label, _ in rows)
        for label, value in rows:
            self._print(f"  {self._color(f'{label:<{label_width}}', Colors.BOLD)}  {value}")

        if not summary.has_reservation_id:
            self.print_warning("Reservation ID could not be resolved")

        if summary.products:
            self._print()
            self._print(self._color("  🏨 Product Calendar", Colors.BOLD))
            for entry in summary.products:
                self._print(
                    f"    {entry.index:<5} {entry.begin_date} → {entry.departure_date}  "
                    f"{entry.amount:>10.2f} {entry.currency}  A{entry.adults}/C{entry.children}  "
                    f"{entry.external_price_code}  product={entry.product_id} price={entry.price_id}  "
                    f"{entry.emoji} {entry.status}"
                )

        if summary.parties:
            self._print()
            self._print(self._color("  👥 Parties", Colors.BOLD))
            for party in summary.parties:
                star = "⭐️" if party.primary else "⚪️"
                age = f"  age {party.child_age}" if party.child_age else ""
                name = f"{party.first_name} {party.last_name}"
                self._print(f"    {party.index:<3} {star} {name} ({party.party_type}){age}")

        if summary.authorizations:
            self._print()
            self._print(self._color("  🔐 Authorizations", Colors.BOLD))
            for auth in summary.authorizations:
                state = "🔴" if auth.inactivated else "🟢"
                self._print(
                    f"    {auth.index:<3} {state} {auth.authorization_type} {auth.authorization_reason}  "
                    f"{auth.last_modified}"
                )

        if summary.udf_values:
            self._print()
            self._print(self._color("  🧩 UDF Values", Colors.BOLD))
            for key, value in summary.udf_values.items():
                self._print(f"    {key}: {value}")

        self._print()

    def report_availability(self, summary: AvailabilitySummary) -> None:
        """Report an availability summary with its rate plans.

        Args:
            summary: The availability summary.
        """
        self.print_header(f"🛏️ Availability · {summary.hotel_name}")

        rows = [
            ("Hotel Code", summary.hotel_code),
            ("Stay", summary.stay_line()),
            ("Inventory Remaining", summary.remaining),
            ("Currency", summary.currency),
            ("Min Price", f"{format_money(summary.min_price, summary.currency)} (code {summary.min_price_code})"),
            ("Max Price", f"{format_money(summary.max_price, summary.currency)} (code {summary.max_price_code})"),
            ("Product Type", summary.product_type),
            ("Txn / Timestamp", f"{summary.transaction_id} · {summary.timestamp}"),
        ]
        label_width = max(len(label) for label, _ in rows)
        for label, value in rows:
            self._print(f"  {self._color(f'{label:<{label_width}}', Colors.BOLD)}  {value}")

        if not summary.rates:
            self._print()
            self._print("  No rate plans returned.")
            self._print()
            return

        for rate in summary.rates:
            if rate.refundable:
                refundable = self._color("refundable", Colors.GREEN)
            else:
                refundable = self._color("non-refundable", Colors.RED)
            inclusive = "inclusive" if rate.inclusive else "exclusive"
            self._print()
            self._print(self._color(f"  {rate.price_code}  {rate.price_description}", Colors.BOLD))
            self._print(
                f"    {refundable} · {inclusive} · avg {rate.money(rate.average_price)} · "
                f"{rate.money(rate.min_price)} → {rate.money(rate.max_price)} · total {rate.money(rate.total)}"
            )
            if rate.product_code or rate.product_description:
                self._print(self._color(f"    {rate.product_description} {rate.product_code}".rstrip(), Colors.DIM))
            for night in rate.nights:
                flag = "✓" if night.refundable else "✗"
                remaining = "—" if night.remaining is None else night.remaining
                self._print(
                    f"      {format_date(night.date):<14} {format_money(night.price_amount, night.currency):>12}  "
                    f"tax {format_money(night.tax_total, night.currency):>10}  "
                    f"total {format_money(night.total, night.currency):>12}  {flag}  remain {remaining}  "
                    f"{night.time_zone}".rstrip()
                )
            for policy in rate.policies:
                due = f"  {policy.due_line}" if policy.due_line else ""
                self._print(
                    f"      {self._color('policy', Colors.DIM)} {policy.type} ({policy.code}) {policy.rule} "
                    f"{format_money(policy.amount, policy.currency)}  {policy.description}{due}"
                )

        self._print()

    def report_channel_parameters(self, summary: ChannelParametersSummary) -> None:
        """Report channel parameters grouped by channel.

        Args:
            summary: The grouped channel parameters, possibly filtered.
        """
        self.print_header("⚙️ Channel Parameters")
        counts = summary.counts()
        self._print(
            self._color(
                f"  Total: {counts['total']} · Channels: {counts['channels']} · Customers: {counts['customers']} · "
                f"Most recent lastModified: {summary.most_recent_last_modified or '—'}",
                Colors.DIM,
            )
        )
        self._print(
            self._color(
                f"  Unique parameterName: {counts['parameter_names']} · Unique fkReference: {counts['fk_references']}",
                Colors.DIM,
            )
        )

        if not summary.groups:
            self._print()
            self._print("  No channel parameters to display.")
            self._print()
            return

        for group in summary.groups:
            pills = [f"{group.count} params"]
            if group.inactive_count:
                pills.append(self._color(f"{group.inactive_count} inactive", Colors.YELLOW))
            if group.has_system_flag:
                pills.append(self._color("systemFlag present", Colors.GREEN))
            self._print()
            self._print(f"  {self._color(f'channelID: {group.channel_id}', Colors.BOLD)}  ({' · '.join(pills)})")
            for item in group.items:
                state = self._color("inactive", Colors.RED) if item.inactivated else self._color("active", Colors.GREEN)
                system = f" {self._color('systemFlag', Colors.YELLOW)}" if item.system_flag else ""
                assignment = f"{item.display('parameter_name')} = {item.display('parameter_value')}"
                self._print(f"    {assignment}  {state}{system}")
                if item.parsed_value is not None:
                    for line in item.pretty_value.splitlines():
                        self._print(self._color(f"        {line}", Colors.DIM))

        self._print()

    def report_message_traces(self, summary: MessageTraceSummary) -> None:
        """Report the channels and rows of a message traces response.

        Args:
            summary: The message trace summary.
        """
        self.print_header(f"📡 Channels ({len(summary.channels)})")
        if summary.channels:
            for channel in summary.channels:
                self._print(f"  {channel.emoji} {channel.code}  {self._color(channel.id, Colors.DIM)}")
        else:
            self._print("  No channels found in messageTraces.")

        self.print_header(f"📜 Message Traces ({len(summary.traces)})")
        if not summary.traces:
            self._print("  No messageTraces found in response.")
            self._print()
            return

        for trace in summary.traces:
            self._print()
            self._print(
                f"  {self._color(trace.timestamp, Colors.BOLD)}  {trace.direction_label}  "
                f"{trace.message_type}  {trace.fk_reference_label}"
            )
            for line in trace.message_data.splitlines():
                self._print(self._color(f"      {line}", Colors.DIM))

        self._print()

    def print_header(self, text: str) -> None:
        """Print a section header.

        Args:
            text: Header text to display.
        """
        self._print()
        self._print(self._color(f"{'=' * 50}", Colors.DIM))
        self._print(self._color(f"  {text}", Colors.BOLD + Colors.CYAN))
        self._print(self._color(f"{'=' * 50}", Colors.DIM))

    def print_warning(self, text: str) -> None:
        """Print a warning message.

        Args:
            text: Message to display.
        """
        self._print(self._color(f"  ⚠️  {text}", Colors.YELLOW))


def _supports_color(stream: TextIO) -> bool:
    """Check if the output stream supports ANSI colors.

    Args:
        stream: Output stream to check.

    Returns:
        True if colors are supported, False otherwise.
    """
    if not hasattr(stream, "isatty"):
        return False
    if not stream.isatty():
        return False

    import os

    if os.environ.get("NO_COLOR"):
        return False

    return os.environ.get("TERM") != "dumb"
