"""HTML reporter for resv-explorer.

This module renders standalone HTML pages: the Delta/Patch Explorer for
reservation history views, and summary pages for reservations,
availability searches, channel parameters and message traces.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from resv_explorer.availability.summary import format_date, format_money
from resv_explorer.core.timestamps import NO_TIMESTAMP_KEY
from resv_explorer.deltas.grouping import stringify_value
from resv_explorer.deltas.names import NameResolver
from resv_explorer.deltas.stats import histogram_widths, path_counts

if TYPE_CHECKING:
    from resv_explorer.availability.summary import AvailabilitySummary
    from resv_explorer.channels.parameters import ChannelParametersSummary
    from resv_explorer.channels.traces import MessageTraceSummary
    from resv_explorer.deltas.models import DeltaView, PatchOperation, Session, SignatureGroup
    from resv_explorer.reservations.summary import ReservationSummary


# Page skeleton with embedded CSS and JavaScript
HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        :root {{
            --border: #e2e8f0;
            --muted: #64748b;
            --text: #0f172a;
            --bg: #ffffff;
            --code-bg: #f1f5f9;
            --bar: #64748b;
        }}

        * {{
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }}

        body {{
            font-family: Inter, Arial, sans-serif;
            color: var(--text);
            background: var(--bg);
            padding: 14px 16px 18px;
        }}

        header {{
            display: flex;
            align-items: flex-end;
            justify-content: space-between;
            gap: 12px;
            flex-wrap: wrap;
            margin-bottom: 10px;
        }}

        header h1 {{
            font-size: 18px;
            font-weight: 800;
        }}

        .sub, .small {{
            font-size: 12px;
            color: var(--muted);
            margin-top: 2px;
        }}

        .row {{
            display: flex;
            gap: 10px;
            align-items: center;
            flex-wrap: wrap;
        }}

        .pill {{
            display: inline-flex;
            align-items: center;
            gap: 8px;
            padding: 4px 8px;
            border-radius: 999px;
            border: 1px solid var(--border);
            font-size: 11px;
        }}

        .card {{
            border: 1px solid var(--border);
            border-radius: 14px;
            padding: 12px;
            margin-top: 12px;
        }}

        .card h2 {{
            font-size: 14px;
            font-weight: 900;
        }}

        .k {{
            color: #94a3b8;
            font-size: 11px;
        }}

        code {{
            background: var(--code-bg);
            padding: 1px 5px;
            border-radius: 6px;
            font-size: 11px;
        }}

        pre {{
            background: #0b1220;
            color: #e5e7eb;
            padding: 10px;
            border-radius: 12px;
            overflow: auto;
            font-size: 11px;
            line-height: 1.35;
            max-height: 520px;
        }}

        table {{
            border-collapse: collapse;
            width: 100%;
        }}

        th, td {{
            border-top: 1px solid var(--border);
            padding: 8px;
            font-size: 12px;
            vertical-align: top;
            text-align: left;
        }}

        th {{
            color: #334155;
            background: #f8fafc;
            position: sticky;
            top: 0;
        }}

        tr.header-row td {{
            font-weight: 900;
            background: #fafafa;
        }}

        .controls input {{
            border: 1px solid var(--border);
            border-radius: 10px;
            padding: 8px 10px;
            font-size: 12px;
            min-width: 260px;
            margin-top: 10px;
        }}

        .bar-row {{
            display: grid;
            grid-template-columns: 1fr 220px 44px;
            gap: 10px;
            align-items: center;
            padding: 6px 0;
            border-top: 1px solid var(--border);
        }}

        .bar-label {{
            font-size: 11px;
            overflow: hidden;
            text-overflow: ellipsis;
            white-space: nowrap;
        }}

        .bar-track {{
            height: 10px;
            border-radius: 999px;
            background: var(--code-bg);
            overflow: hidden;
            border: 1px solid var(--border);
        }}

        .bar-fill {{
            height: 100%;
            background: var(--bar);
        }}

        .bar-num {{
            font-size: 11px;
            text-align: right;
        }}

        .empty-state {{
            text-align: center;
            padding: 3rem;
            color: var(--muted);
        }}
    </style>
</head>
<body>
    <header>
        <div>
            <h1>{title}</h1>
            <div class="sub">{subtitle}</div>
            <div class="sub">Generated: {timestamp}</div>
        </div>
        <div class="row">{pills}</div>
    </header>

    {body}

    <script>
        // Signature filter
        const search = document.getElementById('group-search');
        if (search) {{
            search.addEventListener('input', () => {{
                const term = search.value.trim().toLowerCase();
                document.querySelectorAll('tr.group-row').forEach(row => {{
                    row.style.display = row.textContent.toLowerCase().includes(term) ? '' : 'none';
                }});
            }});
        }}
    </script>
</body>
</html>"""

PILL_TEMPLATE = """<span class="pill"><b>{value}</b> {label}</span>"""

CARD_TEMPLATE = """<section class="card">
    <h2>{heading}</h2>
    <div class="small">{hint}</div>
    <div style="margin-top:10px">{content}</div>
</section>"""

RESULTS_TABLE_TEMPLATE = """<div class="controls"><input type="text" id="group-search" placeholder="Filter signatures..." /></div>
<div style="margin-top:10px; overflow:auto; max-height:520px;">
<table>
    <thead>
        <tr>
            <th style="width:60px;">#</th>
            <th>Group / Session / Signature</th>
            <th style="width:90px;">Count</th>
            <th style="width:260px;">Occurrences</th>
        </tr>
    </thead>
    <tbody>
        {rows}
    </tbody>
</table>
</div>"""

HEADER_ROW_TEMPLATE = """<tr class="header-row">
    <td>—</td>
    <td><div>{label}</div>{meta}</td>
    <td><b>{count}</b></td>
    <td><span class="small">—</span></td>
</tr>"""

GROUP_ROW_TEMPLATE = """<tr class="group-row">
    <td>{index}</td>
    <td>
        <div><span class="k">op</span> <code>{op}</code> &nbsp; <span class="k">path</span> <code>{path}</code></div>
        {from_to}
        <div style="margin-top:4px"><span class="k">lastModified</span> <code>{last_modified}</code></div>
        <div style="margin-top:4px"><span class="k">lastModifiedBy</span> <code>{author}</code></div>
    </td>
    <td><b>{count}</b></td>
    <td>{occurrences}</td>
</tr>"""

FROM_TO_TEMPLATE = """<div style="margin-top:4px"><span class="k">from</span> <code>{from_value}</code></div>
        <div style="margin-top:4px"><span class="k">to</span> <code>{value}</code></div>"""

OCCURRENCE_TEMPLATE = """<span class="pill" title="{pointer}">seq:{sequence}</span>"""

HISTOGRAM_ROW_TEMPLATE = """<div class="bar-row" title="{label}: {count}">
    <div class="bar-label">{label}</div>
    <div class="bar-track"><div class="bar-fill" style="width:{width}%"></div></div>
    <div class="bar-num">{count}</div>
</div>"""

SUMMARY_ROW_TEMPLATE = """<tr><th>{label}</th><td>{value}</td></tr>"""

EMPTY_STATE_TEMPLATE = """<div class="empty-state">
    <p>{message}</p>
</div>"""

SEARCH_TEMPLATE = """<div class="controls"><input type="text" id="group-search" placeholder="{placeholder}" /></div>"""

DETAILS_TEMPLATE = """<details>
    <summary class="small">{label}</summary>
    <pre>{content}</pre>
</details>"""


class HTMLReporter:
    """Reporter that generates standalone HTML pages.

    The Delta/Patch Explorer page provides:
    - Count pills (ops, shown, groups, sessions)
    - Results grouped by bucket -> session -> signature
    - The raw filtered list in appearance order
    - A counts-per-path histogram over the unfiltered dataset

    Attributes:
        names: Resolver for lastModifiedByID display names.

    Example:
        >>> reporter = HTMLReporter(names=NameResolver.from_file("names.json"))
        >>> reporter.report_to_file(view, "deltas.html", all_operations=operations)
    """

    def __init__(self, names: NameResolver | None = None) -> None:
        """Initialize HTMLReporter.

        Args:
            names: Author name resolver. Defaults to an empty mapping.
        """
        self.names = names or NameResolver()

    def _get_timestamp(self) -> str:
        """Get current timestamp in human-readable format."""
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")

    def _escape_html(self, text: Any) -> str:
        """Escape HTML special characters.

        Args:
            text: The text to escape. None renders as an empty string.

        Returns:
            Escaped text safe for HTML.
        """
        return (
            str("" if text is None else text)
            .replace("&", "&amp;")
            .replace("<", "&lt;")
            .replace(">", "&gt;")
            .replace('"', "&quot;")
            .replace("'", "&#x27;")
        )

    def _page(self, title: str, subtitle: str, pills: str, body: str) -> str:
        return HTML_TEMPLATE.format(
            title=self._escape_html(title),
            subtitle=self._escape_html(subtitle),
            timestamp=self._get_timestamp(),
            pills=pills,
            body=body,
        )

    def _generate_pills(self, view: DeltaView) -> str:
        counts = view.counts()
        return "\n".join(
            PILL_TEMPLATE.format(value=counts[key], label=label)
            for key, label in (("total", "ops"), ("shown", "shown"), ("groups", "groups"), ("sessions", "sessions"))
        )

    def _generate_header_row(self, label: str, count: int, meta: str = "") -> str:
        meta_html = f'<div class="small" style="margin-top:4px">{meta}</div>' if meta else ""
        return HEADER_ROW_TEMPLATE.format(label=self._escape_html(label), meta=meta_html, count=count)

    def _generate_session_header(self, session: Session, show_sessions: bool) -> str:
        if not show_sessions:
            return self._generate_header_row(session.key, len(session.items))
        author = self._escape_html(self.names.resolve(session.last_modified_by_id))
        return self._generate_header_row(
            f"🧬 Session: {session.last_modified or NO_TIMESTAMP_KEY}",
            len(session.items),
            f"By: <code>{author}</code>",
        )

    def _generate_group_rows(self, groups: list[SignatureGroup], loose: bool) -> list[str]:
        """Generate one table row per signature group.

        Args:
            groups: Signature groups of one session.
            loose: Whether the view groups by op + path only.

        Returns:
            HTML rows.
        """
        rows = []
        for i, group in enumerate(groups, 1):
            from_to = (
                ""
                if loose
                else FROM_TO_TEMPLATE.format(
                    from_value=self._escape_html(stringify_value(group.from_value)),
                    value=self._escape_html(stringify_value(group.value)),
                )
            )
            occurrences = " ".join(
                OCCURRENCE_TEMPLATE.format(pointer=self._escape_html(item.pointer), sequence=item.sequence)
                for item in group.items
            )
            rows.append(
                GROUP_ROW_TEMPLATE.format(
                    index=i,
                    op=self._escape_html(group.op),
                    path=self._escape_html(group.path),
                    from_to=from_to,
                    last_modified=self._escape_html(group.last_modified or NO_TIMESTAMP_KEY),
                    author=self._escape_html(self.names.resolve(group.last_modified_by_id)),
                    count=len(group.items),
                    occurrences=occurrences,
                )
            )
        return rows

    def _generate_results_table(self, view: DeltaView) -> str:
        """Generate the grouped results table.

        Args:
            view: The grouped view.

        Returns:
            HTML table, or an empty state when nothing matched.
        """
        if not view.sessions:
            return EMPTY_STATE_TEMPLATE.format(message="No patch operations to display.")

        loose = view.config.grouping_mode == "loose"
        show_sessions = view.config.session_grouping
        rows: list[str] = []

        if view.buckets is not None:
            granularity = self._escape_html(view.config.bucket_granularity)
            for bucket in view.buckets:
                rows.append(
                    self._generate_header_row(
                        f"🕒 {bucket.key}",
                        bucket.operation_count,
                        f"Bucket type: <code>{granularity}</code>",
                    )
                )
                for session in bucket.sessions:
                    rows.append(self._generate_session_header(session, show_sessions))
                    rows.extend(self._generate_group_rows(session.groups, loose))
        else:
            for session in view.sessions:
                if show_sessions:
                    rows.append(self._generate_session_header(session, True))
                rows.extend(self._generate_group_rows(session.groups, loose))

        return RESULTS_TABLE_TEMPLATE.format(rows="\n".join(rows))

    def _generate_histogram(self, operations: list[PatchOperation]) -> str:
        counts = path_counts(operations)
        if not counts:
            return EMPTY_STATE_TEMPLATE.format(message="No patch operations found.")
        return "\n".join(
            HISTOGRAM_ROW_TEMPLATE.format(label=self._escape_html(label), count=count, width=width)
            for label, count, width in histogram_widths(counts)
        )

    def report_delta_view(
        self,
        view: DeltaView,
        all_operations: list[PatchOperation] | None = None,
        title: str = "Delta/Patch Explorer",
    ) -> str:
        """Generate the Delta/Patch Explorer page.

        Args:
            view: The grouped view of the filtered operations.
            all_operations: Unfiltered operations for the path histogram.
                Defaults to the view's operations.
            title: Page title.

        Returns:
            HTML string of the page.
        """
        raw = json.dumps(
            [operation.to_dict() for operation in view.operations],
            indent=2,
            ensure_ascii=False,
            default=str,
        )
        grouping = ["op + path" if view.config.grouping_mode == "loose" else "op + path + fromValue + value"]
        if view.config.session_grouping:
            grouping.append("diff sessions")
        if view.config.bucket_grouping:
            grouping.append(f"{view.config.bucket_granularity} buckets")
        if view.config.sort_by_time:
            grouping.append("sorted by lastModified (desc)")

        body = "\n".join(
            [
                CARD_TEMPLATE.format(
                    heading="Results",
                    hint="Grouped by: buckets → sessions → signatures, depending on options",
                    content=self._generate_results_table(view),
                ),
                CARD_TEMPLATE.format(
                    heading="Raw list (ordered by appearance)",
                    hint="Filtered operations",
                    content=f"<pre>{self._escape_html(raw)}</pre>",
                ),
                CARD_TEMPLATE.format(
                    heading="Counts per path",
                    hint="Histogram from full dataset (not affected by filters)",
                    content=self._generate_histogram(
                        all_operations if all_operations is not None else view.operations
                    ),
                ),
            ]
        )
        return self._page(title, "Grouping: " + " · ".join(grouping), self._generate_pills(view), body)

    def report_to_file(
        self,
        view: DeltaView,
        path: Path | str,
        all_operations: list[PatchOperation] | None = None,
    ) -> None:
        """Write the Delta/Patch Explorer page to a file.

        Args:
            view: The grouped view of the filtered operations.
            path: Path to the output file.
            all_operations: Unfiltered operations for the path histogram.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.report_delta_view(view, all_operations), encoding="utf-8")

    def report_reservation(
        self,
        summary: ReservationSummary,
        now: datetime | None = None,
        retention_days: int = 90,
    ) -> str:
        """Generate the reservation summary page.

        Args:
            summary: The reservation summary.
            now: Reference time for the log purge warning.
            retention_days: Log retention window in days.

        Returns:
            HTML string of the page.
        """
        fields = [
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
        table = "<table>{}</table>".format(
            "\n".join(
                SUMMARY_ROW_TEMPLATE.format(label=self._escape_html(label), value=self._escape_html(value))
                for label, value in fields
            )
        )

        product_rows = "\n".join(
            "<tr>"
            + "".join(
                f"<td>{self._escape_html(cell)}</td>"
                for cell in (
                    entry.index,
                    entry.begin_date,
                    entry.departure_date,
                    f"{entry.amount:.2f}",
                    entry.currency,
                    entry.adults,
                    entry.children,
                    entry.external_price_code,
                    entry.product_id,
                    entry.price_id,
                    f"{entry.emoji} {entry.status}",
                    entry.creation_date,
                )
            )
            + "</tr>"
            for entry in summary.products
        )
        products = (
            "<table><thead><tr><th>#</th><th>Begin</th><th>Departure</th><th>Amount</th><th>Currency</th>"
            "<th>Adults</th><th>Children</th><th>External Code</th><th>ProductID</th><th>PriceID</th>"
            f"<th>Status</th><th>Created</th></tr></thead><tbody>{product_rows}</tbody></table>"
            if summary.products
            else EMPTY_STATE_TEMPLATE.format(message="No product calendar entries.")
        )

        counts = summary.counts()
        pills = "\n".join(PILL_TEMPLATE.format(value=value, label=label) for label, value in counts.items())
        body = "\n".join(
            [
                CARD_TEMPLATE.format(heading="✅ Reservation Summary", hint="", content=table),
                CARD_TEMPLATE.format(heading="🏨 Product Calendar Details", hint="", content=products),
            ]
        )
        return self._page("Reservation Summary", summary.reservation_number, pills, body)

    def _generate_table(self, headers: list[str], rows: list[list[str]], row_class: str = "") -> str:
        """Generate a table from headers and pre-rendered cells.

        Args:
            headers: Column titles, escaped here.
            rows: Cell HTML per row, already escaped by the caller.
            row_class: Optional class for every body row.

        Returns:
            HTML table.
        """
        head = "".join(f"<th>{self._escape_html(header)}</th>" for header in headers)
        class_attr = f' class="{row_class}"' if row_class else ""
        body = "\n".join(f"<tr{class_attr}>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>" for row in rows)
        return f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"

    def _yes_no(self, flag: bool) -> str:
        return "<b>Yes</b>" if flag else "No"

    def report_availability(self, summary: AvailabilitySummary) -> str:
        """Generate the availability dashboard page.

        Args:
            summary: The availability summary.

        Returns:
            HTML string of the page.
        """
        fields = [
            ("Hotel Code", summary.hotel_code),
            ("Stay", summary.stay_line()),
            ("Inventory Remaining", summary.remaining),
            ("Currency", summary.currency),
            ("Min Price", f"{format_money(summary.min_price, summary.currency)} (code {summary.min_price_code})"),
            ("Max Price", f"{format_money(summary.max_price, summary.currency)} (code {summary.max_price_code})"),
            ("Product Type", summary.product_type),
            ("Txn / Timestamp", f"{summary.transaction_id} · {summary.timestamp}"),
        ]
        table = "<table>{}</table>".format(
            "\n".join(
                SUMMARY_ROW_TEMPLATE.format(label=self._escape_html(label), value=self._escape_html(value))
                for label, value in fields
            )
        )
        cards = [CARD_TEMPLATE.format(heading="Stay", hint="", content=table)]

        if summary.rates:
            plan_rows = [
                [
                    f"<code>{self._escape_html(rate.price_code)}</code>",
                    self._escape_html(rate.price_description),
                    self._yes_no(rate.refundable),
                    self._yes_no(rate.inclusive),
                    self._escape_html(rate.money(rate.average_price)),
                    self._escape_html(f"{rate.money(rate.min_price)} → {rate.money(rate.max_price)}"),
                    self._escape_html(rate.money(rate.total)),
                    f"{self._escape_html(rate.product_description)}"
                    f'<div class="small"><code>{self._escape_html(rate.product_code)}</code></div>',
                    self._escape_html("—" if rate.remaining is None else rate.remaining),
                ]
                for rate in summary.rates
            ]
            plans = self._generate_table(
                ["Code", "Rate", "Refundable", "Inclusive", "Avg Night", "Min → Max", "Total", "Room", "Remaining"],
                plan_rows,
            )
        else:
            plans = EMPTY_STATE_TEMPLATE.format(message="No rate plans returned.")
        cards.append(CARD_TEMPLATE.format(heading="Rate Plans", hint="Sorted by price code", content=plans))

        for rate in summary.rates:
            night_rows = [
                [
                    self._escape_html(format_date(night.date)),
                    self._escape_html(format_money(night.price_amount, night.currency)),
                    self._escape_html(format_money(night.base_price_amount, night.currency)),
                    self._escape_html(format_money(night.tax_total, night.currency)),
                    self._escape_html(format_money(night.total, night.currency)),
                    self._yes_no(night.refundable),
                    self._escape_html("—" if night.remaining is None else night.remaining),
                    self._escape_html(night.time_zone),
                ]
                for night in rate.nights
            ]
            content = self._generate_table(
                ["Date", "Nightly", "Base", "Tax", "Total", "Refundable", "Remain", "Time Zone"], night_rows
            )
            if rate.policies:
                policy_rows = [
                    [
                        f"{self._escape_html(policy.type)} "
                        f'<span class="small">({self._escape_html(policy.code)})</span>',
                        self._escape_html(policy.rule),
                        self._escape_html(format_money(policy.amount, policy.currency)),
                        f"{self._escape_html(policy.description)}"
                        f'<div class="small">{self._escape_html(policy.due_line)}</div>',
                    ]
                    for policy in rate.policies
                ]
                content += self._generate_table(["Type", "Rule", "Amount", "Due / Notes"], policy_rows)
            cards.append(
                CARD_TEMPLATE.format(
                    heading=self._escape_html(f"Nightly Prices · Code {rate.price_code} · {rate.price_description}"),
                    hint="Policies follow the nightly prices" if rate.policies else "",
                    content=content,
                )
            )

        pills = "\n".join(
            PILL_TEMPLATE.format(value=value, label=label) for label, value in summary.counts().items()
        )
        return self._page(f"Availability · {summary.hotel_name}", summary.hotel_code, pills, "\n".join(cards))

    def report_channel_parameters(self, summary: ChannelParametersSummary) -> str:
        """Generate the channel parameters page.

        Each channel gets a card; every parameter row carries its value
        pretty-printed in a collapsible block. A search box filters rows.

        Args:
            summary: The grouped channel parameters, possibly filtered.

        Returns:
            HTML string of the page.
        """
        counts = summary.counts()
        subtitle = (
            f"Total: {counts['total']} · Channels: {counts['channels']} · Customers: {counts['customers']} · "
            f"Most recent lastModified: {summary.most_recent_last_modified or '—'}"
        )
        pills = "\n".join(
            PILL_TEMPLATE.format(value=counts[key], label=label)
            for key, label in (
                ("parameter_names", "unique parameterName"),
                ("fk_references", "unique fkReference"),
                ("channels", "unique channelID"),
                ("customers", "unique customerID"),
            )
        )

        if not summary.groups:
            body = EMPTY_STATE_TEMPLATE.format(message="No channel parameters to display.")
            return self._page("⚙️ Channel Parameters", subtitle, pills, body)

        cards = [SEARCH_TEMPLATE.format(placeholder="Search parameterName / value / channelID / customerID...")]
        for group in summary.groups:
            hint = [f"{group.count} params"]
            if group.inactive_count:
                hint.append(f"{group.inactive_count} inactive")
            if group.has_system_flag:
                hint.append("systemFlag present")
            rows = [
                [
                    f"<code>{self._escape_html(item.display('parameter_name'))}</code>"
                    f'<div class="small">{self._escape_html(item.display("short_description"))}</div>',
                    f"<code>{self._escape_html(item.display('parameter_value'))}</code>"
                    + DETAILS_TEMPLATE.format(label="JSON", content=self._escape_html(item.pretty_value)),
                    self._escape_html(item.display("customer_id")),
                    self._escape_html(item.display("fk_reference")),
                    self._escape_html(item.display("order_by")),
                    self._escape_html(item.display("last_modified")),
                    ("inactive" if item.inactivated else "active") + (" · systemFlag" if item.system_flag else ""),
                ]
                for item in group.items
            ]
            table = self._generate_table(
                ["Parameter", "Value", "customerID", "fkReference", "orderBy", "lastModified", "State"],
                rows,
                row_class="group-row",
            )
            cards.append(
                CARD_TEMPLATE.format(
                    heading=self._escape_html(f"channelID: {group.channel_id}"),
                    hint=" · ".join(hint),
                    content=table,
                )
            )
        return self._page("⚙️ Channel Parameters", subtitle, pills, "\n".join(cards))

    def report_message_traces(self, summary: MessageTraceSummary) -> str:
        """Generate the message traces page.

        Args:
            summary: The message trace summary.

        Returns:
            HTML string of the page.
        """
        if summary.channels:
            channels = self._generate_table(
                ["Channel Code", "Channel ID"],
                [
                    [
                        self._escape_html(f"{channel.emoji} {channel.code}"),
                        f"<code>{self._escape_html(channel.id)}</code>",
                    ]
                    for channel in summary.channels
                ],
            )
        else:
            channels = EMPTY_STATE_TEMPLATE.format(message="No channels found in messageTraces.")

        if summary.traces:
            traces = self._generate_table(
                ["Timestamp", "Direction", "Message Type", "fkReference", "messageData"],
                [
                    [
                        f"<code>{self._escape_html(trace.timestamp)}</code>",
                        self._escape_html(trace.direction_label),
                        self._escape_html(trace.message_type),
                        self._escape_html(trace.fk_reference_label),
                        DETAILS_TEMPLATE.format(
                            label="Show parsed messageData", content=self._escape_html(trace.message_data)
                        ),
                    ]
                    for trace in summary.traces
                ],
            )
        else:
            traces = EMPTY_STATE_TEMPLATE.format(message="No messageTraces found in response.")

        body = "\n".join(
            [
                CARD_TEMPLATE.format(heading=f"📡 Channels ({len(summary.channels)})", hint="", content=channels),
                CARD_TEMPLATE.format(
                    heading=f"📜 Message Traces ({len(summary.traces)})",
                    hint="Expand messageData to view parsed JSON content",
                    content=traces,
                ),
            ]
        )
        pills = "\n".join(
            PILL_TEMPLATE.format(value=value, label=label) for label, value in summary.counts().items()
        )
        return self._page("Message Traces", "", pills, body)
