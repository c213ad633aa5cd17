"""Main CLI entry point for resv-explorer.

This module defines the Typer application and all CLI commands.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, NoReturn

import typer

from resv_explorer import __version__
from resv_explorer.core.config import Settings
from resv_explorer.core.exceptions import ResvExplorerError

if TYPE_CHECKING:
    from resv_explorer.reporters import ConsoleReporter

logger = logging.getLogger(__name__)

# Create the main Typer app
app = typer.Typer(
    name="resv-explorer",
    help="resv-explorer: Inspect reservation API responses and their change history.",
    add_completion=False,
    no_args_is_help=True,
)

# Global state for options
state: dict[str, bool] = {
    "json": False,
    "no_color": False,
}


class OutputFormat(str, Enum):
    """Report formats."""

    console = "console"
    json = "json"
    html = "html"


class Granularity(str, Enum):
    """Time bucket sizes."""

    hour = "hour"
    day = "day"
    week = "week"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"resv-explorer v{__version__}")
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.callback()
def main(
    version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results in JSON format.",
        ),
    ] = False,
    no_color: Annotated[
        bool,
        typer.Option(
            "--no-color",
            help="Disable colored output.",
        ),
    ] = False,
) -> None:
    """resv-explorer: Inspect reservation API responses.

    Explore patch operations in reservation histories, summarize reservations and
    availability searches, browse channel parameters and message traces.
    """
    state["json"] = json_output
    state["no_color"] = no_color
    _configure_logging(Settings().log_level)


@app.command()
def version() -> None:
    """Show the current version."""
    typer.echo(f"resv-explorer v{__version__}")


def _fail(error: Exception) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


def _load(file: str) -> Any:
    from resv_explorer.loaders import load_document

    try:
        return load_document(file)
    except ResvExplorerError as e:
        _fail(e)


def _resolve_format(output_format: OutputFormat | None) -> OutputFormat:
    if output_format is not None:
        return output_format
    return OutputFormat.json if state["json"] else OutputFormat.console


def _write(text: str, output: str | None) -> None:
    """Write a rendered report to a file, or echo it."""
    if output:
        output_path = Path(output)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(text, encoding="utf-8")
        except OSError as e:
            _fail(e)
        typer.echo(f"  Report saved to: {output}", err=True)
    else:
        typer.echo(text)


def _console(render: Callable[[ConsoleReporter], None], output: str | None, **kwargs: Any) -> None:
    """Print a console report, or save it uncolored to a file."""
    from resv_explorer.reporters import ConsoleReporter

    if not output:
        render(ConsoleReporter(use_colors=not state["no_color"], **kwargs))
        return
    output_path = Path(output)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as handle:
            render(ConsoleReporter(use_colors=False, output=handle, **kwargs))
    except OSError as e:
        _fail(e)
    typer.echo(f"  Report saved to: {output}", err=True)


@app.command()
def deltas(
    file: Annotated[
        str,
        typer.Argument(help="Reservation history JSON file, or '-' for stdin."),
    ],
    loose: Annotated[
        bool,
        typer.Option(
            "--loose",
            help="Group by op + path only, ignoring fromValue and value.",
        ),
    ] = False,
    sessions: Annotated[
        bool,
        typer.Option(
            "--sessions",
            help="Group operations into diff sessions by exact lastModified.",
        ),
    ] = False,
    buckets: Annotated[
        Granularity | None,
        typer.Option(
            "--buckets",
            "-b",
            help="Group sessions into UTC time buckets.",
        ),
    ] = None,
    sort_by_time: Annotated[
        bool,
        typer.Option(
            "--sort-by-time",
            help="Sort sessions and buckets by lastModified, newest first.",
        ),
    ] = False,
    path: Annotated[
        list[str] | None,
        typer.Option(
            "--path",
            "-p",
            help="Only show operations on this path (repeatable).",
        ),
    ] = None,
    author: Annotated[
        list[str] | None,
        typer.Option(
            "--author",
            "-a",
            help="Only show operations by this lastModifiedByID (repeatable, '(null)' for none).",
        ),
    ] = None,
    search: Annotated[
        str,
        typer.Option(
            "--search",
            "-s",
            help="Case-insensitive path substring.",
        ),
    ] = "",
    names: Annotated[
        str | None,
        typer.Option(
            "--names",
            help="JSON or YAML file mapping lastModifiedByID to display names.",
        ),
    ] = None,
    preset: Annotated[
        str | None,
        typer.Option(
            "--preset",
            help="YAML grouping preset. Flags given on the command line are added to it.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat | None,
        typer.Option(
            "--format",
            "-f",
            help="Report format.",
        ),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file path for the report.",
        ),
    ] = None,
) -> None:
    """Explore patch operations in a reservation history response.

    Examples:
        resv-explorer deltas history.json
        resv-explorer deltas history.json --sessions --sort-by-time
        resv-explorer deltas history.json -b day --path /status
        resv-explorer deltas history.json --format html -o deltas.html
        cat history.json | resv-explorer --json deltas -
    """
    from resv_explorer.deltas import FilterCriteria, GroupingConfig, NameResolver, explore

    settings = Settings()

    try:
        base = (
            GroupingConfig.from_yaml(preset)
            if preset
            else GroupingConfig(bucket_granularity=settings.bucket_granularity)
        )
        names_file = names or settings.names_file
        resolver = NameResolver.from_file(names_file) if names_file else NameResolver()
    except ResvExplorerError as e:
        _fail(e)

    updates: dict[str, Any] = {}
    if loose:
        updates["grouping_mode"] = "loose"
    if sessions:
        updates["session_grouping"] = True
    if buckets is not None:
        updates["bucket_grouping"] = True
        updates["bucket_granularity"] = buckets.value
    if sort_by_time:
        updates["sort_by_time"] = True
    config = base.model_copy(update=updates)

    criteria = FilterCriteria(
        paths=frozenset(path or []),
        authors=frozenset(author or []),
        path_search=search,
    )

    document = _load(file)
    operations, view = explore(document, criteria, config, history_key=settings.history_key)
    logger.info(f"{file}: {view.summary()}")

    report_format = _resolve_format(output_format)
    if report_format is OutputFormat.json:
        from resv_explorer.reporters import JSONReporter

        _write(JSONReporter().report_delta_view(view, metadata={"source": file}), output)
    elif report_format is OutputFormat.html:
        from resv_explorer.reporters import HTMLReporter

        _write(HTMLReporter(names=resolver).report_delta_view(view, all_operations=operations), output)
    else:
        _console(lambda reporter: reporter.report_delta_view(view), output, names=resolver)


@app.command()
def paths(
    file: Annotated[
        str,
        typer.Argument(help="Reservation history JSON file, or '-' for stdin."),
    ],
) -> None:
    """Show the number of patch operations per path.

    Counts cover every operation in the document; no filters apply.

    Examples:
        resv-explorer paths history.json
        resv-explorer --json paths history.json
    """
    from resv_explorer.deltas import extract_patch_operations, path_counts

    settings = Settings()
    document = _load(file)
    counts = path_counts(extract_patch_operations(document, history_key=settings.history_key))

    if state["json"]:
        from resv_explorer.reporters import JSONReporter

        typer.echo(JSONReporter().report_path_counts(counts))
    else:
        from resv_explorer.reporters import ConsoleReporter

        ConsoleReporter(use_colors=not state["no_color"]).report_path_histogram(counts)


@app.command()
def reservation(
    file: Annotated[
        str,
        typer.Argument(help="Reservation JSON file, or '-' for stdin."),
    ],
    output_format: Annotated[
        OutputFormat | None,
        typer.Option(
            "--format",
            "-f",
            help="Report format.",
        ),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file path for the report.",
        ),
    ] = None,
) -> None:
    """Summarize a reservation response.

    Examples:
        resv-explorer reservation reservation.json
        resv-explorer reservation reservation.json --format html -o summary.html
    """
    from resv_explorer.reservations import summarize_reservation

    settings = Settings()
    summary = summarize_reservation(_load(file))

    report_format = _resolve_format(output_format)
    if report_format is OutputFormat.json:
        from resv_explorer.reporters import JSONReporter

        _write(JSONReporter().report_reservation(summary), output)
    elif report_format is OutputFormat.html:
        from resv_explorer.reporters import HTMLReporter

        _write(HTMLReporter().report_reservation(summary, retention_days=settings.log_retention_days), output)
    else:
        retention_days = settings.log_retention_days
        _console(lambda reporter: reporter.report_reservation(summary, retention_days=retention_days), output)


@app.command()
def availability(
    file: Annotated[
        str,
        typer.Argument(help="Availability search JSON file, or '-' for stdin."),
    ],
    channel: Annotated[
        str | None,
        typer.Option(
            "--channel",
            help="Channel the search was made on, EXPEDIA or DERBYSOFT. Defaults to RESV_EXPLORER_CHANNEL_SELECTOR.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat | None,
        typer.Option(
            "--format",
            "-f",
            help="Report format.",
        ),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file path for the report.",
        ),
    ] = None,
) -> None:
    """Show the stay summary and rate plans of an availability response.

    Examples:
        resv-explorer availability availability.json
        resv-explorer --json availability availability.json --channel EXPEDIA
        resv-explorer availability availability.json --format html -o availability.html
    """
    from resv_explorer.availability import request_parameters, summarize_availability

    try:
        request = request_parameters((channel or Settings().channel_selector).upper())
    except ResvExplorerError as e:
        _fail(e)

    summary = summarize_availability(_load(file))
    logger.info(f"{file} ({request['channelCode']}): {summary.counts()}")

    report_format = _resolve_format(output_format)
    if report_format is OutputFormat.json:
        from resv_explorer.reporters import JSONReporter

        _write(JSONReporter().report_availability(summary, request=request), output)
    elif report_format is OutputFormat.html:
        from resv_explorer.reporters import HTMLReporter

        _write(HTMLReporter().report_availability(summary), output)
    else:
        _console(lambda reporter: reporter.report_availability(summary), output)


@app.command("channel-params")
def channel_params(
    file: Annotated[
        str,
        typer.Argument(help="Channel parameters JSON file, or '-' for stdin."),
    ],
    search: Annotated[
        str,
        typer.Option(
            "--search",
            "-s",
            help="Case-insensitive text in parameterName, parameterValue, channelID, customerID or fkReference.",
        ),
    ] = "",
    channel: Annotated[
        str | None,
        typer.Option(
            "--channel",
            help="Only show this channelID.",
        ),
    ] = None,
    inactive: Annotated[
        bool | None,
        typer.Option(
            "--inactive/--active",
            help="Only show inactivated, or only active, parameters.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat | None,
        typer.Option(
            "--format",
            "-f",
            help="Report format.",
        ),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file path for the report.",
        ),
    ] = None,
) -> None:
    """Explore channel parameters grouped by channelID.

    Examples:
        resv-explorer channel-params params.json
        resv-explorer channel-params params.json --search rateplan --inactive
        resv-explorer channel-params params.json --format html -o params.html
    """
    from resv_explorer.channels import summarize_channel_parameters

    summary = summarize_channel_parameters(_load(file)).filtered(search, channel, inactive)
    logger.info(f"{file}: {summary.counts()}")

    report_format = _resolve_format(output_format)
    if report_format is OutputFormat.json:
        from resv_explorer.reporters import JSONReporter

        _write(JSONReporter().report_channel_parameters(summary), output)
    elif report_format is OutputFormat.html:
        from resv_explorer.reporters import HTMLReporter

        _write(HTMLReporter().report_channel_parameters(summary), output)
    else:
        _console(lambda reporter: reporter.report_channel_parameters(summary), output)


@app.command()
def traces(
    file: Annotated[
        str,
        typer.Argument(help="Message traces JSON file, or '-' for stdin."),
    ],
    output_format: Annotated[
        OutputFormat | None,
        typer.Option(
            "--format",
            "-f",
            help="Report format.",
        ),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file path for the report.",
        ),
    ] = None,
) -> None:
    """List the channels and messages of a message traces response.

    Examples:
        resv-explorer traces traces.json
        resv-explorer traces traces.json --format html -o traces.html
    """
    from resv_explorer.channels import summarize_message_traces

    summary = summarize_message_traces(_load(file))
    logger.info(f"{file}: {summary.counts()}")

    report_format = _resolve_format(output_format)
    if report_format is OutputFormat.json:
        from resv_explorer.reporters import JSONReporter

        _write(JSONReporter().report_message_traces(summary), output)
    elif report_format is OutputFormat.html:
        from resv_explorer.reporters import HTMLReporter

        _write(HTMLReporter().report_message_traces(summary), output)
    else:
        _console(lambda reporter: reporter.report_message_traces(summary), output)


@app.command()
def inflate(
    file: Annotated[
        str,
        typer.Argument(help="Reservation JSON file, or '-' for stdin."),
    ],
    factor: Annotated[
        float | None,
        typer.Option(
            "--factor",
            help="Multiplier for the main product's amounts. Defaults to RESV_EXPLORER_INFLATION_FACTOR.",
        ),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file path for the payload.",
        ),
    ] = None,
) -> None:
    """Build a reservation payload with the main product's rates inflated.

    The payload is printed as JSON; nothing is sent.

    Examples:
        resv-explorer inflate reservation.json
        resv-explorer inflate reservation.json --factor 2 -o payload.json
    """
    from resv_explorer.core.exceptions import PayloadError
    from resv_explorer.reporters import JSONReporter
    from resv_explorer.reservations import inflate_reservation

    multiplier = factor if factor is not None else Settings().inflation_factor
    if multiplier <= 0:
        _fail(PayloadError(f"Inflation factor must be positive, got {multiplier}"))

    try:
        result = inflate_reservation(_load(file), multiplier)
    except PayloadError as e:
        _fail(e)

    _write(JSONReporter(indent=4).report_payload(result), output)


if __name__ == "__main__":
    app()
