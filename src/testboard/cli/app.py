"""Main Typer CLI application for testboard."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from testboard.cli.formatters import (
    fallback_notice,
    render_summary,
    render_test_detail,
    render_tests,
)
from testboard.config import get_settings
from testboard.logging import configure_logging
from testboard.reports import (
    NormalizedReport,
    build_dashboard,
    filter_tests,
    find_test,
    load_and_normalize,
)

app = typer.Typer(
    name="testboard",
    help="Dashboard data for Playwright JSON test reports",
    no_args_is_help=True,
)

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

OUTPUT_FORMATS = ("text", "json")

SourceArgument = Annotated[
    str | None,
    typer.Argument(
        help="Report file path or http(s) URL (defaults to TESTBOARD_REPORT_SOURCE)",
    ),
]
OutputFormatOption = Annotated[
    str,
    typer.Option(
        "-f",
        "--output-format",
        help="Output format (text, json)",
    ),
]


def _load(source: str | None) -> NormalizedReport:
    settings = get_settings()
    return asyncio.run(
        load_and_normalize(source or settings.report_source, timeout=settings.fetch_timeout)
    )


def _check_output_format(output_format: str) -> None:
    if output_format not in OUTPUT_FORMATS:
        err_console.print(f"[red]Unknown output format: {output_format}[/red]")
        raise typer.Exit(code=1)


def _print_fallback_notice(report: NormalizedReport) -> None:
    notice = fallback_notice(report)
    if notice is not None:
        err_console.print(notice)


@app.callback()
def configure(
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Log level (DEBUG, INFO, WARNING, ERROR)",
        ),
    ] = None,
    log_format: Annotated[
        str | None,
        typer.Option(
            "--log-format",
            help="Log format (json, console)",
        ),
    ] = None,
) -> None:
    """Configure logging before any command runs."""
    settings = get_settings()
    configure_logging(
        log_level=log_level or settings.log_level,
        json_format=settings.log_json_format if log_format is None else log_format == "json",
    )


@app.command()
def summary(
    source: SourceArgument = None,
    output_format: OutputFormatOption = "text",
) -> None:
    """Show KPI statistics and the per-suite breakdown."""
    _check_output_format(output_format)
    report = _load(source)

    if output_format == "json":
        data = {
            "is_fallback": report.is_fallback,
            "fallback_reason": report.fallback_reason,
            "global_stats": report.global_stats.to_dict(),
            "suites": [suite.to_dict() for suite in report.suites],
        }
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    _print_fallback_notice(report)
    console.print(render_summary(report))


@app.command()
def tests(
    source: SourceArgument = None,
    status: Annotated[
        str,
        typer.Option(
            "-s",
            "--status",
            help="Filter by status (all, passed, failed, skipped, unknown)",
        ),
    ] = "all",
    search: Annotated[
        str | None,
        typer.Option(
            "-q",
            "--search",
            help="Case-insensitive match on test title or suite name",
        ),
    ] = None,
    sort: Annotated[
        str | None,
        typer.Option(
            "--sort",
            help="Sort column (title, suite, status, duration)",
        ),
    ] = None,
    descending: Annotated[
        bool,
        typer.Option(
            "--desc",
            help="Sort in descending order",
        ),
    ] = False,
    output_format: OutputFormatOption = "text",
) -> None:
    """List tests, optionally filtered, searched and sorted."""
    _check_output_format(output_format)
    report = _load(source)

    try:
        selected = filter_tests(
            report.tests,
            status=status,
            query=search,
            sort=sort,
            direction="desc" if descending else "asc",
        )
    except ValueError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e

    if output_format == "json":
        data = [record.to_dict() for record in selected]
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    _print_fallback_notice(report)
    console.print(render_tests(selected))


@app.command()
def show(
    test_id: Annotated[
        str,
        typer.Argument(help="Test ID as listed by the 'tests' command"),
    ],
    source: SourceArgument = None,
) -> None:
    """Show details for a single test, including its error."""
    report = _load(source)
    record = find_test(report.tests, test_id)
    if record is None:
        err_console.print(f"[red]No test with ID: {test_id}[/red]")
        raise typer.Exit(code=1)

    _print_fallback_notice(report)
    console.print(render_test_detail(record))


@app.command()
def export(
    source: SourceArgument = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "-o",
            "--output",
            help="Write the dashboard payload to a file instead of stdout",
        ),
    ] = None,
) -> None:
    """Export the dashboard payload (KPIs, chart series, table rows) as JSON."""
    report = _load(source)
    payload = json.dumps(build_dashboard(report), indent=2, ensure_ascii=False)

    if output is None:
        typer.echo(payload)
        return

    output.write_text(payload + "\n", encoding="utf-8")
    _print_fallback_notice(report)
    err_console.print(f"Dashboard data written to {output}")


def main() -> None:
    """Entry point for the Typer CLI."""
    app()
