"""Rich renderables for the testboard CLI."""

from __future__ import annotations

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from testboard.reports import SUITE_SEPARATOR, NormalizedReport, TestRecord, build_kpis
from testboard.utils.formatting import format_duration, format_timestamp

BUCKET_STYLES = {
    "passed": "green",
    "failed": "red",
    "skipped": "yellow",
    "unknown": "magenta",
}

FALLBACK_NOTICE = "No usable report found ({reason}); showing fixture data."


def _status_text(record: TestRecord) -> Text:
    return Text(record.bucket.capitalize(), style=BUCKET_STYLES[record.bucket])


def fallback_notice(report: NormalizedReport) -> Text | None:
    """Warning line shown above any output built from fixture data."""
    if not report.is_fallback:
        return None
    return Text(FALLBACK_NOTICE.format(reason=report.fallback_reason), style="bold yellow")


def render_summary(report: NormalizedReport) -> Group:
    """KPI panel followed by the per-suite breakdown."""
    kpis = build_kpis(report)
    kpi_lines = [
        f"Test date:  {kpis['test_date']}",
        f"Finished:   {format_timestamp(report.global_stats.end_time)}",
        f"Total:      {kpis['total']}",
        f"Passed:     {kpis['passed']} ({kpis['passed_percentage']}%)",
        f"Failed:     {kpis['failed']} ({kpis['failed_percentage']}%)",
        f"Skipped:    {kpis['skipped']} ({kpis['skipped_percentage']}%)",
    ]
    if kpis["unknown"]:
        kpi_lines.append(f"Unknown:    {kpis['unknown']}")
    kpi_lines.extend(
        [
            f"Pass rate:  {kpis['pass_rate']}%",
            f"Duration:   {kpis['total_duration']} (avg {kpis['avg_duration']})",
        ]
    )

    suites = Table(title="Suites")
    suites.add_column("Suite")
    for column in ("Total", "Passed", "Failed", "Skipped", "Duration"):
        suites.add_column(column, justify="right")
    for suite in report.suites:
        suites.add_row(
            Text(suite.name),
            str(suite.total),
            str(suite.passed),
            str(suite.failed),
            str(suite.skipped),
            format_duration(suite.duration_ms),
        )

    return Group(Panel("\n".join(kpi_lines), title="Test Results"), suites)


def render_tests(tests: tuple[TestRecord, ...]) -> Table | Text:
    """Results table; a short message when nothing matches."""
    if not tests:
        return Text("No tests match the current filters.", style="dim")

    table = Table(title=f"Tests ({len(tests)})")
    table.add_column("Test")
    table.add_column("Suite")
    table.add_column("Status")
    table.add_column("Duration", justify="right")
    table.add_column("ID", style="dim", overflow="fold")
    for record in tests:
        title = Text(record.title)
        if record.retry_count > 0:
            title.append(f"\nRetried {record.retry_count} time(s)", style="yellow")
        table.add_row(
            title,
            record.suite_name.split(SUITE_SEPARATOR)[-1],
            _status_text(record),
            format_duration(record.duration_ms),
            record.id,
        )
    return table


def render_test_detail(record: TestRecord) -> Panel:
    """Detail view for a single test, including its error when present."""
    body = Text()
    body.append("Suite:    ", style="bold")
    body.append(f"{record.suite_name}\n")
    body.append("Status:   ", style="bold")
    body.append_text(_status_text(record))
    body.append(f" ({record.status})\n")
    body.append("Duration: ", style="bold")
    body.append(f"{format_duration(record.duration_ms)}\n")
    body.append("File:     ", style="bold")
    body.append(record.file_path or "N/A")
    if record.project:
        body.append("\nProject:  ", style="bold")
        body.append(record.project)
    if record.retry_count > 0:
        body.append("\nRetries:  ", style="bold")
        body.append(str(record.retry_count))
    if record.error:
        body.append("\n\nError: ", style="bold red")
        body.append(record.error.message)
        if record.error.stack:
            body.append(f"\n{record.error.stack}", style="dim")
    return Panel(body, title=Text(record.title))
