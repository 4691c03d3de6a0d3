"""Dashboard payload consumed by the browser view.

Everything the view renders (KPI cards, the status doughnut, the per-suite
stacked bars and the results table) is precomputed here so the view layer
only has to place values into the page.
"""

from __future__ import annotations

from typing import Any

from testboard.reports.models import SUITE_SEPARATOR, NormalizedReport, TestRecord
from testboard.utils.formatting import (
    format_duration,
    format_timestamp,
    percentage,
    status_icon_key,
)

STATUS_LABELS = ("Passed", "Failed", "Skipped")


def _table_row(record: TestRecord) -> dict[str, Any]:
    row = record.to_dict()
    row["suite_short_name"] = record.suite_name.split(SUITE_SEPARATOR)[-1]
    row["icon"] = status_icon_key(record.status)
    row["duration"] = format_duration(record.duration_ms)
    return row


def build_kpis(report: NormalizedReport) -> dict[str, Any]:
    """KPI card values, including formatted durations and start time."""
    stats = report.global_stats
    return {
        "total": stats.total,
        "passed": stats.passed,
        "failed": stats.failed,
        "skipped": stats.skipped,
        "unknown": stats.unknown,
        "passed_percentage": percentage(stats.passed, stats.total),
        "failed_percentage": percentage(stats.failed, stats.total),
        "skipped_percentage": percentage(stats.skipped, stats.total),
        "pass_rate": stats.pass_rate,
        "total_duration": format_duration(stats.duration_ms),
        "avg_duration": format_duration(stats.avg_duration),
        "test_date": format_timestamp(stats.start_time),
    }


def build_dashboard(report: NormalizedReport) -> dict[str, Any]:
    """Build the complete JSON-ready payload for the dashboard page."""
    stats = report.global_stats
    return {
        "is_fallback": report.is_fallback,
        "fallback_reason": report.fallback_reason,
        "global_stats": stats.to_dict(),
        "kpis": build_kpis(report),
        "status_chart": {
            "labels": list(STATUS_LABELS),
            "data": [stats.passed, stats.failed, stats.skipped],
        },
        "suite_chart": {
            "labels": [suite.short_name for suite in report.suites],
            "passed": [suite.passed for suite in report.suites],
            "failed": [suite.failed for suite in report.suites],
            "skipped": [suite.skipped for suite in report.suites],
        },
        "suites": [suite.to_dict() for suite in report.suites],
        "tests": [_table_row(record) for record in report.tests],
    }
