"""Normalization of Playwright JSON reports into dashboard data.

Usage:
    from testboard.reports import ReportNormalizer

    report = ReportNormalizer().normalize(raw_json)
    failed = report.by_status("failed")
    if report.is_fallback:
        print(f"Showing fixture data ({report.fallback_reason})")
"""

from .dashboard import build_dashboard, build_kpis
from .fixtures import FALLBACK_TOTAL_TESTS
from .loader import LoadResult, load_and_normalize, load_report
from .models import (
    SUITE_SEPARATOR,
    ErrorDetail,
    GlobalStats,
    NormalizedReport,
    RawReport,
    SuiteStats,
    TestRecord,
)
from .normalizer import ReportNormalizer, make_test_id
from .queries import by_status, filter_tests, find_test, search, sort_by

__all__ = [
    "FALLBACK_TOTAL_TESTS",
    "SUITE_SEPARATOR",
    "ErrorDetail",
    "GlobalStats",
    "LoadResult",
    "NormalizedReport",
    "RawReport",
    "ReportNormalizer",
    "SuiteStats",
    "TestRecord",
    "build_dashboard",
    "build_kpis",
    "by_status",
    "filter_tests",
    "find_test",
    "load_and_normalize",
    "load_report",
    "make_test_id",
    "search",
    "sort_by",
]
