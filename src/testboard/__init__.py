"""testboard - dashboard data for Playwright JSON test reports."""

__version__ = "0.3.0"

from testboard.reports import (
    GlobalStats,
    NormalizedReport,
    ReportNormalizer,
    SuiteStats,
    TestRecord,
    load_and_normalize,
)

__all__ = [
    "GlobalStats",
    "NormalizedReport",
    "ReportNormalizer",
    "SuiteStats",
    "TestRecord",
    "load_and_normalize",
]
