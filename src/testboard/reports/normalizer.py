"""Normalization of Playwright JSON reports into dashboard statistics.

The normalizer walks the nested suite tree once and produces three read-only
outputs: run-wide statistics, per-suite statistics keyed by the resolved suite
path, and a flat list of test records. Anything it cannot use is replaced by
the fixture dataset so the dashboard always has something to show.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import Any

from testboard.exceptions import ReportFormatError
from testboard.logging import get_logger
from testboard.reports.fixtures import FIXTURE_DURATION_MS, fixture_report_data
from testboard.reports.models import (
    SUITE_SEPARATOR,
    GlobalStats,
    NormalizedReport,
    RawReport,
    Spec,
    SuiteStats,
    TestRecord,
)
from testboard.utils.formatting import (
    FAILED,
    PASSED,
    SKIPPED,
    UNKNOWN,
    percentage,
    round_half_up,
    status_bucket,
)

logger = get_logger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
WHITESPACE_PATTERN = re.compile(r"\s+")

# Reasons reported in NormalizedReport.fallback_reason
REASON_MISSING = "report_missing"
REASON_NO_SUITES = "report_without_suites"
REASON_MALFORMED = "report_malformed"


def make_test_id(suite_name: str, spec_title: str, test_title: str) -> str:
    """Build the stable record id, e.g. ``Login-loads-loads``."""
    return WHITESPACE_PATTERN.sub("-", f"{suite_name}-{spec_title}-{test_title}")


@dataclass
class _Tally:
    """Mutable counters, private to one normalization pass."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    unknown: int = 0
    duration_ms: int = 0

    def add(self, bucket: str, duration_ms: int) -> None:
        self.total += 1
        self.duration_ms += duration_ms
        if bucket == PASSED:
            self.passed += 1
        elif bucket == FAILED:
            self.failed += 1
        elif bucket == SKIPPED:
            self.skipped += 1
        else:
            self.unknown += 1


@dataclass
class _ReportBuilder:
    """Scoped accumulator that is finalized exactly once into a snapshot."""

    overall: _Tally = field(default_factory=_Tally)
    suites: dict[str, _Tally] = field(default_factory=dict)
    records: list[TestRecord] = field(default_factory=list)
    _used_ids: set[str] = field(default_factory=set)

    def visit_suite(self, suite_name: str) -> None:
        self.suites.setdefault(suite_name, _Tally())

    def add_spec(self, spec: Spec, suite_name: str) -> None:
        suite_tally = self.suites[suite_name]
        for test in spec.tests:
            if not test.attempts:
                continue

            final = test.attempts[-1]
            title = test.title or spec.title
            record = TestRecord(
                id=self._unique_id(make_test_id(suite_name, spec.title, title)),
                title=title,
                full_title=f"{suite_name}{SUITE_SEPARATOR}{title}",
                suite_name=suite_name,
                status=final.status,
                duration_ms=final.duration_ms,
                error=final.error,
                retry_count=len(test.attempts) - 1,
                file_path=spec.file,
                project=test.project,
            )

            bucket = status_bucket(record.status)
            if bucket == UNKNOWN:
                logger.warning(
                    "unknown_test_status",
                    status=record.status,
                    test_id=record.id,
                    suite=suite_name,
                )

            suite_tally.add(bucket, record.duration_ms)
            self.overall.add(bucket, record.duration_ms)
            self.records.append(record)

    def _unique_id(self, base_id: str) -> str:
        test_id = base_id
        suffix = 1
        while test_id in self._used_ids:
            suffix += 1
            test_id = f"{base_id}-{suffix}"
        self._used_ids.add(test_id)
        return test_id

    def finalize(self, start_time: datetime) -> NormalizedReport:
        duration_ms = sum(record.duration_ms for record in self.records)
        if duration_ms != self.overall.duration_ms:
            logger.error(
                "duration_mismatch",
                records_total=duration_ms,
                accumulated=self.overall.duration_ms,
            )

        try:
            end_time = start_time + timedelta(milliseconds=duration_ms)
        except OverflowError as e:
            raise ReportFormatError(f"run end time out of range: {e}", "duration") from e

        tally = self.overall
        global_stats = GlobalStats(
            total=tally.total,
            passed=tally.passed,
            failed=tally.failed,
            skipped=tally.skipped,
            unknown=tally.unknown,
            duration_ms=duration_ms,
            start_time=start_time,
            end_time=end_time,
            pass_rate=percentage(tally.passed, tally.total),
            fail_rate=percentage(tally.failed, tally.total),
            skip_rate=percentage(tally.skipped, tally.total),
            avg_duration=round_half_up(duration_ms / tally.total) if tally.total else 0,
        )
        suites = tuple(
            SuiteStats(
                name=name,
                total=t.total,
                passed=t.passed,
                failed=t.failed,
                skipped=t.skipped,
                unknown=t.unknown,
                duration_ms=t.duration_ms,
            )
            for name, t in self.suites.items()
        )
        return NormalizedReport(
            global_stats=global_stats,
            suites=suites,
            tests=tuple(self.records),
        )


class ReportNormalizer:
    """Turns a raw report document into a NormalizedReport.

    The normalizer keeps no state between calls; every call to ``normalize``
    works on a fresh builder, so an instance may be reused sequentially.

    Args:
        clock: Returns the current time; used when the report carries no
            start time and for the fixture fallback.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(UTC))

    def normalize(self, raw: Mapping[str, Any] | None) -> NormalizedReport:
        """Normalize a deserialized report, falling back to fixture data.

        Never raises for bad input: missing, empty or malformed reports yield
        the fixture dataset with ``is_fallback`` set.
        """
        if raw is None:
            return self.fallback(REASON_MISSING)
        if not isinstance(raw, Mapping) or not isinstance(raw.get("suites"), list):
            return self.fallback(REASON_NO_SUITES)

        try:
            report = RawReport.from_dict(raw)
            return self._build(report, self._resolve_start_time(report.start_time))
        except ReportFormatError as e:
            logger.warning("report_malformed", error=str(e), path=e.path)
            return self.fallback(REASON_MALFORMED)

    def fallback(self, reason: str) -> NormalizedReport:
        """Return the fixture dataset, flagged as fallback data."""
        logger.warning("report_fallback", reason=reason)
        report = RawReport.from_dict(fixture_report_data())
        start_time = self._clock() - timedelta(milliseconds=FIXTURE_DURATION_MS)
        normalized = self._build(report, start_time)
        return replace(normalized, is_fallback=True, fallback_reason=reason)

    def _build(self, report: RawReport, start_time: datetime) -> NormalizedReport:
        builder = _ReportBuilder()

        # Pre-order walk: a node's specs come before its child suites
        stack = [(suite, "") for suite in reversed(report.suites)]
        while stack:
            suite, parent_name = stack.pop()
            suite_name = (
                f"{parent_name}{SUITE_SEPARATOR}{suite.title}" if parent_name else suite.title
            )
            builder.visit_suite(suite_name)
            for spec in suite.specs:
                builder.add_spec(spec, suite_name)
            stack.extend((child, suite_name) for child in reversed(suite.suites))

        normalized = builder.finalize(start_time)
        logger.info(
            "report_normalized",
            total=normalized.global_stats.total,
            suites=len(normalized.suites),
        )
        return normalized

    def _resolve_start_time(self, value: Any) -> datetime:
        """Interpret ``actualStartTime`` as epoch milliseconds or ISO-8601."""
        if value is None:
            logger.debug("start_time_missing")
            return self._clock()

        if isinstance(value, int | float) and not isinstance(value, bool):
            try:
                return EPOCH + timedelta(milliseconds=value)
            except (OverflowError, ValueError):
                pass
        elif isinstance(value, str):
            try:
                parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                pass
            else:
                return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

        logger.warning("start_time_unparseable", value=repr(value))
        return self._clock()
