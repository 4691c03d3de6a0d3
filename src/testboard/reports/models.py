"""Data models for raw and normalized test reports."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from testboard.exceptions import ReportFormatError
from testboard.utils.formatting import status_bucket

SUITE_SEPARATOR = " › "

# Largest duration a timedelta can hold
MAX_DURATION_MS = timedelta.max // timedelta(milliseconds=1)


# =============================================================================
# RAW REPORT TREE
# =============================================================================


def _require_title(data: Mapping[str, Any], path: str) -> str:
    title = data.get("title")
    if not isinstance(title, str):
        raise ReportFormatError("'title' must be a string", path)
    return title


def _optional_list(data: Mapping[str, Any], key: str, path: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ReportFormatError(f"'{key}' must be a list", path)
    return value


def _require_mapping(value: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ReportFormatError("expected an object", path)
    return value


def _coerce_duration(value: Any, path: str) -> int:
    """Convert a raw duration to whole milliseconds (half-up)."""
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ReportFormatError("'duration' must be a number", path)
    if isinstance(value, float) and not math.isfinite(value):
        raise ReportFormatError("'duration' must be a number", path)
    if abs(value) > MAX_DURATION_MS:
        raise ReportFormatError("'duration' is out of range", path)
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class ErrorDetail:
    """Error attached to a test attempt."""

    message: str = ""
    stack: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ErrorDetail:
        """Create ErrorDetail from a Playwright error dict."""
        return cls(
            message=str(data.get("message") or ""),
            stack=str(data.get("stack") or ""),
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary."""
        return {"message": self.message, "stack": self.stack}


@dataclass(frozen=True)
class Attempt:
    """One execution of a test (the first run or a retry)."""

    status: str = "unknown"
    duration_ms: int = 0
    error: ErrorDetail | None = None

    @classmethod
    def from_dict(cls, data: Any, path: str = "") -> Attempt:
        data = _require_mapping(data, path)
        error_data = data.get("error")
        error = None
        if error_data is not None:
            error = ErrorDetail.from_dict(_require_mapping(error_data, f"{path}.error"))
        status = data.get("status")
        return cls(
            status=status if isinstance(status, str) and status else "unknown",
            duration_ms=_coerce_duration(data.get("duration"), path),
            error=error,
        )


@dataclass(frozen=True)
class RawTest:
    """A test entry of a spec, holding its attempts in execution order."""

    title: str | None = None
    project: str | None = None
    attempts: tuple[Attempt, ...] = ()

    @classmethod
    def from_dict(cls, data: Any, path: str = "") -> RawTest:
        data = _require_mapping(data, path)
        results = _optional_list(data, "results", path)
        title = data.get("title")
        project = data.get("projectName")
        return cls(
            title=title if isinstance(title, str) and title else None,
            project=project if isinstance(project, str) and project else None,
            attempts=tuple(
                Attempt.from_dict(result, f"{path}.results[{i}]")
                for i, result in enumerate(results)
            ),
        )


@dataclass(frozen=True)
class Spec:
    """A named test definition, possibly run under several projects."""

    title: str
    file: str = ""
    tests: tuple[RawTest, ...] = ()

    @classmethod
    def from_dict(cls, data: Any, path: str = "") -> Spec:
        data = _require_mapping(data, path)
        file = data.get("file")
        return cls(
            title=_require_title(data, path),
            file=file if isinstance(file, str) else "",
            tests=tuple(
                RawTest.from_dict(test, f"{path}.tests[{i}]")
                for i, test in enumerate(_optional_list(data, "tests", path))
            ),
        )


@dataclass(frozen=True)
class Suite:
    """A suite node; suites nest to arbitrary depth."""

    title: str
    specs: tuple[Spec, ...] = ()
    suites: tuple[Suite, ...] = ()

    @classmethod
    def from_dict(cls, data: Any, path: str = "") -> Suite:
        """Build a suite subtree without recursion, so depth is unbounded."""
        # Pre-order listing of (node, path, parent position)
        nodes: list[tuple[Mapping[str, Any], str, int]] = []
        pending: list[tuple[Any, str, int]] = [(data, path, -1)]
        while pending:
            node, node_path, parent = pending.pop()
            node = _require_mapping(node, node_path)
            position = len(nodes)
            nodes.append((node, node_path, parent))
            children = list(enumerate(_optional_list(node, "suites", node_path)))
            pending.extend(
                (child, f"{node_path}.suites[{i}]", position) for i, child in reversed(children)
            )

        # Children sit after their parent, so build from the end
        built: list[list[Suite]] = [[] for _ in nodes]
        suite = None
        for position in range(len(nodes) - 1, -1, -1):
            node, node_path, parent = nodes[position]
            suite = cls(
                title=_require_title(node, node_path),
                specs=tuple(
                    Spec.from_dict(spec, f"{node_path}.specs[{i}]")
                    for i, spec in enumerate(_optional_list(node, "specs", node_path))
                ),
                suites=tuple(reversed(built[position])),
            )
            if parent >= 0:
                built[parent].append(suite)
        return suite


@dataclass(frozen=True)
class RawReport:
    """Parsed report document: root suites plus the raw run start time."""

    suites: tuple[Suite, ...]
    start_time: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RawReport:
        """Build the report tree.

        Raises:
            ReportFormatError: If a node does not have the expected shape.
        """
        suites = data.get("suites")
        if not isinstance(suites, list):
            raise ReportFormatError("'suites' must be a list", "suites")

        metadata: Any = {}
        config = data.get("config")
        if isinstance(config, Mapping) and isinstance(config.get("metadata"), Mapping):
            metadata = config["metadata"]

        return cls(
            suites=tuple(Suite.from_dict(s, f"suites[{i}]") for i, s in enumerate(suites)),
            start_time=metadata.get("actualStartTime"),
        )


# =============================================================================
# NORMALIZED OUTPUT
# =============================================================================


@dataclass(frozen=True)
class TestRecord:
    """A single test with its authoritative (final) attempt."""

    __test__ = False  # not a pytest class

    id: str
    title: str
    full_title: str
    suite_name: str
    status: str
    duration_ms: int
    error: ErrorDetail | None = None
    retry_count: int = 0
    file_path: str = ""
    project: str | None = None

    @property
    def bucket(self) -> str:
        """Normalized outcome: passed, failed, skipped or unknown."""
        return status_bucket(self.status)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "full_title": self.full_title,
            "suite_name": self.suite_name,
            "status": self.status,
            "bucket": self.bucket,
            "duration_ms": self.duration_ms,
            "error": self.error.to_dict() if self.error else None,
            "retry_count": self.retry_count,
            "file_path": self.file_path,
            "project": self.project,
        }


@dataclass(frozen=True)
class SuiteStats:
    """Aggregated counts for one resolved suite path."""

    name: str
    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    unknown: int = 0
    duration_ms: int = 0

    @property
    def short_name(self) -> str:
        """Last segment of the suite path (chart label)."""
        return self.name.split(SUITE_SEPARATOR)[-1]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "short_name": self.short_name,
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "unknown": self.unknown,
            "duration_ms": self.duration_ms,
        }


@dataclass(frozen=True)
class GlobalStats:
    """Run-wide counts, timing and derived rates."""

    total: int
    passed: int
    failed: int
    skipped: int
    unknown: int
    duration_ms: int
    start_time: datetime
    end_time: datetime
    pass_rate: int
    fail_rate: int
    skip_rate: int
    avg_duration: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "unknown": self.unknown,
            "duration_ms": self.duration_ms,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "pass_rate": self.pass_rate,
            "fail_rate": self.fail_rate,
            "skip_rate": self.skip_rate,
            "avg_duration": self.avg_duration,
        }


@dataclass(frozen=True)
class NormalizedReport:
    """Read-only snapshot produced by one normalization pass.

    ``is_fallback`` is True when the fixture dataset was served instead of
    real report data; ``fallback_reason`` then names the cause.
    """

    global_stats: GlobalStats
    suites: tuple[SuiteStats, ...] = field(default_factory=tuple)
    tests: tuple[TestRecord, ...] = field(default_factory=tuple)
    is_fallback: bool = False
    fallback_reason: str | None = None

    def by_status(self, bucket: str) -> tuple[TestRecord, ...]:
        """Tests whose status bucket matches; ``all`` returns every test."""
        from testboard.reports.queries import by_status

        return by_status(self.tests, bucket)

    def search(self, query: str | None) -> tuple[TestRecord, ...]:
        """Tests whose title or suite name contains ``query``, ignoring case."""
        from testboard.reports.queries import search

        return search(self.tests, query)

    def sort_by(self, column: str, direction: str = "asc") -> tuple[TestRecord, ...]:
        """Tests sorted by ``column``; ties keep their report order."""
        from testboard.reports.queries import sort_by

        return sort_by(self.tests, column, direction)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "global_stats": self.global_stats.to_dict(),
            "suites": [s.to_dict() for s in self.suites],
            "tests": [t.to_dict() for t in self.tests],
            "is_fallback": self.is_fallback,
            "fallback_reason": self.fallback_reason,
        }
