"""Read-only queries over normalized test records.

All functions accept any sequence of TestRecord and return a new tuple; the
input is never modified.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from testboard.reports.models import TestRecord
from testboard.utils.formatting import BUCKETS

ALL = "all"
SORT_DIRECTIONS = ("asc", "desc")

SORT_KEYS: dict[str, Callable[[TestRecord], Any]] = {
    "title": lambda record: record.title.lower(),
    "suite": lambda record: record.suite_name.lower(),
    "status": lambda record: record.status,
    "duration": lambda record: record.duration_ms,
}


def by_status(tests: Sequence[TestRecord], bucket: str) -> tuple[TestRecord, ...]:
    """Filter records by normalized bucket; ``"all"`` returns every record.

    Raises:
        ValueError: If bucket is not one of all/passed/failed/skipped/unknown.
    """
    if bucket == ALL:
        return tuple(tests)
    if bucket not in BUCKETS:
        raise ValueError(f"Unknown status filter: {bucket!r}")
    return tuple(record for record in tests if record.bucket == bucket)


def search(tests: Sequence[TestRecord], query: str | None) -> tuple[TestRecord, ...]:
    """Case-insensitive substring match on test title or suite name."""
    if not query:
        return tuple(tests)
    needle = query.lower()
    return tuple(
        record
        for record in tests
        if needle in record.title.lower() or needle in record.suite_name.lower()
    )


def sort_by(
    tests: Sequence[TestRecord], column: str, direction: str = "asc"
) -> tuple[TestRecord, ...]:
    """Stable sort by title, suite, status or duration.

    Records that compare equal keep their original relative order in both
    directions.

    Raises:
        ValueError: If column or direction is not supported.
    """
    key = SORT_KEYS.get(column)
    if key is None:
        raise ValueError(f"Unknown sort column: {column!r}")
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"Unknown sort direction: {direction!r}")
    return tuple(sorted(tests, key=key, reverse=direction == "desc"))


def filter_tests(
    tests: Sequence[TestRecord],
    status: str = ALL,
    query: str | None = None,
    sort: str | None = None,
    direction: str = "asc",
) -> tuple[TestRecord, ...]:
    """Apply search, status filter and optional sort, as the results table does."""
    result = by_status(search(tests, query), status)
    if sort:
        result = sort_by(result, sort, direction)
    return result


def find_test(tests: Sequence[TestRecord], test_id: str) -> TestRecord | None:
    """Return the record with the given id, or None."""
    return next((record for record in tests if record.id == test_id), None)
