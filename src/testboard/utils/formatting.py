"""Stateless formatting and classification helpers.

The dashboard view calls these directly; they depend only on their input.
"""

from __future__ import annotations

import math
from datetime import datetime
from types import MappingProxyType

PASSED = "passed"
FAILED = "failed"
SKIPPED = "skipped"
UNKNOWN = "unknown"

BUCKETS = (PASSED, FAILED, SKIPPED, UNKNOWN)

# Raw statuses are compared verbatim (case-sensitive)
STATUS_BUCKETS: MappingProxyType[str, str] = MappingProxyType(
    {
        "passed": PASSED,
        "expected": PASSED,
        "failed": FAILED,
        "unexpected": FAILED,
        "skipped": SKIPPED,
        "pending": SKIPPED,
    }
)

STATUS_ICONS: MappingProxyType[str, str] = MappingProxyType(
    {
        PASSED: "check-circle",
        FAILED: "times-circle",
        SKIPPED: "forward",
        UNKNOWN: "question-circle",
    }
)


def status_bucket(status: str | None) -> str:
    """Map a raw attempt status onto passed/failed/skipped, or ``unknown``."""
    if status is None:
        return UNKNOWN
    return STATUS_BUCKETS.get(status, UNKNOWN)


def status_icon_key(status: str | None) -> str:
    """Return the icon key for a raw status (e.g. 'unexpected' -> 'times-circle')."""
    return STATUS_ICONS[status_bucket(status)]


def format_duration(ms: int | float) -> str:
    """Format a duration in milliseconds for display.

    Examples:
        >>> format_duration(450)
        '450ms'
        >>> format_duration(1500)
        '1.50s'
        >>> format_duration(125000)
        '2m 5s'
    """
    if ms < 1000:
        return f"{ms}ms"
    if ms < 60000:
        return f"{ms / 1000:.2f}s"
    minutes = int(ms // 60000)
    seconds = (ms % 60000) / 1000
    return f"{minutes}m {round_half_up(seconds)}s"


def format_timestamp(value: datetime | None) -> str:
    """Format a timestamp as e.g. ``Jan 15, 2024, 10:30:00 AM``; ``N/A`` for None."""
    if value is None:
        return "N/A"
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return (
        f"{value:%b} {value.day}, {value.year}, "
        f"{hour:02d}:{value.minute:02d}:{value.second:02d} {meridiem}"
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negatives."""
    return math.floor(value + 0.5)


def percentage(part: int, total: int) -> int:
    """Whole-number percentage of ``part`` in ``total``; 0 when total is 0."""
    if total == 0:
        return 0
    return round_half_up(part * 100 / total)
