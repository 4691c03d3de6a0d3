"""Tests for the stateless formatting helpers."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from testboard.utils.formatting import (
    format_duration,
    format_timestamp,
    percentage,
    round_half_up,
    status_bucket,
    status_icon_key,
)


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        "ms,expected",
        [
            (0, "0ms"),
            (999, "999ms"),
            (1000, "1.00s"),
            (1500, "1.50s"),
            (59_990, "59.99s"),
            (60_000, "1m 0s"),
            (125_000, "2m 5s"),
            (62_500, "1m 3s"),
            (64_500, "1m 5s"),
            (3_725_000, "62m 5s"),
        ],
    )
    def test_format_duration(self, ms: int, expected: str):
        assert format_duration(ms) == expected


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_none_is_not_available(self):
        assert format_timestamp(None) == "N/A"

    def test_morning(self):
        value = datetime(2024, 1, 15, 10, 30, 0, tzinfo=UTC)
        assert format_timestamp(value) == "Jan 15, 2024, 10:30:00 AM"

    def test_afternoon(self):
        value = datetime(2024, 3, 5, 13, 5, 9, tzinfo=UTC)
        assert format_timestamp(value) == "Mar 5, 2024, 01:05:09 PM"

    def test_midnight_and_noon(self):
        assert format_timestamp(datetime(2024, 1, 1, 0, 0, 0)) == "Jan 1, 2024, 12:00:00 AM"
        assert format_timestamp(datetime(2024, 1, 1, 12, 0, 0)) == "Jan 1, 2024, 12:00:00 PM"


class TestStatusBucket:
    """Tests for status_bucket and status_icon_key."""

    @pytest.mark.parametrize(
        "status,bucket",
        [
            ("passed", "passed"),
            ("expected", "passed"),
            ("failed", "failed"),
            ("unexpected", "failed"),
            ("skipped", "skipped"),
            ("pending", "skipped"),
            ("PASSED", "unknown"),
            ("timedOut", "unknown"),
            ("", "unknown"),
            (None, "unknown"),
        ],
    )
    def test_status_bucket(self, status, bucket):
        assert status_bucket(status) == bucket

    @pytest.mark.parametrize(
        "status,icon",
        [
            ("expected", "check-circle"),
            ("unexpected", "times-circle"),
            ("pending", "forward"),
            ("interrupted", "question-circle"),
        ],
    )
    def test_status_icon_key(self, status, icon):
        assert status_icon_key(status) == icon


class TestRounding:
    """Tests for percentage and round_half_up."""

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.49) == 2

    def test_percentage(self):
        assert percentage(1, 8) == 13
        assert percentage(2, 3) == 67
        assert percentage(5, 5) == 100

    def test_percentage_of_zero_total(self):
        assert percentage(0, 0) == 0
