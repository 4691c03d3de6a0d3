"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
import structlog

from testboard.config import get_settings
from testboard.reports import ReportNormalizer

from tests.factories import FIXED_NOW, make_mixed_report

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def reset_logging_and_settings() -> Generator[None, None, None]:
    """Undo any logging configuration or cached settings a test created."""
    yield
    structlog.reset_defaults()
    get_settings.cache_clear()


@pytest.fixture
def normalizer() -> ReportNormalizer:
    """Normalizer with a fixed clock."""
    return ReportNormalizer(clock=lambda: FIXED_NOW)


@pytest.fixture
def mixed_report_data() -> dict[str, Any]:
    """Nested report covering every bucket (see factories.make_mixed_report)."""
    return make_mixed_report()
