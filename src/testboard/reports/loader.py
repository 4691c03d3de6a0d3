"""One-shot loading of a JSON report from a file or an HTTP(S) URL.

Load failures are not retried. Each cause is logged under its own event name
and then handed to the normalizer as "no report", which serves the fixture
dataset.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from testboard.exceptions import ReportLoadError
from testboard.logging import get_logger
from testboard.reports.models import NormalizedReport
from testboard.reports.normalizer import ReportNormalizer

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0

# Load failure causes
CAUSE_NOT_FOUND = "not_found"
CAUSE_HTTP_STATUS = "http_status"
CAUSE_REQUEST_FAILED = "request_failed"
CAUSE_READ_FAILED = "read_failed"
CAUSE_INVALID_JSON = "invalid_json"
CAUSE_NOT_AN_OBJECT = "not_an_object"


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a load: parsed data, or the cause of the failure."""

    data: dict[str, Any] | None = None
    error_cause: str | None = None

    @property
    def ok(self) -> bool:
        return self.data is not None


def is_url(source: str) -> bool:
    """Check whether the source should be fetched over HTTP."""
    return source.startswith(("http://", "https://"))


async def _fetch_bytes(url: str, timeout: float) -> bytes:
    async with httpx.AsyncClient(follow_redirects=True) as client:
        try:
            response = await client.get(url, timeout=timeout)
        except httpx.RequestError as e:
            raise ReportLoadError(f"Request failed: {e}", CAUSE_REQUEST_FAILED) from e

        if response.status_code == 404:
            raise ReportLoadError("Report not found", CAUSE_NOT_FOUND, status_code=404)
        if response.status_code >= 400:
            raise ReportLoadError(
                f"Report request failed: {response.status_code} {response.reason_phrase}",
                CAUSE_HTTP_STATUS,
                status_code=response.status_code,
            )
        return response.content


def _read_bytes(path: Path) -> bytes:
    if not path.is_file():
        raise ReportLoadError(f"Report file not found: {path}", CAUSE_NOT_FOUND)
    try:
        return path.read_bytes()
    except OSError as e:
        raise ReportLoadError(f"Cannot read report file: {e}", CAUSE_READ_FAILED) from e


def _decode(content: bytes) -> dict[str, Any]:
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ReportLoadError(f"Invalid JSON in report: {e}", CAUSE_INVALID_JSON) from e
    if not isinstance(data, dict):
        raise ReportLoadError("Report JSON is not an object", CAUSE_NOT_AN_OBJECT)
    return data


async def load_report(source: str | Path, *, timeout: float = DEFAULT_TIMEOUT) -> LoadResult:
    """
    Load and parse a report without raising.

    Args:
        source: Path to a report file, or an http(s) URL.
        timeout: HTTP timeout in seconds (ignored for files).

    Returns:
        LoadResult with the parsed document, or with ``error_cause`` set.
    """
    source_str = str(source)
    try:
        if is_url(source_str):
            content = await _fetch_bytes(source_str, timeout)
        else:
            content = _read_bytes(Path(source))
        data = _decode(content)
    except ReportLoadError as e:
        logger.warning(
            f"report_load_{e.cause}",
            source=source_str,
            error=str(e),
            status_code=e.status_code,
        )
        return LoadResult(error_cause=e.cause)

    logger.info("report_loaded", source=source_str)
    return LoadResult(data=data)


async def load_and_normalize(
    source: str | Path,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    normalizer: ReportNormalizer | None = None,
) -> NormalizedReport:
    """Load a report and normalize it; load failures produce fixture data."""
    normalizer = normalizer or ReportNormalizer()
    result = await load_report(source, timeout=timeout)
    if not result.ok:
        return normalizer.fallback(f"load_{result.error_cause}")
    return normalizer.normalize(result.data)
