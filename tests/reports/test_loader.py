"""Tests for loading reports from files and URLs."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
from structlog.testing import capture_logs

from testboard.reports import FALLBACK_TOTAL_TESTS, ReportNormalizer, load_and_normalize
from testboard.reports.loader import is_url, load_report

from tests.factories import make_mixed_report

REPORT_URL = "https://ci.example.com/artifacts/test-results.json"


def _patch_transport(mocker, handler) -> None:
    """Route every AsyncClient created by the loader through a mock transport."""
    real_client = httpx.AsyncClient

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    mocker.patch("testboard.reports.loader.httpx.AsyncClient", side_effect=client_factory)


@pytest.fixture
def report_file(tmp_path: Path) -> Path:
    path = tmp_path / "test-results.json"
    path.write_text(json.dumps(make_mixed_report()), encoding="utf-8")
    return path


class TestIsUrl:
    """Tests for source type detection."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("https://example.com/report.json", True),
            ("http://localhost:8080/report.json", True),
            ("./test-results.json", False),
            ("/tmp/report.json", False),
            ("httpfiles/report.json", False),
        ],
    )
    def test_is_url(self, source: str, expected: bool):
        assert is_url(source) is expected


class TestLoadReportFromFile:
    """Loading from the local filesystem."""

    @pytest.mark.asyncio
    async def test_loads_valid_file(self, report_file: Path):
        result = await load_report(report_file)

        assert result.ok
        assert result.error_cause is None
        assert result.data["suites"][0]["title"] == "checkout.spec.ts"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path):
        with capture_logs() as logs:
            result = await load_report(tmp_path / "absent.json")

        assert not result.ok
        assert result.error_cause == "not_found"
        assert logs[0]["event"] == "report_load_not_found"
        assert logs[0]["log_level"] == "warning"

    @pytest.mark.asyncio
    async def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with capture_logs() as logs:
            result = await load_report(path)

        assert result.error_cause == "invalid_json"
        assert logs[0]["event"] == "report_load_invalid_json"

    @pytest.mark.asyncio
    async def test_json_array_is_rejected(self, tmp_path: Path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        result = await load_report(path)

        assert result.error_cause == "not_an_object"


class TestLoadReportFromUrl:
    """Loading over HTTP."""

    @pytest.mark.asyncio
    async def test_successful_fetch(self, mocker):
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == REPORT_URL
            return httpx.Response(200, json={"suites": []})

        _patch_transport(mocker, handler)

        result = await load_report(REPORT_URL)

        assert result.data == {"suites": []}

    @pytest.mark.asyncio
    async def test_not_found(self, mocker):
        _patch_transport(mocker, lambda request: httpx.Response(404))

        result = await load_report(REPORT_URL)

        assert result.error_cause == "not_found"

    @pytest.mark.asyncio
    async def test_server_error(self, mocker):
        _patch_transport(mocker, lambda request: httpx.Response(503))

        with capture_logs() as logs:
            result = await load_report(REPORT_URL)

        assert result.error_cause == "http_status"
        assert logs[0]["event"] == "report_load_http_status"
        assert logs[0]["status_code"] == 503

    @pytest.mark.asyncio
    async def test_connection_error(self, mocker):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        _patch_transport(mocker, handler)

        result = await load_report(REPORT_URL)

        assert result.error_cause == "request_failed"

    @pytest.mark.asyncio
    async def test_non_json_body(self, mocker):
        _patch_transport(mocker, lambda request: httpx.Response(200, text="<html></html>"))

        result = await load_report(REPORT_URL)

        assert result.error_cause == "invalid_json"


class TestLoadAndNormalize:
    """Loading feeds the normalizer; failures produce fixture data."""

    @pytest.mark.asyncio
    async def test_real_report(self, report_file: Path, normalizer: ReportNormalizer):
        report = await load_and_normalize(report_file, normalizer=normalizer)

        assert report.is_fallback is False
        assert report.global_stats.total == 5

    @pytest.mark.asyncio
    async def test_missing_file_falls_back(self, tmp_path: Path, normalizer: ReportNormalizer):
        report = await load_and_normalize(tmp_path / "absent.json", normalizer=normalizer)

        assert report.is_fallback is True
        assert report.fallback_reason == "load_not_found"
        assert report.global_stats.total == FALLBACK_TOTAL_TESTS

    @pytest.mark.asyncio
    async def test_http_failure_falls_back(self, mocker, normalizer: ReportNormalizer):
        _patch_transport(mocker, lambda request: httpx.Response(500))

        report = await load_and_normalize(REPORT_URL, normalizer=normalizer)

        assert report.is_fallback is True
        assert report.fallback_reason == "load_http_status"

    @pytest.mark.asyncio
    async def test_report_without_suites_falls_back(self, tmp_path: Path):
        path = tmp_path / "empty.json"
        path.write_text('{"config": {}}', encoding="utf-8")

        report = await load_and_normalize(path)

        assert report.is_fallback is True
        assert report.fallback_reason == "report_without_suites"
