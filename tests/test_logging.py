"""Tests for structured logging configuration."""

from __future__ import annotations

import json
from io import StringIO

from testboard.logging import configure_logging, get_logger


class TestLoggingConfig:
    """Test suite for logging configuration."""

    def test_logger_outputs_json_format(self):
        # Given
        output = StringIO()
        configure_logging(log_level="INFO", json_format=True, stream=output)
        logger = get_logger("test")

        # When
        logger.info("test message", key="value")

        # Then
        parsed = json.loads(output.getvalue().strip())
        assert parsed["event"] == "test message"
        assert parsed["key"] == "value"
        assert parsed["level"] == "info"
        assert parsed["logger_name"] == "test"
        assert "timestamp" in parsed

    def test_level_filtering(self):
        output = StringIO()
        configure_logging(log_level="WARNING", json_format=True, stream=output)
        logger = get_logger("test")

        logger.info("hidden")
        logger.warning("shown")

        lines = output.getvalue().strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["event"] == "shown"

    def test_console_format(self):
        output = StringIO()
        configure_logging(log_level="INFO", json_format=False, stream=output)

        get_logger("test").warning("console message")

        assert "console message" in output.getvalue()

    def test_module_logger_follows_later_configuration(self):
        # Given - a logger created before logging is configured
        logger = get_logger("early")
        output = StringIO()

        # When
        configure_logging(log_level="INFO", json_format=True, stream=output)
        logger.info("after configure")

        # Then
        parsed = json.loads(output.getvalue().strip())
        assert parsed["event"] == "after configure"
        assert parsed["logger_name"] == "early"
