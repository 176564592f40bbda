"""Tests for logging configuration."""

import json
import logging
import sys
from unittest.mock import patch

from vectorsearch.config import Environment, Settings
from vectorsearch.logging_config import (
    DevFormatter,
    JSONFormatter,
    get_logger,
    setup_logging,
)


def _record(**overrides: object) -> logging.LogRecord:
    fields: dict[str, object] = {
        "name": "test",
        "level": logging.INFO,
        "pathname": "test.py",
        "lineno": 10,
        "msg": "Test message",
        "args": (),
        "exc_info": None,
    }
    fields.update(overrides)
    return logging.LogRecord(**fields)  # type: ignore[arg-type]


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_format_basic_message(self) -> None:
        """Basic log message is formatted as JSON."""
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "Test message"
        assert "timestamp" in data
        assert "extra" not in data

    def test_format_includes_file_info(self) -> None:
        """Log includes file and line information."""
        record = _record(pathname="/app/module.py", lineno=42)
        data = json.loads(JSONFormatter().format(record))
        assert data["file"] == "/app/module.py:42"

    def test_format_includes_extra_fields(self) -> None:
        """Fields passed via extra= are collected."""
        record = _record()
        record.collection = "hotels"
        data = json.loads(JSONFormatter().format(record))
        assert data["extra"] == {"collection": "hotels"}

    def test_format_with_exception(self) -> None:
        """Exception info is included in output."""
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(_record(exc_info=exc_info)))
        assert "ValueError" in data["exception"]


class TestDevFormatter:
    """Tests for development formatter."""

    def test_format_includes_level(self) -> None:
        """Development format includes level, logger and message."""
        record = _record(name="vectorsearch.loader", level=logging.WARNING, msg="Batch 2 had errors")
        output = DevFormatter().format(record)

        assert "WARNING" in output
        assert "vectorsearch.loader" in output
        assert "Batch 2 had errors" in output


class TestSetupLogging:
    """Tests for logging setup."""

    def test_returns_root_logger(self) -> None:
        """setup_logging returns root logger."""
        assert setup_logging(level="INFO", json_output=False) is logging.getLogger()

    def test_uses_json_in_production(self) -> None:
        """JSON output is used in production environment."""
        mock_settings = Settings(environment=Environment.PRODUCTION)

        with patch("vectorsearch.logging_config.get_settings", return_value=mock_settings):
            setup_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_uses_dev_formatter_in_development(self) -> None:
        """Dev formatter is used in development environment."""
        mock_settings = Settings(environment=Environment.DEVELOPMENT)

        with patch("vectorsearch.logging_config.get_settings", return_value=mock_settings):
            setup_logging()

        assert isinstance(logging.getLogger().handlers[0].formatter, DevFormatter)

    def test_level_override(self) -> None:
        """Log level can be overridden."""
        setup_logging(level="DEBUG", json_output=False)
        assert logging.getLogger().level == logging.DEBUG

    def test_quiets_driver_loggers(self) -> None:
        """Driver and SDK loggers are raised to WARNING."""
        setup_logging(level="DEBUG", json_output=False)
        assert logging.getLogger("pymongo").level == logging.WARNING
        assert logging.getLogger("azure").level == logging.WARNING


class TestGetLogger:
    """Tests for named logger retrieval."""

    def test_returns_named_logger(self) -> None:
        """get_logger returns a logger with the given name."""
        assert get_logger("vectorsearch.records").name == "vectorsearch.records"
