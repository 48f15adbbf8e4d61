"""
Unit tests for src/utils/logging

This module tests structured logging configuration, including JSON
formatting, console formatting, context logging, and environment-based
configuration.
"""

import json
import logging
import logging.handlers
from unittest.mock import patch

import pytest

from src.utils.logging import (
    ConsoleFormatter,
    ContextLogger,
    JSONFormatter,
    configure_from_env,
    setup_logging,
)
from src.utils.logging.formatters import extra_fields


def _record(msg="Test message", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="/path/to/test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestJSONFormatter:
    """Test JSONFormatter class"""

    def test_init_with_defaults(self):
        """Test initialization with default parameters"""
        formatter = JSONFormatter()

        assert formatter.include_timestamp is True
        assert formatter.include_hostname is True
        assert formatter.app_name == "cashtag-tracker"
        assert formatter.hostname is not None

    def test_format_basic_log_record(self):
        """Test formatting a basic log record"""
        # Arrange
        formatter = JSONFormatter()

        # Act
        data = json.loads(formatter.format(_record()))

        # Assert
        assert data["level"] == "INFO"
        assert data["logger"] == "test_logger"
        assert data["message"] == "Test message"
        assert data["app"] == "cashtag-tracker"
        assert "timestamp" in data
        assert "hostname" in data
        assert data["source"]["file"] == "/path/to/test.py"
        assert data["source"]["line"] == 42

    def test_format_without_timestamp_and_hostname(self):
        """Test optional fields can be switched off"""
        formatter = JSONFormatter(include_timestamp=False, include_hostname=False)

        data = json.loads(formatter.format(_record()))

        assert "timestamp" not in data
        assert "hostname" not in data

    def test_format_with_extra_fields(self):
        """Test extra fields are collected under context"""
        formatter = JSONFormatter()

        data = json.loads(formatter.format(_record(cashtag="$FOO", added=2)))

        assert data["context"] == {"cashtag": "$FOO", "added": 2}

    def test_format_keeps_non_ascii(self):
        """Test non-ASCII message text is preserved"""
        formatter = JSONFormatter()

        result = formatter.format(_record(msg="Neu gefunden: $MÜNZE"))

        assert "$MÜNZE" in result

    def test_format_with_exception(self):
        """Test exception details are included"""
        formatter = JSONFormatter()
        try:
            raise ValueError("store unreadable")
        except ValueError:
            import sys
            exc_info = sys.exc_info()

        data = json.loads(formatter.format(_record(level=logging.ERROR, exc_info=exc_info)))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "store unreadable"
        assert any("ValueError" in line for line in data["exception"]["traceback"])


class TestConsoleFormatter:
    """Test ConsoleFormatter class"""

    def test_colors_disabled_off_tty(self):
        """Test colours are only used on a terminal"""
        with patch("sys.stderr.isatty", return_value=False):
            formatter = ConsoleFormatter(use_colors=True)

        assert formatter.use_colors is False

    def test_format_plain(self):
        """Test plain single-line output"""
        formatter = ConsoleFormatter(use_colors=False)

        result = formatter.format(_record())

        assert "[INFO] test_logger: Test message" in result

    def test_format_appends_context(self):
        """Test extra fields are appended as key=value pairs"""
        formatter = ConsoleFormatter(use_colors=False)

        result = formatter.format(_record(cycle=3, store="s.json"))

        assert result.endswith("[cycle=3, store=s.json]")

    def test_colors_do_not_leak_into_record(self):
        """Test levelname is restored after colouring"""
        formatter = ConsoleFormatter(use_colors=False)
        formatter.use_colors = True
        record = _record(level=logging.WARNING)

        result = formatter.format(record)

        assert ConsoleFormatter.COLORS["WARNING"] in result
        assert record.levelname == "WARNING"


class TestExtraFields:
    """Test extra_fields helper"""

    def test_ignores_standard_attributes(self):
        assert extra_fields(_record()) == {}

    def test_ignores_private_attributes(self):
        assert extra_fields(_record(_internal=1, public=2)) == {"public": 2}


class TestContextLogger:
    """Test ContextLogger class"""

    def test_context_attached(self, caplog):
        """Test context is attached to every message"""
        log = ContextLogger("test.context", cycle=1)

        with caplog.at_level(logging.INFO, logger="test.context"):
            log.info("Merged batch", added=2)

        record = caplog.records[0]
        assert record.cycle == 1
        assert record.added == 2
        assert record.getMessage() == "Merged batch"

    def test_bind_returns_new_logger(self):
        """Test bind does not mutate the original"""
        log = ContextLogger("test.context", cycle=1)

        bound = log.bind(store="s.json")

        assert bound.get_context() == {"cycle": 1, "store": "s.json"}
        assert log.get_context() == {"cycle": 1}

    def test_error_with_exc_info(self, caplog):
        """Test exc_info is forwarded"""
        log = ContextLogger("test.context")

        with caplog.at_level(logging.ERROR, logger="test.context"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                log.error("Cycle failed", exc_info=True)

        assert caplog.records[0].exc_info[0] is RuntimeError

    def test_get_context_is_copy(self):
        log = ContextLogger("test.context", cycle=1)

        log.get_context()["cycle"] = 99

        assert log.get_context() == {"cycle": 1}


class TestSetupLogging:
    """Test setup_logging function"""

    def test_console_handler(self, restore_root_logger):
        """Test a single console handler replaces existing handlers"""
        setup_logging(level="DEBUG")
        setup_logging(level="DEBUG")

        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, ConsoleFormatter)

    def test_json_console(self, restore_root_logger):
        """Test JSON format on the console"""
        setup_logging(json_format=True, app_name="tracker-test")

        formatter = restore_root_logger.handlers[0].formatter
        assert isinstance(formatter, JSONFormatter)
        assert formatter.app_name == "tracker-test"

    def test_file_handler(self, restore_root_logger, tmp_path):
        """Test rotating file output creates parent directories"""
        log_file = tmp_path / "logs" / "tracker.log"

        setup_logging(log_file=str(log_file), console_output=False)
        logging.getLogger("test.file").warning("written to file")
        for handler in restore_root_logger.handlers:
            handler.flush()

        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.handlers.RotatingFileHandler)
        assert "written to file" in log_file.read_text()

    def test_invalid_level_falls_back_to_info(self, restore_root_logger):
        setup_logging(level="CHATTY")

        assert restore_root_logger.level == logging.INFO

    def test_noisy_loggers_quieted(self, restore_root_logger):
        """Test third-party loggers stay at WARNING or above"""
        setup_logging(level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("apscheduler").level == logging.WARNING


class TestConfigureFromEnv:
    """Test configure_from_env function"""

    @patch("src.utils.logging.config.setup_logging")
    def test_defaults(self, mock_setup, monkeypatch):
        """Test defaults without environment variables"""
        for name in ("LOG_LEVEL", "LOG_FILE", "LOG_JSON", "LOG_CONSOLE"):
            monkeypatch.delenv(name, raising=False)

        configure_from_env()

        mock_setup.assert_called_once_with(
            level="INFO", log_file=None, console_output=True, json_format=False
        )

    @patch("src.utils.logging.config.setup_logging")
    def test_environment(self, mock_setup, monkeypatch):
        """Test LOG_* variables are honoured"""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_FILE", "/tmp/tracker.log")
        monkeypatch.setenv("LOG_JSON", "true")
        monkeypatch.setenv("LOG_CONSOLE", "0")

        configure_from_env()

        mock_setup.assert_called_once_with(
            level="DEBUG", log_file="/tmp/tracker.log", console_output=False, json_format=True
        )

    @patch("src.utils.logging.config.setup_logging")
    def test_arguments_override_environment(self, mock_setup, monkeypatch):
        """Test explicit arguments win over the environment"""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_JSON", "true")

        configure_from_env(level="ERROR", json_format=False)

        kwargs = mock_setup.call_args.kwargs
        assert kwargs["level"] == "ERROR"
        assert kwargs["json_format"] is False
