"""Unit tests for logging configuration."""

import logging
from pathlib import Path

import pytest
import structlog

from initplan.observability.logger import (
    TRACE,
    VERBOSE,
    LogContext,
    configure_logging,
    get_log_level,
)


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore default structlog configuration after each test."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    logging.basicConfig(force=True, level=logging.WARNING)


class TestLogLevels:
    """Test level name mapping."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("TRACE", TRACE),
            ("debug", logging.DEBUG),
            ("VERBOSE", VERBOSE),
            ("INFO", logging.INFO),
            ("warning", logging.WARNING),
            ("nonsense", logging.INFO),
        ],
    )
    def test_get_log_level(self, name, expected):
        """Test level names map to numbers, unknown names to INFO."""
        assert get_log_level(name) == expected

    def test_custom_level_names(self):
        """Test custom levels are registered with the logging module."""
        assert logging.getLevelName(TRACE) == "TRACE"
        assert logging.getLevelName(VERBOSE) == "VERBOSE"


class TestLoggingConfiguration:
    """Test configure_logging."""

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR"])
    def test_configure_logging_levels(self, level):
        """Test root logger level follows the configured level."""
        configure_logging(level=level)

        assert logging.getLogger().level == getattr(logging, level)

    def test_configure_logging_json(self):
        """Test JSON rendering is selected."""
        configure_logging(json_logs=True)

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_configure_logging_console(self):
        """Test console rendering is the default."""
        configure_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_configure_logging_with_file(self, tmp_path: Path):
        """Test a file handler is attached and its directory created."""
        log_file = tmp_path / "logs" / "init.log"

        configure_logging(log_file=log_file)

        handlers = logging.getLogger().handlers
        assert any(isinstance(h, logging.FileHandler) for h in handlers)
        assert log_file.parent.exists()


class TestLogContext:
    """Test LogContext."""

    def test_binds_and_restores(self):
        """Test values are bound inside the block and removed afterwards."""
        with LogContext(initializer="app"):
            assert structlog.contextvars.get_contextvars()["initializer"] == "app"

        assert "initializer" not in structlog.contextvars.get_contextvars()

    def test_nested_restores_outer_value(self):
        """Test nested contexts restore the outer binding."""
        with LogContext(stage="outer"):
            with LogContext(stage="inner"):
                assert structlog.contextvars.get_contextvars()["stage"] == "inner"
            assert structlog.contextvars.get_contextvars()["stage"] == "outer"
