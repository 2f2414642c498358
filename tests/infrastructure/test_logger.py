#!/usr/bin/env python3
"""Tests for the Logger module."""

import io
import logging

import pytest

from filefilter.infrastructure.logger import (
    Logger,
    LogLevel,
    configure_logging,
    get_logger,
    set_global_logger,
)


@pytest.fixture
def stream_logger():
    """Logger writing bare messages to an in-memory stream."""
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    logger = Logger(name="test.stream", level=LogLevel.DEBUG, handlers=[handler])
    return logger, stream


class TestLogLevel:
    """Tests for LogLevel enum."""

    def test_log_levels(self):
        """Test log level values match Python logging."""
        assert LogLevel.DEBUG == logging.DEBUG
        assert LogLevel.INFO == logging.INFO
        assert LogLevel.WARNING == logging.WARNING
        assert LogLevel.ERROR == logging.ERROR
        assert LogLevel.CRITICAL == logging.CRITICAL


class TestLogger:
    """Tests for Logger class."""

    def test_logger_creation(self):
        """Test creating a logger."""
        logger = Logger(name="test.create", level=LogLevel.DEBUG)
        assert logger.name == "test.create"
        assert logger.get_level() == LogLevel.DEBUG
        assert logger.logger.propagate is False

    def test_level_from_string(self):
        """Test levels given by name."""
        logger = Logger(name="test.level", level="warning")
        assert logger.get_level() == LogLevel.WARNING
        assert logger.is_enabled_for("error")
        assert not logger.is_enabled_for(LogLevel.INFO)

    def test_context_rendered(self, stream_logger):
        """Test keyword context is appended to the message."""
        logger, stream = stream_logger
        logger.info("Compiled glob", glob="*.jpg", regex="x")
        assert stream.getvalue().strip() == "INFO Compiled glob | glob=*.jpg regex=x"

    def test_message_without_context(self, stream_logger):
        """Test a message without context has no separator."""
        logger, stream = stream_logger
        logger.warning("Plain")
        assert stream.getvalue().strip() == "WARNING Plain"

    def test_context_block(self, stream_logger):
        """Test thread-local context applies inside the block only."""
        logger, stream = stream_logger
        with logger.add_context(filter_id="uploads"):
            logger.debug("Inside")
        logger.debug("Outside")

        lines = stream.getvalue().strip().splitlines()
        assert lines[0] == "DEBUG Inside | filter_id=uploads"
        assert lines[1] == "DEBUG Outside"

    def test_level_filters(self, stream_logger):
        """Test messages below the level are dropped."""
        logger, stream = stream_logger
        logger.set_level(LogLevel.ERROR)
        logger.info("Dropped")
        logger.error("Kept")
        assert stream.getvalue().strip() == "ERROR Kept"

    def test_exception(self, stream_logger):
        """Test exceptions are logged with their type and message."""
        logger, stream = stream_logger
        try:
            raise ValueError("bad size")
        except ValueError as e:
            logger.exception("Failed", e)

        output = stream.getvalue()
        assert "exception_type=ValueError" in output
        assert "exception_message=bad size" in output
        assert "Traceback" in output

    def test_file_handler(self, temp_dir):
        """Test logging to a rotating file."""
        logger = Logger(name="test.file", level=LogLevel.INFO, handlers=[])
        handler = logger.create_file_handler(temp_dir / "filefilter.log")
        logger.add_handler(handler)
        logger.info("To file", size=1024)
        handler.flush()
        logger.remove_handler(handler)
        handler.close()

        assert "To file | size=1024" in (temp_dir / "filefilter.log").read_text()


class TestRegistry:
    """Tests for the logger registry."""

    def test_get_logger_cached(self):
        """Test one logger per name."""
        assert get_logger("test.cached") is get_logger("test.cached")
        assert get_logger("test.cached") is not get_logger("test.other")

    def test_set_global_logger(self):
        """Test replacing a registered logger."""
        custom = Logger(name="test.custom", handlers=[])
        set_global_logger(custom)
        assert get_logger("test.custom") is custom

    def test_configure_logging(self):
        """Test the level applies to every registered logger."""
        first = get_logger("test.configure.a")
        second = get_logger("test.configure.b")
        configure_logging("ERROR")
        try:
            assert first.get_level() == LogLevel.ERROR
            assert second.get_level() == LogLevel.ERROR
        finally:
            configure_logging(LogLevel.INFO)
