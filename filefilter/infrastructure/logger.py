#!/usr/bin/env python3
"""Structured logging for filefilter.

Thin wrapper around the standard :mod:`logging` module that renders
key-value context after the message:

    Compiled glob pattern | glob=*.jpg regex=^[^/]*\\.jpg$

Features:
- Log levels matching Python's logging module
- Keyword context per call plus thread-local context blocks
- Console handler by default, optional rotating file handler
- One cached Logger per name

Example:
    >>> logger = get_logger("filefilter.rules")
    >>> logger.debug("Parsed predicate", predicate="> 1 KB", clauses=1)
    >>> with logger.add_context(filter_id="uploads"):
    ...     logger.info("Filter configured")
"""

import logging
import logging.handlers
import threading
from contextlib import contextmanager
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class LogLevel(IntEnum):
    """Log levels matching Python's logging module."""

    DEBUG = logging.DEBUG  # 10
    INFO = logging.INFO  # 20
    WARNING = logging.WARNING  # 30
    ERROR = logging.ERROR  # 40
    CRITICAL = logging.CRITICAL  # 50


class Logger:
    """Structured logger with context support."""

    # Thread-local storage for context
    _context_stack = threading.local()

    def __init__(
        self,
        name: str = "filefilter",
        level: Union[LogLevel, str] = LogLevel.INFO,
        handlers: Optional[List[logging.Handler]] = None,
    ):
        """Initialize logger.

        Args:
            name: Logger name for identification
            level: Minimum log level to output
            handlers: Optional list of logging handlers
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self.set_level(level)

        if handlers is None:
            handlers = [self._create_console_handler()]

        self.logger.handlers.clear()
        for handler in handlers:
            self.logger.addHandler(handler)

        # Prevent duplicate output through the root logger
        self.logger.propagate = False

    def _create_console_handler(self) -> logging.StreamHandler:
        """Create default console handler with formatting."""
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT))
        return handler

    def create_file_handler(
        self,
        filename: Union[str, Path],
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
    ) -> logging.handlers.RotatingFileHandler:
        """Create rotating file handler.

        Args:
            filename: Path to log file
            max_bytes: Maximum size before rotation
            backup_count: Number of backup files to keep

        Returns:
            Configured rotating file handler
        """
        handler = logging.handlers.RotatingFileHandler(
            filename, maxBytes=max_bytes, backupCount=backup_count
        )
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT))
        return handler

    def add_handler(self, handler: logging.Handler) -> None:
        self.logger.addHandler(handler)

    def remove_handler(self, handler: logging.Handler) -> None:
        self.logger.removeHandler(handler)

    def set_level(self, level: Union[LogLevel, str]) -> None:
        """Set the minimum log level.

        Args:
            level: New log level (LogLevel or string)
        """
        if isinstance(level, str):
            level = LogLevel[level.upper()]
        self.logger.setLevel(level)

    def get_level(self) -> LogLevel:
        return LogLevel(self.logger.level)

    def _get_context(self) -> Dict[str, Any]:
        """Merge all thread-local context levels."""
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        context: Dict[str, Any] = {}
        for ctx in self._context_stack.stack:
            context.update(ctx)
        return context

    def _format_message(self, msg: str, context: Dict[str, Any]) -> str:
        if context:
            ctx_str = " ".join(f"{k}={v}" for k, v in context.items())
            return f"{msg} | {ctx_str}"
        return msg

    @contextmanager
    def add_context(self, **kwargs):
        """Context manager to add temporary context.

        Example:
            >>> with logger.add_context(filter_id="uploads"):
            ...     logger.info("Checking name")
        """
        if not hasattr(self._context_stack, "stack"):
            self._context_stack.stack = [{}]

        self._context_stack.stack.append(kwargs)
        try:
            yield
        finally:
            self._context_stack.stack.pop()

    def _log(self, level: LogLevel, msg: str, context: Dict[str, Any], **kwargs) -> None:
        if not self.logger.isEnabledFor(level):
            return
        combined_context = self._get_context()
        combined_context.update(context)
        formatted_msg = self._format_message(msg, combined_context)
        self.logger.log(level, formatted_msg, extra={"context": combined_context}, **kwargs)

    def debug(self, msg: str, **context) -> None:
        self._log(LogLevel.DEBUG, msg, context)

    def info(self, msg: str, **context) -> None:
        self._log(LogLevel.INFO, msg, context)

    def warning(self, msg: str, **context) -> None:
        self._log(LogLevel.WARNING, msg, context)

    def error(self, msg: str, **context) -> None:
        self._log(LogLevel.ERROR, msg, context)

    def exception(self, msg: str, exc: Exception, **context) -> None:
        """Log exception with traceback.

        Args:
            msg: Log message
            exc: Exception to log
            **context: Additional context key-value pairs
        """
        context["exception_type"] = type(exc).__name__
        context["exception_message"] = str(exc)
        self._log(LogLevel.ERROR, msg, context, exc_info=exc)

    def is_enabled_for(self, level: Union[LogLevel, str]) -> bool:
        if isinstance(level, str):
            level = LogLevel[level.upper()]
        return self.logger.isEnabledFor(level)


# Logger instances by name
_loggers: Dict[str, Logger] = {}
_loggers_lock = threading.Lock()


def get_logger(name: str = "filefilter") -> Logger:
    """Get or create the logger registered under ``name``.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    with _loggers_lock:
        logger = _loggers.get(name)
        if logger is None:
            logger = Logger(name=name)
            _loggers[name] = logger
        return logger


def set_global_logger(logger: Logger) -> None:
    """Register ``logger`` under its own name, replacing any previous one."""
    with _loggers_lock:
        _loggers[logger.name] = logger


def configure_logging(
    level: Union[LogLevel, str] = LogLevel.INFO, filename: Optional[Union[str, Path]] = None
) -> None:
    """Apply a level, and optionally a log file, to every registered logger.

    Args:
        level: Minimum log level
        filename: Optional path of a rotating log file
    """
    with _loggers_lock:
        loggers = list(_loggers.values())

    for logger in loggers:
        logger.set_level(level)
        if filename is not None:
            logger.add_handler(logger.create_file_handler(filename))
