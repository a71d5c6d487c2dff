"""
NexaValid Logger
================

Structured logging with pluggable handlers.

Library modules obtain a named logger with `get_logger`. Nothing is
printed below WARNING until the application calls
`configure_logging`.
"""

from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional

import orjson


class LogLevel(IntEnum):
    """Log levels."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def parse(cls, value: Any) -> LogLevel:
        """Accept a LogLevel, an int or a level name."""
        if isinstance(value, LogLevel):
            return value
        if isinstance(value, int):
            return cls(value)
        return cls[str(value).strip().upper()]


@dataclass
class LogRecord:
    """
    Structured log record.

    Attributes:
        level: Log level
        message: Log message
        timestamp: Record timestamp
        context: Additional context
        exception: Exception info
    """

    level: LogLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[BaseException] = None
    logger_name: str = "nexavalid"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "message": self.message,
            "logger": self.logger_name,
        }

        if self.context:
            data["context"] = self.context

        if self.exception:
            data["exception"] = {
                "type": type(self.exception).__name__,
                "message": str(self.exception),
                "traceback": traceback.format_exception(
                    type(self.exception),
                    self.exception,
                    self.exception.__traceback__,
                ),
            }

        return data

    def to_json(self) -> str:
        """Convert to JSON string."""
        return orjson.dumps(self.to_dict(), default=str).decode()


class LogFormatter:
    """Base log formatter."""

    def format(self, record: LogRecord) -> str:
        raise NotImplementedError


class TextFormatter(LogFormatter):
    """
    Plain text formatter.

    Example output:
        2024-01-15 10:30:45 [DEBUG] nexavalid.validator: Validated record record=SignupForm violations=2
    """

    def __init__(
        self,
        format_string: Optional[str] = None,
        date_format: str = "%Y-%m-%d %H:%M:%S",
    ):
        self.format_string = format_string or "{timestamp} [{level}] {logger}: {message}"
        self.date_format = date_format

    def format(self, record: LogRecord) -> str:
        message = record.message

        # Context as key=value pairs
        if record.context:
            context_str = " ".join(f"{k}={v}" for k, v in record.context.items())
            message = f"{message} {context_str}"

        output = self.format_string.format(
            timestamp=record.timestamp.strftime(self.date_format),
            level=record.level.name,
            message=message,
            logger=record.logger_name,
        )

        if record.exception:
            output += "\n" + "".join(
                traceback.format_exception(
                    type(record.exception),
                    record.exception,
                    record.exception.__traceback__,
                )
            )

        return output


class JsonFormatter(LogFormatter):
    """JSON formatter, one object per line."""

    def format(self, record: LogRecord) -> str:
        return record.to_json()


class LogHandler:
    """Base log handler."""

    def __init__(
        self,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        self.formatter = formatter or TextFormatter()
        self.level = level

    def handle(self, record: LogRecord) -> None:
        if record.level >= self.level:
            self.emit(record)

    def emit(self, record: LogRecord) -> None:
        raise NotImplementedError


class StreamHandler(LogHandler):
    """Stream output handler."""

    def __init__(
        self,
        stream: Any = None,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        super().__init__(formatter, level)
        self.stream = stream

    def emit(self, record: LogRecord) -> None:
        # Resolved per call so redirected/captured stderr is honoured
        stream = self.stream or sys.stderr
        stream.write(self.formatter.format(record) + "\n")
        stream.flush()


class MemoryHandler(LogHandler):
    """Keeps records in a list. Handy in tests."""

    def __init__(self, level: LogLevel = LogLevel.DEBUG):
        super().__init__(level=level)
        self.records: List[LogRecord] = []

    def emit(self, record: LogRecord) -> None:
        self.records.append(record)

    def messages(self) -> List[str]:
        return [r.message for r in self.records]


class Logger:
    """
    Structured logger.

    Example:
        logger = get_logger("nexavalid.validator")

        logger.debug("Validated record", record="SignupForm", violations=0)
        logger.error("Request failed", exception=e, url=url)

        # With context
        logger = logger.with_context(request_id="abc123")
    """

    def __init__(
        self,
        name: str = "nexavalid",
        level: LogLevel = LogLevel.WARNING,
        handlers: Optional[List[LogHandler]] = None,
    ):
        self.name = name
        self.level = level
        self._handlers = handlers if handlers is not None else []
        self._context: Dict[str, Any] = {}

    @property
    def handlers(self) -> List[LogHandler]:
        return list(self._handlers)

    def add_handler(self, handler: LogHandler) -> Logger:
        self._handlers.append(handler)
        return self

    def remove_handler(self, handler: LogHandler) -> Logger:
        self._handlers.remove(handler)
        return self

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def with_context(self, **context: Any) -> Logger:
        """
        Create logger with additional context.

        The child shares handlers with its parent.
        """
        new_logger = Logger(name=self.name, level=self.level, handlers=self._handlers)
        new_logger._context = {**self._context, **context}
        return new_logger

    def _log(
        self,
        level: LogLevel,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        if level < self.level:
            return

        record = LogRecord(
            level=level,
            message=message,
            context={**self._context, **context},
            exception=exception,
            logger_name=self.name,
        )

        for handler in self._handlers:
            try:
                handler.handle(record)
            except Exception:
                pass  # Don't let logging errors break validation

    def debug(self, message: str, **context: Any) -> None:
        self._log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(LogLevel.WARNING, message, **context)

    def error(
        self,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        self._log(LogLevel.ERROR, message, exception, **context)

    def critical(
        self,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        self._log(LogLevel.CRITICAL, message, exception, **context)


# Global logger registry
_loggers: Dict[str, Logger] = {}
_default_level = LogLevel.WARNING
_default_handlers: List[LogHandler] = [StreamHandler()]


def get_logger(name: str = "nexavalid") -> Logger:
    """
    Get or create logger.

    All registered loggers share the handler list installed by
    `configure_logging`.
    """
    if name not in _loggers:
        _loggers[name] = Logger(name=name, level=_default_level, handlers=_default_handlers)
    return _loggers[name]


def configure_logging(
    level: Any = LogLevel.INFO,
    format: str = "text",
    stream: Any = None,
    handlers: Optional[List[LogHandler]] = None,
) -> Logger:
    """
    Configure every NexaValid logger.

    Args:
        level: Log level (LogLevel, int or name)
        format: Output format ("text" or "json")
        stream: Stream for the default handler (stderr if None)
        handlers: Replace the default stream handler entirely

    Returns:
        The root "nexavalid" logger
    """
    global _default_level

    _default_level = LogLevel.parse(level)

    if handlers is None:
        formatter = JsonFormatter() if format == "json" else TextFormatter()
        handlers = [StreamHandler(stream=stream, formatter=formatter)]

    # Shared list: update in place so existing loggers pick it up
    _default_handlers[:] = handlers

    for logger in _loggers.values():
        logger.level = _default_level

    return get_logger("nexavalid")
