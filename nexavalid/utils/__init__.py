"""
NexaValid Utils Package
=======================

Logging utilities.
"""

from __future__ import annotations

from nexavalid.utils.logger import (
    JsonFormatter,
    Logger,
    LogLevel,
    MemoryHandler,
    StreamHandler,
    TextFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    "Logger",
    "LogLevel",
    "TextFormatter",
    "JsonFormatter",
    "StreamHandler",
    "MemoryHandler",
    "get_logger",
    "configure_logging",
]
