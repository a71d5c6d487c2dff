"""
Shared fixtures.
"""

import os

import pytest

from nexavalid.core.config import reset_config
from nexavalid.utils.logger import LogLevel, MemoryHandler, StreamHandler, configure_logging
from nexavalid.validation import reset_email_checker, reset_password_checker


@pytest.fixture(autouse=True)
def default_checkers():
    """Every test starts and ends with the default checkers."""
    reset_password_checker()
    reset_email_checker()
    yield
    reset_password_checker()
    reset_email_checker()


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Drop cached configuration and NEXAVALID_* variables."""
    for key in list(os.environ):
        if key.startswith("NEXAVALID_"):
            monkeypatch.delenv(key)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def log_records():
    """Capture NexaValid log output at DEBUG level."""
    handler = MemoryHandler()
    configure_logging(level=LogLevel.DEBUG, handlers=[handler])
    yield handler
    configure_logging(level=LogLevel.WARNING, handlers=[StreamHandler()])
