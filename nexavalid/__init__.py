"""
NexaValid - Declarative Field Validation
========================================

Validate decoded input records before acting on them. Each field
carries a rule specification; validation returns an ordered list of
human-readable violation messages.

Features:
---------
- Rule specifications: required, min:N, max:N, len:N, password, email
- Record classes, dataclasses or builder-registered types
- Depth-first traversal of nested records
- Replaceable password and email checkers
- Strict mode that rejects unknown rules up front
- JSON HTTP helper that binds responses into records

Quick Start:
    from nexavalid import Record, Field, validate

    class SignupForm(Record):
        email = Field("required,email")
        password = Field("required,min:8,password")

    errors = validate(SignupForm(email="jane@example.com", password="Passwo1!"))
    assert errors == []
"""

from __future__ import annotations

__version__ = "1.0.0"
__author__ = "NexaValid Team"
__license__ = "MIT"

from nexavalid.core.config import Config, get_config
from nexavalid.utils.logger import configure_logging, get_logger
from nexavalid.validation import (
    Checkers,
    Field,
    Nested,
    Record,
    RecordTypeError,
    RuleSpecError,
    ValidationError,
    Validator,
    register,
    reset_email_checker,
    reset_password_checker,
    set_email_checker,
    set_password_checker,
    validate,
    validate_or_fail,
)


def __getattr__(name: str):
    """Lazy loading of the HTTP helper, which pulls in httpx."""
    _imports = {
        "make_request": "nexavalid.http.client",
        "RequestError": "nexavalid.http.client",
        "ResponseDecodeError": "nexavalid.http.client",
    }

    if name in _imports:
        import importlib
        module = importlib.import_module(_imports[name])
        return getattr(module, name)

    raise AttributeError(f"module 'nexavalid' has no attribute '{name}'")


__all__ = [
    # Metadata
    "__version__",
    "__author__",
    "__license__",
    # Validation
    "Validator",
    "validate",
    "validate_or_fail",
    "Record",
    "Field",
    "Nested",
    "register",
    "Checkers",
    "set_password_checker",
    "reset_password_checker",
    "set_email_checker",
    "reset_email_checker",
    # Errors
    "ValidationError",
    "RecordTypeError",
    "RuleSpecError",
    # Configuration
    "Config",
    "get_config",
    "configure_logging",
    "get_logger",
    # HTTP (lazy)
    "make_request",
    "RequestError",
    "ResponseDecodeError",
]
