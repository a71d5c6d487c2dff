"""
NexaValid Validation Errors
===========================

Exception hierarchy for the validation engine.

Rule violations are never raised: they are returned as an ordered
list of messages. Exceptions are reserved for programmer errors
(passing something that is not a record, a malformed rule
specification in strict mode) and for `validate_or_fail`.
"""

from __future__ import annotations

from typing import Any, List, Optional


class NexaValidError(Exception):
    """Base class for all NexaValid exceptions."""


class RecordTypeError(NexaValidError, TypeError):
    """
    Value handed to the validator is not a traversable record.

    Raised for plain dicts, scalars, None and instances of classes
    that are neither Record subclasses, dataclasses nor registered
    with a schema builder.
    """

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(
            f"Cannot validate value of type {type(value).__name__!r}: "
            "expected a Record, a dataclass or a registered type"
        )


class RuleSpecError(NexaValidError, ValueError):
    """Rule specification rejected in strict mode."""

    def __init__(self, rule_spec: str, token: str, reason: str) -> None:
        self.rule_spec = rule_spec
        self.token = token
        self.reason = reason
        super().__init__(f"Invalid rule {token!r} in {rule_spec!r}: {reason}")


class ValidationError(NexaValidError):
    """
    Validation failed exception.

    Contains every violation message in traversal order.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[List[str]] = None,
    ) -> None:
        super().__init__(message)
        self.errors: List[str] = list(errors or [])

    def __str__(self) -> str:
        if self.errors:
            lines = "\n".join(f"  - {msg}" for msg in self.errors)
            return f"Validation failed:\n{lines}"
        return "Validation failed"

    def first(self) -> Optional[str]:
        """Get first error message."""
        return self.errors[0] if self.errors else None
