"""
NexaValid Validation Rules
==========================

Built-in rules for rule specifications.

The primitive checkers (`check_required`, `check_min`, `check_max`,
`check_len`) are pure functions over a string and a bound. The Rule
classes wrap them so a parsed rule specification can be kept and
re-run without parsing it again.

Lengths are measured in UTF-8 bytes, so "né" is three long.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from nexavalid.validation.checkers import Checkers


REQUIRED_MESSAGE = "Field '{field}' is required"
MIN_MESSAGE = "Field '{field}' must be at least {bound} characters long"
MAX_MESSAGE = "Field '{field}' must be at most {bound} characters long"
LEN_MESSAGE = "Field '{field}' must be exactly {bound} characters long"


def byte_length(value: str) -> int:
    """Length of value in UTF-8 bytes."""
    return len(value.encode("utf-8"))


def check_required(value: str, field: str) -> Optional[str]:
    """Fail on the empty string."""
    if value == "":
        return REQUIRED_MESSAGE.format(field=field)
    return None


def check_min(value: str, field: str, bound: int) -> Optional[str]:
    """Fail when value is shorter than bound."""
    if byte_length(value) < bound:
        return MIN_MESSAGE.format(field=field, bound=bound)
    return None


def check_max(value: str, field: str, bound: int) -> Optional[str]:
    """Fail when value is longer than bound."""
    if byte_length(value) > bound:
        return MAX_MESSAGE.format(field=field, bound=bound)
    return None


def check_len(value: str, field: str, bound: int) -> Optional[str]:
    """Fail unless value is exactly bound long."""
    if byte_length(value) != bound:
        return LEN_MESSAGE.format(field=field, bound=bound)
    return None


class Rule(ABC):
    """
    Abstract validation rule.

    Implement `check` to create custom rules.

    Example:
        class NoSpaces(Rule):
            name = "no_spaces"

            def check(self, value, field, checkers):
                if " " in value:
                    return [f"Field '{field}' must not contain spaces"]
                return []
    """

    name: str = ""

    @abstractmethod
    def check(self, value: str, field: str, checkers: Checkers) -> List[str]:
        """
        Check the value.

        Args:
            value: String value of the field
            field: Display name used in messages
            checkers: Active password and email checkers

        Returns:
            Violation messages, empty when the value passes
        """
        ...

    def __call__(self, value: str, field: str, checkers: Checkers) -> List[str]:
        """Allow rule to be called directly."""
        return self.check(value, field, checkers)


def _one(message: Optional[str]) -> List[str]:
    return [message] if message else []


@dataclass(frozen=True)
class Required(Rule):
    """Require a non-empty string."""

    name = "required"

    def check(self, value: str, field: str, checkers: Checkers) -> List[str]:
        return _one(check_required(value, field))


@dataclass(frozen=True)
class MinLength(Rule):
    """Lower length bound (`min:N`)."""

    bound: int = 0
    name = "min"

    def check(self, value: str, field: str, checkers: Checkers) -> List[str]:
        return _one(check_min(value, field, self.bound))


@dataclass(frozen=True)
class MaxLength(Rule):
    """Upper length bound (`max:N`)."""

    bound: int = 0
    name = "max"

    def check(self, value: str, field: str, checkers: Checkers) -> List[str]:
        return _one(check_max(value, field, self.bound))


@dataclass(frozen=True)
class Length(Rule):
    """Exact length (`len:N`)."""

    bound: int = 0
    name = "len"

    def check(self, value: str, field: str, checkers: Checkers) -> List[str]:
        return _one(check_len(value, field, self.bound))


@dataclass(frozen=True)
class Password(Rule):
    """Delegate to the active password checker."""

    name = "password"

    def check(self, value: str, field: str, checkers: Checkers) -> List[str]:
        return list(checkers.password(value, field) or [])


@dataclass(frozen=True)
class Email(Rule):
    """Delegate to the active email checker."""

    name = "email"

    def check(self, value: str, field: str, checkers: Checkers) -> List[str]:
        return _one(checkers.email(value, field))
