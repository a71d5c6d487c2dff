"""
NexaValid Pluggable Checkers
============================

Password strength and email format checks.

Both are replaceable. A `Checkers` value bundles one function of
each kind and can be handed to a `Validator` directly. The
process-wide slots below back the module-level `validate()` and can
be overridden and reset, typically at startup or in test setup.

Example:
    def deny_example_domains(email, field):
        if email.endswith("@example.com"):
            return f"Field '{field}' uses a blocked domain"
        return None

    set_email_checker(deny_example_domains)
    ...
    reset_email_checker()
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from nexavalid.utils.logger import get_logger

PasswordChecker = Callable[[str, str], List[str]]
EmailChecker = Callable[[str, str], Optional[str]]

logger = get_logger("nexavalid.checkers")

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def is_number(c: int) -> bool:
    """Check whether byte c is an ASCII digit."""
    return ord("0") <= c <= ord("9")


def is_special_character(c: int) -> bool:
    """Check whether byte c is printable ASCII punctuation."""
    return (
        ord("!") <= c <= ord("/")
        or ord(":") <= c <= ord("@")
        or ord("[") <= c <= ord("^")
        or ord("{") <= c <= ord("~")
    )


def default_password_checker(password: str, field: str) -> List[str]:
    """
    Require a digit, a special character, an upper and a lower case letter.

    Scans the UTF-8 bytes once. Bytes outside these classes (anything
    non-ASCII, spaces, `_` and backtick) count towards nothing.
    """
    number = special = upper = lower = False

    for c in password.encode("utf-8"):
        if is_number(c):
            number = True
        elif is_special_character(c):
            special = True
        elif ord("a") <= c <= ord("z"):
            lower = True
        elif ord("A") <= c <= ord("Z"):
            upper = True

    errors = []
    if not number:
        errors.append(f"Field '{field}' requires at least one digit")
    if not special:
        errors.append(f"Field '{field}' requires at least one special character")
    if not upper:
        errors.append(f"Field '{field}' requires at least one upper case letter")
    if not lower:
        errors.append(f"Field '{field}' requires at least one lower case letter")
    return errors


def default_email_checker(email: str, field: str) -> Optional[str]:
    """Match a basic `local@domain.tld` shape."""
    if not EMAIL_PATTERN.fullmatch(email):
        return f"Field '{field}' is not a valid email"
    return None


@dataclass(frozen=True)
class Checkers:
    """
    Immutable pair of pluggable checkers.

    Example:
        strict = Checkers.default().with_password(my_policy)
        Validator(checkers=strict).validate(form)
    """

    password: PasswordChecker = default_password_checker
    email: EmailChecker = default_email_checker

    @classmethod
    def default(cls) -> Checkers:
        return cls()

    def with_password(self, checker: PasswordChecker) -> Checkers:
        """Copy with a different password checker."""
        return replace(self, password=checker)

    def with_email(self, checker: EmailChecker) -> Checkers:
        """Copy with a different email checker."""
        return replace(self, email=checker)


# Process-wide slots
_lock = threading.RLock()
_active = Checkers.default()


def current_checkers() -> Checkers:
    """Snapshot of the process-wide checkers."""
    with _lock:
        return _active


def get_password_checker() -> PasswordChecker:
    return current_checkers().password


def get_email_checker() -> EmailChecker:
    return current_checkers().email


def set_password_checker(checker: PasswordChecker) -> None:
    """Replace the process-wide password checker."""
    global _active
    with _lock:
        _active = _active.with_password(checker)
    logger.info("Password checker overridden", checker=_describe(checker))


def reset_password_checker() -> None:
    """Restore the default password checker."""
    global _active
    with _lock:
        _active = _active.with_password(default_password_checker)
    logger.info("Password checker reset")


def set_email_checker(checker: EmailChecker) -> None:
    """Replace the process-wide email checker."""
    global _active
    with _lock:
        _active = _active.with_email(checker)
    logger.info("Email checker overridden", checker=_describe(checker))


def reset_email_checker() -> None:
    """Restore the default email checker."""
    global _active
    with _lock:
        _active = _active.with_email(default_email_checker)
    logger.info("Email checker reset")


def _describe(checker: Callable) -> str:
    return getattr(checker, "__qualname__", repr(checker))
