"""
NexaValid Rule Parser
=====================

Turns a rule specification such as "required,min:2,max:100" into
Rule objects and runs them against a value.

Tokens are matched exactly as written, so " email" is an unknown token.
Parsing is lenient by default: unknown tokens are dropped and a
missing or non-numeric bound becomes 0, so "max:" rejects every
non-empty value. Pass `strict=True` to raise RuleSpecError instead.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional, Tuple

from nexavalid.utils.logger import get_logger
from nexavalid.validation.checkers import Checkers, current_checkers
from nexavalid.validation.errors import RuleSpecError
from nexavalid.validation.rules import (
    Email,
    Length,
    MaxLength,
    MinLength,
    Password,
    Required,
    Rule,
)

logger = get_logger("nexavalid.parser")

INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# Prefix rules take an integer bound after the colon
BOUNDED_RULES: Dict[str, Callable[[int], Rule]] = {
    "min:": MinLength,
    "max:": MaxLength,
    "len:": Length,
}

EXACT_RULES: Dict[str, Callable[[], Rule]] = {
    "required": Required,
    "password": Password,
    "email": Email,
}


def _parse_bound(rule_spec: str, token: str, raw: str, strict: bool) -> int:
    if INTEGER_PATTERN.fullmatch(raw):
        return int(raw)
    if strict:
        logger.warning("Rejected rule bound", rule=token, spec=rule_spec)
        raise RuleSpecError(rule_spec, token, "bound must be an integer")
    return 0


def parse_token(token: str, rule_spec: str = "", strict: bool = False) -> Optional[Rule]:
    """
    Parse one token into a Rule.

    Returns None for unknown tokens unless strict.
    """
    for prefix, factory in BOUNDED_RULES.items():
        if token.startswith(prefix):
            return factory(_parse_bound(rule_spec or token, token, token[len(prefix):], strict))

    factory = EXACT_RULES.get(token)
    if factory is not None:
        return factory()

    if strict:
        logger.warning("Rejected unknown rule", rule=token, spec=rule_spec)
        raise RuleSpecError(rule_spec or token, token, "unknown rule")
    return None


def parse_rule_spec(rule_spec: Optional[str], strict: bool = False) -> Tuple[Rule, ...]:
    """
    Parse a comma-separated rule specification.

    Example:
        parse_rule_spec("required,min:8")
        # (Required(), MinLength(bound=8))
    """
    if not rule_spec:
        return ()

    rules: List[Rule] = []
    for token in rule_spec.split(","):
        if not token:
            continue
        rule = parse_token(token, rule_spec, strict)
        if rule is not None:
            rules.append(rule)

    return tuple(rules)


def check_rules(
    value: str,
    field: str,
    rules: Tuple[Rule, ...],
    checkers: Optional[Checkers] = None,
) -> List[str]:
    """Run already-parsed rules in order and collect violations."""
    checkers = checkers or current_checkers()
    errors: List[str] = []
    for rule in rules:
        errors.extend(rule.check(value, field, checkers))
    return errors


def parse_and_check(
    value: str,
    field: str,
    rule_spec: Optional[str],
    checkers: Optional[Checkers] = None,
    strict: bool = False,
) -> List[str]:
    """
    Parse rule_spec and check value against it.

    Args:
        value: String value of the field
        field: Display name used in messages
        rule_spec: Comma-separated rule tokens
        checkers: Password/email checkers (process-wide if None)
        strict: Raise RuleSpecError on unknown tokens or bad bounds

    Returns:
        Violation messages in token order
    """
    return check_rules(value, field, parse_rule_spec(rule_spec, strict), checkers)
