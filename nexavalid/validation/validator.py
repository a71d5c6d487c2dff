"""
NexaValid Validator
===================

Core validation engine.

Walks a record's fields in declaration order, descends into nested
records depth-first and runs each field's rules. Returns the
violation messages as one ordered list; an empty list means the
record is valid.

A record that contains itself, directly or through its children, is
walked once; the reference back to it is skipped.
"""

from __future__ import annotations

from typing import Any, List, Optional, Set

from nexavalid.core.config import get_config
from nexavalid.utils.logger import get_logger
from nexavalid.validation.checkers import Checkers, current_checkers
from nexavalid.validation.errors import RecordTypeError, ValidationError
from nexavalid.validation.parser import check_rules
from nexavalid.validation.record import is_record, schema_for

logger = get_logger("nexavalid.validator")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


class Validator:
    """
    Record validator.

    Example:
        class SignupForm(Record):
            email = Field("required,email")
            password = Field("required,min:8,password")

        errors = Validator().validate(SignupForm(email="nope", password="x"))
        # ["Field 'email' is not a valid email",
        #  "Field 'password' must be at least 8 characters long",
        #  "Field 'password' requires at least one digit", ...]

    A validator built with explicit `checkers` never looks at the
    process-wide checker slots. Without them, each `validate` call
    takes one snapshot of the slots and uses it for the whole record.
    """

    def __init__(
        self,
        checkers: Optional[Checkers] = None,
        strict: Optional[bool] = None,
    ) -> None:
        """
        Initialize validator.

        Args:
            checkers: Password and email checkers (process-wide if None)
            strict: Reject unknown rules and bad bounds
                (defaults to the `validation.strict` setting)
        """
        self._checkers = checkers
        self._strict = strict

    @property
    def checkers(self) -> Checkers:
        return self._checkers or current_checkers()

    @property
    def strict(self) -> bool:
        if self._strict is None:
            return get_config().get_bool("validation.strict")
        return self._strict

    def validate(self, record: Any) -> List[str]:
        """
        Validate a record.

        Args:
            record: Record, dataclass or registered instance

        Returns:
            Violation messages in traversal order

        Raises:
            RecordTypeError: record is not a record
        """
        if not is_record(record):
            logger.error("Refused to validate non-record", type=type(record).__name__)
            raise RecordTypeError(record)

        errors: List[str] = []
        self._walk(record, self.checkers, self.strict, errors, set())

        logger.debug(
            "Validated record",
            record=type(record).__name__,
            violations=len(errors),
        )
        return errors

    def _walk(
        self,
        record: Any,
        checkers: Checkers,
        strict: bool,
        errors: List[str],
        path: Set[int],
    ) -> None:
        # path holds the ids of the records being walked above this one
        path.add(id(record))
        for spec in schema_for(type(record), strict=strict):
            value = getattr(record, spec.attribute, None)

            if is_record(value):
                if id(value) in path:
                    logger.debug(
                        "Skipped record cycle",
                        record=type(value).__name__,
                        field=spec.display_name,
                    )
                else:
                    self._walk(value, checkers, strict, errors, path)
                continue

            if spec.nested is not None and value is None:
                continue

            if not spec.rules:
                continue

            errors.extend(check_rules(_as_text(value), spec.display_name, spec.rules, checkers))
        path.discard(id(record))

    def validate_or_fail(self, record: Any) -> None:
        """
        Validate and raise on failure.

        Raises:
            ValidationError: at least one violation, all in `errors`
        """
        errors = self.validate(record)
        if errors:
            raise ValidationError(errors=errors)

    def is_valid(self, record: Any) -> bool:
        return not self.validate(record)


# Convenience functions

def validate(record: Any, checkers: Optional[Checkers] = None) -> List[str]:
    """
    Validate a record with the process-wide configuration.

    Example:
        errors = validate(SignupForm(email="a@b.co", password="Passwo1!"))
        assert errors == []
    """
    return Validator(checkers=checkers).validate(record)


def validate_or_fail(record: Any, checkers: Optional[Checkers] = None) -> None:
    """
    Validate a record and raise on failure.

    Example:
        try:
            validate_or_fail(form)
        except ValidationError as e:
            return {"errors": e.errors}
    """
    Validator(checkers=checkers).validate_or_fail(record)
