"""
NexaValid Validation System
===========================

Declarative field validation for decoded input records.

Features:
- Comma-separated rule specifications ("required,min:8,password")
- Nested record traversal in declaration order
- Replaceable password and email checkers
- Strict mode for catching rule typos early
"""

from nexavalid.validation.checkers import (
    Checkers,
    EmailChecker,
    PasswordChecker,
    current_checkers,
    default_email_checker,
    default_password_checker,
    get_email_checker,
    get_password_checker,
    is_number,
    is_special_character,
    reset_email_checker,
    reset_password_checker,
    set_email_checker,
    set_password_checker,
)
from nexavalid.validation.errors import (
    NexaValidError,
    RecordTypeError,
    RuleSpecError,
    ValidationError,
)
from nexavalid.validation.parser import (
    check_rules,
    parse_and_check,
    parse_rule_spec,
)
from nexavalid.validation.record import (
    Field,
    FieldBuilder,
    FieldSpec,
    Nested,
    Record,
    RecordSchema,
    SchemaBuilder,
    bind,
    is_record,
    register,
    schema_for,
    unregister,
)
from nexavalid.validation.rules import (
    Email,
    Length,
    MaxLength,
    MinLength,
    Password,
    Required,
    Rule,
    check_len,
    check_max,
    check_min,
    check_required,
)
from nexavalid.validation.validator import (
    Validator,
    validate,
    validate_or_fail,
)

__all__ = [
    # Core
    "Validator",
    "validate",
    "validate_or_fail",
    # Records
    "Record",
    "Field",
    "Nested",
    "RecordSchema",
    "FieldSpec",
    "SchemaBuilder",
    "FieldBuilder",
    "register",
    "unregister",
    "schema_for",
    "is_record",
    "bind",
    # Parser
    "parse_rule_spec",
    "parse_and_check",
    "check_rules",
    # Rules
    "Rule",
    "Required",
    "MinLength",
    "MaxLength",
    "Length",
    "Password",
    "Email",
    "check_required",
    "check_min",
    "check_max",
    "check_len",
    # Checkers
    "Checkers",
    "PasswordChecker",
    "EmailChecker",
    "default_password_checker",
    "default_email_checker",
    "is_number",
    "is_special_character",
    "current_checkers",
    "get_password_checker",
    "get_email_checker",
    "set_password_checker",
    "reset_password_checker",
    "set_email_checker",
    "reset_email_checker",
    # Errors
    "NexaValidError",
    "RecordTypeError",
    "RuleSpecError",
    "ValidationError",
]
