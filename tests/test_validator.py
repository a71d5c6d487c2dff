"""
Validator tests.
"""

from dataclasses import dataclass, field

import pytest

from nexavalid.core.config import get_config
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
    set_email_checker,
    set_password_checker,
    unregister,
    validate,
    validate_or_fail,
)


class EmailRecord(Record):
    email = Field("email")


class RequiredRecord(Record):
    required = Field("required")


class PasswordRecord(Record):
    password = Field("password")


class MinMaxRecord(Record):
    field1 = Field("min:1,max:10")
    field2 = Field("min:3,max:6")


class Mixed(Record):
    email = Field("required,email,min:2,max:100")
    password = Field("required,min:8,max:10")
    min_max = Nested(MinMaxRecord)


class Inner(Record):
    a = Field("required")
    b = Field("required", name="B")


class Outer(Record):
    first = Field("required")
    inner = Nested(Inner)
    untagged = Field()
    last = Field("required")


@pytest.mark.parametrize(
    "record, should_fail",
    [
        (EmailRecord(email="test@test.com"), False),
        (EmailRecord(email=""), True),
        (RequiredRecord(required="required"), False),
        (RequiredRecord(required=""), True),
        (PasswordRecord(password=""), True),
        (PasswordRecord(password="password"), True),
        (PasswordRecord(password="Passwo1!"), False),
        (MinMaxRecord(field1="AAAA", field2="AAAA"), False),
        (MinMaxRecord(field1="AA", field2="AA"), True),
        (Mixed(email="AA", password="AAAAAAAAAAAAA"), True),
        (Mixed(email="ok@email.com", password="AAAAAAAa1!"), True),
        (
            Mixed(
                email="ok@email.com",
                password="AAAAAAAa1!",
                min_max=MinMaxRecord(field1="AAAA", field2="AAAA"),
            ),
            False,
        ),
    ],
)
def test_validate(record, should_fail):
    assert bool(validate(record)) == should_fail


def test_mixed_record_reports_every_violation():
    assert validate(Mixed(email="AA", password="AAAAAAAAAAAAA")) == [
        "Field 'email' is not a valid email",
        "Field 'password' must be at most 10 characters long",
        "Field 'field1' must be at least 1 characters long",
        "Field 'field2' must be at least 3 characters long",
    ]


def test_nested_violations_are_depth_first_in_declaration_order():
    assert validate(Outer()) == [
        "Field 'first' is required",
        "Field 'a' is required",
        "Field 'B' is required",
        "Field 'last' is required",
    ]


def test_traversal_is_stable_across_calls():
    record = Outer(inner=Inner(a="x"))

    first = validate(record)
    assert all(validate(record) == first for _ in range(5))


def test_fields_without_rules_are_never_checked():
    class Notes(Record):
        body = Field()
        title = Field("")

    assert validate(Notes()) == []


def test_record_in_a_plain_field_is_walked():
    class Wrapper(Record):
        payload = Field()

    assert validate(Wrapper(payload=RequiredRecord())) == ["Field 'required' is required"]


def test_optional_nested_record_is_skipped_when_absent():
    class Order(Record):
        shipping = Nested(Inner, optional=True)

    assert validate(Order()) == []
    assert validate(Order(shipping=Inner(a="x", b="y"))) == []
    assert validate(Order(shipping=Inner())) == ["Field 'a' is required", "Field 'B' is required"]


def test_self_referencing_record_is_walked_once():
    class Node(Record):
        name = Field("required")
        child = Field()

    node = Node()
    node.child = node

    assert validate(node) == ["Field 'name' is required"]


def test_indirect_cycle_is_walked_once():
    class Node(Record):
        name = Field("required")
        child = Field()

    first, second = Node(), Node(name="second")
    first.child = second
    second.child = first

    assert validate(first) == ["Field 'name' is required"]


def test_shared_child_is_walked_for_each_reference():
    class Pair(Record):
        left = Nested(Inner)
        right = Nested(Inner)

    inner = Inner(b="ok")

    assert validate(Pair(left=inner, right=inner)) == [
        "Field 'a' is required",
        "Field 'a' is required",
    ]


def test_none_leaf_counts_as_empty():
    assert validate(RequiredRecord(required=None)) == ["Field 'required' is required"]


@pytest.mark.parametrize("value", [{"email": "x"}, "text", None, 42, EmailRecord])
def test_non_records_are_rejected(value):
    with pytest.raises(RecordTypeError):
        validate(value)


class TestOtherRecordForms:

    def test_dataclasses(self):
        @dataclass
        class Credentials:
            email: str = field(default="", metadata={"validate": "required,email"})

        @dataclass
        class Account:
            username: str = field(default="", metadata={"validate": "required", "json": "user_name"})
            credentials: Credentials = field(default_factory=Credentials)

        assert validate(Account()) == [
            "Field 'user_name' is required",
            "Field 'email' is required",
            "Field 'email' is not a valid email",
        ]

    def test_registered_types(self):
        class Profile:
            def __init__(self, handle="", contact=None):
                self.handle = handle
                self.contact = contact

        class Contact:
            def __init__(self, mail=""):
                self.mail = mail

        register(Profile).field("handle").required().min(3).name("Handle").nested("contact", Contact)
        register(Contact).field("mail").email()
        try:
            assert validate(Profile(handle="ab", contact=Contact("nope"))) == [
                "Field 'Handle' must be at least 3 characters long",
                "Field 'mail' is not a valid email",
            ]
            assert validate(Profile(handle="abc")) == []
        finally:
            unregister(Profile)
            unregister(Contact)


class TestCheckers:

    def test_process_wide_override_applies(self):
        set_email_checker(lambda value, field: f"Field '{field}' is on the deny list")

        assert validate(EmailRecord(email="test@test.com")) == ["Field 'email' is on the deny list"]

    def test_explicit_checkers_ignore_process_slots(self):
        set_password_checker(lambda value, field: ["global"])
        validator = Validator(checkers=Checkers.default())

        assert validator.validate(PasswordRecord(password="Passwo1!")) == []

    def test_explicit_checkers_via_function(self):
        checkers = Checkers.default().with_password(lambda value, field: [f"{field}: custom"])

        assert validate(PasswordRecord(password="Passwo1!"), checkers=checkers) == ["password: custom"]

    def test_override_during_validation_is_not_observed(self):
        calls = []

        def first(value, field):
            calls.append(field)
            set_password_checker(lambda v, f: [f"{f} second"])
            return []

        class TwoPasswords(Record):
            p1 = Field("password")
            p2 = Field("password")

        set_password_checker(first)

        assert validate(TwoPasswords(p1="x", p2="y")) == []
        assert calls == ["p1", "p2"]
        assert validate(TwoPasswords()) == ["p1 second", "p2 second"]


class TestStrictMode:

    class Typo(Record):
        name = Field("required,requird")

    def test_lenient_by_default(self):
        assert validate(self.Typo(name="x")) == []

    def test_strict_argument(self):
        with pytest.raises(RuleSpecError):
            Validator(strict=True).validate(self.Typo(name="x"))

    def test_strict_from_config(self):
        get_config().set("validation.strict", True)

        with pytest.raises(RuleSpecError):
            validate(self.Typo(name="x"))

    def test_strict_from_environment(self, monkeypatch):
        monkeypatch.setenv("NEXAVALID_VALIDATION_STRICT", "true")

        assert Validator().strict is True


class TestValidateOrFail:

    def test_passes_silently(self):
        assert validate_or_fail(RequiredRecord(required="x")) is None

    def test_raises_with_all_errors(self):
        record = Mixed(email="AA", password="AAAAAAAAAAAAA")

        with pytest.raises(ValidationError) as exc_info:
            validate_or_fail(record)

        assert exc_info.value.errors == validate(record)
        assert exc_info.value.first() == "Field 'email' is not a valid email"
        assert "  - Field 'password' must be at most 10 characters long" in str(exc_info.value)

    def test_is_valid(self):
        assert Validator().is_valid(RequiredRecord(required="x"))
        assert not Validator().is_valid(RequiredRecord())


def test_validation_is_logged(log_records):
    validate(Outer())

    record = log_records.records[-1]
    assert record.message == "Validated record"
    assert record.context == {"record": "Outer", "violations": 4}
