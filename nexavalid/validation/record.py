"""
NexaValid Records
=================

Declaring which fields of a type carry which rules.

Three forms are understood, each compiled once per type into a
`RecordSchema`:

1. Record subclasses with `Field` / `Nested` class attributes:

    class Address(Record):
        city = Field("required,max:64")

    class SignupForm(Record):
        email = Field("required,email", name="email_address")
        password = Field("required,min:8,password")
        address = Nested(Address)

2. Dataclasses with rules in field metadata:

    @dataclass
    class Login:
        email: str = field(default="", metadata={"validate": "required,email", "json": "email"})

3. Any other class, registered with the fluent builder:

    register(LegacyUser) \\
        .field("login").rules("required,min:3").name("Login") \\
        .field("mail").email()
"""

from __future__ import annotations

import dataclasses
import threading
import types
import typing
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from nexavalid.validation.errors import RecordTypeError
from nexavalid.validation.parser import parse_rule_spec
from nexavalid.validation.rules import Rule

RULES_METADATA_KEY = "validate"
JSON_METADATA_KEY = "json"
NAME_METADATA_KEYS = ("name", JSON_METADATA_KEY)


@dataclass(frozen=True)
class FieldSpec:
    """
    Compiled field declaration.

    Attributes:
        attribute: Python attribute holding the value
        display_name: Name used in messages and as the JSON key
        rules: Parsed rules, empty when the field is never checked
        nested: Declared record type for nested fields
        json_key: Key read by `bind` before the display name
    """

    attribute: str
    display_name: str
    rules: Tuple[Rule, ...] = ()
    nested: Optional[type] = None
    json_key: Optional[str] = None


@dataclass(frozen=True)
class RecordSchema:
    """Ordered field declarations of one record type."""

    record_type: type
    fields: Tuple[FieldSpec, ...]

    def __iter__(self):
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def field(self, attribute: str) -> Optional[FieldSpec]:
        return next((f for f in self.fields if f.attribute == attribute), None)


def _compile(
    attribute: str,
    rule_spec: Optional[str],
    name: Optional[str],
    strict: bool,
    nested: Optional[type] = None,
    json_key: Optional[str] = None,
) -> FieldSpec:
    return FieldSpec(
        attribute=attribute,
        display_name=name or attribute,
        rules=parse_rule_spec(rule_spec, strict=strict),
        nested=nested,
        json_key=json_key,
    )


# ============================================================================
# Record classes
# ============================================================================

class Field:
    """
    String field declaration.

    Args:
        rules: Comma-separated rule specification
        name: Display name override (defaults to the attribute name)
        default: Initial value for new instances
    """

    def __init__(
        self,
        rules: str = "",
        name: Optional[str] = None,
        default: str = "",
    ) -> None:
        self.rules = rules
        self.name = name
        self.default = default
        self.attribute = ""

    def __set_name__(self, owner: type, attribute: str) -> None:
        self.attribute = attribute

    def make_default(self) -> Any:
        return self.default

    def compile(self, strict: bool) -> FieldSpec:
        return _compile(self.attribute, self.rules, self.name, strict)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.rules!r}, name={self.name!r})"


class Nested(Field):
    """
    Embedded record declaration.

    The nested record is always validated, whether or not the field
    itself has rules. New instances get an empty nested record unless
    `optional=True`, in which case the default is None and a None
    value is skipped.
    """

    def __init__(
        self,
        record_type: type,
        rules: str = "",
        name: Optional[str] = None,
        optional: bool = False,
    ) -> None:
        super().__init__(rules=rules, name=name)
        self.record_type = record_type
        self.optional = optional

    def make_default(self) -> Any:
        return None if self.optional else self.record_type()

    def compile(self, strict: bool) -> FieldSpec:
        return _compile(self.attribute, self.rules, self.name, strict, self.record_type)


class RecordMeta(type):
    """Metaclass for Record to collect field declarations."""

    def __new__(mcs, name: str, bases: tuple, namespace: dict) -> RecordMeta:
        fields: Dict[str, Field] = {}

        # Base class fields come first
        for base in reversed(bases):
            if hasattr(base, "_fields"):
                fields.update(base._fields)

        for key, value in namespace.items():
            if isinstance(value, Field):
                fields[key] = value

        namespace["_fields"] = fields
        cls = super().__new__(mcs, name, bases, namespace)

        # Fail fast on rule typos when the class asks for it
        if getattr(cls, "__strict__", False):
            schema_for(cls, strict=True)

        return cls


class Record(metaclass=RecordMeta):
    """
    Base record class.

    Example:
        class ProfileForm(Record):
            __strict__ = True  # reject unknown rules at class creation

            nickname = Field("required,min:2,max:32", name="Nickname")

        form = ProfileForm(nickname="x")
        validate(form)
        # ["Field 'Nickname' must be at least 2 characters long"]
    """

    _fields: Dict[str, Field]

    def __init__(self, **values: Any) -> None:
        unknown = set(values) - set(self._fields)
        if unknown:
            raise TypeError(
                f"{type(self).__name__} got unexpected fields: {', '.join(sorted(unknown))}"
            )

        for attribute, declaration in self._fields.items():
            if attribute in values:
                setattr(self, attribute, values[attribute])
            else:
                setattr(self, attribute, declaration.make_default())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Record:
        """Build an instance from decoded JSON keyed by display names."""
        return bind(cls, data)

    def to_dict(self) -> Dict[str, Any]:
        """Inverse of `from_dict`."""
        result: Dict[str, Any] = {}
        for spec in schema_for(type(self)):
            value = getattr(self, spec.attribute)
            result[spec.display_name] = value.to_dict() if isinstance(value, Record) else value
        return result

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, a) == getattr(other, a) for a in self._fields)

    def __repr__(self) -> str:
        values = ", ".join(f"{a}={getattr(self, a)!r}" for a in self._fields)
        return f"{type(self).__name__}({values})"


# ============================================================================
# Builder registration
# ============================================================================

class SchemaBuilder:
    """
    Builder for types that cannot carry declarations themselves.

    Fields are kept in the order they are first declared.
    """

    def __init__(self, record_type: type, strict: bool = False) -> None:
        self.record_type = record_type
        self.strict = strict
        self._fields: Dict[str, FieldBuilder] = {}

    def field(self, attribute: str) -> FieldBuilder:
        """
        Define a field.

        Returns FieldBuilder for chaining rules.
        """
        if attribute not in self._fields:
            self._fields[attribute] = FieldBuilder(attribute, self)
        _invalidate(self.record_type)
        return self._fields[attribute]

    def nested(self, attribute: str, record_type: Optional[type] = None) -> FieldBuilder:
        """Define a field holding an embedded record."""
        builder = self.field(attribute)
        builder._nested = record_type
        return builder

    def build(self, strict: bool = False) -> RecordSchema:
        strict = strict or self.strict
        return RecordSchema(
            record_type=self.record_type,
            fields=tuple(b.compile(strict) for b in self._fields.values()),
        )


class FieldBuilder:
    """Builder for one field's rules."""

    def __init__(self, attribute: str, schema: SchemaBuilder) -> None:
        self.attribute = attribute
        self.schema = schema
        self._tokens: List[str] = []
        self._label: Optional[str] = None
        self._nested: Optional[type] = None

    def _add(self, token: str) -> FieldBuilder:
        if self.schema.strict:
            parse_rule_spec(token, strict=True)
        self._tokens.append(token)
        _invalidate(self.schema.record_type)
        return self

    def rules(self, rule_spec: str) -> FieldBuilder:
        """Append every token of a rule specification."""
        if self.schema.strict:
            parse_rule_spec(rule_spec, strict=True)
        self._tokens.extend(t for t in rule_spec.split(",") if t)
        _invalidate(self.schema.record_type)
        return self

    def name(self, label: str) -> FieldBuilder:
        """Set display name."""
        self._label = label
        _invalidate(self.schema.record_type)
        return self

    def required(self) -> FieldBuilder:
        return self._add("required")

    def min(self, length: int) -> FieldBuilder:
        return self._add(f"min:{length}")

    def max(self, length: int) -> FieldBuilder:
        return self._add(f"max:{length}")

    def length(self, length: int) -> FieldBuilder:
        return self._add(f"len:{length}")

    def password(self) -> FieldBuilder:
        return self._add("password")

    def email(self) -> FieldBuilder:
        return self._add("email")

    def field(self, attribute: str) -> FieldBuilder:
        """Continue with the next field of the same schema."""
        return self.schema.field(attribute)

    def nested(self, attribute: str, record_type: Optional[type] = None) -> FieldBuilder:
        return self.schema.nested(attribute, record_type)

    def compile(self, strict: bool) -> FieldSpec:
        return _compile(
            self.attribute,
            ",".join(self._tokens),
            self._label,
            strict,
            self._nested,
        )


# ============================================================================
# Schema lookup
# ============================================================================

_registry: Dict[type, SchemaBuilder] = {}
_schemas: Dict[Tuple[type, bool], RecordSchema] = {}
_lock = threading.RLock()


def _invalidate(record_type: type) -> None:
    with _lock:
        _schemas.pop((record_type, False), None)
        _schemas.pop((record_type, True), None)


def register(record_type: type, strict: bool = False) -> SchemaBuilder:
    """
    Register rules for an arbitrary class.

    Calling it again for the same class returns the existing builder.
    """
    with _lock:
        builder = _registry.get(record_type)
        if builder is None:
            builder = SchemaBuilder(record_type, strict=strict)
            _registry[record_type] = builder
        builder.strict = builder.strict or strict
        return builder


def unregister(record_type: type) -> None:
    with _lock:
        _registry.pop(record_type, None)
        _invalidate(record_type)


def _field_types(record_type: type) -> Dict[str, Any]:
    # Postponed annotations are strings; classes defined inside a
    # function body may not resolve, in which case nothing is nested.
    try:
        return typing.get_type_hints(record_type)
    except (NameError, TypeError):
        return {}


def _nested_type(annotation: Any) -> Optional[type]:
    """Dataclass named by an annotation, unwrapping Optional[X] and X | None."""
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        members = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(members) != 1:
            return None
        annotation = members[0]
    if isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
        return annotation
    return None


def _dataclass_schema(record_type: type, strict: bool) -> RecordSchema:
    hints = _field_types(record_type)
    specs = []
    for dc_field in dataclasses.fields(record_type):
        metadata = dc_field.metadata
        name = next((metadata[k] for k in NAME_METADATA_KEYS if metadata.get(k)), None)
        nested = _nested_type(hints.get(dc_field.name, dc_field.type))
        specs.append(
            _compile(
                dc_field.name,
                metadata.get(RULES_METADATA_KEY),
                name,
                strict,
                nested,
                metadata.get(JSON_METADATA_KEY),
            )
        )
    return RecordSchema(record_type=record_type, fields=tuple(specs))


def _record_schema(record_type: Type[Record], strict: bool) -> RecordSchema:
    return RecordSchema(
        record_type=record_type,
        fields=tuple(declaration.compile(strict) for declaration in record_type._fields.values()),
    )


def schema_for(record_type: type, strict: bool = False) -> RecordSchema:
    """
    Compiled schema of a record type.

    Raises:
        RecordTypeError: record_type is not a record type
        RuleSpecError: strict and a rule specification is malformed
    """
    key = (record_type, strict)
    with _lock:
        schema = _schemas.get(key)
        if schema is not None:
            return schema

        if isinstance(record_type, RecordMeta):
            schema = _record_schema(record_type, strict)
        elif record_type in _registry:
            schema = _registry[record_type].build(strict)
        elif isinstance(record_type, type) and dataclasses.is_dataclass(record_type):
            schema = _dataclass_schema(record_type, strict)
        else:
            raise RecordTypeError(record_type)

        _schemas[key] = schema
        return schema


def is_record(value: Any) -> bool:
    """Check whether value is a record instance the walker can traverse."""
    if isinstance(value, type):
        return False
    record_type = type(value)
    return (
        isinstance(value, Record)
        or record_type in _registry
        or dataclasses.is_dataclass(record_type)
    )


# ============================================================================
# Binding decoded JSON
# ============================================================================

def bind(record_type: Type[Any], data: Mapping[str, Any]) -> Any:
    """
    Build a record from a decoded JSON object.

    Keys are matched against the `json` metadata key, then display
    names, then attribute names. Missing keys keep the type's defaults,
    unknown keys are ignored. Nested records are built recursively.
    """
    if not isinstance(data, Mapping):
        raise TypeError(f"Cannot bind {type(data).__name__} to {record_type.__name__}")

    schema = schema_for(record_type)
    values: Dict[str, Any] = {}

    for spec in schema:
        key = next(
            (k for k in (spec.json_key, spec.display_name, spec.attribute) if k and k in data),
            None,
        )
        if key is None:
            continue
        value = data[key]
        if spec.nested is not None and isinstance(value, Mapping):
            value = bind(spec.nested, value)
        values[spec.attribute] = value

    if isinstance(record_type, RecordMeta) or dataclasses.is_dataclass(record_type):
        return record_type(**values)

    instance = record_type()
    for attribute, value in values.items():
        setattr(instance, attribute, value)
    return instance

