"""Core validator nodes and contracts for reify.

A validator is an immutable tree of nodes. Leaves check a single value
(primitives, literals, predicates); inner nodes hold their children in
read-only containers and are evaluated by ``reify.core.engine``.

Nodes are callable, so a composed tree is used like a plain predicate:

    person = Shape({"name": string, "age": Union((number, undefinedtype))})
    person({"name": "Ada"})  # True
"""

import json
import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from reify.core.diagnostics import ValidationResult


# =============================================================================
# Absent value
# =============================================================================


class _Undefined:
    """Marker for a value that is not there at all (as opposed to ``None``)."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


# =============================================================================
# Enums
# =============================================================================


class PrimitiveKind(str, Enum):
    """Runtime kinds checked by primitive validators."""

    UNDEFINED = "undefined"
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"


class FailureCode(str, Enum):
    """Why a combinator rejected a value."""

    INVALID_TYPE = "INVALID_TYPE"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_FIELD = "INVALID_FIELD"
    INVALID_ELEMENT = "INVALID_ELEMENT"
    LENGTH_MISMATCH = "LENGTH_MISMATCH"
    NO_MATCH = "NO_MATCH"
    INTERSECTION_FAILED = "INTERSECTION_FAILED"
    MISSING_TAG = "MISSING_TAG"
    UNKNOWN_TAG = "UNKNOWN_TAG"
    PREDICATE_ERROR = "PREDICATE_ERROR"
    DEPTH_EXCEEDED = "DEPTH_EXCEEDED"


# =============================================================================
# Options
# =============================================================================


class ValidateOptions(BaseModel):
    """Per-call diagnostics configuration."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    log_failures: bool = Field(default=False, alias="logFailures")
    sink: Callable[[str], None] | None = Field(default=None, exclude=True)

    @classmethod
    def coerce(cls, opts: "ValidateOptions | Mapping[str, Any] | None") -> "ValidateOptions":
        """Accept an options instance, a plain mapping, or nothing."""
        if opts is None:
            return _DEFAULT_OPTIONS
        if isinstance(opts, cls):
            return opts
        if isinstance(opts, Mapping):
            return cls.model_validate(dict(opts))
        raise TypeError(f"opts must be ValidateOptions, a mapping or None, got: {type(opts).__name__}")


_DEFAULT_OPTIONS = ValidateOptions()


# =============================================================================
# Literal equality
# =============================================================================


def canonicalize(value: Any) -> str | None:
    """Serialise *value* for literal comparison, or None if it cannot be.

    Only scalars are compared exactly. Containers go through the same
    serialisation, so key order matters for them.
    """
    if value is UNDEFINED:
        return None
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        value = int(value)
    try:
        return json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError, RecursionError):
        return None


# =============================================================================
# Validator nodes
# =============================================================================


@dataclass(frozen=True, eq=False)
class Validator:
    """Base class of every node; calling a node evaluates it."""

    def __call__(self, value: Any, opts: ValidateOptions | Mapping[str, Any] | None = None) -> bool:
        from reify.core.engine import run

        return run(self, value, opts)

    def explain(self, value: Any) -> "ValidationResult":
        from reify.core.engine import explain

        return explain(self, value)


def as_validator(child: Any, where: str = "child") -> Validator:
    """Return *child* as a node, wrapping plain callables in a Predicate."""
    if isinstance(child, Validator):
        return child
    if isinstance(child, type) or not callable(child):
        raise TypeError(f"{where} must be a validator or a predicate callable, got: {child!r}")
    return Predicate(child)


def _freeze_fields(fields: Mapping[str, Any], owner: str) -> Mapping[str, Validator]:
    if not isinstance(fields, Mapping):
        raise TypeError(f"{owner} fields must be a mapping, got: {type(fields).__name__}")
    frozen: dict[str, Validator] = {}
    for key, child in fields.items():
        if not isinstance(key, str):
            raise TypeError(f"{owner} field names must be strings, got: {key!r}")
        frozen[key] = as_validator(child, f"{owner} field '{key}'")
    return MappingProxyType(frozen)


def _freeze_members(members: Any, owner: str) -> tuple[Validator, ...]:
    if isinstance(members, (str, bytes, Mapping)) or not hasattr(members, "__iter__"):
        raise TypeError(f"{owner} members must be a sequence of validators, got: {type(members).__name__}")
    return tuple(as_validator(m, f"{owner} member {i}") for i, m in enumerate(members))


@dataclass(frozen=True, eq=False)
class Primitive(Validator):
    """Exact runtime-kind check."""

    kind: PrimitiveKind


@dataclass(frozen=True, eq=False)
class Literal(Validator):
    """Equality with a single constant."""

    constant: Any
    canonical: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.constant, Validator) or callable(self.constant):
            raise TypeError(f"literal expects a constant value, got: {self.constant!r}")
        canonical = canonicalize(self.constant)
        if canonical is None:
            raise TypeError(f"literal constant is not serialisable: {self.constant!r}")
        object.__setattr__(self, "canonical", canonical)


@dataclass(frozen=True, eq=False)
class Shape(Validator):
    """Object with at least the declared fields."""

    fields: Mapping[str, Validator]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _freeze_fields(self.fields, "shape"))


@dataclass(frozen=True, eq=False)
class Array(Validator):
    """Homogeneous sequence."""

    member: Validator

    def __post_init__(self) -> None:
        object.__setattr__(self, "member", as_validator(self.member, "array member"))


@dataclass(frozen=True, eq=False)
class Tuple(Validator):
    """Fixed-length, position-wise typed sequence."""

    members: tuple[Validator, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.members, Sequence):
            raise TypeError(f"tuple members must be an ordered sequence, got: {type(self.members).__name__}")
        object.__setattr__(self, "members", _freeze_members(self.members, "tuple"))


@dataclass(frozen=True, eq=False)
class Union(Validator):
    """Accepts when any member accepts."""

    members: tuple[Validator, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", _freeze_members(self.members, "union"))


@dataclass(frozen=True, eq=False)
class Intersection(Validator):
    """Accepts when every member accepts."""

    members: tuple[Validator, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", _freeze_members(self.members, "intersection"))


@dataclass(frozen=True, eq=False)
class TaggedUnion(Validator):
    """Dispatches on the value of ``tag`` to one variant's field rules."""

    tag: str
    variants: Mapping[str, Shape]

    def __post_init__(self) -> None:
        if not isinstance(self.tag, str):
            raise TypeError(f"tagged union tag must be a string, got: {self.tag!r}")
        if not isinstance(self.variants, Mapping):
            raise TypeError(f"tagged union variants must be a mapping, got: {type(self.variants).__name__}")

        variants: dict[str, Shape] = {}
        for key, definition in self.variants.items():
            if not isinstance(key, str):
                raise TypeError(f"tagged union variant keys must be strings, got: {key!r}")
            variant = definition if isinstance(definition, Shape) else Shape(definition)
            tag_check = variant.fields.get(self.tag)
            if tag_check is None:
                raise ValueError(f"variant '{key}' does not declare the tag field '{self.tag}'")
            if isinstance(tag_check, Literal) and tag_check.canonical != canonicalize(key):
                raise ValueError(
                    f"variant '{key}' checks tag '{self.tag}' against {tag_check.constant!r}"
                )
            variants[key] = variant
        object.__setattr__(self, "variants", MappingProxyType(variants))


@dataclass(frozen=True, eq=False)
class Predicate(Validator):
    """Caller-supplied leaf check; exceptions count as rejection."""

    func: Callable[[Any], Any]
    name: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.func, (Validator, type)) or not callable(self.func):
            raise TypeError(f"predicate expects a plain callable, got: {self.func!r}")
        if not self.name:
            object.__setattr__(self, "name", getattr(self.func, "__name__", type(self.func).__name__))
