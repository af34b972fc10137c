"""
Combinators - Construction functions for validators.

Each function returns a new immutable validator node. Children may be
other validators or plain ``value -> bool`` callables:

    user = shape({
        "id": number,
        "name": string,
        "email": optional(string),
        "roles": array(literals(["admin", "member"])),
    })
    user({"id": 1, "name": "Ada", "roles": ["admin"]})  # True
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from reify.core.models import (
    Array,
    Intersection,
    Literal,
    Predicate,
    Primitive,
    PrimitiveKind,
    Shape,
    TaggedUnion,
    Tuple,
    Union,
    Validator,
)


# =============================================================================
# Primitives
# =============================================================================

undefinedtype = Primitive(PrimitiveKind.UNDEFINED)
nulltype = Primitive(PrimitiveKind.NULL)
boolean = Primitive(PrimitiveKind.BOOLEAN)
number = Primitive(PrimitiveKind.NUMBER)
string = Primitive(PrimitiveKind.STRING)


def literal(constant: Any) -> Literal:
    """Accept values equal to *constant* (str, int, float or bool)."""
    return Literal(constant)


def predicate(func: Callable[[Any], Any], name: str | None = None) -> Predicate:
    """Wrap a plain callable as a leaf validator."""
    return Predicate(func, name or "")


# =============================================================================
# Structural
# =============================================================================


def shape(fields: Mapping[str, Any]) -> Shape:
    """
    Accept objects whose declared fields all validate.

    Extra fields are ignored, so several shapes can be intersected against
    one wider object. A missing field is checked as UNDEFINED, which makes
    it required unless its validator is ``optional``.
    """
    return Shape(fields)


def array(member: Any) -> Array:
    """Accept lists or tuples whose every element validates against *member*."""
    return Array(member)


def tuple_(members: Sequence[Any]) -> Tuple:
    """Accept sequences of exactly ``len(members)`` items, checked position by position."""
    return Tuple(members)


# =============================================================================
# Logical
# =============================================================================


def union(left: Any, right: Any) -> Union:
    return Union((left, right))


def union_many(members: Iterable[Any]) -> Union:
    """Accept if any member accepts; an empty union accepts nothing."""
    return Union(members)


def intersection(left: Any, right: Any) -> Intersection:
    return Intersection((left, right))


def intersect_many(members: Iterable[Any]) -> Intersection:
    """Accept if every member accepts; an empty intersection accepts everything."""
    return Intersection(members)


# =============================================================================
# Discriminated
# =============================================================================


def tagged_union(tag: str, variants: Mapping[str, Mapping[str, Any]]) -> TaggedUnion:
    """
    Dispatch on ``value[tag]`` to exactly one variant.

    Args:
        tag: Name of the discriminant field
        variants: Tag value -> field definitions; each definition must
            declare the tag field itself, usually as ``literal(<key>)``

    Returns:
        Validator that only checks the fields of the selected variant
    """
    return TaggedUnion(tag, variants)


# =============================================================================
# Helpers
# =============================================================================


def optional(inner: Any) -> Union:
    return union(inner, undefinedtype)


def nullable(inner: Any) -> Union:
    return union(inner, nulltype)


def literals(constants: Iterable[Any]) -> Union:
    """Accept any one of *constants*; mixed kinds (``[True, 0, "x"]``) are fine."""
    if isinstance(constants, (str, bytes, Mapping, Validator)):
        raise TypeError(f"literals expects a sequence of constants, got: {constants!r}")
    return union_many([Literal(constant) for constant in constants])


__all__ = [
    "array",
    "boolean",
    "intersect_many",
    "intersection",
    "literal",
    "literals",
    "nullable",
    "nulltype",
    "number",
    "optional",
    "predicate",
    "shape",
    "string",
    "tagged_union",
    "tuple_",
    "undefinedtype",
    "union",
    "union_many",
]
