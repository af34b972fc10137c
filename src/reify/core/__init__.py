"""reify core - Validator nodes, evaluation and diagnostics."""

from reify.core.models import (
    UNDEFINED,
    Array,
    FailureCode,
    Intersection,
    Literal,
    Predicate,
    Primitive,
    PrimitiveKind,
    Shape,
    TaggedUnion,
    Tuple,
    Union,
    ValidateOptions,
    Validator,
)

__all__ = [
    "UNDEFINED",
    "Array",
    "FailureCode",
    "Intersection",
    "Literal",
    "Predicate",
    "Primitive",
    "PrimitiveKind",
    "Shape",
    "TaggedUnion",
    "Tuple",
    "Union",
    "ValidateOptions",
    "Validator",
]
