"""reify - Composable runtime validators for structured data."""

from reify.combinators import (
    array,
    boolean,
    intersect_many,
    intersection,
    literal,
    literals,
    nullable,
    nulltype,
    number,
    optional,
    predicate,
    shape,
    string,
    tagged_union,
    tuple_,
    undefinedtype,
    union,
    union_many,
)
from reify.config import Settings, get_settings
from reify.core.diagnostics import ValidationError, ValidationResult
from reify.core.engine import explain
from reify.core.models import UNDEFINED, FailureCode, ValidateOptions, Validator

__all__ = [
    "UNDEFINED",
    "FailureCode",
    "Settings",
    "ValidateOptions",
    "ValidationError",
    "ValidationResult",
    "Validator",
    "array",
    "boolean",
    "explain",
    "get_settings",
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
