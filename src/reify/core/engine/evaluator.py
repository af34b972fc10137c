"""
Evaluator - The recursive interpreter behind every validator.

Responsibilities:
1. Dispatch on the node kind and apply its acceptance rule
2. Track the path of the value under inspection
3. Record a ValidationError for every rejecting combinator
4. Bound nesting depth so evaluation always returns a verdict

Records are only collected when someone will read them (trace logging or
``explain``); the verdict is computed identically either way.
"""

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from reify.config import get_settings
from reify.core.diagnostics import ValidationError, ValidationResult, emit, render
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
    canonicalize,
)


@dataclass
class EvaluationContext:
    """Mutable bookkeeping for a single top-level call."""

    collect: bool
    max_depth: int
    render_limit: int
    depth: int = 0
    segments: list[str] = field(default_factory=list)
    failures: list[ValidationError] = field(default_factory=list)

    @property
    def path(self) -> str:
        return "".join(self.segments).lstrip(".")

    def render(self, value: Any) -> str:
        return render(value, self.render_limit)

    def report(self, code: FailureCode, message: Callable[[], str]) -> None:
        """Record a failure; *message* is only built when failures are collected."""
        if not self.collect:
            return
        self.failures.append(ValidationError(path=self.path, message=message(), code=code))

    @contextmanager
    def at(self, segment: str) -> Iterator[None]:
        """Descend into a field (``.name``) or index (``[3]``)."""
        self.segments.append(segment)
        try:
            yield
        finally:
            self.segments.pop()

    @contextmanager
    def scratch(self) -> Iterator[list[ValidationError]]:
        """Collect failures separately so they can be dropped if unneeded."""
        outer = self.failures
        self.failures = []
        try:
            yield self.failures
        finally:
            self.failures = outer


def evaluate(node: Validator, value: Any, ctx: EvaluationContext) -> bool:
    """Evaluate *node* against *value*."""
    if ctx.depth >= ctx.max_depth:
        ctx.report(
            FailureCode.DEPTH_EXCEEDED,
            lambda: f"Schema nesting exceeds max depth of {ctx.max_depth}",
        )
        return False

    ctx.depth += 1
    try:
        if isinstance(node, Primitive):
            return _check_primitive(node.kind, value)

        if isinstance(node, Literal):
            return canonicalize(value) == node.canonical

        if isinstance(node, Shape):
            if not isinstance(value, Mapping):
                ctx.report(
                    FailureCode.INVALID_TYPE,
                    lambda: f"Shape expected an object, got: {ctx.render(value)}",
                )
                return False
            return _check_fields(node.fields, value, ctx)

        if isinstance(node, Array):
            if not _is_sequence(value):
                ctx.report(
                    FailureCode.INVALID_TYPE,
                    lambda: f"Array expected a sequence, got: {ctx.render(value)}",
                )
                return False
            for index, item in enumerate(value):
                with ctx.at(f"[{index}]"):
                    if not evaluate(node.member, item, ctx):
                        ctx.report(
                            FailureCode.INVALID_ELEMENT,
                            lambda: f'Member of array "{ctx.render(item)}" does not match expected type',
                        )
                        return False
            return True

        if isinstance(node, Tuple):
            if not _is_sequence(value):
                ctx.report(
                    FailureCode.INVALID_TYPE,
                    lambda: f"Tuple expected a sequence, got: {ctx.render(value)}",
                )
                return False
            if len(value) != len(node.members):
                ctx.report(
                    FailureCode.LENGTH_MISMATCH,
                    lambda: f"Tuple expected {len(node.members)} members, got {len(value)}",
                )
                return False
            for index, (member, item) in enumerate(zip(node.members, value)):
                with ctx.at(f"[{index}]"):
                    if not evaluate(member, item, ctx):
                        ctx.report(
                            FailureCode.INVALID_ELEMENT,
                            lambda: f'Member of tuple "{ctx.render(item)}" does not match expected type',
                        )
                        return False
            return True

        if isinstance(node, Union):
            with ctx.scratch() as member_failures:
                matches = any(evaluate(member, value, ctx) for member in node.members)
            if not matches:
                ctx.failures.extend(member_failures)
                ctx.report(
                    FailureCode.NO_MATCH,
                    lambda: f'Member of union "{ctx.render(value)}" does not match any of '
                    f"{len(node.members)} members",
                )
            return matches

        if isinstance(node, Intersection):
            # Every member runs so the trace does not depend on member order
            results = [evaluate(member, value, ctx) for member in node.members]
            matches = all(results)
            if not matches:
                ctx.report(
                    FailureCode.INTERSECTION_FAILED,
                    lambda: f'Member of intersection "{ctx.render(value)}" failed '
                    f"{results.count(False)} of {len(results)} members",
                )
            return matches

        if isinstance(node, TaggedUnion):
            if not isinstance(value, Mapping) or node.tag not in value:
                ctx.report(
                    FailureCode.MISSING_TAG,
                    lambda: f"Tagged union is not an object or missing tag '{node.tag}'",
                )
                return False
            tag_value = value[node.tag]
            variant = node.variants.get(tag_value) if isinstance(tag_value, str) else None
            if variant is None:
                ctx.report(
                    FailureCode.UNKNOWN_TAG,
                    lambda: f"Tagged union has no variant for {node.tag}={ctx.render(tag_value)}",
                )
                return False
            return _check_fields(variant.fields, value, ctx)

        if isinstance(node, Predicate):
            try:
                return bool(node.func(value))
            except Exception as e:
                ctx.report(
                    FailureCode.PREDICATE_ERROR,
                    lambda: f"Predicate {node.name} raised {type(e).__name__}: {e}",
                )
                return False

        raise TypeError(f"Unknown validator node: {type(node).__name__}")
    finally:
        ctx.depth -= 1


def _check_primitive(kind: PrimitiveKind, value: Any) -> bool:
    if kind == PrimitiveKind.UNDEFINED:
        return value is UNDEFINED
    if kind == PrimitiveKind.NULL:
        return value is None
    if kind == PrimitiveKind.BOOLEAN:
        return isinstance(value, bool)
    if kind == PrimitiveKind.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, str)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _check_fields(fields: Mapping[str, Validator], value: Mapping[str, Any], ctx: EvaluationContext) -> bool:
    """Check declared fields only; undeclared fields on *value* are ignored."""
    for key, child in fields.items():
        member = value[key] if key in value else UNDEFINED
        with ctx.at(f".{key}"):
            if not evaluate(child, member, ctx):
                ctx.report(
                    FailureCode.MISSING_FIELD if member is UNDEFINED else FailureCode.INVALID_FIELD,
                    lambda: f"Member of shape {ctx.render(member)} for {key} does not match expected type",
                )
                return False
    return True


def _evaluate_root(node: Validator, value: Any, ctx: EvaluationContext) -> bool:
    """Evaluate from the root, rejecting if the interpreter stack runs out first."""
    root_failures = ctx.failures
    try:
        return evaluate(node, value, ctx)
    except RecursionError:
        ctx.depth = 0
        ctx.segments.clear()
        ctx.failures = root_failures
        ctx.report(
            FailureCode.DEPTH_EXCEEDED,
            lambda: "Interpreter stack exhausted before max depth was reached",
        )
        return False


def _new_context(collect: bool) -> EvaluationContext:
    settings = get_settings()
    return EvaluationContext(
        collect=collect,
        max_depth=settings.max_depth,
        render_limit=settings.render_limit,
    )


def run(node: Validator, value: Any, opts: ValidateOptions | Mapping[str, Any] | None = None) -> bool:
    """
    Evaluate *node* against *value* as a top-level call.

    Args:
        node: Validator to apply
        value: Any value at all
        opts: Diagnostics options; trace lines are written only when
            ``log_failures`` is set

    Returns:
        True if the value conforms
    """
    options = ValidateOptions.coerce(opts)
    ctx = _new_context(collect=options.log_failures)
    matches = _evaluate_root(node, value, ctx)
    if options.log_failures and ctx.failures:
        emit(ctx.failures, options.sink)
    return matches


def explain(node: Validator, value: Any) -> ValidationResult:
    """Evaluate *node* and return every failure record instead of logging it."""
    ctx = _new_context(collect=True)
    matches = _evaluate_root(node, value, ctx)
    return ValidationResult(valid=matches, errors=[] if matches else ctx.failures)
