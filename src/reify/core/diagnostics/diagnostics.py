"""
Diagnostics - Observational failure tracing.

Rejecting combinators describe what failed as ValidationError records.
Records are either handed back to the caller (``explain``) or written as
trace lines to a sink; they never influence the boolean verdict.
"""

import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from reify.core.models import UNDEFINED, FailureCode

logger = logging.getLogger(__name__)


@dataclass
class ValidationError:
    """A single rejection reported by one combinator."""

    path: str  # e.g. "items[2].name", "" for the root value
    message: str
    code: FailureCode

    def describe(self) -> str:
        location = self.path or "<root>"
        return f"{location}: [{self.code.value}] {self.message}"


@dataclass
class ValidationResult:
    """Result of explaining a validator against one value."""

    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def codes(self) -> list[FailureCode]:
        return [error.code for error in self.errors]


def render(value: Any, limit: int) -> str:
    """Serialise *value* for a trace line, truncated to *limit* characters."""
    if value is UNDEFINED:
        text = "undefined"
    else:
        try:
            text = json.dumps(value, default=_safe_repr, ensure_ascii=False)
        except (TypeError, ValueError, RecursionError):
            text = _safe_repr(value)
    if len(text) > limit:
        text = text[: limit - 3] + "..."
    return text


def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception:
        return f"<{type(value).__name__}>"


def log_sink(line: str) -> None:
    """Default sink: one INFO record per trace line."""
    logger.info(line)


def emit(errors: Iterable[ValidationError], sink: Callable[[str], None] | None = None) -> None:
    """Write trace lines for *errors* to *sink* (or the module logger)."""
    write = sink or log_sink
    for error in errors:
        try:
            write(error.describe())
        except Exception:
            logger.exception(f"Diagnostics sink failed while reporting {error.path or '<root>'}")
