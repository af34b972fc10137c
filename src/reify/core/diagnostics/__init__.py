"""Diagnostics - Failure records and trace output."""

from reify.core.diagnostics.diagnostics import (
    ValidationError,
    ValidationResult,
    emit,
    log_sink,
    render,
)

__all__ = ["ValidationError", "ValidationResult", "emit", "log_sink", "render"]
