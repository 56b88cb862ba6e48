"""Importer exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class SkyError(Exception):
    """Base exception for all importer failures."""


class SkyConfigError(SkyError):
    """Raised for invalid runtime configuration."""


class SkyDependencyError(SkyError):
    """Raised when a module requested by a transform cannot be imported."""


class SkyIngestError(SkyError):
    """Raised for input file parsing failures."""


class UnsupportedFileTypeError(SkyIngestError):
    """Raised when no format reader matches an input file."""


class TransformNotFoundError(SkyError):
    """Raised when a named or path-based transform cannot be located."""


class TransformParseError(SkyError):
    """Raised for structurally invalid transform specifications."""


class CoercionError(SkyError):
    """Raised when a raw field value cannot be converted to its declared type."""

    def __init__(self, field: str, raw_value: object, coercion: str) -> None:
        self.field = field
        self.raw_value = raw_value
        self.coercion = coercion
        super().__init__(
            f"Cannot coerce field '{field}' value {raw_value!r} to {coercion}. "
            "Fix the input data or change the field type in the transform."
        )


class ExpressionEvaluationError(SkyError):
    """Raised when a transform expression fails during execution."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(
            f"Transform expression for '{source}' failed: {message}. "
            "Fix the expression code in the transform."
        )


class InvalidRecordError(SkyError):
    """Raised when a translated record is missing required event fields."""

    def __init__(self, line_number: int, reason: str) -> None:
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"{reason} on line {line_number}")


class SkySinkError(SkyError):
    """Raised when translated events cannot be written to the sink."""
