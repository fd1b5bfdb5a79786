"""Custom exceptions for the dataknobs_validator package.

This module defines the validator's exception types, built on the common
exception framework from dataknobs_common, and the error model used to
report field failures.

Field-level failures are collected rather than raised. Each one is wrapped in
a ``FieldError`` naming the field it belongs to, and all of them are gathered
into a ``ValidationErrors`` aggregate in field declaration order.

Example:
    ```python
    from dataknobs_validator import ValidationErrors, validate

    try:
        validate(user)
    except ValidationErrors as errors:
        for error in errors:
            print(error.path, error.root_cause)
    ```
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, Dict

from dataknobs_common import (
    ConfigurationError as BaseConfigurationError,
    DataknobsError,
    NotFoundError,
    OperationError,
    ValidationError,
)

# The package shares the common base so callers can catch any dataknobs error
ValidatorError = DataknobsError

# Use common ConfigurationError directly (no validator-specific behavior needed)
ConfigurationError = BaseConfigurationError


class ShapeRegistrationError(OperationError):
    """Raised when a record shape cannot be registered."""

    pass


class ShapeNotFoundError(NotFoundError):
    """Raised when no record shape is known for a type."""

    def __init__(self, record_type: type):
        self.record_type = record_type
        super().__init__(
            f"No record shape registered for {record_type.__qualname__}",
            context={"record_type": record_type.__qualname__},
        )


class NotRecordError(ValidationError):
    """Raised when the value handed to the validator is not a record.

    At the top level this aborts the call. For a nested record field holding
    a non-record value it is collected as that field's cause instead.
    """

    def __init__(self, value: Any = None):
        type_name = type(value).__name__
        super().__init__(
            f"wrong argument given, should be a record, got {type_name}",
            context={"type": type_name},
        )


class UnexportedFieldError(ValidationError):
    """Collected when an annotated field is private and cannot be validated."""

    def __init__(self) -> None:
        super().__init__("validation for unexported field is not allowed")


class MalformedAnnotationError(ValidationError):
    """Collected when a field annotation cannot be parsed."""

    def __init__(self, annotation: str, reason: str | None = None):
        self.annotation = annotation
        self.reason = reason
        super().__init__(
            "invalid validator syntax",
            context={"annotation": annotation, "reason": reason},
        )


class ConstraintParameterError(ValidationError):
    """Raised when a constraint rejects its parameter text.

    The parser converts this into a ``MalformedAnnotationError``.
    """

    def __init__(self, constraint: str, raw: str, reason: str):
        self.constraint = constraint
        self.raw = raw
        super().__init__(
            f"Invalid parameter {raw!r} for constraint '{constraint}': {reason}",
            context={"constraint": constraint, "raw": raw},
        )


class ConstraintViolation(ValidationError):
    """Collected when a field value does not satisfy a constraint."""

    def __init__(self, constraint: str, value: Any, parameter: Any, message: str):
        self.constraint = constraint
        self.value = value
        self.parameter = parameter
        super().__init__(
            message,
            context={"constraint": constraint, "value": value, "parameter": parameter},
        )


class FieldTypeError(ValidationError):
    """Collected when a field value does not match the field's declared kind."""

    def __init__(self, expected_kind: str, value: Any):
        self.expected_kind = expected_kind
        self.actual_type = type(value).__name__
        super().__init__(
            f"expected {expected_kind} value, got {self.actual_type}",
            context={"expected_kind": expected_kind, "actual_type": self.actual_type},
        )


class UnsupportedFieldKindError(TypeError):
    """Internal defect: a non-leaf field kind reached the constraint parser.

    The traversal engine only parses annotations of integer and text fields,
    so this is never produced by user input and is never collected into a
    ``ValidationErrors`` aggregate.
    """

    pass


class FieldError(ValidationError):
    """A failure qualified by the name of the field it occurred in.

    Nested records produce chains: an error two records deep is a
    ``FieldError`` whose cause is another ``FieldError``.

    Attributes:
        field: Name of the immediately containing field
        cause: Underlying error (a ``ValidatorError``, possibly a ``FieldError``)
    """

    def __init__(self, field: str, cause: ValidatorError):
        self.field = field
        self.cause = cause
        super().__init__(f"{field}: {cause}", context={"field": field})

    @property
    def path(self) -> tuple[str, ...]:
        """Field names from the outermost record down to the failing field."""
        names = [self.field]
        cause = self.cause
        while isinstance(cause, FieldError):
            names.append(cause.field)
            cause = cause.cause
        return tuple(names)

    @property
    def root_cause(self) -> ValidatorError:
        """The innermost cause, with all field wrapping removed."""
        cause = self.cause
        while isinstance(cause, FieldError):
            cause = cause.cause
        return cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a serializable dictionary."""
        root = self.root_cause
        return {
            "field": self.field,
            "path": list(self.path),
            "error": type(root).__name__,
            "message": str(root),
            "context": dict(root.context),
        }


class ValidationErrors(ValidationError):
    """Ordered aggregate of every ``FieldError`` found in one validation call.

    Errors appear in field declaration order, then in constraint declaration
    order within a field. A successful validation never produces an empty
    aggregate; it produces no aggregate at all.

    An aggregate holding a single error renders as that error's cause alone,
    without the field prefix. Larger aggregates render one qualified error per
    line.
    """

    def __init__(self, errors: Sequence[FieldError]):
        self.errors: list[FieldError] = list(errors)
        super().__init__(self._render(), context={"count": len(self.errors)})

    def _render(self) -> str:
        if len(self.errors) == 1:
            return str(self.errors[0].cause)
        return "\n".join(str(error) for error in self.errors)

    def __str__(self) -> str:
        return self._render()

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[FieldError]:
        return iter(self.errors)

    def __getitem__(self, index: int) -> FieldError:
        return self.errors[index]

    @property
    def fields(self) -> list[str]:
        """Top-level field names in error order (repeats kept)."""
        return [error.field for error in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a serializable dictionary."""
        return {
            "count": len(self.errors),
            "errors": [error.to_dict() for error in self.errors],
        }


__all__ = [
    "ValidatorError",
    "ConfigurationError",
    "ShapeRegistrationError",
    "ShapeNotFoundError",
    "NotRecordError",
    "UnexportedFieldError",
    "MalformedAnnotationError",
    "ConstraintParameterError",
    "ConstraintViolation",
    "FieldTypeError",
    "UnsupportedFieldKindError",
    "FieldError",
    "ValidationErrors",
]
