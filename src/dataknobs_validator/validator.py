"""Record validation engine.

The validator walks a record's fields in declaration order and collects every
failure instead of stopping at the first one:

- fields with no annotation anywhere in their shape are skipped
- annotated private fields are reported without being read
- nested records are validated through the same entry point and their errors
  are wrapped with the outer field's name
- leaf fields have their annotation parsed and every constraint evaluated

Only a non-record top-level value aborts the call (``NotRecordError``).

Example:
    ```python
    from dataclasses import dataclass
    from dataknobs_validator import tagged, validate

    @dataclass
    class Product:
        code: str = tagged("len:6")
        stock: int = tagged("min:0;max:1000")

    validate(Product(code="ABC123", stock=4))  # returns None
    ```
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Final

from .config import ValidatorConfig
from .exceptions import (
    FieldError,
    FieldTypeError,
    MalformedAnnotationError,
    NotRecordError,
    UnexportedFieldError,
    ValidationErrors,
)
from .kinds import FieldKind, classify
from .parser import parse_annotation
from .shapes import FieldDescriptor, ShapeRegistry

logger = logging.getLogger(__name__)


class Validator:
    """Validates records against the annotations on their fields.

    A validator holds no per-call state, so one instance can validate any
    number of values, including from several threads at once.

    Args:
        config: Validator settings (defaults to ``ValidatorConfig()``)
        registry: Shape registry to use; a new one keyed by ``config.tag``
            is created when omitted
    """

    def __init__(
        self,
        config: ValidatorConfig | None = None,
        registry: ShapeRegistry | None = None,
    ):
        self.config = config or ValidatorConfig()
        if registry is not None and registry.tag != self.config.tag:
            logger.warning(
                f"Registry tag '{registry.tag}' differs from configured tag "
                f"'{self.config.tag}'; the registry's tag is used"
            )
        self.registry = registry or ShapeRegistry(tag=self.config.tag)

    def validate(self, value: Any) -> None:
        """Validate a record, raising on failure.

        Args:
            value: Record to validate

        Raises:
            NotRecordError: If ``value`` is not a record
            ValidationErrors: If any field fails validation
        """
        errors = self.check(value)
        if errors is not None:
            raise errors

    def check(self, value: Any) -> ValidationErrors | None:
        """Validate a record, returning the failures.

        Args:
            value: Record to validate

        Returns:
            The aggregate of field errors, or None when the record is valid

        Raises:
            NotRecordError: If ``value`` is not a record
        """
        errors = self._collect(value)
        if not errors:
            return None
        logger.debug(f"{type(value).__qualname__} failed validation with {len(errors)} error(s)")
        return ValidationErrors(errors)

    def _collect(self, value: Any) -> list[FieldError]:
        shape = self.registry.shape_of(value)
        if shape is None:
            raise NotRecordError(value)

        errors: list[FieldError] = []
        for descriptor in shape.fields:
            if not self.registry.needs_validation(descriptor):
                continue

            if not descriptor.exported:
                errors.append(FieldError(descriptor.name, UnexportedFieldError()))
                continue

            field_value = getattr(value, descriptor.name)
            if descriptor.deferred:
                errors.extend(self._check_deferred(descriptor, field_value))
            elif descriptor.kind is FieldKind.RECORD:
                errors.extend(self._check_nested(descriptor, field_value))
            else:
                errors.extend(self._check_leaf(descriptor, field_value))

        return errors

    def _check_nested(self, descriptor: FieldDescriptor, value: Any) -> list[FieldError]:
        try:
            nested = self._collect(value)
        except NotRecordError as e:
            return [FieldError(descriptor.name, e)]
        return [FieldError(descriptor.name, error) for error in nested]

    def _check_deferred(self, descriptor: FieldDescriptor, value: Any) -> list[FieldError]:
        # The declared type never resolved, so the value decides the kind.
        if self.registry.shape_of(value) is not None:
            return self._check_nested(descriptor, value)
        kind = classify(type(value))
        if descriptor.annotated and kind.is_leaf:
            return self._check_leaf(replace(descriptor, kind=kind), value)
        return []

    def _check_leaf(self, descriptor: FieldDescriptor, value: Any) -> list[FieldError]:
        try:
            constraints = parse_annotation(descriptor.kind, descriptor.annotation or "")
        except MalformedAnnotationError as e:
            return [FieldError(descriptor.name, e)]

        if self.config.check_types and not descriptor.kind.accepts(value):
            return [FieldError(descriptor.name, FieldTypeError(descriptor.kind.value, value))]

        errors = []
        for constraint in constraints:
            violation = constraint.check(value)
            if violation is not None:
                errors.append(FieldError(descriptor.name, violation))
        return errors


_VALIDATOR: Final[Validator] = Validator()


def get_validator() -> Validator:
    """Return the process-wide default validator."""
    return _VALIDATOR


def validate(value: Any) -> None:
    """Validate a record with the default validator, raising on failure.

    Raises:
        NotRecordError: If ``value`` is not a record
        ValidationErrors: If any field fails validation
    """
    _VALIDATOR.validate(value)


def check(value: Any) -> ValidationErrors | None:
    """Validate a record with the default validator, returning the failures."""
    return _VALIDATOR.check(value)


__all__ = ["Validator", "check", "get_validator", "validate"]
