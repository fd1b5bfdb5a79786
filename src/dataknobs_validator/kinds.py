"""Field kinds recognized by the validator."""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any, Callable


class FieldKind(Enum):
    """Classification of a field's declared type.

    Only ``INTEGER`` and ``TEXT`` fields carry constraints. ``RECORD`` fields
    are validated recursively, and ``OTHER`` fields are never looked at.
    """

    INTEGER = "integer"
    TEXT = "text"
    RECORD = "record"
    OTHER = "other"

    @property
    def is_leaf(self) -> bool:
        """True for kinds whose values are checked against constraints."""
        return self in (FieldKind.INTEGER, FieldKind.TEXT)

    def accepts(self, value: Any) -> bool:
        """Check whether a runtime value belongs to this leaf kind.

        ``bool`` is rejected for ``INTEGER`` even though it subclasses ``int``.
        """
        if self is FieldKind.INTEGER:
            return isinstance(value, int) and not isinstance(value, bool)
        if self is FieldKind.TEXT:
            return isinstance(value, str)
        return False


def classify(declared: Any, is_record: Callable[[type], bool] | None = None) -> FieldKind:
    """Map a declared field type to its ``FieldKind``.

    Args:
        declared: The resolved type annotation of the field
        is_record: Optional predicate for types with a registered shape

    Returns:
        The field kind. Anything that is not a plain class (``Optional[int]``,
        ``list[str]``, unresolved forward references) is ``OTHER``.
    """
    if not isinstance(declared, type):
        return FieldKind.OTHER
    if issubclass(declared, bool):
        return FieldKind.OTHER
    if issubclass(declared, int):
        return FieldKind.INTEGER
    if issubclass(declared, str):
        return FieldKind.TEXT
    if dataclasses.is_dataclass(declared):
        return FieldKind.RECORD
    if is_record is not None and is_record(declared):
        return FieldKind.RECORD
    return FieldKind.OTHER
