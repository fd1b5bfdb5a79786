"""Annotation parsing.

An annotation is a ``;``-separated list of ``key:value`` clauses, for example
``"min:0;max:10"`` or ``"len:2;in:ab,cd"``. Parsing is all or nothing: a
single bad clause fails the whole annotation.
"""

from __future__ import annotations

import logging

from .constraints import (
    Constraint,
    IntegerIn,
    IntegerMax,
    IntegerMin,
    TextIn,
    TextLen,
    TextMax,
    TextMin,
)
from .exceptions import (
    ConstraintParameterError,
    MalformedAnnotationError,
    UnsupportedFieldKindError,
)
from .kinds import FieldKind

logger = logging.getLogger(__name__)

CLAUSE_SEPARATOR = ";"
KEY_SEPARATOR = ":"


def _integer_constraint(key: str) -> type[Constraint] | None:
    if key == "min":
        return IntegerMin
    elif key == "max":
        return IntegerMax
    elif key == "in":
        return IntegerIn
    return None


def _text_constraint(key: str) -> type[Constraint] | None:
    if key == "min":
        return TextMin
    elif key == "max":
        return TextMax
    elif key == "len":
        return TextLen
    elif key == "in":
        return TextIn
    return None


def constraint_class(kind: FieldKind, key: str) -> type[Constraint] | None:
    """Look up the constraint class for a field kind and clause key.

    Args:
        kind: Leaf field kind
        key: Constraint name from the annotation

    Returns:
        The constraint class, or ``None`` if the kind has no such constraint

    Raises:
        UnsupportedFieldKindError: If ``kind`` is not a leaf kind
    """
    if kind is FieldKind.INTEGER:
        return _integer_constraint(key)
    elif kind is FieldKind.TEXT:
        return _text_constraint(key)
    raise UnsupportedFieldKindError(f"unsupported field kind: {kind.value}")


def parse_annotation(kind: FieldKind, annotation: str) -> list[Constraint]:
    """Parse a field annotation into its constraints.

    Args:
        kind: Kind of the annotated field (``INTEGER`` or ``TEXT``)
        annotation: Raw annotation text

    Returns:
        Constraints in clause order

    Raises:
        MalformedAnnotationError: If any clause is malformed, names an unknown
            constraint, or carries an invalid parameter
        UnsupportedFieldKindError: If ``kind`` is not a leaf kind
    """
    if not kind.is_leaf:
        raise UnsupportedFieldKindError(f"unsupported field kind: {kind.value}")

    constraints: list[Constraint] = []
    for clause in annotation.split(CLAUSE_SEPARATOR):
        parts = clause.split(KEY_SEPARATOR)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            logger.debug(f"Malformed clause {clause!r} in annotation {annotation!r}")
            raise MalformedAnnotationError(annotation, f"malformed clause {clause!r}")

        key, raw = parts
        cls = constraint_class(kind, key)
        if cls is None:
            logger.debug(f"Unknown {kind.value} constraint '{key}' in {annotation!r}")
            raise MalformedAnnotationError(annotation, f"unknown constraint '{key}'")

        try:
            constraints.append(cls.from_text(raw))
        except ConstraintParameterError as e:
            logger.debug(f"Rejected parameter in annotation {annotation!r}: {e}")
            raise MalformedAnnotationError(annotation, str(e)) from e

    return constraints


__all__ = ["parse_annotation", "constraint_class"]
