"""Built-in constraint kinds.

Each constraint is specialized by the kind of field it applies to: ``min`` on
an integer field is a numeric lower bound, while ``min`` on a text field is a
minimum length. There is one class per (field kind, constraint name) pair:

=========  ============  ==============  ==================================
Name       Integer       Text            Parameter
=========  ============  ==============  ==================================
``min``    IntegerMin    TextMin         integer bound
``max``    IntegerMax    TextMax         integer bound
``len``    (none)        TextLen         exact length
``in``     IntegerIn     TextIn          comma-separated allowed values
=========  ============  ==============  ==================================

Every class builds itself from annotation text with ``from_text`` and checks
a field value with ``check``, which returns a ``ConstraintViolation`` or
``None``.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from .exceptions import ConstraintParameterError, ConstraintViolation
from .kinds import FieldKind

_INTEGER_LITERAL = re.compile(r"-?[0-9]+")


def parse_integer(raw: str, constraint: str) -> int:
    """Parse an integer constraint parameter.

    Accepts an optional leading ``-`` followed by ASCII digits and nothing
    else.

    Raises:
        ConstraintParameterError: If ``raw`` is not an integer literal
    """
    if not _INTEGER_LITERAL.fullmatch(raw):
        raise ConstraintParameterError(constraint, raw, "not an integer")
    return int(raw)


def parse_integer_list(raw: str, constraint: str) -> tuple[int, ...]:
    """Parse a comma-separated list of integer literals."""
    return tuple(parse_integer(item, constraint) for item in raw.split(","))


def _format_members(members: tuple[Any, ...]) -> str:
    return "[" + ", ".join(repr(member) for member in members) + "]"


class Constraint(ABC):
    """Base class for all constraints."""

    name: ClassVar[str]
    kind: ClassVar[FieldKind]

    @classmethod
    @abstractmethod
    def from_text(cls, raw: str) -> Constraint:
        """Build the constraint from its annotation parameter text.

        Args:
            raw: Parameter text, the part after ``:`` in the clause

        Returns:
            The constraint instance

        Raises:
            ConstraintParameterError: If the parameter is invalid
        """

    @abstractmethod
    def check(self, value: Any) -> ConstraintViolation | None:
        """Evaluate the constraint against a field value.

        Args:
            value: Field value of the constraint's kind

        Returns:
            A ``ConstraintViolation`` when the value fails, otherwise ``None``
        """

    def _violation(self, value: Any, parameter: Any, message: str) -> ConstraintViolation:
        return ConstraintViolation(self.name, value, parameter, message)


@dataclass(frozen=True)
class IntegerMin(Constraint):
    """Integer value must be at least ``bound``."""

    bound: int

    name: ClassVar[str] = "min"
    kind: ClassVar[FieldKind] = FieldKind.INTEGER

    @classmethod
    def from_text(cls, raw: str) -> IntegerMin:
        return cls(parse_integer(raw, cls.name))

    def check(self, value: int) -> ConstraintViolation | None:
        if value < self.bound:
            return self._violation(
                value, self.bound, f"{value} is less than min allowed {self.bound}"
            )
        return None


@dataclass(frozen=True)
class IntegerMax(Constraint):
    """Integer value must be at most ``bound``."""

    bound: int

    name: ClassVar[str] = "max"
    kind: ClassVar[FieldKind] = FieldKind.INTEGER

    @classmethod
    def from_text(cls, raw: str) -> IntegerMax:
        return cls(parse_integer(raw, cls.name))

    def check(self, value: int) -> ConstraintViolation | None:
        if value > self.bound:
            return self._violation(
                value, self.bound, f"{value} is higher than max allowed {self.bound}"
            )
        return None


@dataclass(frozen=True)
class IntegerIn(Constraint):
    """Integer value must be one of ``members``."""

    members: tuple[int, ...]

    name: ClassVar[str] = "in"
    kind: ClassVar[FieldKind] = FieldKind.INTEGER

    @classmethod
    def from_text(cls, raw: str) -> IntegerIn:
        return cls(parse_integer_list(raw, cls.name))

    def check(self, value: int) -> ConstraintViolation | None:
        if value not in self.members:
            return self._violation(
                value, list(self.members), f"{value} is not in {_format_members(self.members)}"
            )
        return None


@dataclass(frozen=True)
class TextMin(Constraint):
    """Text must be at least ``bound`` characters long."""

    bound: int

    name: ClassVar[str] = "min"
    kind: ClassVar[FieldKind] = FieldKind.TEXT

    @classmethod
    def from_text(cls, raw: str) -> TextMin:
        return cls(parse_integer(raw, cls.name))

    def check(self, value: str) -> ConstraintViolation | None:
        if len(value) < self.bound:
            return self._violation(
                value,
                self.bound,
                f"len of {value!r} is less than min allowed {self.bound}",
            )
        return None


@dataclass(frozen=True)
class TextMax(Constraint):
    """Text must be at most ``bound`` characters long."""

    bound: int

    name: ClassVar[str] = "max"
    kind: ClassVar[FieldKind] = FieldKind.TEXT

    @classmethod
    def from_text(cls, raw: str) -> TextMax:
        return cls(parse_integer(raw, cls.name))

    def check(self, value: str) -> ConstraintViolation | None:
        if len(value) > self.bound:
            return self._violation(
                value,
                self.bound,
                f"len of {value!r} is higher than max allowed {self.bound}",
            )
        return None


@dataclass(frozen=True)
class TextLen(Constraint):
    """Text must be exactly ``length`` characters long."""

    length: int

    name: ClassVar[str] = "len"
    kind: ClassVar[FieldKind] = FieldKind.TEXT

    @classmethod
    def from_text(cls, raw: str) -> TextLen:
        return cls(parse_integer(raw, cls.name))

    def check(self, value: str) -> ConstraintViolation | None:
        if len(value) != self.length:
            return self._violation(
                value,
                self.length,
                f"len of {value!r} is not equal to {self.length}",
            )
        return None


@dataclass(frozen=True)
class TextIn(Constraint):
    """Text must equal one of ``members``.

    Members are taken verbatim, so ``"a,,b"`` allows the empty string.
    """

    members: tuple[str, ...]

    name: ClassVar[str] = "in"
    kind: ClassVar[FieldKind] = FieldKind.TEXT

    @classmethod
    def from_text(cls, raw: str) -> TextIn:
        return cls(tuple(raw.split(",")))

    def check(self, value: str) -> ConstraintViolation | None:
        if value not in self.members:
            return self._violation(
                value,
                list(self.members),
                f"{value!r} is not in {_format_members(self.members)}",
            )
        return None


__all__ = [
    "Constraint",
    "IntegerMin",
    "IntegerMax",
    "IntegerIn",
    "TextMin",
    "TextMax",
    "TextLen",
    "TextIn",
    "parse_integer",
    "parse_integer_list",
]
