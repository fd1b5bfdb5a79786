"""Tests for the built-in constraint kinds."""

import pytest

from dataknobs_validator import (
    ConstraintParameterError,
    ConstraintViolation,
    FieldKind,
    IntegerIn,
    IntegerMax,
    IntegerMin,
    TextIn,
    TextLen,
    TextMax,
    TextMin,
)
from dataknobs_validator.constraints import parse_integer, parse_integer_list


class TestParseInteger:
    """Test integer parameter parsing."""

    @pytest.mark.parametrize("raw,expected", [("0", 0), ("10", 10), ("-12", -12), ("007", 7)])
    def test_valid_literals(self, raw, expected):
        """Test that plain and negative integers parse."""
        assert parse_integer(raw, "min") == expected

    @pytest.mark.parametrize("raw", ["abc", "5-", "%12", "", "-", "+5", " 5", "1_000", "1.5"])
    def test_invalid_literals(self, raw):
        """Test that anything but an optional minus and digits is rejected."""
        with pytest.raises(ConstraintParameterError) as exc_info:
            parse_integer(raw, "min")
        assert exc_info.value.context["raw"] == raw
        assert exc_info.value.context["constraint"] == "min"

    def test_integer_list(self):
        """Test comma-separated integer lists keep their order."""
        assert parse_integer_list("20,-25,30", "in") == (20, -25, 30)

    def test_integer_list_rejects_bad_member(self):
        """Test that a single bad member fails the whole list."""
        with pytest.raises(ConstraintParameterError):
            parse_integer_list("1,x,3", "in")


class TestIntegerConstraints:
    """Test integer constraints."""

    def test_kinds_and_names(self):
        """Test that integer constraints are bound to the integer kind."""
        assert (IntegerMin.name, IntegerMin.kind) == ("min", FieldKind.INTEGER)
        assert (IntegerMax.name, IntegerMax.kind) == ("max", FieldKind.INTEGER)
        assert (IntegerIn.name, IntegerIn.kind) == ("in", FieldKind.INTEGER)

    def test_min(self):
        """Test numeric lower bound."""
        constraint = IntegerMin.from_text("10")
        assert constraint == IntegerMin(10)
        assert constraint.check(10) is None
        assert constraint.check(15) is None

        violation = constraint.check(5)
        assert isinstance(violation, ConstraintViolation)
        assert "5" in str(violation)
        assert "10" in str(violation)
        assert violation.constraint == "min"
        assert violation.value == 5
        assert violation.parameter == 10

    def test_negative_min(self):
        """Test negative lower bound."""
        constraint = IntegerMin.from_text("-10")
        assert constraint.check(-9) is None
        assert constraint.check(-11) is not None

    def test_max(self):
        """Test numeric upper bound."""
        constraint = IntegerMax.from_text("20")
        assert constraint.check(20) is None
        assert constraint.check(-3) is None

        violation = constraint.check(22)
        assert violation is not None
        assert "22" in str(violation)
        assert "20" in str(violation)

    def test_in(self):
        """Test integer membership."""
        constraint = IntegerIn.from_text("-1,-3,5,7")
        assert constraint.members == (-1, -3, 5, 7)
        assert constraint.check(-3) is None
        assert constraint.check(7) is None

        violation = constraint.check(2)
        assert violation is not None
        assert str(violation) == "2 is not in [-1, -3, 5, 7]"
        assert violation.parameter == [-1, -3, 5, 7]

    @pytest.mark.parametrize("cls", [IntegerMin, IntegerMax, IntegerIn])
    def test_bad_parameter(self, cls):
        """Test that non-numeric parameters fail construction."""
        with pytest.raises(ConstraintParameterError):
            cls.from_text("5-")


class TestTextConstraints:
    """Test text constraints."""

    def test_kinds_and_names(self):
        """Test that text constraints are bound to the text kind."""
        assert (TextMin.name, TextMin.kind) == ("min", FieldKind.TEXT)
        assert (TextMax.name, TextMax.kind) == ("max", FieldKind.TEXT)
        assert (TextLen.name, TextLen.kind) == ("len", FieldKind.TEXT)
        assert (TextIn.name, TextIn.kind) == ("in", FieldKind.TEXT)

    def test_min_counts_characters(self):
        """Test minimum length."""
        constraint = TextMin.from_text("3")
        assert constraint.check("abc") is None
        assert constraint.check("äöü") is None

        violation = constraint.check("ab")
        assert violation is not None
        assert "'ab'" in str(violation)
        assert "3" in str(violation)

    def test_negative_min_always_passes(self):
        """Test that a negative minimum length accepts everything."""
        assert TextMin.from_text("-1").check("") is None

    def test_max(self):
        """Test maximum length."""
        constraint = TextMax.from_text("2")
        assert constraint.check("ef") is None
        assert constraint.check("efgh") is not None

    def test_negative_max_always_fails(self):
        """Test that a negative maximum length rejects everything."""
        assert TextMax.from_text("-7").check("") is not None

    def test_len(self):
        """Test exact length."""
        constraint = TextLen.from_text("3")
        assert constraint.check("abc") is None

        violation = constraint.check("ab")
        assert violation is not None
        assert violation.constraint == "len"
        assert violation.parameter == 3
        assert "'ab'" in str(violation)
        assert "3" in str(violation)

    def test_len_zero(self):
        """Test zero length matches only the empty string."""
        constraint = TextLen.from_text("0")
        assert constraint.check("") is None
        assert constraint.check("a") is not None

    def test_in(self):
        """Test text membership."""
        constraint = TextIn.from_text("a,b,c")
        assert constraint.members == ("a", "b", "c")
        assert constraint.check("b") is None

        violation = constraint.check("z")
        assert violation is not None
        assert str(violation) == "'z' is not in ['a', 'b', 'c']"

    def test_in_allows_empty_members(self):
        """Test that empty members are legal and matched exactly."""
        constraint = TextIn.from_text("a,,b")
        assert constraint.members == ("a", "", "b")
        assert constraint.check("") is None
        assert constraint.check(" ") is not None

    def test_in_is_case_sensitive(self):
        """Test that membership uses exact equality."""
        assert TextIn.from_text("foo,bar").check("Foo") is not None

    @pytest.mark.parametrize("cls", [TextMin, TextMax, TextLen])
    def test_bad_parameter(self, cls):
        """Test that non-numeric lengths fail construction."""
        with pytest.raises(ConstraintParameterError):
            cls.from_text("abcdef")
