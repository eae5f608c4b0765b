"""
Tests for symcore number and symbol leaves.

Covers exact rational arithmetic, number kinds, exact square roots and
symbol interning.
"""

import pytest
import sys
import os
import copy
from fractions import Fraction

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from symcore import (
    Number, NumberKind, Symbol, AlgebraicKind, Commutativity, symbol, symbols,
    rational, integer, float_, DivisionByZeroError,
)


class TestNumber:
    """Test Number construction and arithmetic."""

    def test_rational_reduces(self):
        """rational(2, 4) is stored reduced."""
        r = rational(2, 4)
        assert r == Number(Fraction(1, 2))
        assert r.numerator == 1
        assert r.denominator == 2

    def test_rational_with_unit_denominator_is_integer(self):
        """A rational with denominator one collapses to an integer."""
        r = rational(4, 2)
        assert r.is_integer()
        assert r == integer(2)

    def test_negative_denominator_moves_sign(self):
        """The denominator of a stored rational is positive."""
        r = rational(1, -3)
        assert r.numerator == -1
        assert r.denominator == 3

    def test_zero_denominator_raises(self):
        """rational(n, 0) raises DivisionByZeroError."""
        with pytest.raises(DivisionByZeroError):
            rational(1, 0)

    def test_kinds(self):
        """Each storage variant reports its kind."""
        assert integer(5).kind is NumberKind.INTEGER
        assert integer(2 ** 70).kind is NumberKind.BIG_INTEGER
        assert rational(1, 3).kind is NumberKind.RATIONAL
        assert float_(0.5).kind is NumberKind.FLOAT

    def test_exact_and_float_differ(self):
        """Integer 2 and float 2.0 are different nodes."""
        assert Number(2) != Number(2.0)

    def test_exact_addition(self):
        """1/2 + 1/3 = 5/6 exactly."""
        assert rational(1, 2).add(rational(1, 3)) == rational(5, 6)

    def test_float_absorbs(self):
        """Mixing a float with an exact value gives a float."""
        result = rational(1, 2).add(float_(0.25))
        assert result.is_float()
        assert result.value == pytest.approx(0.75)

    def test_big_integer_arithmetic_is_exact(self):
        """Products beyond 64 bits stay exact."""
        big = integer(2 ** 63)
        assert big.mul(integer(4)) == integer(2 ** 65)

    def test_negative_integer_power_is_rational(self):
        """2^-3 = 1/8."""
        assert integer(2).pow_int(-3) == rational(1, 8)

    def test_rational_power(self):
        """(2/3)^2 = 4/9."""
        assert rational(2, 3).pow_int(2) == rational(4, 9)

    def test_zero_to_negative_power_raises(self):
        """0^-1 raises DivisionByZeroError."""
        with pytest.raises(DivisionByZeroError):
            integer(0).pow_int(-1)

    def test_division(self):
        """3 / 6 = 1/2; division by zero raises."""
        assert integer(3).div(integer(6)) == rational(1, 2)
        with pytest.raises(DivisionByZeroError):
            integer(3).div(integer(0))

    def test_sqrt_exact(self):
        """Perfect squares have exact roots; others return None."""
        assert integer(49).sqrt_exact() == integer(7)
        assert rational(4, 9).sqrt_exact() == rational(2, 3)
        assert integer(2).sqrt_exact() is None
        assert integer(-4).sqrt_exact() is None

    def test_string_forms(self):
        """Rationals print as num/den."""
        assert str(rational(-1, 2)) == "-1/2"
        assert str(integer(7)) == "7"

    def test_predicates(self):
        """Zero and one checks distinguish exact from float values."""
        assert integer(0).is_exact_zero()
        assert not float_(0.0).is_exact_zero()
        assert float_(0.0).is_zero()
        assert integer(1).is_one()
        assert not float_(1.0).is_one()

    def test_compare(self):
        """compare orders mixed exact and float values."""
        assert rational(1, 3).compare(float_(0.5)) == -1
        assert integer(2).compare(rational(4, 2)) == 0
        assert integer(3).compare(rational(5, 2)) == 1


class TestSymbol:
    """Test interned symbols."""

    def test_interning(self):
        """The same name and kind give the same object."""
        assert symbol("x") is symbol("x")
        assert Symbol("x") is symbol("x")

    def test_kind_is_part_of_identity(self):
        """A matrix symbol is distinct from the scalar of the same name."""
        a_scalar = symbol("A")
        a_matrix = symbol("A", "matrix")
        assert a_scalar is not a_matrix
        assert a_scalar != a_matrix
        assert a_matrix.kind is AlgebraicKind.MATRIX

    def test_commutativity_from_kind(self):
        """Scalar symbols commute; matrix symbols do not."""
        assert symbol("x").commutativity is Commutativity.COMMUTATIVE
        assert symbol("M", "matrix").commutativity is Commutativity.NON_COMMUTATIVE

    def test_empty_name_rejected(self):
        """A symbol needs a non-empty name."""
        with pytest.raises(ValueError):
            symbol("")

    def test_copy_keeps_identity(self):
        """Copies of a symbol are the symbol itself."""
        x = symbol("x")
        assert copy.copy(x) is x
        assert copy.deepcopy(x) is x

    def test_symbols_helper(self):
        """symbols() splits on whitespace and commas."""
        a, b, c = symbols("a, b c")
        assert (a.name, b.name, c.name) == ("a", "b", "c")
