"""
Tests for common-factor extraction.

Tests:
- Rational content and shared powers pulled out of sums
- Sums without a common factor
- Content and primitive part through the polynomial engine
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from symcore import (
    symbol, integer, rational, float_, add, mul, pow_, sub, sin,
    simplify, expand, factor, factor_out_gcd, NotPolynomialError,
)


# === Test Fixtures ===

@pytest.fixture
def x():
    return symbol("x")


@pytest.fixture
def y():
    return symbol("y")


class TestFactor:
    """Test structural factoring."""

    def test_integer_content(self, x):
        """6x + 9 = 3*(2x + 3)."""
        assert factor(add([mul([6, x]), 9])) == mul([3, add([mul([2, x]), 3])])

    def test_common_symbol(self, x, y):
        """x*y + x = x*(y + 1)."""
        assert factor(add([mul([x, y]), x])) == mul([x, add([y, 1])])

    def test_content_and_powers(self, x):
        """2x^3 + 4x^2 = 2*x^2*(x + 2)."""
        e = add([mul([2, pow_(x, 3)]), mul([4, pow_(x, 2)])])
        assert factor(e) == mul([2, pow_(x, 2), add([x, 2])])

    def test_negative_content(self, x):
        """-2x - 4 = -2*(x + 2)."""
        assert factor(add([mul([-2, x]), -4])) == mul([-2, add([x, 2])])

    def test_rational_content(self, x):
        """x/2 + 1/3 = (1/6)*(3x + 2)."""
        e = add([mul([rational(1, 2), x]), rational(1, 3)])
        assert factor(e) == mul([rational(1, 6), add([mul([3, x]), 2])])

    def test_float_coefficients_keep_powers(self, x):
        """Float coefficients give no numeric content; x still comes out."""
        e = add([mul([float_(0.5), x]), mul([float_(1.5), pow_(x, 2)])])
        assert factor(e) == mul([x, add([float_(0.5), mul([float_(1.5), x])])])

    def test_no_common_factor(self, x, y):
        """x + y is unchanged."""
        e = add([x, y])
        assert factor(e) == e

    def test_inside_function(self, x):
        """Sums inside function arguments are factored."""
        assert factor(sin(add([mul([2, x]), 4]))) == sin(mul([2, add([x, 2])]))

    def test_expand_inverts(self, x, y):
        """Expanding the factored form gives back the input."""
        e = add([mul([6, pow_(x, 2), y]), mul([9, x, pow_(y, 2)])])
        factored = factor(e)
        assert factored == mul([3, x, y, add([mul([2, x]), mul([3, y])])])
        assert simplify(sub(expand(factored), e)) == integer(0)


class TestFactorOutGcd:
    """Test content extraction through the polynomial engine."""

    def test_numeric_content(self, x, y):
        """6x + 4y = 2*(3x + 2y)."""
        e = add([mul([6, x]), mul([4, y])])
        assert factor_out_gcd(e) == mul([2, simplify(add([mul([3, x]), mul([2, y])]))])

    def test_content_in_variable(self, x, y):
        """x*y + y in x is y*(x + 1)."""
        assert factor_out_gcd(add([mul([x, y]), y]), x) == mul([y, simplify(add([x, 1]))])

    def test_primitive_input(self, x):
        """x + 1 has content 1 and is returned simplified."""
        assert factor_out_gcd(add([x, 1])) == simplify(add([x, 1]))

    def test_zero(self, x):
        """The zero polynomial stays zero."""
        assert factor_out_gcd(sub(x, x)) == integer(0)

    def test_non_polynomial(self, x):
        """sin(x) has no polynomial content."""
        with pytest.raises(NotPolynomialError):
            factor_out_gcd(sin(x))
