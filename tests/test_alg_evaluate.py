"""
Tests for numeric evaluation and the expression arena.
"""

import pytest
import sys
import os
import math

import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from symcore import (
    symbol, integer, rational, add, mul, pow_, neg, function, sin, ln, sqrt,
    I, PI, UNDEFINED, matrix, relation, piecewise,
    evaluate, evaluate_bulk, nth_derivative, ExprArena,
    DomainError, DivisionByZeroError,
)


# === Test Fixtures ===

@pytest.fixture
def x():
    return symbol("x")


class TestEvaluate:
    """Test scalar evaluation."""

    def test_polynomial(self, x):
        """x^2 + 1 at x = 2 is 5."""
        assert evaluate(add([pow_(x, 2), 1]), {"x": 2.0}) == pytest.approx(5.0)

    def test_exact_numbers_and_constants(self):
        """Rationals and pi evaluate to floats."""
        assert evaluate(rational(1, 4)) == pytest.approx(0.25)
        assert evaluate(mul([2, PI])) == pytest.approx(2 * math.pi)

    def test_functions(self, x):
        """Registry evaluators are used for functions."""
        assert evaluate(sin(x), {"x": 0.5}) == pytest.approx(math.sin(0.5))
        assert evaluate(sqrt(x), {"x": 9.0}) == pytest.approx(3.0)

    def test_imaginary_unit(self):
        """i * i evaluates to the real number -1."""
        value = evaluate(mul([I, I]))
        assert isinstance(value, float)
        assert value == pytest.approx(-1.0)

    def test_outside_domain(self):
        """ln(-1) is a domain error."""
        with pytest.raises(DomainError):
            evaluate(function("ln", [integer(-1)]))

    def test_unbound_variable(self, x):
        """Evaluating a free variable without a binding fails."""
        with pytest.raises(DomainError) as info:
            evaluate(add([x, 1]))
        assert "unbound variable 'x'" in str(info.value)

    def test_zero_to_negative_power(self, x):
        """0^-1 raises DivisionByZeroError."""
        with pytest.raises(DivisionByZeroError):
            evaluate(pow_(x, -1), {"x": 0.0})

    def test_negative_base_fractional_exponent(self, x):
        """(-1)^(1/2) has no real value."""
        with pytest.raises(DomainError):
            evaluate(pow_(x, rational(1, 2)), {"x": -1.0})

    def test_undefined(self):
        """The undefined sentinel has no value."""
        with pytest.raises(DomainError):
            evaluate(UNDEFINED)

    def test_matrix_rejected(self):
        """Matrices have no scalar value."""
        with pytest.raises(DomainError):
            evaluate(matrix([[1]]))

    def test_unknown_function(self, x):
        """Functions without an evaluator cannot be evaluated."""
        with pytest.raises(DomainError):
            evaluate(function("f", [x]), {"x": 1.0})

    def test_piecewise(self, x):
        """|x| as a piecewise expression."""
        e = piecewise([(x, relation(x, 0, ">="))], otherwise=neg(x))
        assert evaluate(e, {"x": 3.0}) == pytest.approx(3.0)
        assert evaluate(e, {"x": -2.0}) == pytest.approx(2.0)

    def test_piecewise_without_fallback(self, x):
        """No matching branch and no otherwise is a domain error."""
        e = piecewise([(x, relation(x, 0, ">"))])
        with pytest.raises(DomainError):
            evaluate(e, {"x": -1.0})


class TestEvaluateBulk:
    """Test vectorized evaluation."""

    def test_matches_numpy(self, x):
        """sin over an array agrees with numpy."""
        values = np.linspace(0.0, 3.0, 7)
        np.testing.assert_allclose(evaluate_bulk(sin(x), x, values), np.sin(values))

    def test_polynomial(self, x):
        """x^2 + 2x + 1 over a small grid."""
        e = add([pow_(x, 2), mul([2, x]), 1])
        np.testing.assert_allclose(evaluate_bulk(e, "x", [0.0, 1.0, 2.0]), [1.0, 4.0, 9.0])

    def test_bound_parameters(self, x):
        """Other variables come from env."""
        a = symbol("a")
        result = evaluate_bulk(mul([a, x]), x, [1.0, 2.0], env={"a": 3.0})
        np.testing.assert_allclose(result, [3.0, 6.0])

    def test_outside_domain_is_nan(self, x):
        """Points outside the domain become nan instead of raising."""
        result = evaluate_bulk(ln(x), x, [-1.0, 1.0])
        assert np.isnan(result[0])
        assert result[1] == pytest.approx(0.0)

    def test_unbound_parameter(self, x):
        """Unbound variables other than the swept one raise."""
        with pytest.raises(DomainError):
            evaluate_bulk(add([x, symbol("b")]), x, [1.0])


class TestExprArena:
    """Test scoped expression storage."""

    def test_sharing(self, x):
        """Equal expressions allocated twice are shared."""
        with ExprArena() as arena:
            a = arena.mul([2, x])
            b = arena.alloc(mul([x, 2]))
            assert a is b
            stats = arena.stats()
            assert stats.allocated == 1
            assert stats.shared == 1
            assert len(arena) == 1

    def test_without_interning(self, x):
        """intern=False keeps every allocation."""
        arena = ExprArena(intern=False)
        arena.pow_(x, 2)
        arena.pow_(x, 2)
        assert len(arena) == 2
        assert arena.stats().shared == 0

    def test_release(self, x):
        """Leaving the context releases all nodes."""
        with ExprArena() as arena:
            arena.add([x, 1])
        assert arena.released
        assert len(arena) == 0
        with pytest.raises(RuntimeError):
            arena.alloc(x)

    def test_results_outlive_arena(self, x):
        """Results computed through an arena stay valid after release."""
        assert nth_derivative(pow_(x, 4), x, 2) == mul([12, pow_(x, 2)])
