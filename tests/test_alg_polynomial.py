"""
Tests for the expression-level polynomial operations and classification.

Tests:
- degree, leading coefficient, content, primitive part
- poly_div correctness and error channel
- poly_gcd, cofactors
- resultant and discriminant (numeric and symbolic coefficients)
- classification and lowering
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from symcore import (
    symbol, symbols, integer, rational, float_, add, mul, pow_, sub, div, sin, exp,
    simplify, expand, derivative,
    degree, leading_coefficient, content, primitive_part,
    poly_div, poly_gcd, poly_cofactors, poly_resultant, poly_discriminant, sylvester_matrix,
    classify, ExpressionClass, find_variables, is_polynomial_in, MatrixOps,
    DivisionByZeroError, DomainError, NotPolynomialError,
)
from symcore.alg_lower import to_sparse, to_intpoly, coefficients_in
from symcore import IntPoly


# === Test Fixtures ===

@pytest.fixture
def x():
    return symbol("x")


@pytest.fixture
def y():
    return symbol("y")


def _is_zero(expr):
    return simplify(expr) == integer(0)


class TestPolynomialProperties:
    """Test degree, leading coefficient and content."""

    def test_degree(self, x, y):
        """degree(x^3 + x*y, x) = 3 and degree in y is 1."""
        p = add([pow_(x, 3), mul([x, y])])
        assert degree(p, x) == 3
        assert degree(p, "y") == 1

    def test_degree_of_zero(self, x):
        """The zero polynomial has degree -1; constants have degree 0."""
        assert degree(integer(0), x) == -1
        assert degree(integer(7), x) == 0

    def test_degree_after_cancellation(self, x):
        """(x + 1)^2 - x^2 has degree 1."""
        p = sub(pow_(add([x, 1]), 2), pow_(x, 2))
        assert degree(p, x) == 1

    def test_degree_rejects_non_polynomial(self, x):
        """sin(x) has no degree in x."""
        with pytest.raises(NotPolynomialError):
            degree(sin(x), x)

    def test_leading_coefficient(self, x, y):
        """lc(3x^2*y + x, x) = 3y."""
        p = add([mul([3, pow_(x, 2), y]), x])
        assert leading_coefficient(p, x) == mul([3, y])
        assert leading_coefficient(integer(0), x) == integer(0)

    def test_content_in_variable(self, x):
        """content(6x^2 + 4x, x) = 2."""
        p = add([mul([6, pow_(x, 2)]), mul([4, x])])
        assert content(p, x) == integer(2)
        assert content(p) == integer(2)

    def test_content_is_positive(self, x):
        """content(-6x^2 - 4x) = 2."""
        p = add([mul([-6, pow_(x, 2)]), mul([-4, x])])
        assert content(p, x) == integer(2)

    def test_multivariate_content(self, x, y):
        """content(x*y + y, x) = y."""
        p = add([mul([x, y]), y])
        assert content(p, x) == y

    def test_primitive_part(self, x):
        """primitive_part(6x^2 + 4x) = 3x^2 + 2x; the sign is kept."""
        p = add([mul([6, pow_(x, 2)]), mul([4, x])])
        assert primitive_part(p, x) == add([mul([3, pow_(x, 2)]), mul([2, x])])
        negative = add([mul([-6, pow_(x, 2)]), mul([-4, x])])
        assert primitive_part(negative, x) == add([mul([-3, pow_(x, 2)]), mul([-2, x])])

    def test_methods_on_expressions(self, x):
        """The value-level methods delegate to the module functions."""
        p = add([pow_(x, 2), integer(1)])
        assert p.degree(x) == 2
        assert p.leading_coefficient(x) == integer(1)


class TestPolyDiv:
    """Test polynomial long division."""

    @pytest.mark.parametrize("build", [
        lambda x, y: (sub(pow_(x, 2), 1), sub(x, 1)),
        lambda x, y: (add([pow_(x, 3), mul([2, x]), 5]), add([x, 3])),
        lambda x, y: (add([mul([3, pow_(x, 4)]), x]), add([mul([2, pow_(x, 2)]), 1])),
        lambda x, y: (add([mul([x, y]), y, pow_(x, 2)]), add([x, 1])),
    ])
    def test_division_identity(self, x, y, build):
        """q*g + r - f simplifies to 0 and deg r < deg g."""
        f, g = build(x, y)
        q, r = poly_div(f, g, x)
        assert _is_zero(expand(sub(add([mul([q, g]), r]), f)))
        assert degree(r, x) < degree(g, x)

    def test_exact_division(self, x):
        """(x^2 - 1) / (x - 1) = x + 1 remainder 0."""
        q, r = poly_div(sub(pow_(x, 2), 1), sub(x, 1), x)
        assert q == add([x, 1])
        assert r == integer(0)

    def test_rational_quotient(self, x):
        """x^2 / 2x = x/2."""
        q, r = poly_div(pow_(x, 2), mul([2, x]), x)
        assert q == mul([rational(1, 2), x])
        assert r == integer(0)

    def test_multivariate_division(self, x, y):
        """(x*y + y) / (x + 1) = y."""
        q, r = poly_div(add([mul([x, y]), y]), add([x, 1]), x)
        assert q == y
        assert r == integer(0)

    def test_division_by_zero(self, x):
        """Dividing by the zero polynomial raises DivisionByZeroError."""
        with pytest.raises(DivisionByZeroError):
            poly_div(x, 0, x)

    def test_non_polynomial_input(self, x):
        """sin(x) cannot be divided."""
        with pytest.raises(NotPolynomialError) as info:
            poly_div(sin(x), x, x)
        assert info.value.operation == "poly_div"

    def test_symbolic_leading_coefficient(self, x, y):
        """x^2 / (y*x + 1) divides by the inverse of y."""
        f, g = pow_(x, 2), add([mul([y, x]), 1])
        q, r = poly_div(f, g, x)
        assert _is_zero(expand(sub(add([mul([q, g]), r]), f)))
        assert degree(r, x) < degree(g, x)
        assert r == pow_(y, -2)

    def test_non_polynomial_coefficients(self, x, y):
        """sin(y)*x^2 + x is polynomial in x and divides by x."""
        f = add([mul([sin(y), pow_(x, 2)]), x])
        q, r = poly_div(f, x, x)
        assert q == simplify(add([mul([sin(y), x]), 1]))
        assert r == integer(0)


class TestPolyGcd:
    """Test polynomial GCD and cofactors."""

    def test_univariate_gcd(self, x):
        """gcd(x^2 - 1, x^2 - 2x + 1) = x - 1."""
        a = sub(pow_(x, 2), 1)
        b = add([pow_(x, 2), mul([-2, x]), 1])
        assert poly_gcd(a, b, x) == sub(x, 1)

    def test_gcd_divides_both(self, x):
        """The gcd divides both inputs exactly."""
        a = expand(mul([add([x, 2]), add([x, 3]), add([x, -1])]))
        b = expand(mul([add([x, 2]), add([x, 5])]))
        g = poly_gcd(a, b, x)
        assert g == add([x, 2])
        for p in (a, b):
            _, r = poly_div(p, g, x)
            assert r == integer(0)

    def test_gcd_with_zero(self, x):
        """gcd(a, 0) is the primitive part of a with positive leading coefficient."""
        a = add([mul([-2, x]), -4])
        assert poly_gcd(a, 0, x) == add([x, 2])

    def test_multivariate_gcd(self, x, y):
        """gcd(x^2*y - y, x*y + y) = x*y + y."""
        a = sub(mul([pow_(x, 2), y]), y)
        b = add([mul([x, y]), y])
        assert poly_gcd(a, b) == add([mul([x, y]), y])

    def test_gcd_of_constants(self):
        """The gcd of two constants normalizes to 1."""
        assert poly_gcd(integer(6), integer(4)) == integer(1)

    def test_cofactors(self, x, y):
        """g * (a/g) reproduces a."""
        a = sub(pow_(x, 2), pow_(y, 2))
        b = add([x, y])
        g, ca, cb = poly_cofactors(a, b)
        assert g == add([x, y])
        assert ca == sub(x, y)
        assert cb == integer(1)
        assert _is_zero(expand(sub(mul([g, ca]), a)))


class TestResultantDiscriminant:
    """Test resultants and discriminants."""

    def test_resultant_linear(self, x):
        """res(x - 2, x - 3) = -1."""
        assert poly_resultant(sub(x, 2), sub(x, 3), x) == integer(-1)

    def test_resultant_common_root(self, x):
        """Polynomials sharing a root have resultant 0."""
        assert poly_resultant(sub(pow_(x, 2), 1), sub(x, 1), x) == integer(0)

    def test_resultant_rational_coefficients(self, x):
        """res(x/2 - 1, x - 3) = -1/2."""
        assert poly_resultant(sub(div(x, 2), 1), sub(x, 3), x) == rational(-1, 2)

    def test_resultant_symbolic(self, x, y):
        """res_x(x + y, x - y) = -2y."""
        assert poly_resultant(add([x, y]), sub(x, y), x) == mul([-2, y])

    def test_resultant_with_constant(self, x):
        """res(f, c) = c^deg f."""
        assert poly_resultant(add([pow_(x, 2), 1]), integer(3), x) == integer(9)

    def test_sylvester_matrix_determinant(self, x, y):
        """The Sylvester determinant matches the resultant."""
        f = add([pow_(x, 2), y])
        g = sub(x, y)
        det = MatrixOps().determinant(sylvester_matrix(f, g, x))
        assert expand(det) == poly_resultant(f, g, x)

    def test_discriminants(self, x):
        """disc(x^2 + 2x + 1) = 0 and disc(x^2 + 1) = -4."""
        assert poly_discriminant(add([pow_(x, 2), mul([2, x]), 1]), x) == integer(0)
        assert poly_discriminant(add([pow_(x, 2), 1]), x) == integer(-4)

    def test_discriminant_cubic(self, x):
        """disc(x^3 - x) = 4."""
        assert poly_discriminant(sub(pow_(x, 3), x), x) == integer(4)

    def test_discriminant_rational_scaling(self, x):
        """disc(x^2/2 + 1) = -2."""
        p = add([mul([rational(1, 2), pow_(x, 2)]), 1])
        assert poly_discriminant(p, x) == integer(-2)

    def test_discriminant_symbolic(self):
        """disc(a*x^2 + b*x + c) = b^2 - 4ac."""
        a, b, c, x = symbols("a b c x")
        p = add([mul([a, pow_(x, 2)]), mul([b, x]), c])
        assert poly_discriminant(p, x) == sub(pow_(b, 2), mul([4, a, c]))

    def test_discriminant_repeated_root(self, x):
        """disc = 0 exactly when gcd(p, p') has positive degree."""
        for p in (expand(pow_(sub(x, 3), 2)), expand(mul([sub(x, 1), sub(x, 2)]))):
            repeated = degree(poly_gcd(p, derivative(p, x), x), x) > 0
            assert (poly_discriminant(p, x) == integer(0)) == repeated

    def test_discriminant_of_constant(self, x):
        """Constants have no discriminant."""
        with pytest.raises(DomainError):
            poly_discriminant(integer(5), x)


class TestClassification:
    """Test classification and polynomial predicates."""

    def test_numbers(self):
        """Integers and rationals classify as such."""
        assert classify(integer(3)).kind is ExpressionClass.INTEGER
        assert classify(rational(1, 2)).kind is ExpressionClass.RATIONAL

    def test_univariate(self, x):
        """x^2 + 1 is a univariate polynomial of degree 2."""
        c = classify(add([pow_(x, 2), 1]))
        assert c.kind is ExpressionClass.UNIVARIATE_POLYNOMIAL
        assert c.variables == ("x",)
        assert c.degree == 2
        assert c.is_polynomial()

    def test_multivariate(self, x, y):
        """x*y + 1 is multivariate of total degree 2."""
        c = classify(add([mul([x, y]), 1]))
        assert c.kind is ExpressionClass.MULTIVARIATE_POLYNOMIAL
        assert c.degree == 2

    def test_symbolic_coefficients(self, x, y):
        """sin(y)*x^2 is polynomial in x."""
        c = classify(mul([sin(y), pow_(x, 2)]), [x])
        assert c.kind is ExpressionClass.UNIVARIATE_POLYNOMIAL
        assert c.degree == 2

    def test_transcendental(self, x):
        """sin(x) and 2^x are transcendental in x."""
        assert classify(sin(x)).kind is ExpressionClass.TRANSCENDENTAL
        assert classify(pow_(2, x)).kind is ExpressionClass.TRANSCENDENTAL

    def test_rational_function(self, x):
        """1/(x + 1) is a rational function."""
        assert classify(div(1, add([x, 1]))).kind is ExpressionClass.RATIONAL_FUNCTION

    def test_cancelling_polynomial(self, x):
        """x - x classifies as the integer 0."""
        assert classify(sub(x, x)).kind is ExpressionClass.INTEGER

    def test_find_variables(self, x, y):
        """find_variables returns each symbol once in canonical order."""
        assert find_variables(add([mul([y, x]), x, sin(y)])) == [x, y]

    def test_is_polynomial_in(self, x, y):
        """Negative powers and functions of the variable are not polynomial."""
        assert is_polynomial_in(add([pow_(x, 3), y]), [x])
        assert not is_polynomial_in(pow_(x, -1), [x])
        assert not is_polynomial_in(exp(x), ["x"])
        assert is_polynomial_in(exp(y), ["x"])


class TestLowering:
    """Test conversion between expressions and polynomial representations."""

    def test_to_sparse(self, x, y):
        """x^2 + 2xy lowers to its term dictionary."""
        p = to_sparse(add([pow_(x, 2), mul([2, x, y])]), ["x", "y"])
        assert p.terms == {(2, 0): 1, (1, 1): 2}

    def test_float_rejected(self, x):
        """Float coefficients are not polynomial."""
        with pytest.raises(NotPolynomialError):
            to_sparse(add([x, float_(0.5)]), ["x"])

    def test_matrix_symbol_rejected(self):
        """Non-commutative symbols are not polynomial variables."""
        A = symbol("A", "matrix")
        with pytest.raises(NotPolynomialError):
            to_sparse(A, ["A"])

    def test_to_intpoly(self, x):
        """(x + 1)^2 lowers to the dense coefficients 1, 2, 1."""
        assert to_intpoly(pow_(add([x, 1]), 2), x) == IntPoly([1, 2, 1])

    def test_coefficients_in(self, x):
        """Coefficients of a*x^2 + b are keyed by power."""
        a, b = symbols("a b")
        coeffs = coefficients_in(add([mul([a, pow_(x, 2)]), b]), x)
        assert coeffs == {2: a, 0: b}
