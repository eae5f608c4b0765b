"""
Tests for symcore Gröbner basis computation.

Tests:
- Reduced basis of a small system
- Iteration cap
- Ideal membership and elimination
- Multivariate reduction
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from symcore import (
    symbols, integer, rational, add, mul, pow_, sub,
    GroebnerBasis, groebner_basis, ideal_contains, elimination_ideal,
    SparsePolynomial, MonomialOrder, MaxIterationsReachedError, NotPolynomialError,
    sin,
)
from symcore.alg_lower import to_sparse


# === Test Fixtures ===

@pytest.fixture
def xy():
    return symbols("x y")


@pytest.fixture
def circle_line(xy):
    x, y = xy
    return [sub(add([pow_(x, 2), pow_(y, 2)]), 1), sub(x, y)]


class TestGroebnerBasis:
    """Test Buchberger's algorithm."""

    def test_circle_and_line(self, xy, circle_line):
        """{x^2 + y^2 - 1, x - y} has lex basis {x - y, 2y^2 - 1}."""
        x, y = xy
        basis = groebner_basis(circle_line, [x, y], "lex")
        assert basis == [sub(x, y), sub(mul([2, pow_(y, 2)]), 1)]

    def test_pairs_processed(self, xy, circle_line):
        """Coprime pairs still count toward the iteration cap."""
        gb = GroebnerBasis(["x", "y"], "lex")
        gb.compute_basis([to_sparse(p, ["x", "y"]) for p in circle_line])
        assert gb.pairs_processed == 3

    def test_iteration_cap(self, xy, circle_line):
        """A cap of one pair is exceeded."""
        x, y = xy
        with pytest.raises(MaxIterationsReachedError) as info:
            groebner_basis(circle_line, [x, y], "lex", iter_cap=1)
        assert info.value.cap == 1

    def test_invalid_cap(self):
        """The iteration cap must be positive."""
        with pytest.raises(ValueError):
            GroebnerBasis(["x"], "lex", iteration_cap=0)

    def test_default_order(self):
        """Without an explicit order the configured default (lex) is used."""
        assert GroebnerBasis(["x", "y"]).order is MonomialOrder.LEX

    def test_empty_and_zero_generators(self, xy):
        """Zero generators contribute nothing."""
        assert groebner_basis([integer(0)], ["x"]) == []

    def test_single_generator_is_made_primitive(self, xy):
        """A single generator becomes primitive with positive leading coefficient."""
        x, _ = xy
        assert groebner_basis([add([mul([-2, x]), 4])], [x]) == [sub(x, 2)]

    def test_rational_generators(self, xy):
        """Rational coefficients are cleared before the computation."""
        x, _ = xy
        assert groebner_basis([sub(mul([rational(1, 2), x]), rational(1, 3))], [x]) == [sub(mul([3, x]), 2)]

    def test_non_polynomial_generator(self, xy):
        """sin(x) cannot be a generator."""
        x, _ = xy
        with pytest.raises(NotPolynomialError):
            groebner_basis([sin(x)], [x])

    def test_reduce(self):
        """x^2 reduces to y^2 modulo x - y."""
        gb = GroebnerBasis(["x", "y"], "lex")
        g = SparsePolynomial(("x", "y"), {(1, 0): 1, (0, 1): -1})
        r = gb.reduce(SparsePolynomial(("x", "y"), {(2, 0): 1}), [g])
        assert r == SparsePolynomial(("x", "y"), {(0, 2): 1})

    @pytest.mark.parametrize("order", ["grevlex", "grlex", "lex"])
    def test_cyclic3_basis_is_closed(self, order):
        """Every S-polynomial of the cyclic-3 basis and every generator reduce to 0."""
        x, y, z = symbols("x y z")
        generators = [
            add([x, y, z]),
            add([mul([x, y]), mul([y, z]), mul([z, x])]),
            sub(mul([x, y, z]), 1),
        ]
        gb = GroebnerBasis(["x", "y", "z"], order)
        basis = gb.compute_basis([to_sparse(g, ["x", "y", "z"]) for g in generators])
        assert basis
        for i in range(len(basis)):
            for j in range(i + 1, len(basis)):
                assert gb.reduce(gb._S_polynomial(basis[i], basis[j]), basis).is_zero()
        for g in generators:
            assert gb.contains(to_sparse(g, ["x", "y", "z"]), basis)


class TestIdealOperations:
    """Test membership and elimination."""

    def test_membership(self, xy, circle_line):
        """x^2 - y^2 is in the ideal; x is not."""
        x, y = xy
        assert ideal_contains(sub(pow_(x, 2), pow_(y, 2)), circle_line, [x, y])
        assert ideal_contains(sub(pow_(y, 2), rational(1, 2)), circle_line, [x, y])
        assert not ideal_contains(x, circle_line, [x, y])

    def test_elimination(self):
        """Eliminating t from x = t, y = t^2 leaves y = x^2."""
        t, x, y = symbols("t x y")
        result = elimination_ideal([sub(x, t), sub(y, pow_(t, 2))], [t])
        assert result == [sub(pow_(x, 2), y)]

    def test_elimination_needs_lex_with_eliminated_first(self):
        """Elimination rejects other orders and variable layouts."""
        with pytest.raises(ValueError):
            GroebnerBasis(["t", "x"], "grlex").elimination_ideal([], ["t"])
        with pytest.raises(ValueError):
            GroebnerBasis(["x", "t"], "lex").elimination_ideal([], ["t"])
