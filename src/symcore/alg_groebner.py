"""
symcore ALG Model: Gröbner Basis

Buchberger's algorithm over Z[x1..xn] with the coprime-leading-monomial
criterion, fraction-free S-polynomials and reductions, and a final
auto-reduction to the reduced basis (elements primitive with positive
leading coefficient, sorted by decreasing leading monomial).
"""

import logging
import math
from collections import deque
from typing import List, Optional, Sequence, Tuple, Union

from .alg_base import AlgebraicExpr
from .alg_config import get_config
from .alg_errors import MaxIterationsReachedError
from .alg_sparse import (
    MonomialOrder, SparsePolynomial, monomial_divides, monomial_lcm,
    monomial_quotient, monomials_coprime,
)
from .alg_types import ExprLike, as_expr
from .alg_lower import VariableLike, variable_names, to_sparse, from_sparse
from .logging_config import Timer

logger = logging.getLogger('symcore.groebner')

OrderLike = Union[MonomialOrder, str, None]


class GroebnerBasis:
    """Gröbner basis computation for a fixed variable list and monomial order."""

    def __init__(self, variables: Sequence[VariableLike], order: OrderLike = None,
                 iteration_cap: Optional[int] = None):
        self.variables = variable_names(variables)
        self.order = MonomialOrder.parse(order)
        self.iteration_cap = iteration_cap if iteration_cap is not None else get_config().groebner_iteration_cap
        if self.iteration_cap < 1:
            raise ValueError(f"iteration_cap must be positive, got {self.iteration_cap}")
        self.pairs_processed = 0

    def compute_basis(self, polynomials: Sequence[SparsePolynomial]) -> List[SparsePolynomial]:
        """
        Reduced Gröbner basis of the ideal generated by ``polynomials``.

        Raises:
            MaxIterationsReachedError: more than ``iteration_cap`` pairs were processed.
        """
        G = []
        for p in polynomials:
            if p.variables != self.variables:
                raise ValueError(f"polynomial over {p.variables}, expected {self.variables}")
            if not p.is_zero():
                G.append(p.primitive(self.order))
        if not G:
            return []

        pairs = deque((i, j) for i in range(len(G)) for j in range(i + 1, len(G)))
        self.pairs_processed = 0
        while pairs:
            i, j = pairs.popleft()
            self.pairs_processed += 1
            if self.pairs_processed > self.iteration_cap:
                logger.warning(f"Buchberger iteration cap {self.iteration_cap} reached", extra={'extra_data': {
                    'cap': self.iteration_cap, 'basis_size': len(G), 'pending_pairs': len(pairs) + 1}})
                raise MaxIterationsReachedError("groebner_basis", self.iteration_cap)

            lm_i = G[i].leading_monomial(self.order)
            lm_j = G[j].leading_monomial(self.order)
            if monomials_coprime(lm_i, lm_j):
                continue

            remainder = self.reduce(self._S_polynomial(G[i], G[j]), G)
            if not remainder.is_zero():
                G.append(remainder.primitive(self.order))
                new = len(G) - 1
                pairs.extend((k, new) for k in range(new))

        return self._minimalize(G)

    def _S_polynomial(self, f: SparsePolynomial, g: SparsePolynomial) -> SparsePolynomial:
        """Integer multiple of S(f, g) = (L/LT(f))*f - (L/LT(g))*g."""
        mf, cf = f.leading_term(self.order)
        mg, cg = g.leading_term(self.order)
        lcm = monomial_lcm(mf, mg)
        d = math.gcd(cf, cg)
        return (f.mul_term(monomial_quotient(lcm, mf), cg // d)
                - g.mul_term(monomial_quotient(lcm, mg), cf // d))

    def reduce(self, poly: SparsePolynomial, basis: Sequence[SparsePolynomial]) -> SparsePolynomial:
        """
        Fully reduce ``poly`` modulo ``basis``.

        The remainder is exact up to a non-zero integer factor and is
        returned primitive. No term of it is divisible by a leading
        monomial of the basis.
        """
        leads = [(g.leading_term(self.order), g) for g in basis if not g.is_zero()]
        r = poly.clear_denominators()[0]
        rem = SparsePolynomial.zero(poly.variables)
        while not r.is_zero():
            m, c = r.leading_term(self.order)
            for (lm, lc), g in leads:
                if monomial_divides(lm, m):
                    d = math.gcd(c, lc)
                    r = r.scale(lc // d) - g.mul_term(monomial_quotient(m, lm), c // d)
                    rem = rem.scale(lc // d)
                    break
            else:
                lead = SparsePolynomial(poly.variables, {m: c})
                rem = rem + lead
                r = r - lead
        return rem.primitive(self.order)

    def _minimalize(self, basis: List[SparsePolynomial]) -> List[SparsePolynomial]:
        """Drop redundant elements, then reduce each by the rest."""
        ordered = sorted(basis, key=lambda p: self.order.key(p.leading_monomial(self.order)))
        minimal: List[SparsePolynomial] = []
        for g in ordered:
            lm = g.leading_monomial(self.order)
            if not any(monomial_divides(h.leading_monomial(self.order), lm) for h in minimal):
                minimal.append(g)

        reduced = list(minimal)
        for k in range(len(reduced)):
            others = reduced[:k] + reduced[k + 1:]
            reduced[k] = self.reduce(reduced[k], others)
        reduced = [g for g in reduced if not g.is_zero()]
        reduced.sort(key=lambda p: self.order.key(p.leading_monomial(self.order)), reverse=True)
        return reduced

    def contains(self, poly: SparsePolynomial, basis: Sequence[SparsePolynomial]) -> bool:
        """Ideal membership against a Gröbner basis."""
        return self.reduce(poly, basis).is_zero()

    def elimination_ideal(self, polynomials: Sequence[SparsePolynomial],
                          eliminate: Sequence[VariableLike]) -> List[SparsePolynomial]:
        """
        Basis elements free of ``eliminate``.

        Requires lex order with the eliminated variables first in the
        variable list.
        """
        names = variable_names(eliminate)
        if self.order is not MonomialOrder.LEX or self.variables[:len(names)] != names:
            raise ValueError("elimination needs lex order with the eliminated variables first")
        basis = self.compute_basis(polynomials)
        return [g for g in basis if not any(g.degree_in(i) > 0 for i in range(len(names)))]


# === Expression-level API ===

def _lower_generators(generators: Sequence[ExprLike], variables: Optional[Sequence[VariableLike]]
                      ) -> Tuple[Tuple[str, ...], List[SparsePolynomial], List[AlgebraicExpr]]:
    exprs = [as_expr(g) for g in generators]
    if variables is None:
        from .alg_classify import find_variables
        found = []
        for e in exprs:
            found.extend(find_variables(e))
        variables = sorted(set(found), key=lambda s: s.sort_key())
    names = variable_names(variables)
    return names, [to_sparse(e, names) for e in exprs], exprs


def groebner_basis(generators: Sequence[ExprLike], variables: Optional[Sequence[VariableLike]] = None,
                   order: OrderLike = None, iter_cap: Optional[int] = None) -> List[AlgebraicExpr]:
    """
    Reduced Gröbner basis of ``generators`` as simplified expressions.

    ``variables`` fixes the variable order (first is most significant);
    by default it is every symbol of the generators in canonical order.
    ``order`` is lex, grlex or grevlex (default from the engine config).

    Raises:
        NotPolynomialError: a generator is not a polynomial in ``variables``.
        MaxIterationsReachedError: more than ``iter_cap`` pairs were processed.
    """
    names, polys, exprs = _lower_generators(generators, variables)
    gb = GroebnerBasis(names, order, iter_cap)
    logger.info(f"Buchberger start: {len(polys)} generators", extra={'extra_data': {
        'generators': [str(e) for e in exprs], 'variables': list(names), 'order': gb.order.value}})
    with Timer("groebner") as timer:
        basis = gb.compute_basis(polys)
    logger.info(f"Buchberger finished: basis size {len(basis)}", extra={'extra_data': {
        'basis_size': len(basis), 'pairs_processed': gb.pairs_processed,
        'elapsed_ms': timer.elapsed_ms()}})
    return [from_sparse(g) for g in basis]


def ideal_contains(poly: ExprLike, generators: Sequence[ExprLike],
                   variables: Optional[Sequence[VariableLike]] = None, order: OrderLike = None) -> bool:
    """Whether ``poly`` lies in the ideal generated by ``generators``."""
    names, polys, _ = _lower_generators(list(generators) + [poly], variables)
    gb = GroebnerBasis(names, order)
    return gb.contains(polys[-1], gb.compute_basis(polys[:-1]))


def elimination_ideal(generators: Sequence[ExprLike], eliminate: Sequence[VariableLike],
                      variables: Optional[Sequence[VariableLike]] = None) -> List[AlgebraicExpr]:
    """Generators of the ideal intersected with the ring without ``eliminate``."""
    names, _, exprs = _lower_generators(generators, variables)
    drop = variable_names(eliminate)
    ordered = drop + tuple(n for n in names if n not in drop)
    polys = [to_sparse(e, ordered) for e in exprs]
    gb = GroebnerBasis(ordered, MonomialOrder.LEX)
    return [from_sparse(g) for g in gb.elimination_ideal(polys, drop)]
