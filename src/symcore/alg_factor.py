"""
symcore ALG Model: Factoring

Common-factor extraction, the structural counterpart of expand.

factor pulls the rational content and any shared powers out of a sum:
6x + 9 -> 3*(2x + 3), x^3*y + x^2 -> x^2*(x*y + 1). factor_out_gcd works
through the polynomial engine instead, splitting a polynomial into its
content and primitive part, optionally with respect to one variable:
x*y + y in x -> y*(x + 1).
"""

import logging
from fractions import Fraction
from math import gcd
from typing import Dict, List, Optional, Tuple

from .alg_base import AlgebraicExpr
from .alg_number import Number, ONE
from .alg_types import Add, Mul, Pow, Function, add, mul, pow_, function, split_coefficient, split_power
from .alg_simplify import simplify
from .alg_polynomial import content, primitive_part
from .alg_lower import VariableLike

logger = logging.getLogger('symcore.factor')

Powers = Dict[AlgebraicExpr, int]


def _powers(rest: AlgebraicExpr) -> Powers:
    """Base -> positive integer exponent for each factor of a term."""
    factors = rest.factors if isinstance(rest, Mul) else (rest,)
    powers: Powers = {}
    for f in factors:
        if isinstance(f, Number) and f.is_one():
            continue
        base, exp = split_power(f)
        if isinstance(exp, Number) and exp.is_integer() and exp.value > 0:
            powers[base] = powers.get(base, 0) + exp.value
        else:
            powers[f] = powers.get(f, 0) + 1
    return powers


def _numeric_content(coeffs: List[Number]) -> Number:
    """Rational GCD of exact coefficients, negative when all are; 1 with any float."""
    if any(not c.is_exact() for c in coeffs):
        return ONE
    num, den = 0, 1
    for c in coeffs:
        num = gcd(num, c.numerator)
        den = den * c.denominator // gcd(den, c.denominator)
    value = Fraction(num, den)
    if all(c.is_negative() for c in coeffs):
        value = -value
    return Number(value)


def _common_powers(all_powers: List[Powers]) -> Powers:
    common = dict(all_powers[0])
    for powers in all_powers[1:]:
        common = {b: min(e, powers[b]) for b, e in common.items() if b in powers}
        if not common:
            break
    return common


def _factor_sum(expr: Add) -> AlgebraicExpr:
    split: List[Tuple[Number, Powers]] = []
    for term in expr.terms:
        coeff, rest = split_coefficient(term)
        split.append((coeff, _powers(rest)))

    k = _numeric_content([c for c, _ in split])
    common = _common_powers([p for _, p in split])
    if k.is_one() and not common:
        return expr

    cofactors = []
    for coeff, powers in split:
        factors: List[AlgebraicExpr] = [coeff.div(k)]
        factors.extend(pow_(b, e - common.get(b, 0)) for b, e in powers.items())
        cofactors.append(mul(factors))
    outer: List[AlgebraicExpr] = [k]
    outer.extend(pow_(b, e) for b, e in common.items())
    logger.debug(f"Extracted common factor from {len(expr.terms)} terms", extra={'extra_data': {
        'content': str(k), 'common': [str(b) for b in common]}})
    return mul(outer + [add(cofactors)])


def factor(expr: AlgebraicExpr) -> AlgebraicExpr:
    """
    Pull common factors out of every sum in ``expr``.

    The input is simplified first; children are factored before their
    parent. A sum with no common factor is returned as is, and expanding
    the result gives back the simplified input.
    """
    return _factor(simplify(expr))


def _factor(expr: AlgebraicExpr) -> AlgebraicExpr:
    if isinstance(expr, Add):
        terms = [_factor(t) for t in expr.terms]
        rebuilt = expr if all(a is b for a, b in zip(terms, expr.terms)) else Add(tuple(terms))
        return _factor_sum(rebuilt)
    elif isinstance(expr, Mul):
        return mul([_factor(f) for f in expr.factors])
    elif isinstance(expr, Pow):
        return Pow(_factor(expr.base), expr.exp)
    elif isinstance(expr, Function):
        return function(expr.name, [_factor(a) for a in expr.args])
    return expr


def factor_out_gcd(expr: AlgebraicExpr, var: Optional[VariableLike] = None) -> AlgebraicExpr:
    """
    content * primitive_part for a polynomial.

    Without ``var`` only the rational content comes out; with ``var`` the
    content is the GCD of the coefficients of ``var``, itself a polynomial
    in the remaining variables. Raises NotPolynomialError for other input.
    """
    expr = simplify(expr)
    c = content(expr, var)
    if isinstance(c, Number) and (c.is_one() or c.is_zero()):
        return expr
    return mul([c, primitive_part(expr, var)])
