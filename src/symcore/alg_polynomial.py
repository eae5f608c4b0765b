"""
symcore ALG Model: Polynomial Operations

Expression-level polynomial API: degree, leading coefficient, content,
primitive part, long division, GCD and cofactors, resultant and
discriminant. Each operation lowers to IntPoly or SparsePolynomial, works
there, and lifts the result back to a simplified expression.

Degree, leading coefficient, content and IntPoly conversions go through the
thread-local cache; results are identical with a cold or warm cache.
"""

import logging
from fractions import Fraction
from typing import List, Optional, Sequence, Tuple

from .alg_base import AlgebraicExpr
from .alg_cache import get_cache
from .alg_errors import DivisionByZeroError, DomainError, NotPolynomialError
from .alg_intpoly import IntPoly
from .alg_number import Number, ZERO, ONE
from .alg_sparse import SparsePolynomial, polynomial_gcd, polynomial_cofactors
from .alg_types import ExprLike, as_expr, add, mul, pow_, matrix
from .alg_lower import (
    VariableLike, variable_name, variable_names, to_sparse, from_sparse,
    to_intpoly, from_intpoly, coefficients_in, from_coefficients,
)

logger = logging.getLogger('symcore.polynomial')


def _variables_for(exprs: Sequence[AlgebraicExpr], var: Optional[VariableLike]) -> Tuple[str, ...]:
    """``var`` first, then every other symbol of ``exprs`` in canonical order."""
    from .alg_classify import find_variables
    names: List[VariableLike] = [variable_name(var)] if var is not None else []
    for e in exprs:
        names.extend(find_variables(e))
    return variable_names(names)


def _lower(exprs: Sequence[AlgebraicExpr], var: Optional[VariableLike], operation: str):
    variables = _variables_for(exprs, var)
    try:
        return variables, [to_sparse(e, variables) for e in exprs]
    except NotPolynomialError as exc:
        raise NotPolynomialError(operation, exc.expr, exc.detail) from exc


def _intpoly(expr: AlgebraicExpr, var: VariableLike) -> Optional[IntPoly]:
    """Cached IntPoly of ``expr`` in ``var``, or None when it has no such form."""
    name = variable_name(var)

    def compute():
        try:
            return to_intpoly(expr, name)
        except NotPolynomialError:
            return None

    return get_cache().memoize("intpoly", expr, compute, extra=name)


# === Properties ===

def degree(expr: ExprLike, var: VariableLike) -> int:
    """Degree in ``var``; the zero polynomial has degree -1."""
    expr = as_expr(expr)
    name = variable_name(var)
    return get_cache().memoize(
        "degree", expr, lambda: max(coefficients_in(expr, name), default=-1), extra=name)


def leading_coefficient(expr: ExprLike, var: VariableLike) -> AlgebraicExpr:
    """Coefficient of the highest power of ``var`` (0 for the zero polynomial)."""
    expr = as_expr(expr)
    name = variable_name(var)

    def compute():
        coeffs = coefficients_in(expr, name)
        return coeffs[max(coeffs)] if coeffs else ZERO

    return get_cache().memoize("leading_coefficient", expr, compute, extra=name)


def _content_sparse(poly: SparsePolynomial, index: Optional[int]) -> SparsePolynomial:
    if poly.is_zero():
        return poly
    if index is None:
        return SparsePolynomial.constant(poly.variables, poly.coefficient_content())
    scaled, den = poly.clear_denominators()
    return scaled.content_in(index).scale(Fraction(1, den))


def content(expr: ExprLike, var: Optional[VariableLike] = None) -> AlgebraicExpr:
    """
    Content of ``expr``.

    With ``var`` it is the GCD of the coefficients of ``var`` as polynomials
    in the remaining variables; without it, the rational GCD of all
    numeric coefficients. The content is positive for non-zero input.
    """
    expr = as_expr(expr)
    key = variable_name(var) if var is not None else None

    def compute():
        variables, (poly,) = _lower([expr], var, "content")
        index = 0 if var is not None else None
        return from_sparse(_content_sparse(poly, index))

    return get_cache().memoize("content", expr, compute, extra=key)


def primitive_part(expr: ExprLike, var: Optional[VariableLike] = None) -> AlgebraicExpr:
    """``expr`` divided by its content; the sign is kept."""
    expr = as_expr(expr)
    variables, (poly,) = _lower([expr], var, "primitive_part")
    if poly.is_zero():
        return ZERO
    c = _content_sparse(poly, 0 if var is not None else None)
    return from_sparse(poly.divide_exact(c))


# === Division ===

def _poly_div_coefficients(f: AlgebraicExpr, g: AlgebraicExpr,
                           var: VariableLike) -> Tuple[AlgebraicExpr, AlgebraicExpr]:
    """
    Long division over coefficient maps in ``var``. Coefficients are
    arbitrary expressions free of ``var``; each step multiplies by the
    inverse of the divisor's leading coefficient.
    """
    from .alg_simplify import simplify
    try:
        remainder = coefficients_in(f, var)
        divisor = coefficients_in(g, var)
    except NotPolynomialError as exc:
        raise NotPolynomialError("poly_div", exc.expr, exc.detail) from exc
    if not divisor:
        raise DivisionByZeroError("poly_div", g)

    dg = max(divisor)
    inverse = pow_(divisor[dg], -1)
    quotient = {}
    while remainder and max(remainder) >= dg:
        k = max(remainder)
        step = simplify(mul([remainder.pop(k), inverse]))
        quotient[k - dg] = step
        for e, c in divisor.items():
            if e == dg:
                continue
            index = e + k - dg
            value = simplify(add([remainder.get(index, ZERO), mul([-1, step, c])]))
            if isinstance(value, Number) and value.is_zero():
                remainder.pop(index, None)
            else:
                remainder[index] = value
    return from_coefficients(quotient, var), from_coefficients(remainder, var)


def poly_div(dividend: ExprLike, divisor: ExprLike, var: VariableLike) -> Tuple[AlgebraicExpr, AlgebraicExpr]:
    """
    Long division in ``var``: returns (q, r) with dividend = q*divisor + r
    and degree(r, var) < degree(divisor, var).

    Polynomial coefficients in the other variables are divided exactly when
    possible; otherwise, or when coefficients are not polynomial (sin(y)*x^2),
    quotient coefficients carry the inverse of the divisor's leading
    coefficient.

    Raises:
        DivisionByZeroError: divisor is zero.
        NotPolynomialError: either input is not a polynomial in ``var``.
    """
    f, g = as_expr(dividend), as_expr(divisor)
    try:
        variables, (fp, gp) = _lower([f, g], var, "poly_div")
    except NotPolynomialError:
        return _poly_div_coefficients(f, g, var)
    if gp.is_zero():
        raise DivisionByZeroError("poly_div", g)

    dg = gp.degree_in(0)
    lc_g = gp.leading_coefficient_in(0)
    quotient = SparsePolynomial.zero(variables)
    remainder = fp
    while not remainder.is_zero() and remainder.degree_in(0) >= dg:
        k = remainder.degree_in(0)
        lc_r = remainder.leading_coefficient_in(0)
        try:
            step = lc_r.divide_exact(lc_g)
        except DomainError:
            logger.debug("Inexact leading coefficient, dividing over coefficient maps",
                         extra={'extra_data': {'operation': 'poly_div', 'divisor': str(g)}})
            return _poly_div_coefficients(f, g, var)
        shift = (k - dg,) + (0,) * (len(variables) - 1)
        term = step.mul_term(shift, 1)
        quotient = quotient + term
        remainder = remainder - term * gp
    return from_sparse(quotient), from_sparse(remainder)


# === GCD ===

def poly_gcd(a: ExprLike, b: ExprLike, var: Optional[VariableLike] = None) -> AlgebraicExpr:
    """
    GCD of two polynomials, primitive with positive leading coefficient.

    Univariate integer input in ``var`` uses the IntPoly primitive remainder
    sequence; anything else goes through the multivariate GCD.
    """
    a, b = as_expr(a), as_expr(b)
    if var is not None:
        pa, pb = _intpoly(a, var), _intpoly(b, var)
        if pa is not None and pb is not None:
            return from_intpoly(pa.gcd(pb), var)
    variables, (sa, sb) = _lower([a, b], var, "poly_gcd")
    return from_sparse(polynomial_gcd(sa, sb))


def poly_cofactors(a: ExprLike, b: ExprLike, var: Optional[VariableLike] = None) -> Tuple[AlgebraicExpr, AlgebraicExpr, AlgebraicExpr]:
    """(g, a/g, b/g) with g = poly_gcd(a, b)."""
    a, b = as_expr(a), as_expr(b)
    variables, (sa, sb) = _lower([a, b], var, "poly_cofactors")
    g, ca, cb = polynomial_cofactors(sa, sb)
    return from_sparse(g), from_sparse(ca), from_sparse(cb)


# === Resultant and discriminant ===

def _rational_intpoly(expr: AlgebraicExpr, var: VariableLike) -> Optional[Tuple[IntPoly, int]]:
    """(P, d) with expr = P/d for univariate rational-coefficient input, else None."""
    pi = _intpoly(expr, var)
    if pi is not None:
        return pi, 1
    try:
        sp = to_sparse(expr, [variable_name(var)])
    except NotPolynomialError:
        return None
    scaled, den = sp.clear_denominators()
    coeffs = [0] * (scaled.total_degree() + 1)
    for (e,), c in scaled.terms.items():
        coeffs[e] = c
    return IntPoly(coeffs), den


def sylvester_matrix(f: ExprLike, g: ExprLike, var: VariableLike):
    """Sylvester matrix of f and g in ``var`` with expression entries."""
    f, g = as_expr(f), as_expr(g)
    cf = coefficients_in(f, var)
    cg = coefficients_in(g, var)
    if not cf or not cg:
        raise DomainError("sylvester_matrix", "zero polynomial has no Sylvester matrix")
    m, n = max(cf), max(cg)
    size = m + n
    if size == 0:
        raise DomainError("sylvester_matrix", "both polynomials are constant")
    fr = [cf.get(k, ZERO) for k in range(m, -1, -1)]
    gr = [cg.get(k, ZERO) for k in range(n, -1, -1)]
    rows = [[ZERO] * i + fr + [ZERO] * (size - m - 1 - i) for i in range(n)]
    rows += [[ZERO] * i + gr + [ZERO] * (size - n - 1 - i) for i in range(m)]
    return matrix(rows)


def poly_resultant(f: ExprLike, g: ExprLike, var: VariableLike) -> AlgebraicExpr:
    """
    Resultant of f and g in ``var``.

    Univariate input with rational coefficients uses the Euclidean
    recursion on IntPoly; coefficients in other variables fall back to the
    Sylvester determinant.
    """
    f, g = as_expr(f), as_expr(g)
    rf, rg = _rational_intpoly(f, var), _rational_intpoly(g, var)
    if rf is not None and rg is not None:
        (pf, df), (pg, dg) = rf, rg
        if pf.is_zero() or pg.is_zero():
            return ZERO
        value = Fraction(pf.resultant(pg)) / (Fraction(df) ** pg.degree() * Fraction(dg) ** pf.degree())
        return Number(value)

    from .alg_matrix import MatrixOps
    from .alg_simplify import expand
    logger.debug(f"Sylvester resultant in {variable_name(var)}", extra={'extra_data': {
        'operation': 'poly_resultant', 'f': str(f), 'g': str(g)}})
    if not coefficients_in(f, var) or not coefficients_in(g, var):
        return ZERO
    m, n = degree(f, var), degree(g, var)
    if m == 0 and n == 0:
        return ONE
    if m == 0:
        return expand(pow_(leading_coefficient(f, var), n))
    if n == 0:
        return expand(pow_(leading_coefficient(g, var), m))
    return expand(MatrixOps().determinant(sylvester_matrix(f, g, var)))


def poly_discriminant(p: ExprLike, var: VariableLike) -> AlgebraicExpr:
    """
    (-1)^(n(n-1)/2) * resultant(p, p') / lc(p) with n = degree(p, var).

    Zero iff p has a repeated root. Raises DomainError for degree < 1.
    """
    p = as_expr(p)
    n = degree(p, var)
    if n < 1:
        raise DomainError("poly_discriminant", f"degree {n} polynomial has no discriminant", p)

    rational = _rational_intpoly(p, var)
    if rational is not None:
        poly, den = rational
        # disc(P/d) = disc(P) / d^(2n-2)
        return Number(Fraction(poly.discriminant(), den ** (2 * n - 2)))

    from .alg_calculus import derivative
    from .alg_symbol import symbol
    x = symbol(variable_name(var))
    res = poly_resultant(p, derivative(p, x), x)
    sign = -1 if (n * (n - 1) // 2) % 2 else 1
    q, r = poly_div(mul([sign, res]), leading_coefficient(p, x), variable_name(x))
    if not (isinstance(r, Number) and r.is_zero()):
        raise DomainError("poly_discriminant", "leading coefficient does not divide the resultant", p)
    return q
