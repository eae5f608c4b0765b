"""
symcore ALG Model: Lowering to Polynomial Form

Bridges between expressions and the specialized polynomial
representations: SparsePolynomial over an ordered variable list, IntPoly in
one variable, and per-power coefficient maps for a distinguished variable.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .alg_base import AlgebraicExpr
from .alg_errors import NotPolynomialError
from .alg_intpoly import IntPoly
from .alg_number import Number
from .alg_sparse import SparsePolynomial
from .alg_symbol import Symbol, AlgebraicKind, symbol
from .alg_types import Add, Mul, Pow, add, mul, pow_, split_power

VariableLike = Union[Symbol, str]


def variable_name(var: VariableLike) -> str:
    if isinstance(var, Symbol):
        return var.name
    if isinstance(var, str) and var:
        return var
    raise TypeError(f"Expected a Symbol or variable name, got {var!r}")


def variable_names(variables: Iterable[VariableLike]) -> Tuple[str, ...]:
    names: List[str] = []
    for v in variables:
        name = variable_name(v)
        if name not in names:
            names.append(name)
    return tuple(names)


def depends_on(expr: AlgebraicExpr, name: str) -> bool:
    """Whether a symbol called ``name`` occurs anywhere in ``expr``."""
    return any(isinstance(node, Symbol) and node.name == name for node in expr.walk())


class PolynomialLowerer:
    """Lower expressions to polynomial form and lift them back."""

    def __init__(self, variables: Sequence[VariableLike]):
        self.variables = variable_names(variables)

    def to_sparse(self, expr: AlgebraicExpr) -> SparsePolynomial:
        """
        Lower ``expr`` to a SparsePolynomial over this lowerer's variables.

        Raises NotPolynomialError for any symbol outside the variable list,
        non-scalar symbols, floats, functions, constants, and powers whose
        exponent is not a non-negative integer.
        """
        vars_ = self.variables
        if isinstance(expr, Number):
            if not expr.is_exact():
                raise NotPolynomialError("to_polynomial", expr, "floating-point coefficient")
            return SparsePolynomial.constant(vars_, expr.value)
        if isinstance(expr, Symbol):
            if expr.kind is not AlgebraicKind.SCALAR:
                raise NotPolynomialError("to_polynomial", expr, "non-commutative symbol")
            if expr.name not in vars_:
                raise NotPolynomialError("to_polynomial", expr, f"symbol '{expr.name}' is not a variable")
            return SparsePolynomial.variable(vars_, expr.name)
        if isinstance(expr, Add):
            result = SparsePolynomial.zero(vars_)
            for t in expr.terms:
                result = result + self.to_sparse(t)
            return result
        if isinstance(expr, Mul):
            result = SparsePolynomial.constant(vars_, 1)
            for f in expr.factors:
                result = result * self.to_sparse(f)
            return result
        if isinstance(expr, Pow):
            exp = expr.exp
            if not (isinstance(exp, Number) and exp.is_integer() and not exp.is_negative()):
                raise NotPolynomialError("to_polynomial", expr, "exponent is not a non-negative integer")
            return self.to_sparse(expr.base) ** exp.value
        raise NotPolynomialError("to_polynomial", expr)

    def from_sparse(self, poly: SparsePolynomial) -> AlgebraicExpr:
        return from_sparse(poly)


def to_sparse(expr: AlgebraicExpr, variables: Optional[Sequence[VariableLike]] = None) -> SparsePolynomial:
    if variables is None:
        from .alg_classify import find_variables
        variables = find_variables(expr)
    return PolynomialLowerer(variables).to_sparse(expr)


def from_sparse(poly: SparsePolynomial) -> AlgebraicExpr:
    """Lift back to a simplified expression over scalar symbols."""
    from .alg_simplify import simplify
    syms = [symbol(v) for v in poly.variables]
    terms = []
    for mono, c in poly.sorted_terms():
        factors: List[AlgebraicExpr] = [Number(c)]
        factors.extend(pow_(s, e) for s, e in zip(syms, mono) if e)
        terms.append(mul(factors))
    return simplify(add(terms))


def to_intpoly(expr: AlgebraicExpr, var: VariableLike) -> IntPoly:
    """Lower to an IntPoly in ``var``; rational coefficients are rejected."""
    name = variable_name(var)
    poly = to_sparse(expr, [name])
    if not poly.is_integral():
        raise NotPolynomialError("to_intpoly", expr, "non-integer coefficient")
    coeffs = [0] * (poly.total_degree() + 1)
    for (e,), c in poly.terms.items():
        coeffs[e] = c
    return IntPoly(coeffs)


def from_intpoly(poly: IntPoly, var: VariableLike) -> AlgebraicExpr:
    name = variable_name(var)
    return from_sparse(SparsePolynomial([name], {(i,): c for i, c in enumerate(poly.coeffs) if c}))


def coefficients_in(expr: AlgebraicExpr, var: VariableLike) -> Dict[int, AlgebraicExpr]:
    """
    Coefficients of the powers of ``var`` in the expanded expression.

    Coefficients may be arbitrary expressions free of ``var``; zero
    coefficients are omitted. Raises NotPolynomialError when ``var`` occurs
    other than in non-negative integer powers.
    """
    from .alg_simplify import expand, simplify
    name = variable_name(var)
    expanded = expand(expr)
    terms = expanded.terms if isinstance(expanded, Add) else (expanded,)
    groups: Dict[int, List[AlgebraicExpr]] = {}
    for term in terms:
        factors = term.factors if isinstance(term, Mul) else (term,)
        power = 0
        rest: List[AlgebraicExpr] = []
        for f in factors:
            base, exp = split_power(f)
            if isinstance(base, Symbol) and base.name == name:
                if not (isinstance(exp, Number) and exp.is_integer() and not exp.is_negative()):
                    raise NotPolynomialError("coefficients", expr, f"non-polynomial power of {name}")
                power += exp.value
            elif depends_on(f, name):
                raise NotPolynomialError("coefficients", expr, f"{f} is not polynomial in {name}")
            else:
                rest.append(f)
        groups.setdefault(power, []).append(mul(rest))
    result = {}
    for power in sorted(groups):
        coeff = simplify(add(groups[power]))
        if not (isinstance(coeff, Number) and coeff.is_zero()):
            result[power] = coeff
    return result


def from_coefficients(coeffs: Dict[int, AlgebraicExpr], var: VariableLike) -> AlgebraicExpr:
    """Inverse of coefficients_in: sum of coeffs[k] * var^k, simplified."""
    from .alg_simplify import simplify
    x = var if isinstance(var, Symbol) else symbol(variable_name(var))
    return simplify(add([mul([c, pow_(x, k)]) for k, c in sorted(coeffs.items())]))
