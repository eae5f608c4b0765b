"""
symcore ALG Model: Expression Classification

Routes an expression to the specialized polynomial paths: integer,
rational, univariate or multivariate polynomial, rational function,
transcendental, or plain symbolic.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .alg_base import AlgebraicExpr
from .alg_cache import get_cache
from .alg_number import Number
from .alg_symbol import Symbol
from .alg_types import Add, Mul, Pow, Function, split_power
from .alg_lower import VariableLike, variable_names, depends_on


class ExpressionClass(Enum):
    INTEGER = "integer"
    RATIONAL = "rational"
    UNIVARIATE_POLYNOMIAL = "univariate_polynomial"
    MULTIVARIATE_POLYNOMIAL = "multivariate_polynomial"
    RATIONAL_FUNCTION = "rational_function"
    TRANSCENDENTAL = "transcendental"
    SYMBOLIC = "symbolic"


@dataclass(frozen=True)
class Classification:
    """Classification result; ``degree`` is the total degree for polynomials, else -1."""
    kind: ExpressionClass
    variables: Tuple[str, ...] = ()
    degree: int = -1

    def is_polynomial(self) -> bool:
        return self.kind in (ExpressionClass.INTEGER, ExpressionClass.RATIONAL,
                             ExpressionClass.UNIVARIATE_POLYNOMIAL,
                             ExpressionClass.MULTIVARIATE_POLYNOMIAL)


def find_variables(expr: AlgebraicExpr) -> List[Symbol]:
    """Distinct symbols in ``expr`` in canonical order."""
    seen = {}
    for node in expr.walk():
        if isinstance(node, Symbol):
            seen[node] = True
    return sorted(seen, key=lambda s: s.sort_key())


def is_polynomial_in(expr: AlgebraicExpr, variables: Iterable[VariableLike]) -> bool:
    """
    Whether ``expr`` is a polynomial in ``variables``.

    Sub-expressions free of the variables count as coefficients, so
    sin(y)*x^2 is polynomial in x.
    """
    names = variable_names(variables)
    stack = [expr]
    while stack:
        node = stack.pop()
        if not any(depends_on(node, n) for n in names):
            continue
        if isinstance(node, Symbol):
            continue
        if isinstance(node, (Add, Mul)):
            stack.extend(node.children())
            continue
        if isinstance(node, Pow):
            exp = node.exp
            if isinstance(exp, Number) and exp.is_integer() and not exp.is_negative():
                stack.append(node.base)
                continue
        return False
    return True


def _has_function_of(expr: AlgebraicExpr, names: Tuple[str, ...]) -> bool:
    for node in expr.walk():
        if isinstance(node, Function) and any(depends_on(node, n) for n in names):
            return True
        if isinstance(node, Pow) and not isinstance(node.exp, Number) and any(depends_on(node.exp, n) for n in names):
            return True
    return False


def _is_rational_function(expr: AlgebraicExpr, names: Tuple[str, ...]) -> bool:
    """Polynomial factors times polynomials raised to negative integers."""
    if isinstance(expr, Add):
        return all(_is_rational_function(t, names) for t in expr.terms)
    factors = expr.factors if isinstance(expr, Mul) else (expr,)
    for f in factors:
        if isinstance(f, Pow) and isinstance(f.exp, Number) and f.exp.is_integer():
            if not is_polynomial_in(f.base, names):
                return False
        elif not is_polynomial_in(f, names):
            return False
    return True


def _degrees(expr: AlgebraicExpr, names: Tuple[str, ...]) -> Tuple[Tuple[str, ...], int]:
    """Variables that survive expansion and the total degree in them."""
    from .alg_simplify import expand
    expanded = expand(expr)
    terms = expanded.terms if isinstance(expanded, Add) else (expanded,)
    used = set()
    degree = -1
    for term in terms:
        d = 0
        for f in (term.factors if isinstance(term, Mul) else (term,)):
            base, exp = split_power(f)
            if isinstance(base, Symbol) and base.name in names and isinstance(exp, Number):
                used.add(base.name)
                d += exp.value
        degree = max(degree, d)
    return tuple(n for n in names if n in used), degree


def _classify(expr: AlgebraicExpr, names: Tuple[str, ...]) -> Classification:
    if isinstance(expr, Number):
        if expr.is_integer():
            return Classification(ExpressionClass.INTEGER)
        if expr.is_rational():
            return Classification(ExpressionClass.RATIONAL)
        return Classification(ExpressionClass.SYMBOLIC)

    used = tuple(n for n in names if depends_on(expr, n))
    if not used:
        return Classification(ExpressionClass.SYMBOLIC)
    if _has_function_of(expr, used):
        return Classification(ExpressionClass.TRANSCENDENTAL, used)
    if is_polynomial_in(expr, used):
        used, degree = _degrees(expr, used)
        if not used:
            from .alg_simplify import simplify
            value = simplify(expr)
            if isinstance(value, Number):
                return _classify(value, ())
            return Classification(ExpressionClass.SYMBOLIC)
        if len(used) == 1:
            return Classification(ExpressionClass.UNIVARIATE_POLYNOMIAL, used, degree)
        return Classification(ExpressionClass.MULTIVARIATE_POLYNOMIAL, used, degree)
    if _is_rational_function(expr, used):
        return Classification(ExpressionClass.RATIONAL_FUNCTION, used)
    return Classification(ExpressionClass.SYMBOLIC, used)


def classify(expr: AlgebraicExpr, variables: Optional[Iterable[VariableLike]] = None) -> Classification:
    """Classify ``expr`` with respect to ``variables`` (default: all its symbols)."""
    if variables is None:
        variables = find_variables(expr)
    names = variable_names(variables)
    return get_cache().memoize("classification", expr, lambda: _classify(expr, names), extra=names)
