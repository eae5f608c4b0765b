"""
symcore ALG Model: Derivatives and Substitution

Structural differentiation over the AST. Named functions are
differentiated through the Function Property Registry; functions without a
closed-form rule produce an unevaluated Derivative node. Results are
simplified before they are returned.

Substitution replaces free occurrences of symbols and rebuilds through the
normal-form constructors.
"""

from typing import Dict, Mapping, Optional, Union

from .alg_arena import ExprArena
from .alg_base import AlgebraicExpr
from .alg_errors import DomainError, NotPolynomialError
from .alg_number import Number, ZERO, ONE, MINUS_ONE
from .alg_symbol import Symbol, symbol
from .alg_types import (
    ExprLike, as_expr, Constant, Add, Mul, Pow, Function, Derivative, Integral,
    Matrix, Relation, Complex, Piecewise, Interval,
    add, mul, pow_, neg, function, split_coefficient, zero_matrix,
)
from .alg_lower import VariableLike, depends_on, coefficients_in
from .alg_registry import FunctionRegistry, get_registry


def _as_symbol(var: VariableLike) -> Symbol:
    if isinstance(var, Symbol):
        return var
    if isinstance(var, str) and var:
        return symbol(var)
    raise TypeError(f"Expected a Symbol or variable name, got {var!r}")


def _is_zero(expr: AlgebraicExpr) -> bool:
    return isinstance(expr, Number) and expr.is_exact_zero()


class Differentiator:
    """Differentiate with respect to one variable."""

    def __init__(self, var: VariableLike, registry: Optional[FunctionRegistry] = None):
        self.var = _as_symbol(var)
        self.registry = registry if registry is not None else get_registry()

    def __call__(self, expr: AlgebraicExpr) -> AlgebraicExpr:
        return self.diff(expr)

    def diff(self, expr: AlgebraicExpr) -> AlgebraicExpr:
        """Unsimplified derivative of ``expr``."""
        if isinstance(expr, Matrix) and not depends_on(expr, self.var.name):
            return zero_matrix(expr.rows, expr.cols)
        if not depends_on(expr, self.var.name):
            return ZERO
        if isinstance(expr, Symbol):
            return ONE if expr == self.var else ZERO
        if isinstance(expr, Add):
            return add([self.diff(t) for t in expr.terms])
        if isinstance(expr, Mul):
            return self._product(expr)
        if isinstance(expr, Pow):
            return self._power(expr)
        if isinstance(expr, Function):
            return self._function(expr)
        if isinstance(expr, Derivative):
            if expr.var == self.var:
                return Derivative(expr.body, expr.var, expr.order + 1)
            return Derivative(expr, self.var)
        if isinstance(expr, Integral):
            return self._integral(expr)
        if isinstance(expr, (Matrix, Relation, Complex)):
            return expr.with_children(tuple(self.diff(c) for c in expr.children()))
        if isinstance(expr, Piecewise):
            return Piecewise(tuple((self.diff(v), c) for v, c in expr.pieces),
                             self.diff(expr.otherwise) if expr.otherwise is not None else None)
        if isinstance(expr, Interval):
            raise DomainError("derivative", "interval has no derivative", expr)
        return Derivative(expr, self.var)

    def _product(self, expr: Mul) -> AlgebraicExpr:
        """Left-to-right product rule; factor order is kept for non-commutative products."""
        factors = expr.factors
        terms = []
        for i, f in enumerate(factors):
            df = self.diff(f)
            if _is_zero(df):
                continue
            terms.append(mul(factors[:i] + (df,) + factors[i + 1:]))
        return add(terms)

    def _power(self, expr: Pow) -> AlgebraicExpr:
        f, g = expr.base, expr.exp
        name = self.var.name
        if not depends_on(g, name):
            # d(f^g) = g * f^(g-1) * f'
            return mul([g, pow_(f, add([g, MINUS_ONE])), self.diff(f)])
        if not depends_on(f, name):
            # d(f^g) = f^g * ln(f) * g'
            return mul([expr, function("ln", [f]), self.diff(g)])
        return mul([expr, add([
            mul([self.diff(g), function("ln", [f])]),
            mul([g, self.diff(f), pow_(f, MINUS_ONE)]),
        ])])

    def _function(self, expr: Function) -> AlgebraicExpr:
        props = self.registry.get(expr.name)
        if (props is None or props.derivative is None or not props.derivative.is_closed_form()
                or len(expr.args) != 1):
            return Derivative(expr, self.var)
        arg = expr.args[0]
        return mul([props.derivative.apply(arg), self.diff(arg)])

    def _integral(self, expr: Integral) -> AlgebraicExpr:
        if expr.var != self.var:
            return Derivative(expr, self.var)
        if expr.bounds is None:
            return expr.body
        # Fundamental theorem: the integration variable is bound.
        lo, hi = expr.bounds
        at_hi = substitute(expr.body, {self.var: hi})
        at_lo = substitute(expr.body, {self.var: lo})
        return add([mul([at_hi, self.diff(hi)]), neg(mul([at_lo, self.diff(lo)]))])


def derivative(expr: ExprLike, var: VariableLike) -> AlgebraicExpr:
    """Simplified derivative of ``expr`` with respect to ``var``."""
    from .alg_simplify import simplify
    return simplify(Differentiator(var).diff(as_expr(expr)))


def nth_derivative(expr: ExprLike, var: VariableLike, n: int) -> AlgebraicExpr:
    """n-th derivative; n = 0 returns ``expr`` unchanged."""
    if n < 0:
        raise ValueError(f"derivative order must be non-negative, got {n}")
    from .alg_simplify import simplify
    d = Differentiator(var)
    result = as_expr(expr)
    with ExprArena() as arena:
        for _ in range(n):
            result = arena.alloc(simplify(d.diff(result)))
            if _is_zero(result):
                break
    return result


# === Antiderivatives ===

def _linear_in(arg: AlgebraicExpr, var: Symbol):
    """(a, b) with arg = a*var + b and a a non-zero number, else None."""
    try:
        coeffs = coefficients_in(arg, var)
    except NotPolynomialError:
        return None
    if set(coeffs) - {0, 1} or 1 not in coeffs or not isinstance(coeffs[1], Number):
        return None
    return coeffs[1], coeffs.get(0, ZERO)


def antiderivative(expr: ExprLike, var: VariableLike) -> AlgebraicExpr:
    """
    Antiderivative with respect to ``var`` without the constant.

    Handles linearity, powers of ``var``, and registry functions of a linear
    argument; anything else stays an unevaluated Integral.
    """
    from .alg_simplify import simplify
    x = _as_symbol(var)
    registry = get_registry()

    def integrate(e: AlgebraicExpr) -> AlgebraicExpr:
        if not depends_on(e, x.name):
            return mul([e, x])
        if isinstance(e, Add):
            return add([integrate(t) for t in e.terms])
        coeff, rest = split_coefficient(e)
        if not coeff.is_one():
            return mul([coeff, integrate(rest)])
        if isinstance(e, Mul):
            free = [f for f in e.factors if not depends_on(f, x.name)]
            if free and e.commutativity.can_sort():
                bound = [f for f in e.factors if depends_on(f, x.name)]
                return mul(free + [integrate(mul(bound))])
        if e == x:
            return mul([Number.rational(1, 2), pow_(x, 2)])
        if isinstance(e, Pow) and e.base == x and not depends_on(e.exp, x.name):
            if e.exp == MINUS_ONE:
                return function("ln", [function("abs", [x])])
            n1 = add([e.exp, ONE])
            return mul([pow_(n1, MINUS_ONE), pow_(x, n1)])
        if isinstance(e, Function) and len(e.args) == 1:
            props = registry.get(e.name)
            linear = _linear_in(e.args[0], x)
            if props is not None and props.antiderivative is not None and linear is not None:
                primitive = props.antiderivative.apply(e.args[0])
                if primitive is not None:
                    return mul([linear[0].reciprocal(), primitive])
        return Integral(e, x)

    return simplify(integrate(simplify(as_expr(expr))))


# === Substitution ===

def _lookup(sym: Symbol, mapping: Dict[Union[Symbol, str], AlgebraicExpr]) -> AlgebraicExpr:
    if sym in mapping:
        return mapping[sym]
    return mapping.get(sym.name, sym)


def _substitute(expr: AlgebraicExpr, mapping: Dict[Union[Symbol, str], AlgebraicExpr]) -> AlgebraicExpr:
    if not mapping:
        return expr
    if isinstance(expr, Symbol):
        return _lookup(expr, mapping)
    if isinstance(expr, (Number, Constant)):
        return expr
    if isinstance(expr, (Derivative, Integral)):
        inner = {k: v for k, v in mapping.items() if k != expr.var and k != expr.var.name}
        body = _substitute(expr.body, inner)
        if isinstance(expr, Derivative):
            return expr if body is expr.body else Derivative(body, expr.var, expr.order)
        bounds = None
        if expr.bounds is not None:
            bounds = tuple(_substitute(b, mapping) for b in expr.bounds)
        return Integral(body, expr.var, bounds)
    children = expr.children()
    replaced = tuple(_substitute(c, mapping) for c in children)
    if all(a is b for a, b in zip(children, replaced)):
        return expr
    return expr.with_children(replaced)


def substitute(expr: ExprLike, mapping: Mapping[Union[Symbol, str], ExprLike],
               simplify: bool = False) -> AlgebraicExpr:
    """
    Replace free occurrences of each mapped variable.

    A Symbol key replaces only that symbol, so a matrix-kind ``A`` and a
    scalar ``A`` stay distinct; a name key replaces every symbol of that
    name whatever its kind. A Symbol key wins over a name key.

    The variable of a Derivative or Integral is bound inside its body and
    is not replaced there; integral bounds are. With ``simplify=True`` the
    result is simplified.
    """
    keyed: Dict[Union[Symbol, str], AlgebraicExpr] = {}
    for key, value in mapping.items():
        if not isinstance(key, Symbol) and not (isinstance(key, str) and key):
            raise TypeError(f"Substitution keys must be Symbols or names, got {key!r}")
        keyed[key] = as_expr(value)
    result = _substitute(as_expr(expr), keyed)
    if simplify:
        from .alg_simplify import simplify as _simplify
        result = _simplify(result)
    return result
