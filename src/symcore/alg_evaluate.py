"""
symcore ALG Model: Numeric Evaluation

Evaluates expressions to Python floats (or complex numbers when the
imaginary unit appears) through the registry's numerical evaluators, and
over numpy arrays through their bulk evaluators.
"""

import math
from typing import Dict, Mapping, Optional, Union

import numpy as np

from .alg_base import AlgebraicExpr
from .alg_errors import DivisionByZeroError, DomainError
from .alg_number import Number
from .alg_symbol import Symbol
from .alg_types import (
    ExprLike, as_expr, Constant, Add, Mul, Pow, Function, Complex, Piecewise,
    Relation, RelationOp, is_undefined,
)
from .alg_lower import VariableLike, variable_name
from .alg_registry import FunctionRegistry, get_registry

Scalar = Union[float, complex]

_CONSTANTS: Dict[str, Scalar] = {
    "pi": math.pi,
    "e": math.e,
    "i": 1j,
    "oo": math.inf,
}


def _real_if_possible(value: Scalar) -> Scalar:
    if isinstance(value, complex) and value.imag == 0:
        return value.real
    return value


class Evaluator:
    """Evaluate expressions under a fixed variable binding."""

    def __init__(self, env: Optional[Mapping[str, Scalar]] = None,
                 registry: Optional[FunctionRegistry] = None):
        self.env = dict(env or {})
        self.registry = registry if registry is not None else get_registry()

    def evaluate(self, expr: AlgebraicExpr) -> Scalar:
        if isinstance(expr, Number):
            return expr.to_float()
        if isinstance(expr, Symbol):
            if expr.name not in self.env:
                raise DomainError("evaluate", f"unbound variable '{expr.name}'", expr)
            return self.env[expr.name]
        if isinstance(expr, Constant):
            return _CONSTANTS[expr.name]
        if isinstance(expr, Add):
            return _real_if_possible(sum(self.evaluate(t) for t in expr.terms))
        if isinstance(expr, Mul):
            result = 1.0
            for f in expr.factors:
                result *= self.evaluate(f)
            return _real_if_possible(result)
        if isinstance(expr, Pow):
            return self._power(expr)
        if isinstance(expr, Complex):
            return _real_if_possible(complex(self.evaluate(expr.re)) + 1j * self.evaluate(expr.im))
        if isinstance(expr, Function):
            return self._function(expr)
        if isinstance(expr, Piecewise):
            return self._piecewise(expr)
        raise DomainError("evaluate", f"{type(expr).__name__} has no numeric value", expr)

    def _power(self, expr: Pow) -> Scalar:
        base = self.evaluate(expr.base)
        exp = self.evaluate(expr.exp)
        if base == 0 and (exp.real if isinstance(exp, complex) else exp) < 0:
            raise DivisionByZeroError("evaluate", expr)
        if isinstance(base, complex) or isinstance(exp, complex):
            return _real_if_possible(complex(base) ** exp)
        if base < 0 and not float(exp).is_integer():
            raise DomainError("evaluate", "non-integer power of a negative number", expr)
        try:
            return float(base) ** float(exp)
        except OverflowError:
            return math.inf

    def _function(self, expr: Function) -> Scalar:
        if is_undefined(expr):
            raise DomainError("evaluate", "undefined value", expr)
        props = self.registry.get(expr.name)
        if props is None or props.evaluator is None:
            raise DomainError("evaluate", f"no numeric evaluator for '{expr.name}'", expr)
        if len(expr.args) != 1:
            raise DomainError("evaluate", f"'{expr.name}' expects one argument", expr)
        arg = self.evaluate(expr.args[0])
        if isinstance(arg, complex):
            raise DomainError("evaluate", f"complex argument to '{expr.name}'", expr)
        try:
            return props.evaluate(arg)
        except (ValueError, OverflowError) as exc:
            raise DomainError("evaluate", str(exc), expr) from exc

    def _piecewise(self, expr: Piecewise) -> Scalar:
        for value, condition in expr.pieces:
            if not isinstance(condition, Relation):
                raise DomainError("evaluate", "piecewise condition must be a relation", expr)
            lhs, rhs = self.evaluate(condition.lhs), self.evaluate(condition.rhs)
            holds = {
                RelationOp.EQ: lhs == rhs,
                RelationOp.NE: lhs != rhs,
                RelationOp.LT: lhs < rhs,
                RelationOp.LE: lhs <= rhs,
                RelationOp.GT: lhs > rhs,
                RelationOp.GE: lhs >= rhs,
            }[condition.op]
            if holds:
                return self.evaluate(value)
        if expr.otherwise is None:
            raise DomainError("evaluate", "no piecewise branch applies", expr)
        return self.evaluate(expr.otherwise)


def evaluate(expr: ExprLike, env: Optional[Mapping[str, Scalar]] = None) -> Scalar:
    """
    Numeric value of ``expr`` with variables bound by ``env``.

    Raises:
        DomainError: unbound variable, argument outside a function's domain,
            or a node with no numeric value (matrix, relation, derivative, ...).
        DivisionByZeroError: zero raised to a negative power.
    """
    return Evaluator(env).evaluate(as_expr(expr))


# === Bulk evaluation ===

class BulkEvaluator:
    """Evaluate one expression over an array of values of a single variable."""

    def __init__(self, var: VariableLike, env: Optional[Mapping[str, Scalar]] = None,
                 registry: Optional[FunctionRegistry] = None):
        self.var = variable_name(var)
        self.env = dict(env or {})
        self.registry = registry if registry is not None else get_registry()

    def evaluate(self, expr: AlgebraicExpr, values: np.ndarray) -> np.ndarray:
        if isinstance(expr, Number):
            return np.full(values.shape, expr.to_float())
        if isinstance(expr, Symbol):
            if expr.name == self.var:
                return values
            if expr.name in self.env:
                return np.full(values.shape, float(self.env[expr.name]))
            raise DomainError("evaluate_bulk", f"unbound variable '{expr.name}'", expr)
        if isinstance(expr, Constant):
            value = _CONSTANTS[expr.name]
            if isinstance(value, complex):
                raise DomainError("evaluate_bulk", "complex constant in real bulk evaluation", expr)
            return np.full(values.shape, value)
        if isinstance(expr, Add):
            result = np.zeros(values.shape)
            for t in expr.terms:
                result = result + self.evaluate(t, values)
            return result
        if isinstance(expr, Mul):
            result = np.ones(values.shape)
            for f in expr.factors:
                result = result * self.evaluate(f, values)
            return result
        if isinstance(expr, Pow):
            return np.power(self.evaluate(expr.base, values), self.evaluate(expr.exp, values))
        if isinstance(expr, Function) and not is_undefined(expr) and len(expr.args) == 1:
            props = self.registry.get(expr.name)
            if props is None:
                raise DomainError("evaluate_bulk", f"no numeric evaluator for '{expr.name}'", expr)
            try:
                return props.evaluate_bulk(self.evaluate(expr.args[0], values))
            except ValueError as exc:
                raise DomainError("evaluate_bulk", str(exc), expr) from exc
        raise DomainError("evaluate_bulk", f"{type(expr).__name__} has no numeric value", expr)


def evaluate_bulk(expr: ExprLike, var: VariableLike, values,
                  env: Optional[Mapping[str, Scalar]] = None) -> np.ndarray:
    """
    Evaluate ``expr`` at every element of ``values`` for ``var``.

    Points outside a function's domain produce nan rather than an error.
    """
    values = np.asarray(values, dtype=float)
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        return np.asarray(BulkEvaluator(var, env).evaluate(as_expr(expr), values), dtype=float)
