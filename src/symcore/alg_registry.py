"""
symcore ALG Model: Function Property Registry

Maps a function name to everything the engine knows about it: derivative
and antiderivative rules, special values, parity, domain/range, numerical
evaluators, and the rewrite strategy consulted by the simplifier.

The registry is process-wide. It is populated on first access and only
changes afterwards through ``register_function``.
"""

import logging
import math
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, List

import numpy as np

from .alg_base import AlgebraicExpr
from .alg_number import Number, ZERO, ONE, MINUS_ONE
from .alg_types import (
    Function, PI, E, UNDEFINED,
    add, mul, pow_, neg, rational, function, split_coefficient,
)

logger = logging.getLogger('symcore.registry')


# === Declarative records ===

class FunctionFamily(Enum):
    """Family a registered function belongs to."""
    ELEMENTARY = "elementary"
    SPECIAL = "special"
    POLYNOMIAL = "polynomial"
    USER_DEFINED = "user_defined"


class Parity(Enum):
    EVEN = "even"
    ODD = "odd"
    NONE = "none"


@dataclass(frozen=True)
class Domain:
    """Real interval; infinite endpoints are always open."""
    lower: float = -math.inf
    upper: float = math.inf
    left_open: bool = True
    right_open: bool = True

    def contains(self, x: float) -> bool:
        if math.isnan(x):
            return False
        if x < self.lower or (x == self.lower and self.left_open):
            return False
        if x > self.upper or (x == self.upper and self.right_open):
            return False
        return True

    def __str__(self) -> str:
        left = "(" if self.left_open else "["
        right = ")" if self.right_open else "]"
        return f"{left}{self.lower}, {self.upper}{right}"


REAL = Domain()
POSITIVE = Domain(lower=0.0)
NON_NEGATIVE = Domain(lower=0.0, left_open=False)
UNIT_INTERVAL = Domain(lower=-1.0, upper=1.0, left_open=False, right_open=False)


@dataclass(frozen=True)
class DerivativeRule:
    """
    Outer derivative f'(u) as a builder of the argument.

    A rule with ``builder=None`` is a marker: the derivative is known to exist
    but is kept as an unevaluated Derivative node.
    """
    builder: Optional[Callable[[AlgebraicExpr], AlgebraicExpr]] = None

    def is_closed_form(self) -> bool:
        return self.builder is not None

    def apply(self, arg: AlgebraicExpr) -> Optional[AlgebraicExpr]:
        return self.builder(arg) if self.builder is not None else None


class AntiderivativeKind(Enum):
    CLOSED_FORM = "closed_form"
    NON_ELEMENTARY = "non_elementary"
    CUSTOM = "custom"


@dataclass(frozen=True)
class AntiderivativeRule:
    """Antiderivative of f(u) with respect to u."""
    kind: AntiderivativeKind
    builder: Optional[Callable[[AlgebraicExpr], AlgebraicExpr]] = None

    def apply(self, arg: AlgebraicExpr) -> Optional[AlgebraicExpr]:
        if self.kind is AntiderivativeKind.NON_ELEMENTARY or self.builder is None:
            return None
        return self.builder(arg)


@dataclass(frozen=True)
class SpecialValue:
    """Exact value f(input) = output."""
    input: AlgebraicExpr
    output: AlgebraicExpr


# === Strategies ===

class SimplificationStrategy(ABC):
    """Rewrite consulted once per Function node by the simplifier."""

    @abstractmethod
    def applies_to(self, props: 'FunctionProperties', args: Tuple[AlgebraicExpr, ...]) -> bool:
        """Whether ``simplify`` may be called for these (simplified) arguments."""

    @abstractmethod
    def simplify(self, props: 'FunctionProperties', args: Tuple[AlgebraicExpr, ...]) -> AlgebraicExpr:
        """Rewritten expression; the unchanged Function when nothing applies."""


class StandardStrategy(SimplificationStrategy):
    """
    Strategy shared by the built-in functions.

    In order: special values, inverse composition (exp(ln(u)) = u), exact
    evaluation hook, float evaluation, and parity for arguments with a
    negative leading coefficient.
    """

    def applies_to(self, props, args) -> bool:
        return len(args) == props.arity

    def simplify(self, props, args) -> AlgebraicExpr:
        arg = args[0]
        for special in props.special_values:
            if special.input == arg:
                return special.output

        if props.inverse is not None and isinstance(arg, Function) and arg.name == props.inverse:
            return arg.args[0]

        if isinstance(arg, Number):
            exact = self.evaluate_exact(props, arg)
            if exact is not None:
                return exact
            if arg.is_float() and props.evaluator is not None and props.domain.contains(arg.value):
                try:
                    return Number(float(props.evaluator(arg.value)))
                except (ValueError, OverflowError):
                    return Function(props.name, tuple(args))

        coeff, _ = split_coefficient(arg)
        if coeff.is_negative() and props.parity is not Parity.NONE:
            mirrored = function(props.name, [neg(arg)])
            if props.parity is Parity.ODD:
                return neg(mirrored)
            return mirrored

        return Function(props.name, tuple(args))

    def evaluate_exact(self, props, arg: Number) -> Optional[AlgebraicExpr]:
        """Hook for exact numeric reductions; None keeps the function symbolic."""
        return None


class SqrtStrategy(StandardStrategy):
    """sqrt of an exact perfect square is computed exactly."""

    def evaluate_exact(self, props, arg: Number) -> Optional[AlgebraicExpr]:
        if not arg.is_exact():
            return None
        return arg.sqrt_exact()


class AbsStrategy(StandardStrategy):

    def evaluate_exact(self, props, arg: Number) -> Optional[AlgebraicExpr]:
        return arg.negate() if arg.is_negative() else arg


class GammaStrategy(StandardStrategy):
    """gamma(n) = (n-1)! at positive integers; non-positive integers are poles."""

    def evaluate_exact(self, props, arg: Number) -> Optional[AlgebraicExpr]:
        if not arg.is_integer():
            return None
        if arg.value <= 0:
            return UNDEFINED
        return Number(math.factorial(arg.value - 1))


# === Function properties ===

@dataclass
class FunctionProperties:
    """Everything the engine knows about one named function."""
    name: str
    family: FunctionFamily = FunctionFamily.USER_DEFINED
    arity: int = 1
    derivative: Optional[DerivativeRule] = None
    antiderivative: Optional[AntiderivativeRule] = None
    special_values: Tuple[SpecialValue, ...] = ()
    parity: Parity = Parity.NONE
    inverse: Optional[str] = None  # f(inverse(u)) = u
    domain: Domain = REAL
    range: Domain = REAL
    evaluator: Optional[Callable[[float], float]] = None
    bulk_evaluator: Optional[Callable[[np.ndarray], np.ndarray]] = None
    strategy: Optional[SimplificationStrategy] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("FunctionProperties needs a name")
        if self.arity < 0:
            raise ValueError(f"arity must be non-negative, got {self.arity}")
        self.special_values = tuple(self.special_values)

    def has_derivative(self) -> bool:
        return self.derivative is not None

    def has_antiderivative(self) -> bool:
        return self.antiderivative is not None and self.antiderivative.kind is not AntiderivativeKind.NON_ELEMENTARY

    def evaluate(self, x: float) -> float:
        """Scalar evaluation; raises ValueError outside the domain."""
        if self.evaluator is None:
            raise ValueError(f"{self.name} has no numerical evaluator")
        if not self.domain.contains(x):
            raise ValueError(f"{self.name}({x}) outside domain {self.domain}")
        return self.evaluator(x)

    def evaluate_bulk(self, values: np.ndarray) -> np.ndarray:
        """Vectorized evaluation; falls back to the scalar evaluator per element."""
        values = np.asarray(values, dtype=float)
        if self.bulk_evaluator is not None:
            return np.asarray(self.bulk_evaluator(values), dtype=float)
        if self.evaluator is None:
            raise ValueError(f"{self.name} has no numerical evaluator")
        return np.vectorize(self.evaluator, otypes=[float])(values)


# === Built-in content ===

def _half_pi() -> AlgebraicExpr:
    return mul([rational(1, 2), PI])


def _sqrt(u):
    return function("sqrt", [u])


def _one_minus_square(u):
    return add([ONE, neg(pow_(u, 2))])


def _builtin_properties() -> List[FunctionProperties]:
    standard = StandardStrategy()
    return [
        FunctionProperties(
            name="sin", family=FunctionFamily.ELEMENTARY, parity=Parity.ODD,
            derivative=DerivativeRule(lambda u: function("cos", [u])),
            antiderivative=AntiderivativeRule(AntiderivativeKind.CLOSED_FORM,
                                              lambda u: neg(function("cos", [u]))),
            special_values=(SpecialValue(ZERO, ZERO), SpecialValue(PI, ZERO),
                            SpecialValue(_half_pi(), ONE)),
            range=UNIT_INTERVAL, evaluator=math.sin, bulk_evaluator=np.sin, strategy=standard,
        ),
        FunctionProperties(
            name="cos", family=FunctionFamily.ELEMENTARY, parity=Parity.EVEN,
            derivative=DerivativeRule(lambda u: neg(function("sin", [u]))),
            antiderivative=AntiderivativeRule(AntiderivativeKind.CLOSED_FORM,
                                              lambda u: function("sin", [u])),
            special_values=(SpecialValue(ZERO, ONE), SpecialValue(PI, MINUS_ONE),
                            SpecialValue(_half_pi(), ZERO)),
            range=UNIT_INTERVAL, evaluator=math.cos, bulk_evaluator=np.cos, strategy=standard,
        ),
        FunctionProperties(
            name="tan", family=FunctionFamily.ELEMENTARY, parity=Parity.ODD,
            derivative=DerivativeRule(lambda u: pow_(function("cos", [u]), -2)),
            antiderivative=AntiderivativeRule(
                AntiderivativeKind.CLOSED_FORM,
                lambda u: neg(function("ln", [function("abs", [function("cos", [u])])]))),
            special_values=(SpecialValue(ZERO, ZERO), SpecialValue(PI, ZERO)),
            evaluator=math.tan, bulk_evaluator=np.tan, strategy=standard,
        ),
        FunctionProperties(
            name="exp", family=FunctionFamily.ELEMENTARY, inverse="ln",
            derivative=DerivativeRule(lambda u: function("exp", [u])),
            antiderivative=AntiderivativeRule(AntiderivativeKind.CLOSED_FORM,
                                              lambda u: function("exp", [u])),
            special_values=(SpecialValue(ZERO, ONE), SpecialValue(ONE, E)),
            range=POSITIVE, evaluator=math.exp, bulk_evaluator=np.exp, strategy=standard,
        ),
        FunctionProperties(
            name="ln", family=FunctionFamily.ELEMENTARY, inverse="exp",
            derivative=DerivativeRule(lambda u: pow_(u, -1)),
            antiderivative=AntiderivativeRule(
                AntiderivativeKind.CLOSED_FORM,
                lambda u: add([mul([u, function("ln", [u])]), neg(u)])),
            special_values=(SpecialValue(ONE, ZERO), SpecialValue(E, ONE)),
            domain=POSITIVE, evaluator=math.log, bulk_evaluator=np.log, strategy=standard,
        ),
        FunctionProperties(
            name="sqrt", family=FunctionFamily.ELEMENTARY,
            derivative=DerivativeRule(lambda u: mul([rational(1, 2), pow_(_sqrt(u), -1)])),
            antiderivative=AntiderivativeRule(AntiderivativeKind.CLOSED_FORM,
                                              lambda u: mul([rational(2, 3), pow_(_sqrt(u), 3)])),
            domain=NON_NEGATIVE, range=NON_NEGATIVE,
            evaluator=math.sqrt, bulk_evaluator=np.sqrt, strategy=SqrtStrategy(),
        ),
        FunctionProperties(
            name="abs", family=FunctionFamily.ELEMENTARY, parity=Parity.EVEN,
            derivative=DerivativeRule(lambda u: mul([u, pow_(function("abs", [u]), -1)])),
            antiderivative=AntiderivativeRule(
                AntiderivativeKind.CLOSED_FORM,
                lambda u: mul([rational(1, 2), u, function("abs", [u])])),
            range=NON_NEGATIVE, evaluator=abs, bulk_evaluator=np.abs, strategy=AbsStrategy(),
        ),
        FunctionProperties(
            name="sinh", family=FunctionFamily.ELEMENTARY, parity=Parity.ODD,
            derivative=DerivativeRule(lambda u: function("cosh", [u])),
            antiderivative=AntiderivativeRule(AntiderivativeKind.CLOSED_FORM,
                                              lambda u: function("cosh", [u])),
            special_values=(SpecialValue(ZERO, ZERO),),
            evaluator=math.sinh, bulk_evaluator=np.sinh, strategy=standard,
        ),
        FunctionProperties(
            name="cosh", family=FunctionFamily.ELEMENTARY, parity=Parity.EVEN,
            derivative=DerivativeRule(lambda u: function("sinh", [u])),
            antiderivative=AntiderivativeRule(AntiderivativeKind.CLOSED_FORM,
                                              lambda u: function("sinh", [u])),
            special_values=(SpecialValue(ZERO, ONE),),
            range=Domain(lower=1.0, left_open=False),
            evaluator=math.cosh, bulk_evaluator=np.cosh, strategy=standard,
        ),
        FunctionProperties(
            name="tanh", family=FunctionFamily.ELEMENTARY, parity=Parity.ODD,
            derivative=DerivativeRule(lambda u: pow_(function("cosh", [u]), -2)),
            antiderivative=AntiderivativeRule(
                AntiderivativeKind.CLOSED_FORM,
                lambda u: function("ln", [function("cosh", [u])])),
            special_values=(SpecialValue(ZERO, ZERO),),
            range=Domain(lower=-1.0, upper=1.0),
            evaluator=math.tanh, bulk_evaluator=np.tanh, strategy=standard,
        ),
        FunctionProperties(
            name="asin", family=FunctionFamily.ELEMENTARY, parity=Parity.ODD,
            derivative=DerivativeRule(lambda u: pow_(_sqrt(_one_minus_square(u)), -1)),
            antiderivative=AntiderivativeRule(
                AntiderivativeKind.CLOSED_FORM,
                lambda u: add([mul([u, function("asin", [u])]), _sqrt(_one_minus_square(u))])),
            special_values=(SpecialValue(ZERO, ZERO), SpecialValue(ONE, _half_pi())),
            domain=UNIT_INTERVAL, evaluator=math.asin, bulk_evaluator=np.arcsin, strategy=standard,
        ),
        FunctionProperties(
            name="acos", family=FunctionFamily.ELEMENTARY,
            derivative=DerivativeRule(lambda u: neg(pow_(_sqrt(_one_minus_square(u)), -1))),
            antiderivative=AntiderivativeRule(
                AntiderivativeKind.CLOSED_FORM,
                lambda u: add([mul([u, function("acos", [u])]), neg(_sqrt(_one_minus_square(u)))])),
            special_values=(SpecialValue(ONE, ZERO), SpecialValue(ZERO, _half_pi())),
            domain=UNIT_INTERVAL, range=Domain(lower=0.0, upper=math.pi, left_open=False, right_open=False),
            evaluator=math.acos, bulk_evaluator=np.arccos, strategy=standard,
        ),
        FunctionProperties(
            name="atan", family=FunctionFamily.ELEMENTARY, parity=Parity.ODD,
            derivative=DerivativeRule(lambda u: pow_(add([ONE, pow_(u, 2)]), -1)),
            antiderivative=AntiderivativeRule(
                AntiderivativeKind.CLOSED_FORM,
                lambda u: add([mul([u, function("atan", [u])]),
                               mul([rational(-1, 2), function("ln", [add([ONE, pow_(u, 2)])])])])),
            special_values=(SpecialValue(ZERO, ZERO), SpecialValue(ONE, mul([rational(1, 4), PI]))),
            range=Domain(lower=-math.pi / 2, upper=math.pi / 2),
            evaluator=math.atan, bulk_evaluator=np.arctan, strategy=standard,
        ),
        FunctionProperties(
            name="gamma", family=FunctionFamily.SPECIAL,
            derivative=DerivativeRule(),
            antiderivative=AntiderivativeRule(AntiderivativeKind.NON_ELEMENTARY),
            evaluator=math.gamma,
            bulk_evaluator=lambda values: np.frompyfunc(math.gamma, 1, 1)(values).astype(float),
            strategy=GammaStrategy(),
        ),
    ]


# === Registry ===

class FunctionRegistry:
    """Name -> FunctionProperties table."""

    def __init__(self, properties: Optional[List[FunctionProperties]] = None):
        self._functions: Dict[str, FunctionProperties] = {}
        self._lock = threading.Lock()
        for props in properties or []:
            self._functions[props.name] = props

    def get(self, name: str) -> Optional[FunctionProperties]:
        return self._functions.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def names(self) -> List[str]:
        return sorted(self._functions)

    def register(self, properties: FunctionProperties, replace: bool = False) -> None:
        """Add a record; an existing name is only overwritten with ``replace=True``."""
        with self._lock:
            if properties.name in self._functions and not replace:
                raise ValueError(f"Function '{properties.name}' is already registered")
            self._functions[properties.name] = properties
        logger.debug(f"Registered function '{properties.name}' ({properties.family.value})")


_REGISTRY: Optional[FunctionRegistry] = None
_REGISTRY_LOCK = threading.Lock()


def get_registry() -> FunctionRegistry:
    """Get the process-wide registry, populating it on first access."""
    global _REGISTRY
    if _REGISTRY is None:
        with _REGISTRY_LOCK:
            if _REGISTRY is None:
                registry = FunctionRegistry(_builtin_properties())
                logger.info(
                    f"Function registry initialized with {len(registry)} functions",
                    extra={'extra_data': {'functions': registry.names()}}
                )
                _REGISTRY = registry
    return _REGISTRY


def register_function(name: str, properties: FunctionProperties, replace: bool = False) -> None:
    """
    Register ``properties`` under ``name``.

    Must happen before the first use of ``name`` or during a serialized
    initialization phase.
    """
    if properties.name != name:
        raise ValueError(f"Properties are for '{properties.name}', not '{name}'")
    get_registry().register(properties, replace=replace)


def get_function_properties(name: str) -> Optional[FunctionProperties]:
    return get_registry().get(name)
