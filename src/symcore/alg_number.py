"""
symcore ALG Model: Exact Numbers

Numbers are expression leaves. A number is a machine-width integer, an
arbitrary-precision integer, an exact rational in lowest terms, or a double.
Promotion follows Integer -> BigInteger -> Rational -> Float; a float operand
absorbs the other side.
"""

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Union, Optional, Tuple

from .alg_base import AlgebraicExpr, Commutativity, RANK_NUMBER
from .alg_errors import DivisionByZeroError

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

NumberValue = Union[int, Fraction, float]


class NumberKind(Enum):
    """Storage variant of a number."""
    INTEGER = "integer"
    BIG_INTEGER = "big_integer"
    RATIONAL = "rational"
    FLOAT = "float"


def _normalize(value) -> NumberValue:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, Fraction):
        return value.numerator if value.denominator == 1 else value
    if isinstance(value, float):
        return value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Rational):
        return _normalize(Fraction(int(value.numerator), int(value.denominator)))
    if isinstance(value, numbers.Real):
        return float(value)
    raise TypeError(f"Cannot build a Number from {type(value).__name__}")


def _square_multiply(base, exponent: int):
    """base**exponent for exponent >= 0 by repeated squaring."""
    result = 1
    while exponent:
        if exponent & 1:
            result = result * base
        exponent >>= 1
        if exponent:
            base = base * base
    return result


def _promote(a: NumberValue, b: NumberValue) -> Tuple[NumberValue, NumberValue]:
    if isinstance(a, float) or isinstance(b, float):
        return float(a), float(b)
    return a, b


@dataclass(frozen=True, eq=False, repr=False)
class Number(AlgebraicExpr):
    """Exact or floating-point number leaf."""
    value: NumberValue

    def __post_init__(self):
        object.__setattr__(self, 'value', _normalize(self.value))

    @classmethod
    def rational(cls, numerator: int, denominator: int) -> 'Number':
        """Reduced rational; collapses to an integer when the denominator is one."""
        if denominator == 0:
            raise DivisionByZeroError("rational", f"{numerator}/{denominator}")
        return cls(Fraction(int(numerator), int(denominator)))

    # === Classification ===

    @property
    def kind(self) -> NumberKind:
        v = self.value
        if isinstance(v, float):
            return NumberKind.FLOAT
        if isinstance(v, Fraction):
            return NumberKind.RATIONAL
        if INT64_MIN <= v <= INT64_MAX:
            return NumberKind.INTEGER
        return NumberKind.BIG_INTEGER

    def is_integer(self) -> bool:
        return isinstance(self.value, int)

    def is_rational(self) -> bool:
        return isinstance(self.value, Fraction)

    def is_float(self) -> bool:
        return isinstance(self.value, float)

    def is_exact(self) -> bool:
        return not isinstance(self.value, float)

    def is_zero(self) -> bool:
        return self.value == 0

    def is_exact_zero(self) -> bool:
        return self.is_exact() and self.value == 0

    def is_one(self) -> bool:
        return self.is_exact() and self.value == 1

    def is_negative(self) -> bool:
        return self.value < 0

    @property
    def numerator(self) -> int:
        return Fraction(self.value).numerator

    @property
    def denominator(self) -> int:
        return Fraction(self.value).denominator

    def to_float(self) -> float:
        return float(self.value)

    # === Arithmetic ===

    def add(self, other: 'Number') -> 'Number':
        a, b = _promote(self.value, other.value)
        return Number(a + b)

    def sub(self, other: 'Number') -> 'Number':
        a, b = _promote(self.value, other.value)
        return Number(a - b)

    def mul(self, other: 'Number') -> 'Number':
        a, b = _promote(self.value, other.value)
        return Number(a * b)

    def negate(self) -> 'Number':
        return Number(-self.value)

    def reciprocal(self) -> 'Number':
        if self.value == 0:
            raise DivisionByZeroError("reciprocal", self)
        if isinstance(self.value, float):
            return Number(1.0 / self.value)
        return Number(1 / Fraction(self.value))

    def div(self, other: 'Number') -> 'Number':
        """self / other as self * other^-1."""
        if other.value == 0:
            raise DivisionByZeroError("divide", self)
        return self.mul(other.reciprocal())

    def pow_int(self, exponent: int) -> 'Number':
        """Raise to an integer power; negative powers invert into a rational."""
        v = self.value
        if isinstance(v, float):
            if v == 0 and exponent < 0:
                raise DivisionByZeroError("pow", self)
            return Number(v ** exponent)
        if exponent < 0:
            if v == 0:
                raise DivisionByZeroError("pow", self)
            return Number(_power_exact(v, -exponent)).reciprocal()
        return Number(_power_exact(v, exponent))

    def sqrt_exact(self) -> Optional['Number']:
        """
        Square root when it is exactly representable.

        Integers and rationals return an exact root only when the value is a
        perfect square (numerator and denominator both squares). Negative
        values return None; the caller decides whether to keep sqrt symbolic.
        """
        v = self.value
        if v < 0:
            return None
        if isinstance(v, float):
            return Number(math.sqrt(v))
        if isinstance(v, int):
            root = math.isqrt(v)
            return Number(root) if root * root == v else None
        num_root = math.isqrt(v.numerator)
        den_root = math.isqrt(v.denominator)
        if num_root * num_root == v.numerator and den_root * den_root == v.denominator:
            return Number(Fraction(num_root, den_root))
        return None

    def compare(self, other: 'Number') -> int:
        a, b = _promote(self.value, other.value)
        return (a > b) - (a < b)

    # === AlgebraicExpr protocol ===

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        return ()

    def with_children(self, children) -> 'Number':
        return self

    def _identity(self) -> tuple:
        return ('f' if isinstance(self.value, float) else 'q', self.value)

    def _own_commutativity(self) -> Commutativity:
        return Commutativity.COMMUTATIVE

    def sort_key(self) -> tuple:
        return (RANK_NUMBER, self.value, 1 if isinstance(self.value, float) else 0)

    def __str__(self) -> str:
        v = self.value
        if isinstance(v, Fraction):
            return f"{v.numerator}/{v.denominator}"
        if isinstance(v, float):
            return repr(v)
        return str(v)


def _power_exact(value, exponent: int):
    if isinstance(value, Fraction):
        # Distribute into numerator and denominator.
        return Fraction(_square_multiply(value.numerator, exponent),
                        _square_multiply(value.denominator, exponent))
    return _square_multiply(value, exponent)


ZERO = Number(0)
ONE = Number(1)
MINUS_ONE = Number(-1)
