"""
symcore ALG Model: Dense Univariate Integer Polynomials

IntPoly stores integer coefficients indexed by degree with trailing zeros
trimmed, so the leading coefficient is non-zero iff the polynomial is
non-zero. The zero polynomial has degree -1.
"""

import math
from fractions import Fraction
from functools import reduce
from typing import List, Sequence, Tuple, Union

from .alg_errors import DivisionByZeroError, DomainError

Coeffs = List[Fraction]


def _trim(coeffs: List) -> List:
    while coeffs and coeffs[-1] == 0:
        coeffs.pop()
    return coeffs


# === Rational coefficient helpers ===

def _frac_divmod(f: Coeffs, g: Coeffs) -> Tuple[Coeffs, Coeffs]:
    """Long division over Q of trimmed coefficient lists."""
    if not g:
        raise DivisionByZeroError("poly_div")
    r = list(f)
    dg = len(g) - 1
    q = [Fraction(0)] * max(len(f) - dg, 1)
    lc = g[-1]
    while r and len(r) - 1 >= dg:
        shift = len(r) - 1 - dg
        c = r[-1] / lc
        q[shift] = c
        for i, gi in enumerate(g):
            r[shift + i] -= c * gi
        _trim(r)
    return _trim(q), r


def _frac_resultant(f: Coeffs, g: Coeffs) -> Fraction:
    """
    Resultant by the Euclidean recursion
    res(f, g) = (-1)^(mn) lc(g)^(m-k) res(g, f mod g), k = deg(f mod g).
    """
    result = Fraction(1)
    while True:
        if not f or not g:
            return Fraction(0)
        m, n = len(f) - 1, len(g) - 1
        if n == 0:
            return result * g[0] ** m
        if m == 0:
            return result * f[0] ** n
        _, r = _frac_divmod(f, g)
        if not r:
            return Fraction(0)
        k = len(r) - 1
        if (m * n) % 2:
            result = -result
        result *= g[-1] ** (m - k)
        f, g = g, r


class IntPoly:
    """Dense univariate polynomial with integer coefficients."""

    __slots__ = ('coeffs',)

    def __init__(self, coeffs: Sequence[int] = ()):
        values = []
        for c in coeffs:
            if isinstance(c, Fraction):
                if c.denominator != 1:
                    raise DomainError("intpoly", f"non-integer coefficient {c}")
                c = c.numerator
            values.append(int(c))
        object.__setattr__(self, 'coeffs', tuple(_trim(values)))

    def __setattr__(self, key, value):
        raise AttributeError("IntPoly is immutable")

    @classmethod
    def zero(cls) -> 'IntPoly':
        return cls(())

    @classmethod
    def constant(cls, c: int) -> 'IntPoly':
        return cls((c,))

    @classmethod
    def monomial(cls, c: int, n: int) -> 'IntPoly':
        """c * x^n."""
        return cls([0] * n + [c])

    # === Properties ===

    def degree(self) -> int:
        return len(self.coeffs) - 1

    def leading_coefficient(self) -> int:
        return self.coeffs[-1] if self.coeffs else 0

    def is_zero(self) -> bool:
        return not self.coeffs

    def content(self) -> int:
        """Non-negative GCD of the coefficients."""
        return reduce(math.gcd, self.coeffs, 0)

    def primitive_part(self) -> 'IntPoly':
        """Divide out the content; the sign is kept."""
        c = self.content()
        if c in (0, 1):
            return self
        return IntPoly(a // c for a in self.coeffs)

    def normalized(self) -> 'IntPoly':
        """Primitive part with positive leading coefficient."""
        p = self.primitive_part()
        return -p if p.leading_coefficient() < 0 else p

    def evaluate(self, x: Union[int, Fraction, float]):
        """Horner evaluation."""
        result = 0
        for c in reversed(self.coeffs):
            result = result * x + c
        return result

    def derivative(self) -> 'IntPoly':
        return IntPoly(i * c for i, c in enumerate(self.coeffs) if i > 0)

    # === Ring operations ===

    def __eq__(self, other) -> bool:
        if not isinstance(other, IntPoly):
            return NotImplemented
        return self.coeffs == other.coeffs

    def __hash__(self) -> int:
        return hash(('IntPoly', self.coeffs))

    def __add__(self, other: 'IntPoly') -> 'IntPoly':
        n = max(len(self.coeffs), len(other.coeffs))
        a = self.coeffs + (0,) * (n - len(self.coeffs))
        b = other.coeffs + (0,) * (n - len(other.coeffs))
        return IntPoly(x + y for x, y in zip(a, b))

    def __neg__(self) -> 'IntPoly':
        return IntPoly(-c for c in self.coeffs)

    def __sub__(self, other: 'IntPoly') -> 'IntPoly':
        return self + (-other)

    def __mul__(self, other: Union['IntPoly', int]) -> 'IntPoly':
        if isinstance(other, int):
            return IntPoly(c * other for c in self.coeffs)
        if self.is_zero() or other.is_zero():
            return IntPoly.zero()
        out = [0] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            if a == 0:
                continue
            for j, b in enumerate(other.coeffs):
                out[i + j] += a * b
        return IntPoly(out)

    __rmul__ = __mul__

    def shift(self, n: int) -> 'IntPoly':
        """Multiply by x^n."""
        if self.is_zero():
            return self
        return IntPoly((0,) * n + self.coeffs)

    def divmod(self, other: 'IntPoly') -> Tuple['IntPoly', 'IntPoly']:
        """
        Long division over Z: self = q*other + r with deg r < deg other.

        Raises DivisionByZeroError for a zero divisor and DomainError when a
        quotient coefficient would not be an integer.
        """
        if other.is_zero():
            raise DivisionByZeroError("poly_div", self)
        q, r = _frac_divmod([Fraction(c) for c in self.coeffs],
                            [Fraction(c) for c in other.coeffs])
        if any(c.denominator != 1 for c in q + r):
            raise DomainError("poly_div", f"{other} does not divide {self} over the integers")
        return IntPoly(q), IntPoly(r)

    def pseudo_remainder(self, other: 'IntPoly') -> 'IntPoly':
        """Remainder of lc(other)^k * self by other, computed without fractions."""
        if other.is_zero():
            raise DivisionByZeroError("pseudo_remainder", self)
        r = self
        d = other.degree()
        lc = other.leading_coefficient()
        while not r.is_zero() and r.degree() >= d:
            r = r * lc - (other * r.leading_coefficient()).shift(r.degree() - d)
        return r

    # === GCD, resultant, discriminant ===

    def gcd(self, other: 'IntPoly') -> 'IntPoly':
        """
        GCD by the primitive remainder sequence.

        Each remainder is replaced by its primitive part with positive leading
        coefficient. The result is primitive with positive leading
        coefficient; gcd(p, 0) is p's normalized primitive part.
        """
        if self.is_zero():
            return other.normalized()
        if other.is_zero():
            return self.normalized()
        a, b = self.normalized(), other.normalized()
        if a.degree() < b.degree():
            a, b = b, a
        while not b.is_zero():
            r = a.pseudo_remainder(b)
            a, b = b, r.normalized()
        return a.normalized()

    def cofactors(self, other: 'IntPoly') -> Tuple['IntPoly', 'IntPoly', 'IntPoly']:
        """(g, self/g, other/g) for g = gcd(self, other)."""
        g = self.gcd(other)
        if g.is_zero():
            return g, self, other
        return g, self.exact_quotient(g), other.exact_quotient(g)

    def exact_quotient(self, other: 'IntPoly') -> 'IntPoly':
        q, r = _frac_divmod([Fraction(c) for c in self.coeffs], [Fraction(c) for c in other.coeffs])
        if r:
            raise DomainError("exact_quotient", f"{other} does not divide {self}")
        # The quotient of two integer polynomials by a primitive divisor is integral.
        return IntPoly(q)

    def resultant(self, other: 'IntPoly') -> int:
        """Resultant res(self, other); zero iff they share a root."""
        value = _frac_resultant([Fraction(c) for c in self.coeffs],
                                [Fraction(c) for c in other.coeffs])
        return value.numerator

    def discriminant(self) -> int:
        """(-1)^(n(n-1)/2) res(p, p') / lc(p); degree must be at least one."""
        n = self.degree()
        if n < 1:
            raise DomainError("poly_discriminant", f"degree {n} polynomial has no discriminant", self)
        res = Fraction(self.resultant(self.derivative()))
        sign = -1 if (n * (n - 1) // 2) % 2 else 1
        value = sign * res / self.leading_coefficient()
        return value.numerator

    def sylvester_matrix(self, other: 'IntPoly') -> List[List[int]]:
        """
        (m+n) x (m+n) Sylvester matrix: n shifted rows of self's coefficients
        followed by m shifted rows of other's, highest degree first.
        """
        m, n = self.degree(), other.degree()
        if m < 0 or n < 0:
            raise DomainError("sylvester_matrix", "zero polynomial has no Sylvester matrix")
        size = m + n
        f = list(reversed(self.coeffs))
        g = list(reversed(other.coeffs))
        rows = []
        for i in range(n):
            rows.append([0] * i + f + [0] * (size - m - 1 - i))
        for i in range(m):
            rows.append([0] * i + g + [0] * (size - n - 1 - i))
        return rows

    # === Display ===

    def __str__(self) -> str:
        if self.is_zero():
            return "0"
        parts = []
        for i in range(len(self.coeffs) - 1, -1, -1):
            c = self.coeffs[i]
            if c == 0:
                continue
            mono = "" if i == 0 else ("x" if i == 1 else f"x^{i}")
            if mono and abs(c) == 1:
                text = mono
            else:
                text = f"{abs(c)}{'*' if mono else ''}{mono}"
            sign = "-" if c < 0 else "+"
            parts.append(f"{sign} {text}" if parts else (f"-{text}" if c < 0 else text))
        return " ".join(parts)

    def __repr__(self) -> str:
        return f"IntPoly({list(self.coeffs)})"
