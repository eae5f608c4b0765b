"""
symcore ALG Model: Sparse Multivariate Polynomials

A SparsePolynomial maps monomials (exponent tuples over an ordered variable
list) to non-zero exact coefficients. Coefficients are integers unless a
computation promotes them to rationals. The monomial order is an argument
of every order-dependent operation, not a property of the polynomial.
"""

import math
from enum import Enum
from fractions import Fraction
from functools import reduce
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .alg_errors import DivisionByZeroError, DomainError

Monomial = Tuple[int, ...]
Coefficient = Union[int, Fraction]


def _normalize_coeff(c) -> Coefficient:
    if isinstance(c, Fraction):
        return c.numerator if c.denominator == 1 else c
    return int(c)


class MonomialOrder(Enum):
    """Term orders; the first variable is the most significant."""
    LEX = "lex"
    GRLEX = "grlex"
    GREVLEX = "grevlex"

    @classmethod
    def parse(cls, value: Union['MonomialOrder', str, None]) -> 'MonomialOrder':
        if value is None:
            from .alg_config import get_config
            value = get_config().default_monomial_order
        if isinstance(value, MonomialOrder):
            return value
        return cls(value.lower())

    def key(self, exps: Monomial) -> tuple:
        """Sort key: larger key means larger monomial."""
        if self is MonomialOrder.LEX:
            return exps
        if self is MonomialOrder.GRLEX:
            return (sum(exps), exps)
        return (sum(exps), tuple(-e for e in reversed(exps)))


def monomial_divides(a: Monomial, b: Monomial) -> bool:
    """Whether a divides b."""
    return all(x <= y for x, y in zip(a, b))


def monomial_lcm(a: Monomial, b: Monomial) -> Monomial:
    return tuple(max(x, y) for x, y in zip(a, b))


def monomial_quotient(b: Monomial, a: Monomial) -> Monomial:
    return tuple(y - x for x, y in zip(a, b))


def monomials_coprime(a: Monomial, b: Monomial) -> bool:
    return all(x == 0 or y == 0 for x, y in zip(a, b))


class SparsePolynomial:
    """Multivariate polynomial over an ordered variable list."""

    __slots__ = ('variables', 'terms')

    def __init__(self, variables: Sequence[str], terms: Optional[Dict[Monomial, Coefficient]] = None):
        variables = tuple(variables)
        clean: Dict[Monomial, Coefficient] = {}
        for mono, c in (terms or {}).items():
            mono = tuple(mono)
            if len(mono) != len(variables):
                raise ValueError(f"monomial {mono} does not match variables {variables}")
            if any(e < 0 for e in mono):
                raise ValueError(f"negative exponent in monomial {mono}")
            if c != 0:
                clean[mono] = _normalize_coeff(c)
        object.__setattr__(self, 'variables', variables)
        object.__setattr__(self, 'terms', clean)

    def __setattr__(self, key, value):
        raise AttributeError("SparsePolynomial is immutable")

    # === Constructors ===

    @classmethod
    def zero(cls, variables: Sequence[str]) -> 'SparsePolynomial':
        return cls(variables)

    @classmethod
    def constant(cls, variables: Sequence[str], c: Coefficient) -> 'SparsePolynomial':
        return cls(variables, {(0,) * len(tuple(variables)): c})

    @classmethod
    def variable(cls, variables: Sequence[str], name: str) -> 'SparsePolynomial':
        variables = tuple(variables)
        index = variables.index(name)
        return cls(variables, {tuple(1 if i == index else 0 for i in range(len(variables))): 1})

    def _like(self, terms: Dict[Monomial, Coefficient]) -> 'SparsePolynomial':
        return SparsePolynomial(self.variables, terms)

    def _check(self, other: 'SparsePolynomial') -> None:
        if self.variables != other.variables:
            raise ValueError(f"variable lists differ: {self.variables} vs {other.variables}")

    # === Properties ===

    def is_zero(self) -> bool:
        return not self.terms

    def is_constant(self) -> bool:
        return all(not any(m) for m in self.terms)

    def constant_value(self) -> Coefficient:
        return self.terms.get((0,) * len(self.variables), 0)

    def is_integral(self) -> bool:
        return all(isinstance(c, int) for c in self.terms.values())

    def total_degree(self) -> int:
        return max((sum(m) for m in self.terms), default=-1)

    def degree_in(self, index: int) -> int:
        return max((m[index] for m in self.terms), default=-1)

    def sorted_terms(self, order: MonomialOrder = MonomialOrder.LEX) -> List[Tuple[Monomial, Coefficient]]:
        """Terms from largest to smallest monomial."""
        return sorted(self.terms.items(), key=lambda item: order.key(item[0]), reverse=True)

    def leading_term(self, order: MonomialOrder = MonomialOrder.LEX) -> Tuple[Monomial, Coefficient]:
        if not self.terms:
            raise DomainError("leading_term", "zero polynomial has no leading term")
        mono = max(self.terms, key=order.key)
        return mono, self.terms[mono]

    def leading_monomial(self, order: MonomialOrder = MonomialOrder.LEX) -> Monomial:
        return self.leading_term(order)[0]

    def leading_coefficient(self, order: MonomialOrder = MonomialOrder.LEX) -> Coefficient:
        return self.leading_term(order)[1] if self.terms else 0

    def used_variables(self) -> List[str]:
        return [v for i, v in enumerate(self.variables) if any(m[i] for m in self.terms)]

    # === Arithmetic ===

    def __eq__(self, other) -> bool:
        if not isinstance(other, SparsePolynomial):
            return NotImplemented
        return self.variables == other.variables and self.terms == other.terms

    def __hash__(self) -> int:
        return hash((self.variables, frozenset(self.terms.items())))

    def __add__(self, other: 'SparsePolynomial') -> 'SparsePolynomial':
        self._check(other)
        out = dict(self.terms)
        for m, c in other.terms.items():
            out[m] = out.get(m, 0) + c
        return self._like(out)

    def __neg__(self) -> 'SparsePolynomial':
        return self._like({m: -c for m, c in self.terms.items()})

    def __sub__(self, other: 'SparsePolynomial') -> 'SparsePolynomial':
        return self + (-other)

    def __mul__(self, other: Union['SparsePolynomial', int, Fraction]) -> 'SparsePolynomial':
        if not isinstance(other, SparsePolynomial):
            return self.scale(other)
        self._check(other)
        out: Dict[Monomial, Coefficient] = {}
        for m1, c1 in self.terms.items():
            for m2, c2 in other.terms.items():
                m = tuple(a + b for a, b in zip(m1, m2))
                out[m] = out.get(m, 0) + c1 * c2
        return self._like(out)

    __rmul__ = __mul__

    def scale(self, k: Coefficient) -> 'SparsePolynomial':
        return self._like({m: c * k for m, c in self.terms.items()})

    def mul_term(self, mono: Monomial, c: Coefficient) -> 'SparsePolynomial':
        """Multiply by the single term c * x^mono."""
        return self._like({tuple(a + b for a, b in zip(m, mono)): v * c for m, v in self.terms.items()})

    def __pow__(self, n: int) -> 'SparsePolynomial':
        if n < 0:
            raise DomainError("poly_pow", f"negative exponent {n}")
        result = SparsePolynomial.constant(self.variables, 1)
        base = self
        while n:
            if n & 1:
                result = result * base
            n >>= 1
            if n:
                base = base * base
        return result

    # === Content ===

    def coefficient_content(self) -> Coefficient:
        """Positive rational content: gcd of numerators over lcm of denominators."""
        if not self.terms:
            return 0
        values = [Fraction(c) for c in self.terms.values()]
        num = reduce(math.gcd, (v.numerator for v in values), 0)
        den = reduce(lambda a, b: a * b // math.gcd(a, b), (v.denominator for v in values), 1)
        return _normalize_coeff(Fraction(num, den))

    def clear_denominators(self) -> Tuple['SparsePolynomial', int]:
        """(d * self, d) with d the least common denominator."""
        den = reduce(lambda a, b: a * b // math.gcd(a, b),
                     (Fraction(c).denominator for c in self.terms.values()), 1)
        return self.scale(den), den

    def monic_sign(self, order: MonomialOrder = MonomialOrder.LEX) -> 'SparsePolynomial':
        """Negate if the leading coefficient is negative."""
        if self.terms and self.leading_coefficient(order) < 0:
            return -self
        return self

    def primitive(self, order: MonomialOrder = MonomialOrder.LEX) -> 'SparsePolynomial':
        """Integral primitive form with positive leading coefficient."""
        if not self.terms:
            return self
        content = self.coefficient_content()
        return self.scale(Fraction(1) / Fraction(content)).monic_sign(order)

    # === Division ===

    def divide_exact(self, other: 'SparsePolynomial') -> 'SparsePolynomial':
        """
        Quotient of an exact division over Q.

        Raises DivisionByZeroError for a zero divisor and DomainError when
        the division leaves a remainder.
        """
        self._check(other)
        if other.is_zero():
            raise DivisionByZeroError("exact_div", self)
        order = MonomialOrder.LEX
        lm, lc = other.leading_term(order)
        quotient: Dict[Monomial, Coefficient] = {}
        rem = self
        while not rem.is_zero():
            m, c = rem.leading_term(order)
            if not monomial_divides(lm, m):
                raise DomainError("exact_div", "divisor does not divide dividend")
            q_mono = monomial_quotient(m, lm)
            q_coeff = Fraction(c) / Fraction(lc)
            quotient[q_mono] = quotient.get(q_mono, 0) + q_coeff
            rem = rem - other.mul_term(q_mono, q_coeff)
        return self._like(quotient)

    def coefficients_in(self, index: int) -> Dict[int, 'SparsePolynomial']:
        """Split into powers of variable ``index``; coefficients keep the full variable list."""
        parts: Dict[int, Dict[Monomial, Coefficient]] = {}
        for m, c in self.terms.items():
            e = m[index]
            reduced = m[:index] + (0,) + m[index + 1:]
            parts.setdefault(e, {})[reduced] = c
        return {e: self._like(t) for e, t in parts.items()}

    def leading_coefficient_in(self, index: int) -> 'SparsePolynomial':
        d = self.degree_in(index)
        if d < 0:
            return self
        return self.coefficients_in(index)[d]

    def pseudo_remainder(self, other: 'SparsePolynomial', index: int) -> 'SparsePolynomial':
        """Remainder of lc(other)^k * self by other as polynomials in variable ``index``."""
        if other.is_zero():
            raise DivisionByZeroError("pseudo_remainder", self)
        d = other.degree_in(index)
        lc = other.leading_coefficient_in(index)
        r = self
        while not r.is_zero() and r.degree_in(index) >= d:
            k = r.degree_in(index)
            lr = r.leading_coefficient_in(index)
            shift = tuple(k - d if i == index else 0 for i in range(len(self.variables)))
            r = r * lc - (other * lr).mul_term(shift, 1)
        return r

    def content_in(self, index: int) -> 'SparsePolynomial':
        """GCD of the coefficients with respect to variable ``index``."""
        return reduce(_gcd, self.coefficients_in(index).values(), self.zero(self.variables))

    def __str__(self) -> str:
        if not self.terms:
            return "0"
        parts = []
        for mono, c in self.sorted_terms():
            factors = [v if e == 1 else f"{v}^{e}" for v, e in zip(self.variables, mono) if e]
            if not factors:
                parts.append(str(c))
            elif c == 1:
                parts.append("*".join(factors))
            elif c == -1:
                parts.append("-" + "*".join(factors))
            else:
                parts.append(f"{c}*" + "*".join(factors))
        return " + ".join(parts).replace("+ -", "- ")

    def __repr__(self) -> str:
        return f"SparsePolynomial({list(self.variables)}, {self.terms})"


# === Multivariate GCD ===

def polynomial_gcd(a: SparsePolynomial, b: SparsePolynomial) -> SparsePolynomial:
    """
    GCD over Z[x1..xn] by recursive primitive remainder sequences.

    Rational inputs are scaled to integral polynomials first. The result is
    primitive with positive leading coefficient (lex); gcd(a, 0) is a's
    primitive form.
    """
    return _gcd(a, b).primitive()


def _gcd(a: SparsePolynomial, b: SparsePolynomial) -> SparsePolynomial:
    """GCD including the integer content, sign normalized."""
    a._check(b)
    if a.is_zero():
        return b.clear_denominators()[0].monic_sign()
    if b.is_zero():
        return a.clear_denominators()[0].monic_sign()
    a = a.clear_denominators()[0]
    b = b.clear_denominators()[0]

    index = _main_variable(a, b)
    if index is None:
        g = math.gcd(a.constant_value(), b.constant_value())
        return SparsePolynomial.constant(a.variables, g)

    ca, cb = a.content_in(index), b.content_in(index)
    pa, pb = a.divide_exact(ca), b.divide_exact(cb)
    if pa.degree_in(index) < pb.degree_in(index):
        pa, pb = pb, pa
    while not pb.is_zero():
        r = pa.pseudo_remainder(pb, index)
        pa, pb = pb, (r.divide_exact(r.content_in(index)) if not r.is_zero() else r)
    g = pa.divide_exact(pa.content_in(index)) * _gcd(ca, cb)
    return g.monic_sign()


def _main_variable(a: SparsePolynomial, b: SparsePolynomial) -> Optional[int]:
    for i in range(len(a.variables)):
        if a.degree_in(i) > 0 or b.degree_in(i) > 0:
            return i
    return None


def polynomial_cofactors(a: SparsePolynomial, b: SparsePolynomial) -> Tuple[SparsePolynomial, SparsePolynomial, SparsePolynomial]:
    g = polynomial_gcd(a, b)
    if g.is_zero():
        return g, a, b
    return g, a.divide_exact(g), b.divide_exact(g)
