"""
symcore ALG Model: Expression Base

Defines the base class shared by every expression node, the commutativity
lattice, and the canonical ordering used to sort scalar aggregates.
"""

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Iterable, Tuple, Optional, Dict, List, Union

HASH_MASK = (1 << 64) - 1

# Canonical order ranks (numbers first, matrices last).
RANK_NUMBER = 0
RANK_CONSTANT = 1
RANK_SYMBOL = 2
RANK_POW = 3
RANK_MUL = 4
RANK_ADD = 5
RANK_FUNCTION = 6
RANK_STRUCTURAL = 7
RANK_MATRIX = 8


class Commutativity(IntEnum):
    """Commutativity of an expression; higher values dominate."""
    COMMUTATIVE = 0
    ANTI_COMMUTATIVE = 1
    NON_COMMUTATIVE = 2

    @classmethod
    def combine(cls, values: Iterable['Commutativity']) -> 'Commutativity':
        """Fold child commutativities: the strongest non-commutativity wins."""
        result = cls.COMMUTATIVE
        for value in values:
            if value > result:
                result = value
                if result == cls.NON_COMMUTATIVE:
                    break
        return result

    def can_sort(self) -> bool:
        return self == Commutativity.COMMUTATIVE


class AlgebraicExpr(ABC):
    """
    Base class for all expression nodes.

    Nodes are immutable and share their children, so copying an expression
    only copies a reference. Equality and hashing are structural; the
    64-bit structural hash and the commutativity flag are computed once per
    node and memoized on the instance.
    """

    # === Structure ===

    @abstractmethod
    def children(self) -> Tuple['AlgebraicExpr', ...]:
        """Direct sub-expressions in source order."""

    @abstractmethod
    def with_children(self, children: Tuple['AlgebraicExpr', ...]) -> 'AlgebraicExpr':
        """Rebuild this node around new children, restoring normal form."""

    @abstractmethod
    def _identity(self) -> tuple:
        """Everything that determines structural equality."""

    @abstractmethod
    def sort_key(self) -> tuple:
        """Key of the engine's canonical total order."""

    def _own_commutativity(self) -> Commutativity:
        return Commutativity.combine(c.commutativity for c in self.children())

    @property
    def commutativity(self) -> Commutativity:
        cached = self.__dict__.get('_commutativity')
        if cached is None:
            cached = self._own_commutativity()
            object.__setattr__(self, '_commutativity', cached)
        return cached

    def structural_hash(self) -> int:
        """64-bit hash over the node's structure."""
        cached = self.__dict__.get('_shash')
        if cached is None:
            cached = hash((type(self).__name__, self._identity())) & HASH_MASK
            object.__setattr__(self, '_shash', cached)
        return cached

    def __hash__(self) -> int:
        return self.structural_hash()

    def __eq__(self, other) -> bool:
        if self is other:
            return True
        if not isinstance(other, AlgebraicExpr):
            return NotImplemented
        if type(self) is not type(other):
            return False
        if self.structural_hash() != other.structural_hash():
            return False
        return self._identity() == other._identity()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"

    def walk(self):
        """Pre-order traversal over the expression tree (iterative)."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    # === Arithmetic sugar (routes through the normal-form constructors) ===

    def __add__(self, other):
        from .alg_types import add
        return add([self, other])

    def __radd__(self, other):
        from .alg_types import add
        return add([other, self])

    def __sub__(self, other):
        from .alg_types import sub
        return sub(self, other)

    def __rsub__(self, other):
        from .alg_types import sub
        return sub(other, self)

    def __mul__(self, other):
        from .alg_types import mul
        return mul([self, other])

    def __rmul__(self, other):
        from .alg_types import mul
        return mul([other, self])

    def __truediv__(self, other):
        from .alg_types import div
        return div(self, other)

    def __rtruediv__(self, other):
        from .alg_types import div
        return div(other, self)

    def __pow__(self, other):
        from .alg_types import pow_
        return pow_(self, other)

    def __rpow__(self, other):
        from .alg_types import pow_
        return pow_(other, self)

    def __neg__(self):
        from .alg_types import neg
        return neg(self)

    # === Value-level API ===

    def simplify(self) -> 'AlgebraicExpr':
        from .alg_simplify import simplify
        return simplify(self)

    def expand(self) -> 'AlgebraicExpr':
        from .alg_simplify import expand
        return expand(self)

    def is_zero(self) -> bool:
        return False

    def is_one(self) -> bool:
        return False

    def find_variables(self) -> List['AlgebraicExpr']:
        from .alg_classify import find_variables
        return find_variables(self)

    def is_polynomial_in(self, variables) -> bool:
        from .alg_classify import is_polynomial_in
        return is_polynomial_in(self, variables)

    def classify(self, variables=None):
        from .alg_classify import classify
        return classify(self, variables)

    def degree(self, var) -> int:
        from .alg_polynomial import degree
        return degree(self, var)

    def leading_coefficient(self, var) -> 'AlgebraicExpr':
        from .alg_polynomial import leading_coefficient
        return leading_coefficient(self, var)

    def content(self, var=None) -> 'AlgebraicExpr':
        from .alg_polynomial import content
        return content(self, var)

    def primitive_part(self, var=None) -> 'AlgebraicExpr':
        from .alg_polynomial import primitive_part
        return primitive_part(self, var)

    def poly_div(self, divisor, var) -> Tuple['AlgebraicExpr', 'AlgebraicExpr']:
        from .alg_polynomial import poly_div
        return poly_div(self, divisor, var)

    def poly_gcd(self, other, var=None) -> 'AlgebraicExpr':
        from .alg_polynomial import poly_gcd
        return poly_gcd(self, other, var)

    def poly_resultant(self, other, var) -> 'AlgebraicExpr':
        from .alg_polynomial import poly_resultant
        return poly_resultant(self, other, var)

    def poly_discriminant(self, var) -> 'AlgebraicExpr':
        from .alg_polynomial import poly_discriminant
        return poly_discriminant(self, var)

    def derivative(self, var) -> 'AlgebraicExpr':
        from .alg_calculus import derivative
        return derivative(self, var)

    def nth_derivative(self, var, n: int) -> 'AlgebraicExpr':
        from .alg_calculus import nth_derivative
        return nth_derivative(self, var, n)

    def substitute(self, mapping, simplify: bool = False) -> 'AlgebraicExpr':
        from .alg_calculus import substitute
        return substitute(self, mapping, simplify=simplify)

    def evaluate(self, env: Optional[Dict[str, float]] = None) -> Union[float, complex]:
        from .alg_evaluate import evaluate
        return evaluate(self, env)
