"""
symcore ALG Model: Expression Arena

Scoped region for short-lived intermediate expressions. Nodes built
through an arena are held until the arena is released and structurally
equal nodes are shared, so repeated intermediates are built once. Using an
arena never changes a result.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List

from .alg_base import AlgebraicExpr
from .alg_types import ExprLike, as_expr, add, mul, pow_


@dataclass
class ArenaStats:
    allocated: int = 0
    shared: int = 0


class ExprArena:
    """
    Context manager holding transient expressions.

    Usage::

        with ExprArena() as arena:
            t = arena.mul([x, arena.pow_(y, 2)])
    """

    def __init__(self, intern: bool = True):
        self.intern = intern
        self._nodes: List[AlgebraicExpr] = []
        self._interned: Dict[AlgebraicExpr, AlgebraicExpr] = {}
        self._stats = ArenaStats()
        self._released = False

    def __enter__(self) -> 'ExprArena':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()

    def alloc(self, expr: ExprLike) -> AlgebraicExpr:
        """Hold ``expr``; returns the arena's shared copy when one exists."""
        if self._released:
            raise RuntimeError("arena already released")
        expr = as_expr(expr)
        if self.intern:
            existing = self._interned.get(expr)
            if existing is not None:
                self._stats.shared += 1
                return existing
            self._interned[expr] = expr
        self._nodes.append(expr)
        self._stats.allocated += 1
        return expr

    def add(self, terms: Iterable[ExprLike]) -> AlgebraicExpr:
        return self.alloc(add(terms))

    def mul(self, factors: Iterable[ExprLike]) -> AlgebraicExpr:
        return self.alloc(mul(factors))

    def pow_(self, base: ExprLike, exp: ExprLike) -> AlgebraicExpr:
        return self.alloc(pow_(base, exp))

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def released(self) -> bool:
        return self._released

    def stats(self) -> ArenaStats:
        return ArenaStats(self._stats.allocated, self._stats.shared)

    def release(self) -> None:
        """Drop every held node at once."""
        self._nodes.clear()
        self._interned.clear()
        self._released = True
