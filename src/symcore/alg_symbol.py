"""
symcore ALG Model: Symbols

Symbols are interned: two symbols with the same name and algebraic kind are
the same object. The kind decides whether products involving the symbol may
be reordered.
"""

import threading
from enum import Enum
from typing import Dict, Tuple, Union

from .alg_base import AlgebraicExpr, Commutativity, RANK_SYMBOL


class AlgebraicKind(Enum):
    """Algebraic kind of a symbol."""
    SCALAR = "scalar"
    MATRIX = "matrix"
    OPERATOR = "operator"
    QUATERNION = "quaternion"

    @property
    def commutativity(self) -> Commutativity:
        if self is AlgebraicKind.SCALAR:
            return Commutativity.COMMUTATIVE
        return Commutativity.NON_COMMUTATIVE


_INTERNED: Dict[Tuple[str, AlgebraicKind], 'Symbol'] = {}
_INTERN_LOCK = threading.Lock()


class Symbol(AlgebraicExpr):
    """Interned named variable."""

    def __new__(cls, name: str, kind: Union[AlgebraicKind, str] = AlgebraicKind.SCALAR):
        if not isinstance(name, str) or not name:
            raise ValueError(f"Symbol name must be a non-empty string, got {name!r}")
        if not isinstance(kind, AlgebraicKind):
            kind = AlgebraicKind(kind)
        key = (name, kind)
        existing = _INTERNED.get(key)
        if existing is not None:
            return existing
        with _INTERN_LOCK:
            existing = _INTERNED.get(key)
            if existing is None:
                existing = super().__new__(cls)
                object.__setattr__(existing, 'name', name)
                object.__setattr__(existing, 'kind', kind)
                _INTERNED[key] = existing
        return existing

    def __init__(self, name: str, kind: Union[AlgebraicKind, str] = AlgebraicKind.SCALAR):
        pass

    def __setattr__(self, key, value):
        raise AttributeError("Symbol is immutable")

    def __reduce__(self):
        return (Symbol, (self.name, self.kind))

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __eq__(self, other) -> bool:
        if isinstance(other, Symbol):
            return self is other
        return super().__eq__(other)

    __hash__ = AlgebraicExpr.__hash__

    def children(self) -> Tuple[AlgebraicExpr, ...]:
        return ()

    def with_children(self, children) -> 'Symbol':
        return self

    def _identity(self) -> tuple:
        return (self.name, self.kind.value)

    def _own_commutativity(self) -> Commutativity:
        return self.kind.commutativity

    def sort_key(self) -> tuple:
        return (RANK_SYMBOL, self.name, self.kind.value)

    def __str__(self) -> str:
        return self.name


def symbol(name: str, kind: Union[AlgebraicKind, str] = AlgebraicKind.SCALAR) -> Symbol:
    """Get the interned symbol for ``name`` with the given kind."""
    return Symbol(name, kind)


def symbols(names: str, kind: Union[AlgebraicKind, str] = AlgebraicKind.SCALAR) -> Tuple[Symbol, ...]:
    """Split a whitespace or comma separated list of names into symbols."""
    parts = [p for p in names.replace(',', ' ').split() if p]
    return tuple(Symbol(p, kind) for p in parts)
