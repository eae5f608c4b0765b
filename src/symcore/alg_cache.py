"""
symcore ALG Model: Thread-Local Polynomial Cache

Side tables memoizing degree, classification, leading coefficient, content
and Expression -> IntPoly conversions. Each thread owns its own tables.

Entries are keyed by the 64-bit structural hash of the expression plus an
optional variable name. The expression itself is stored with the value and
compared on lookup, so a hash collision is a miss and the caller recomputes.
Eviction drops the least recently used fraction of a table in one batch.
"""

import collections
import itertools
import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Optional, Tuple

from .alg_base import AlgebraicExpr
from .alg_config import get_config

logger = logging.getLogger('symcore.cache')

KINDS = ("degree", "classification", "leading_coefficient", "content", "intpoly")

# Process-wide monotonic access clock shared by all threads' tables.
_ACCESS_CLOCK = itertools.count(1)

_MISSING = object()


@dataclass
class _Entry:
    expr: AlgebraicExpr
    value: Any
    stamp: int


@dataclass
class CacheStats:
    """Read-only snapshot of one thread's cache counters."""
    hits: Dict[str, int] = field(default_factory=dict)
    misses: Dict[str, int] = field(default_factory=dict)
    entries: Dict[str, int] = field(default_factory=dict)
    evictions: int = 0

    @property
    def intpoly_hits(self) -> int:
        return self.hits.get("intpoly", 0)

    @property
    def intpoly_misses(self) -> int:
        return self.misses.get("intpoly", 0)

    @property
    def total_hits(self) -> int:
        return sum(self.hits.values())

    @property
    def total_misses(self) -> int:
        return sum(self.misses.values())


class PolynomialCache:
    """One thread's LRU tables, one per cached quantity."""

    def __init__(self, capacity: Optional[int] = None, eviction_fraction: Optional[float] = None):
        config = get_config()
        self.capacity = capacity if capacity is not None else config.cache_capacity
        self.eviction_fraction = (eviction_fraction if eviction_fraction is not None
                                  else config.cache_eviction_fraction)
        self._tables: Dict[str, collections.OrderedDict] = {k: collections.OrderedDict() for k in KINDS}
        self._hits = {k: 0 for k in KINDS}
        self._misses = {k: 0 for k in KINDS}
        self._evictions = 0

    @staticmethod
    def _key(expr: AlgebraicExpr, extra: Hashable) -> Tuple[int, Hashable]:
        return (expr.structural_hash(), extra)

    def get(self, kind: str, expr: AlgebraicExpr, extra: Hashable = None, default=None):
        table = self._tables[kind]
        key = self._key(expr, extra)
        entry = table.get(key)
        if entry is None or entry.expr != expr:
            self._misses[kind] += 1
            return default
        entry.stamp = next(_ACCESS_CLOCK)
        table.move_to_end(key)
        self._hits[kind] += 1
        return entry.value

    def put(self, kind: str, expr: AlgebraicExpr, value: Any, extra: Hashable = None) -> None:
        table = self._tables[kind]
        key = self._key(expr, extra)
        table[key] = _Entry(expr, value, next(_ACCESS_CLOCK))
        table.move_to_end(key)
        if len(table) > self.capacity:
            self._evict(kind, table)

    def _evict(self, kind: str, table: collections.OrderedDict) -> None:
        """Drop the oldest fraction of ``table`` in one batch."""
        count = max(1, math.ceil(len(table) * self.eviction_fraction))
        for _ in range(count):
            table.popitem(last=False)
        self._evictions += count
        logger.debug(f"Evicted {count} {kind} entries", extra={'extra_data': {
            'kind': kind, 'evicted': count, 'remaining': len(table)}})

    def memoize(self, kind: str, expr: AlgebraicExpr, compute, extra: Hashable = None):
        """Cached value, computing and storing it on a miss."""
        value = self.get(kind, expr, extra, _MISSING)
        if value is _MISSING:
            value = compute()
            self.put(kind, expr, value, extra)
        return value

    def stats(self) -> CacheStats:
        return CacheStats(
            hits=dict(self._hits),
            misses=dict(self._misses),
            entries={k: len(t) for k, t in self._tables.items()},
            evictions=self._evictions,
        )

    def clear(self) -> None:
        for table in self._tables.values():
            table.clear()
        self._hits = {k: 0 for k in KINDS}
        self._misses = {k: 0 for k in KINDS}
        self._evictions = 0


_local = threading.local()


def get_cache() -> PolynomialCache:
    """This thread's cache, created on first use."""
    cache = getattr(_local, 'cache', None)
    if cache is None:
        cache = PolynomialCache()
        _local.cache = cache
    return cache


def cache_stats() -> CacheStats:
    return get_cache().stats()


def clear_cache() -> None:
    get_cache().clear()
