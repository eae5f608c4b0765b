"""
Tests for the thread-local polynomial cache.
"""

import pytest
import sys
import os
import threading

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from symcore import (
    symbol, add, mul, pow_, integer, sin,
    classify, degree, leading_coefficient, content, poly_gcd,
    PolynomialCache, get_cache, cache_stats, clear_cache,
)


# === Test Fixtures ===

@pytest.fixture
def fresh_cache():
    clear_cache()
    yield get_cache()
    clear_cache()


@pytest.fixture
def x():
    return symbol("x")


class TestCacheBehavior:
    """Test hit/miss accounting and transparency."""

    def test_classification_hit(self, fresh_cache, x):
        """The second classification of an equal expression is a hit."""
        classify(add([pow_(x, 2), 1]))
        classify(add([1, pow_(x, 2)]))
        stats = cache_stats()
        assert stats.misses["classification"] == 1
        assert stats.hits["classification"] == 1

    def test_cold_and_warm_results_agree(self, fresh_cache, x):
        """Cached results equal freshly computed ones."""
        p = add([mul([3, pow_(x, 4)]), mul([6, x])])
        cold = (degree(p, x), leading_coefficient(p, x), content(p, x))
        warm = (degree(p, x), leading_coefficient(p, x), content(p, x))
        assert cold == warm
        assert cold == (4, integer(3), integer(3))
        assert cache_stats().hits["degree"] == 1

    def test_variable_is_part_of_key(self, fresh_cache, x):
        """Degree in x and degree in y are cached separately."""
        y = symbol("y")
        p = mul([pow_(x, 2), y])
        assert degree(p, x) == 2
        assert degree(p, y) == 1
        assert cache_stats().misses["degree"] == 2

    def test_intpoly_counters(self, fresh_cache, x):
        """Repeated univariate gcds reuse the cached IntPoly forms."""
        a = add([pow_(x, 2), -1])
        b = add([x, -1])
        first = poly_gcd(a, b, x)
        assert cache_stats().intpoly_misses == 2
        assert cache_stats().intpoly_hits == 0
        assert poly_gcd(a, b, x) == first
        assert cache_stats().intpoly_hits == 2

    def test_clear_resets(self, fresh_cache, x):
        """clear() drops entries and counters."""
        classify(x)
        clear_cache()
        stats = cache_stats()
        assert stats.total_hits == 0
        assert stats.total_misses == 0
        assert stats.entries["classification"] == 0


class TestEviction:
    """Test batch eviction."""

    def test_fraction_evicted(self, x):
        """Overflowing a table drops the oldest fraction in one batch."""
        cache = PolynomialCache(capacity=4, eviction_fraction=0.5)
        exprs = [pow_(x, k) for k in range(2, 7)]
        for k, e in enumerate(exprs):
            cache.put("degree", e, k + 2, extra="x")
        stats = cache.stats()
        assert stats.evictions == 3
        assert stats.entries["degree"] == 2
        assert cache.get("degree", exprs[0], "x") is None
        assert cache.get("degree", exprs[-1], "x") == 6

    def test_recent_access_survives(self, x):
        """A recently read entry is not the first to go."""
        cache = PolynomialCache(capacity=3, eviction_fraction=0.25)
        a, b, c, d = pow_(x, 2), pow_(x, 3), pow_(x, 4), pow_(x, 5)
        cache.put("degree", a, 2)
        cache.put("degree", b, 3)
        cache.put("degree", c, 4)
        assert cache.get("degree", a) == 2
        cache.put("degree", d, 5)
        assert cache.stats().evictions == 1
        assert cache.get("degree", a) == 2
        assert cache.get("degree", b) is None

    def test_memoize(self, x):
        """memoize computes once."""
        cache = PolynomialCache(capacity=8, eviction_fraction=0.5)
        calls = []

        def compute():
            calls.append(1)
            return 7

        assert cache.memoize("content", x, compute) == 7
        assert cache.memoize("content", x, compute) == 7
        assert len(calls) == 1


class TestCollisions:
    """Test that a colliding key never returns a wrong value."""

    def test_collision_is_miss(self, x):
        """An entry stored under another expression's key is not returned."""
        cache = PolynomialCache(capacity=8, eviction_fraction=0.5)
        a = pow_(x, 2)
        b = sin(x)
        cache.put("degree", a, 2, extra="x")
        table = cache._tables["degree"]
        table[cache._key(b, "x")] = table.pop(cache._key(a, "x"))
        assert cache.get("degree", b, "x") is None
        assert cache.stats().misses["degree"] == 1


class TestThreadLocal:
    """Test per-thread isolation."""

    def test_threads_have_own_cache(self):
        """Another thread sees a different cache instance."""
        main = get_cache()
        seen = []
        worker = threading.Thread(target=lambda: seen.append(get_cache()))
        worker.start()
        worker.join()
        assert seen[0] is not main
        assert get_cache() is main
