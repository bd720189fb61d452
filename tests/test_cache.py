"""Tests for the time-boxed analytics cache."""

import threading

import pytest

from kakeibo_analytics import AnalyticsCache


class TestAnalyticsCache:
    """Test suite for AnalyticsCache."""

    def test_set_then_get(self, clock):
        cache = AnalyticsCache(clock=clock)
        cache.set("test-key", {"test": "data"})

        assert cache.get("test-key") == {"test": "data"}

    def test_missing_key(self, clock):
        assert AnalyticsCache(clock=clock).get("missing") is None

    def test_clear(self, clock):
        cache = AnalyticsCache(clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)

        cache.clear()

        assert cache.get("a") is None
        assert cache.get("b") is None
        assert len(cache) == 0

    def test_default_ttl_is_one_hour(self):
        assert AnalyticsCache().ttl_seconds == 3600

    def test_entry_alive_until_ttl(self, clock):
        cache = AnalyticsCache(ttl_seconds=3600, clock=clock)
        cache.set("k", "v")

        clock.advance(3600)

        assert cache.get("k") == "v"

    def test_entry_expires_after_ttl(self, clock):
        """Expired entries are absent and evicted on lookup."""
        cache = AnalyticsCache(ttl_seconds=3600, clock=clock)
        cache.set("k", "v")

        clock.advance(3600.5)

        assert cache.get("k") is None
        assert len(cache) == 0

    def test_set_restarts_lifetime(self, clock):
        cache = AnalyticsCache(ttl_seconds=10, clock=clock)
        cache.set("k", "old")
        clock.advance(8)
        cache.set("k", "new")
        clock.advance(8)

        assert cache.get("k") == "new"

    def test_contains(self, clock):
        cache = AnalyticsCache(ttl_seconds=10, clock=clock)
        cache.set("k", "v")

        assert "k" in cache
        clock.advance(11)
        assert "k" not in cache

    def test_non_positive_ttl_rejected(self):
        with pytest.raises(ValueError):
            AnalyticsCache(ttl_seconds=0)

    def test_instances_are_independent(self, clock):
        first = AnalyticsCache(clock=clock)
        second = AnalyticsCache(clock=clock)
        first.set("k", "v")

        assert second.get("k") is None


class TestGetOrCompute:
    """Tests for AnalyticsCache.get_or_compute."""

    def test_computes_on_miss_and_reuses_on_hit(self, clock):
        cache = AnalyticsCache(clock=clock)
        calls = []

        def compute():
            calls.append(1)
            return "report"

        assert cache.get_or_compute("k", compute) == "report"
        assert cache.get_or_compute("k", compute) == "report"
        assert len(calls) == 1

    def test_recomputes_after_expiry(self, clock):
        cache = AnalyticsCache(ttl_seconds=60, clock=clock)
        values = iter(["first", "second"])

        assert cache.get_or_compute("k", lambda: next(values)) == "first"
        clock.advance(61)
        assert cache.get_or_compute("k", lambda: next(values)) == "second"

    def test_failed_compute_stores_nothing(self, clock):
        cache = AnalyticsCache(clock=clock)

        def explode():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            cache.get_or_compute("k", explode)
        assert cache.get("k") is None

    def test_concurrent_callers_compute_once(self):
        cache = AnalyticsCache()
        calls = []
        barrier = threading.Barrier(4)

        def compute():
            calls.append(1)
            return "report"

        def worker():
            barrier.wait()
            cache.get_or_compute("k", compute)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1

    def test_slow_compute_does_not_block_other_keys(self):
        cache = AnalyticsCache()
        started = threading.Event()
        release = threading.Event()
        results = {}

        def slow():
            started.set()
            release.wait(timeout=5)
            return "slow"

        def fetch(key, compute):
            results[key] = cache.get_or_compute(key, compute)

        slow_thread = threading.Thread(target=fetch, args=("a", slow))
        slow_thread.start()
        assert started.wait(timeout=5)

        fast_thread = threading.Thread(target=fetch, args=("b", lambda: "fast"))
        fast_thread.start()
        fast_thread.join(timeout=2)

        assert not fast_thread.is_alive()
        assert results["b"] == "fast"
        assert "a" not in results

        release.set()
        slow_thread.join(timeout=5)
        assert results["a"] == "slow"
