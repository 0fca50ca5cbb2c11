"""Tests for PoolStateCache."""

import pytest

from pegswap.pools import PoolStateCache
from tests.helpers import CVG_POOL, ONE, make_stableswap_snapshot


@pytest.fixture
def cache(clock) -> PoolStateCache:
    return PoolStateCache(ttl=12.0, clock=clock)


class TestPoolStateCache:
    """Tests for TTL behaviour and key handling."""

    def test_miss_on_empty_cache(self, cache):
        assert cache.get(CVG_POOL) is None
        assert CVG_POOL not in cache
        assert len(cache) == 0

    def test_hit_within_ttl(self, cache, clock, cvg_pool):
        cache.put(CVG_POOL, cvg_pool)
        clock.advance(11.9)
        assert cache.get(CVG_POOL) is cvg_pool
        assert CVG_POOL in cache

    def test_expires_at_ttl(self, cache, clock, cvg_pool):
        cache.put(CVG_POOL, cvg_pool)
        clock.advance(12.0)
        assert cache.get(CVG_POOL) is None
        assert CVG_POOL not in cache
        assert len(cache) == 0

    def test_put_evicts_expired_entries(self, cache, clock, cvg_pool):
        for n in range(200):
            cache.put(f"0x{n:040x}", cvg_pool)
            clock.advance(100)
        assert len(cache) == 1

    def test_put_keeps_fresh_entries(self, cache, clock, cvg_pool, balanced_stable_pool):
        cache.put(CVG_POOL, cvg_pool)
        clock.advance(6)
        cache.put("0x" + "11" * 20, balanced_stable_pool)
        assert len(cache) == 2
        assert cache.get(CVG_POOL) is cvg_pool

    def test_keys_are_case_insensitive(self, cache, cvg_pool):
        cache.put(CVG_POOL.upper().replace("0X", "0x"), cvg_pool)
        assert cache.get(CVG_POOL) is cvg_pool

    def test_put_replaces_and_refreshes(self, cache, clock, cvg_pool):
        cache.put(CVG_POOL, cvg_pool)
        clock.advance(10)
        newer = make_stableswap_snapshot(balances=(60_000 * ONE, 60_000 * ONE))
        cache.put(CVG_POOL, newer)
        clock.advance(10)
        assert cache.get(CVG_POOL) is newer

    def test_entry_records_fetch_time(self, cache, clock, cvg_pool):
        entry = cache.put(CVG_POOL, cvg_pool)
        assert entry.fetched_at == 1000.0
        clock.advance(5)
        assert cache.get_entry(CVG_POOL).age(clock()) == 5.0

    def test_get_or_fetch_calls_once(self, cache, cvg_pool):
        calls = []

        def fetch():
            calls.append(1)
            return cvg_pool

        assert cache.get_or_fetch(CVG_POOL, fetch) is cvg_pool
        assert cache.get_or_fetch(CVG_POOL, fetch) is cvg_pool
        assert len(calls) == 1

    def test_get_or_fetch_refetches_when_stale(self, cache, clock, cvg_pool):
        calls = []

        def fetch():
            calls.append(1)
            return cvg_pool

        cache.get_or_fetch(CVG_POOL, fetch)
        clock.advance(13)
        cache.get_or_fetch(CVG_POOL, fetch)
        assert len(calls) == 2

    def test_fetch_error_leaves_cache_unchanged(self, cache):
        def fetch():
            raise ConnectionError("rpc down")

        with pytest.raises(ConnectionError):
            cache.get_or_fetch(CVG_POOL, fetch)
        assert len(cache) == 0

    def test_invalidate(self, cache, cvg_pool):
        cache.put(CVG_POOL, cvg_pool)
        assert cache.invalidate(CVG_POOL) is True
        assert cache.invalidate(CVG_POOL) is False
        assert cache.get(CVG_POOL) is None

    def test_clear(self, cache, cvg_pool, balanced_stable_pool):
        cache.put(CVG_POOL, cvg_pool)
        cache.put("0x" + "11" * 20, balanced_stable_pool)
        cache.clear()
        assert len(cache) == 0

    def test_non_string_not_contained(self, cache):
        assert 42 not in cache

    def test_non_positive_ttl_raises(self):
        with pytest.raises(ValueError, match="ttl"):
            PoolStateCache(ttl=0)
