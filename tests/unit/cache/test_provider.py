"""Tests for the named TTL caches."""

from __future__ import annotations

import pytest

from kinderhub.cache import CacheProvider, ClusterEvent, NamedCache


def make_cache(timer, max_size: int = 10, ttl: float = 60) -> NamedCache:
    return CacheProvider(timer=timer).new_cache("Test", max_size, ttl, ClusterEvent.INVALIDATE_CACHE_FOR_ROLES)


class TestNamedCache:
    """Test get/set/remove/purge semantics."""

    def test_miss_returns_none_and_false(self, timer) -> None:
        cache = make_cache(timer)
        assert cache.get("missing") == (None, False)

    def test_set_then_get(self, timer) -> None:
        cache = make_cache(timer)
        cache.set("a", 1)
        assert cache.get("a") == (1, True)

    def test_set_overwrites(self, timer) -> None:
        cache = make_cache(timer)
        cache.set("a", 1)
        cache.set("a", 2)
        assert cache.get("a") == (2, True)
        assert len(cache) == 1

    def test_remove_is_idempotent(self, timer) -> None:
        cache = make_cache(timer)
        cache.set("a", 1)
        cache.remove("a")
        cache.remove("a")
        cache.remove("never-set")
        assert cache.get("a") == (None, False)

    def test_purge_is_idempotent(self, timer) -> None:
        cache = make_cache(timer)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.purge()
        cache.purge()
        assert len(cache) == 0
        assert cache.get("b") == (None, False)

    def test_entry_expires_after_ttl(self, timer) -> None:
        cache = make_cache(timer, ttl=30)
        cache.set("a", 1)

        timer.advance(29)
        assert cache.get("a") == (1, True)

        timer.advance(2)
        assert cache.get("a") == (None, False)
        assert len(cache) == 0

    def test_least_recently_used_entry_is_evicted(self, timer) -> None:
        cache = make_cache(timer, max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)

        assert cache.get("a") == (1, True)
        assert cache.get("b") == (None, False)
        assert cache.get("c") == (3, True)

    def test_stored_none_is_a_hit(self, timer) -> None:
        cache = make_cache(timer)
        cache.set("a", None)
        assert cache.get("a") == (None, True)


class TestCacheProvider:
    """Test cache creation."""

    def test_new_cache_carries_settings(self, timer) -> None:
        provider = CacheProvider(timer=timer)
        cache = provider.new_cache("Role", 100, 1800, ClusterEvent.INVALIDATE_CACHE_FOR_ROLES)

        assert cache.name == "Role"
        assert cache.max_size == 100
        assert cache.ttl_seconds == 1800
        assert cache.invalidation_event == ClusterEvent.INVALIDATE_CACHE_FOR_ROLES
        assert provider.caches == [cache]

    def test_duplicate_name_rejected(self, timer) -> None:
        provider = CacheProvider(timer=timer)
        provider.new_cache("Role", 100, 1800, ClusterEvent.INVALIDATE_CACHE_FOR_ROLES)

        with pytest.raises(ValueError, match="already exists"):
            provider.new_cache("Role", 10, 60, ClusterEvent.INVALIDATE_CACHE_FOR_ROLES)

    def test_caches_share_the_provider_clock(self, timer) -> None:
        provider = CacheProvider(timer=timer)
        short = provider.new_cache("Short", 10, 10, ClusterEvent.INVALIDATE_CACHE_FOR_ROLES)
        long = provider.new_cache("Long", 10, 100, ClusterEvent.INVALIDATE_CACHE_FOR_SCHEMES)
        short.set("k", 1)
        long.set("k", 1)

        timer.advance(50)

        assert short.get("k") == (None, False)
        assert long.get("k") == (1, True)
