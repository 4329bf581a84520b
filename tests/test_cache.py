"""Tests for the lookup cache."""

from meal_swaps.services.cache import TtlCache


def test_cache_returns_stored_values() -> None:
    cache = TtlCache()

    cache.set("fdc:food:rice", "rice", ttl_seconds=60)

    assert cache.get("fdc:food:rice") == "rice"
    assert cache.get("fdc:food:beans") is None


def test_cache_expires_entries() -> None:
    cache = TtlCache()

    cache.set("fdc:food:rice", "rice", ttl_seconds=0)

    assert cache.get("fdc:food:rice") is None
    assert len(cache) == 0


def test_cache_evicts_oldest_entry_when_full() -> None:
    cache = TtlCache(max_entries=2)

    cache.set("a", 1, ttl_seconds=60)
    cache.set("b", 2, ttl_seconds=60)
    cache.set("c", 3, ttl_seconds=60)

    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.get("c") == 3
    cache.clear()
    assert len(cache) == 0
