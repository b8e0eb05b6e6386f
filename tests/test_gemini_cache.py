from unittest import mock

import pytest

from aigccheck.gemini_cache import Cache
from aigccheck.gemini_config import CacheConfig


@pytest.fixture
def cache():
    return Cache(CacheConfig(enabled=True, ttl=3600.0, max_entries=10))


def test_basic_get_set(cache):
    cache.set("key1", "value1")
    assert cache.get("key1") == "value1"


def test_missing_key(cache):
    assert cache.get("nonexistent") is None


def test_delete(cache):
    cache.set("key2", "value2")
    cache.delete("key2")
    assert cache.get("key2") is None


def test_clear(cache):
    cache.set("key3", "value3")
    cache.set("key4", "value4")
    cache.clear()
    assert len(cache) == 0


def test_max_entries(cache):
    for i in range(15):
        cache.set(chr(ord("a") + i), "value")
    assert len(cache) <= 10


def test_disabled_cache():
    cache = Cache(CacheConfig(enabled=False))
    cache.set("key", "value")
    assert cache.get("key") is None
    assert len(cache) == 0


def test_overwrite_same_key(cache):
    cache.set("k", "first")
    cache.set("k", "second")
    assert cache.get("k") == "second"
    assert len(cache) == 1


def test_expiry_and_purge():
    cache = Cache(CacheConfig(enabled=True, ttl=10.0, max_entries=5))
    with mock.patch("aigccheck.gemini_cache.time.monotonic") as clock:
        clock.return_value = 100.0
        cache.set("old", "v")
        clock.return_value = 105.0
        cache.set("new", "v")
        clock.return_value = 112.0
        assert cache.get("old") is None
        assert cache.get("new") == "v"
        assert cache.purge_expired() == 1
        assert len(cache) == 1


def test_evicts_soonest_expiring():
    cache = Cache(CacheConfig(enabled=True, ttl=60.0, max_entries=2))
    with mock.patch("aigccheck.gemini_cache.time.monotonic") as clock:
        clock.return_value = 0.0
        cache.set("a", "1")
        clock.return_value = 1.0
        cache.set("b", "2")
        clock.return_value = 2.0
        cache.set("c", "3")
        assert cache.get("a") is None
        assert cache.get("b") == "2"
        assert cache.get("c") == "3"
        assert len(cache) == 2