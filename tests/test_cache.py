"""Tests for the in-memory TTL cache."""

import time

from aurabot.core.cache import _store, cache_get, cache_set, make_key


class TestCache:
    def setup_method(self):
        _store.clear()

    def test_set_and_get(self):
        cache_set("key1", "value1", 60)
        assert cache_get("key1") == "value1"

    def test_missing_key_returns_none(self):
        assert cache_get("nonexistent") is None

    def test_expired_key_returns_none(self):
        cache_set("key2", "value2", 0)
        time.sleep(0.01)
        assert cache_get("key2") is None

    def test_overwrite_value(self):
        cache_set("key3", "old", 60)
        cache_set("key3", "new", 60)
        assert cache_get("key3") == "new"

    def test_set_evicts_expired_entries(self):
        cache_set("stale", 1, 0)
        time.sleep(0.01)
        cache_set("fresh", 2, 60)
        assert "stale" not in _store
        assert "fresh" in _store


class TestMakeKey:
    def test_normalises_case_and_punctuation(self):
        assert make_key("weather", "  New York! ") == make_key("weather", "new york")

    def test_namespaced(self):
        assert make_key("crypto", "bitcoin") != make_key("news", "bitcoin")
