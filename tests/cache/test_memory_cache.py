#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Unit Tests for the classification cache

Tests cover:
- Cache operations (set, get, membership, clear)
- Detection memoization (get_or_detect)
- LRU eviction past capacity
- Statistics tracking
- Thread safety
"""

import threading

import pytest

from content_engine.cache import CacheStats, ClassificationCache, LRUCache
from content_engine.shared import ContentFormat, FormatDetection
from config.constants import CLASSIFIER_CACHE_SIZE


class TestLRUCacheOperations:
    """Test basic cache operations"""

    def test_set_and_get(self):
        cache = LRUCache(max_size=3)
        cache.set("a", 1)
        assert cache.get("a") == 1

    def test_missing_key_returns_none(self):
        assert LRUCache(max_size=3).get("missing") is None

    def test_membership_does_not_count_as_access(self):
        cache = LRUCache(max_size=3)
        cache.set("a", 1)
        assert "a" in cache
        assert "b" not in cache
        stats = cache.stats()
        assert stats.hits == 0
        assert stats.misses == 0

    def test_clear_returns_count(self):
        cache = LRUCache(max_size=3)
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.clear() == 2
        assert len(cache) == 0

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            LRUCache(max_size=0)


class TestEviction:
    """Test bounded capacity"""

    def test_oldest_entry_evicted(self):
        cache = LRUCache(max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert "a" not in cache
        assert "b" in cache and "c" in cache
        assert cache.stats().evictions == 1

    def test_recent_access_protects_entry(self):
        cache = LRUCache(max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)
        assert "a" in cache
        assert "b" not in cache

    def test_size_never_exceeds_capacity(self):
        cache = LRUCache(max_size=5)
        for i in range(50):
            cache.set(f"k{i}", i)
        assert len(cache) == 5


class TestStatistics:
    """Test statistics tracking"""

    def test_hits_and_misses(self):
        cache = LRUCache(max_size=3)
        cache.set("a", 1)
        cache.get("a")
        cache.get("b")
        stats = cache.stats()
        assert stats.hits == 1
        assert stats.misses == 1
        assert stats.hit_rate == 0.5

    def test_empty_hit_rate(self):
        assert CacheStats().hit_rate == 0.0

    def test_to_dict(self):
        cache = LRUCache(max_size=3)
        cache.set("a", 1)
        data = cache.stats().to_dict()
        assert data["size"] == 1
        assert data["max_size"] == 3
        assert data["hit_rate"] == "0.0%"


class TestClassificationCache:

    def test_default_size(self):
        assert ClassificationCache().max_size == CLASSIFIER_CACHE_SIZE

    def test_get_or_detect_runs_detector_once(self):
        cache = ClassificationCache(max_size=10)
        calls = []

        def detect(content):
            calls.append(content)
            return FormatDetection(format=ContentFormat.PLAIN_TEXT, confidence=0.8)

        first = cache.get_or_detect("Some words", detect)
        second = cache.get_or_detect("Some words", detect)
        assert first is second
        assert calls == ["Some words"]

    def test_failed_detection_not_stored(self):
        cache = ClassificationCache(max_size=10)

        def broken(content):
            raise RuntimeError("detector down")

        with pytest.raises(RuntimeError):
            cache.get_or_detect("Some words", broken)
        assert "Some words" not in cache
        assert len(cache) == 0


class TestThreadSafety:
    """Concurrent readers and writers"""

    def test_concurrent_set_and_get(self):
        cache = LRUCache(max_size=50)
        errors = []

        def worker(offset):
            try:
                for i in range(200):
                    key = f"k{(i + offset) % 80}"
                    cache.set(key, i)
                    cache.get(key)
            except Exception as e:  # pragma: no cover - surfaced by assertion
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(cache) <= 50
