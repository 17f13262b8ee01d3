"""
Memory Cache

Bounded in-memory LRU cache used to memoize content classification.
Keys are exact content strings, so entries never go stale.
"""

import threading
from typing import Any, Optional
from collections import OrderedDict

from config.constants import CLASSIFIER_CACHE_SIZE
from config.logging_config import get_logger
from .base import CacheInterface, CacheStats

logger = get_logger(__name__)


class LRUCache(CacheInterface):
    """
    Thread-safe LRU (Least Recently Used) cache.

    Features:
    - O(1) get/set operations
    - Evicts the oldest entry once max_size is exceeded
    - Thread-safe (single RLock around every operation)
    """

    def __init__(self, max_size: int = 1000):
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self._cache: OrderedDict[str, Any] = OrderedDict()
        self._lock = threading.RLock()
        self._stats = CacheStats(max_size=max_size)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            if key not in self._cache:
                self._stats.misses += 1
                return None

            # Move to end (most recently used)
            self._cache.move_to_end(key)
            self._stats.hits += 1
            return self._cache[key]

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            self._cache[key] = value

            # Evict if over capacity
            while len(self._cache) > self.max_size:
                self._cache.popitem(last=False)
                self._stats.evictions += 1

            self._stats.size = len(self._cache)

    def __contains__(self, key: str) -> bool:
        # Membership only; does not touch recency or hit counters
        with self._lock:
            return key in self._cache

    def clear(self) -> int:
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            self._stats.size = 0
            logger.debug(f"Cache cleared ({count} entries)")
            return count

    def stats(self) -> CacheStats:
        with self._lock:
            self._stats.size = len(self._cache)
            return self._stats


class ClassificationCache(LRUCache):
    """
    LRUCache sized for classifier memoization.

    One instance is owned by the engine and injected into the classifier,
    so every caller of that engine shares it and tests can reset it.
    """

    def __init__(self, max_size: int = CLASSIFIER_CACHE_SIZE):
        super().__init__(max_size=max_size)
