"""
Cache Module

Exports:
- CacheInterface, CacheStats (detection cache interface)
- LRUCache (thread-safe bounded in-memory cache)
- ClassificationCache (LRUCache sized for classifier memoization)
"""

from .base import CacheInterface, CacheStats
from .memory_cache import LRUCache, ClassificationCache

__all__ = [
    'CacheInterface',
    'CacheStats',
    'LRUCache',
    'ClassificationCache',
]
