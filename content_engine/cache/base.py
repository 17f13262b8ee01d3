"""
Detection Cache Interface

Memoizes FormatDetection results keyed by the exact content string.
A given string always classifies the same way, so entries never go
stale: there is no TTL and no per-key invalidation, only capacity
eviction and clear().
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..shared import FormatDetection


@dataclass
class CacheStats:
    """Hit/miss/eviction counters for one cache instance"""
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    size: int = 0
    max_size: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> Dict:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate": f"{self.hit_rate:.1%}",
            "size": self.size,
            "max_size": self.max_size,
        }


class CacheInterface(ABC):
    """Bounded memo of content -> FormatDetection"""

    @abstractmethod
    def get(self, content: str) -> Optional[FormatDetection]:
        """Cached detection, or None on a miss"""
        pass

    @abstractmethod
    def set(self, content: str, detection: FormatDetection) -> None:
        """Store a detection, evicting the least recently used past capacity"""
        pass

    @abstractmethod
    def clear(self) -> int:
        """Drop every entry, return count cleared"""
        pass

    @abstractmethod
    def stats(self) -> CacheStats:
        pass

    def get_or_detect(
        self,
        content: str,
        detect: Callable[[str], FormatDetection],
    ) -> FormatDetection:
        """
        Cached detection for content, running detect() on a miss.

        If detect() raises, nothing is stored and the error propagates,
        so a failed detection is retried on the next call.
        """
        cached = self.get(content)
        if cached is not None:
            return cached
        detection = detect(content)
        self.set(content, detection)
        return detection
