"""
Bounded least-recently-used cache with hit/miss accounting.
"""

import threading
from collections import OrderedDict
from typing import Any, Dict, Hashable, List

from .errors import ValidationError

DEFAULT_BCD_CACHE_SIZE = 5000
DEFAULT_FEATURE_CACHE_SIZE = 1000


class LRUCache:
    """Fixed-capacity map ordered by recency of access.

    The cache never fetches on behalf of the caller: a miss only counts the
    miss and hands back the default. Eviction is purely capacity-driven.
    """

    def __init__(self, max_size: int = DEFAULT_FEATURE_CACHE_SIZE):
        if not isinstance(max_size, int) or max_size <= 0:
            raise ValidationError("Max size must be greater than 0", "max_size", max_size)
        self.max_size = max_size
        self._data: "OrderedDict[Hashable, Any]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the cached value and promote it to most recently used."""
        with self._lock:
            if key in self._data:
                self._data.move_to_end(key)
                self.hits += 1
                return self._data[key]
            self.misses += 1
            return default

    def set(self, key: Hashable, value: Any) -> None:
        """Insert or refresh an entry, evicting the LRU entry when full."""
        with self._lock:
            if key in self._data:
                del self._data[key]
            elif len(self._data) >= self.max_size:
                self._data.popitem(last=False)
            self._data[key] = value

    def has(self, key: Hashable) -> bool:
        """Membership test. Does not touch recency or stats."""
        with self._lock:
            return key in self._data

    def delete(self, key: Hashable) -> bool:
        with self._lock:
            if key in self._data:
                del self._data[key]
                return True
            return False

    def clear(self) -> None:
        """Drop every entry and reset the counters."""
        with self._lock:
            self._data.clear()
            self.hits = 0
            self.misses = 0

    def is_full(self) -> bool:
        return len(self) >= self.max_size

    def keys(self) -> List[Hashable]:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._data.keys())

    def resize(self, new_max_size: int) -> "LRUCache":
        """Return a new cache holding the most recent entries that fit."""
        resized = LRUCache(new_max_size)
        with self._lock:
            entries = list(self._data.items())[-new_max_size:]
        for key, value in entries:
            resized.set(key, value)
        return resized

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            total = self.hits + self.misses
            return {
                "size": len(self._data),
                "maxSize": self.max_size,
                "hits": self.hits,
                "misses": self.misses,
                "hitRate": self.hits / total if total else 0,
                "missRate": self.misses / total if total else 0,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: Hashable) -> bool:
        return self.has(key)
