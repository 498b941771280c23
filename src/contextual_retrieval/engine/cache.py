"""
Time-expiring caches

One TimedCache instance backs each cache tier (embeddings, retrieval
results, LLM responses). Entries older than the lifetime are treated as
absent and evicted lazily on the next lookup; nothing is swept in the
background. An optional LRU bound caps the number of live entries.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger("contextual_retrieval.cache")

T = TypeVar("T")

DEFAULT_CACHE_LIFETIME = 24 * 60 * 60  # seconds


def normalize_key(text: str) -> str:
    """Cache key used by the embedding and retrieval tiers."""
    return text.strip().lower()


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    created_at: float


class TimedCache(Generic[T]):
    """
    Dict-backed cache with lazy time-based expiry.

    Keys are used verbatim; callers normalize them first.
    """

    def __init__(
        self,
        name: str,
        lifetime_seconds: float = DEFAULT_CACHE_LIFETIME,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.name = name
        self.lifetime_seconds = lifetime_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()
        self._lock = threading.Lock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def _is_expired(self, entry: CacheEntry[T], now: float) -> bool:
        return now - entry.created_at >= self.lifetime_seconds

    def get(self, key: str) -> Optional[T]:
        """Return the live value for ``key``, evicting it first if expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if self._is_expired(entry, self._clock()):
                del self._entries[key]
                self._evictions += 1
                self._misses += 1
                logger.debug(f"{self.name} cache entry expired: {key[:50]!r}")
                return None

            self._entries.move_to_end(key)
            self._hits += 1
            return entry.value

    def set(self, key: str, value: T) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(value=value, created_at=self._clock())
            self._entries.move_to_end(key)

            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)
                    self._evictions += 1

    def __contains__(self, key: str) -> bool:
        """Raw presence check; does not apply expiry or touch statistics."""
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        """Drop all entries and reset statistics."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def get_stats(self) -> dict:
        """Get cache hit/miss statistics."""
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0
            return {
                "name": self.name,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "total_requests": total,
                "hit_rate_percent": round(hit_rate, 2),
                "cache_size": len(self._entries),
                "max_cache_size": self.max_entries,
            }
