"""TTL key/value cache with hit/miss statistics.

Entries carry their own time-to-live. There is no background eviction;
staleness is detected lazily when an entry is read.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from specfields.application.settings import DEFAULT_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of cache effectiveness.

    Attributes:
        hit_rate: Hits divided by lookups (0.0 when there were no lookups).
        hit_count: Lookups that returned a live entry.
        miss_count: Lookups for absent or expired entries.
        cache_size: Entries currently stored, including not-yet-read stale ones.
    """

    hit_rate: float
    hit_count: int
    miss_count: int
    cache_size: int


@dataclass
class _Entry:
    data: Any
    stored_at: float
    ttl: float


class FieldCache:
    """Generic TTL cache keyed by string.

    Example:
        cache = FieldCache(default_ttl=60)
        cache.set("field_configs", fields)
        cached = cache.get("field_configs")  # None once 60 seconds have passed
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            default_ttl: Lifetime in seconds for entries stored without a ttl.
            clock: Source of monotonic time in seconds. Injectable for tests.
        """
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._hit_count = 0
        self._miss_count = 0

    def set(self, key: str, data: Any, ttl: float | None = None) -> None:
        self._entries[key] = _Entry(
            data=data,
            stored_at=self._clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None when absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._miss_count += 1
            logger.debug(f"Cache miss for '{key}'")
            return None

        if self._clock() - entry.stored_at > entry.ttl:
            del self._entries[key]
            self._miss_count += 1
            logger.debug(f"Cache entry '{key}' expired")
            return None

        self._hit_count += 1
        return entry.data

    def delete(self, key: str) -> bool:
        """Remove an entry. Returns True if it existed."""
        return self._entries.pop(key, None) is not None

    def invalidate_prefix(self, prefix: str) -> int:
        """Remove every entry whose key starts with ``prefix``.

        Returns:
            Number of entries removed.
        """
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def keys(self) -> list[str]:
        return list(self._entries)

    def clear(self) -> None:
        """Drop every entry and reset statistics."""
        self._entries.clear()
        self._hit_count = 0
        self._miss_count = 0

    def get_stats(self) -> CacheStats:
        total = self._hit_count + self._miss_count
        return CacheStats(
            hit_rate=self._hit_count / total if total > 0 else 0.0,
            hit_count=self._hit_count,
            miss_count=self._miss_count,
            cache_size=len(self._entries),
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
