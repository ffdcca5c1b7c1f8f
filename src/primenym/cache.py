"""
In-memory availability cache.

Entries live for a fixed TTL from the moment they are written. Nothing is
evicted in the background; a stale entry is simply ignored on lookup and
replaced by the next write for the same key.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

# Five minutes, in seconds
DEFAULT_TTL = 300.0


@dataclass
class CacheEntry(Generic[T]):
    """A cached value and the clock reading it was stored at."""

    key: str
    value: T
    timestamp: float


class TTLCache(Generic[T]):
    """
    Process-local key/value cache with a fixed time-to-live.

    No locking: concurrent writers for the same key just overwrite each
    other, which is harmless because values are interchangeable within the
    TTL window.

    Usage:
        cache = TTLCache(ttl=300)
        cache.set("acme.com", result)
        cache.get("acme.com")  # -> result, or None once 300s have passed
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def get_entry(self, key: str) -> CacheEntry[T] | None:
        """Return the entry for key (fresh or stale), or None."""
        return self._entries.get(key)

    def is_fresh(self, entry: CacheEntry[T]) -> bool:
        return self._clock() - entry.timestamp < self.ttl

    def get(self, key: str) -> T | None:
        """Return the cached value if it is younger than the TTL."""
        entry = self._entries.get(key)
        if entry is None or not self.is_fresh(entry):
            return None
        return entry.value

    def set(self, key: str, value: T) -> CacheEntry[T]:
        """Store value under key, stamped with the current clock reading."""
        entry = CacheEntry(key=key, value=value, timestamp=self._clock())
        self._entries[key] = entry
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
