"""
In-process TTL cache for admissions data.

Entries expire on a monotonic clock. The cache is bounded; the oldest entry
is evicted first once `max_entries` is reached.
"""

import logging
import time
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Generic, Optional, Tuple, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


class TTLCache(Generic[T]):
    """
    Async read-through cache.

    Args:
        ttl_seconds: Lifetime of an entry
        max_entries: Upper bound on stored entries
        name: Tag used in log lines
        clock: Monotonic time source (seconds)
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 1024,
        name: str = "cache",
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.name = name
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, T]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[T]:
        """Return a live entry, dropping it if expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: T) -> None:
        if key in self._entries:
            del self._entries[key]
        while len(self._entries) >= self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"[COHORT-CACHE] {self.name}: evicted {evicted}")
        self._entries[key] = (self._clock() + self.ttl_seconds, value)

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[T]]) -> T:
        """
        Return the cached value for `key`, loading and storing it on a miss.

        Loader errors propagate and nothing is cached.
        """
        value = self.get(key)
        if value is not None:
            logger.debug(f"[COHORT-CACHE] {self.name}: hit {key}")
            return value

        logger.info(f"[COHORT-CACHE] {self.name}: miss {key}")
        value = await loader()
        self.set(key, value)
        return value

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "entries": len(self._entries),
            "max_entries": self.max_entries,
            "ttl_seconds": self.ttl_seconds,
        }
