from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from ..models import SearchResult

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def cache_key(prefix: str, query: str) -> str:
    """Normalize query text into a backend-scoped cache key."""
    return f"{prefix}{query.strip().lower()}"


@dataclass(frozen=True)
class SearchCacheEntry:
    results: Tuple[SearchResult, ...]
    timestamp: float
    ttl: float

    def expired(self, now: float) -> bool:
        return now - self.timestamp >= self.ttl


class SearchCache:
    """Search results shared by every backend, one map, per-entry TTL.

    Expired entries read as absent. Physical removal happens on `store`, and
    only once the map grows past `max_entries`.
    """

    def __init__(self, max_entries: int = 500, clock: Clock = time.monotonic):
        self.max_entries = max_entries
        self._clock = clock
        self._store: dict[str, SearchCacheEntry] = {}

    def __len__(self) -> int:
        return len(self._store)

    def lookup(self, key: str) -> Optional[SearchCacheEntry]:
        entry = self._store.get(key)
        if entry is None or entry.expired(self._clock()):
            return None
        return entry

    def store(self, key: str, results: Sequence[SearchResult], ttl: float) -> SearchCacheEntry:
        entry = SearchCacheEntry(results=tuple(results), timestamp=self._clock(), ttl=ttl)
        self._store[key] = entry
        self.maybe_evict()
        return entry

    def maybe_evict(self) -> int:
        if len(self._store) <= self.max_entries:
            return 0
        now = self._clock()
        stale = [k for k, v in self._store.items() if v.expired(now)]
        for k in stale:
            del self._store[k]
        if stale:
            logger.debug(f"Evicted {len(stale)} expired search cache entries")
        return len(stale)


class Throttle:
    """Minimum-interval gate in front of a rate-limited upstream."""

    def __init__(
        self,
        min_interval: float = 1.5,
        clock: Clock = time.monotonic,
        sleep: Callable[[float], object] = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self) -> float:
        """Suspend until the interval since the previous dispatch has elapsed.

        Returns the number of seconds waited.
        """
        async with self._lock:
            waited = 0.0
            if self._last is not None:
                waited = max(0.0, self.min_interval - (self._clock() - self._last))
                if waited > 0:
                    await self._sleep(waited)
            self._last = self._clock()
            return waited
