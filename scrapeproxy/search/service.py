"""Search front door: per-backend caching and throttling."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..exceptions import ConfigurationError
from ..models import SearchResult
from .cache import SearchCache, Throttle, cache_key
from .providers import SearchBackend

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    results: List[SearchResult]
    cached: bool = False


class SearchService:
    """
    Routes queries to a backend through the shared result cache.

    DuckDuckGo is scraped, so every uncached call waits on the throttle and
    empty result pages are cached too. Google goes through a paid API, so it
    is not throttled and only non-empty answers are cached.
    """

    def __init__(
        self,
        cache: SearchCache,
        throttle: Throttle,
        duckduckgo: SearchBackend,
        google: Optional[SearchBackend] = None,
        duckduckgo_ttl: float = 600.0,
        google_ttl: float = 1800.0,
    ):
        self.cache = cache
        self.throttle = throttle
        self.duckduckgo = duckduckgo
        self.google = google
        self.duckduckgo_ttl = duckduckgo_ttl
        self.google_ttl = google_ttl

    async def search_duckduckgo(self, query: str) -> SearchOutcome:
        return await self._search(
            self.duckduckgo, query, self.duckduckgo_ttl, throttled=True, cache_empty=True
        )

    async def search_google(self, query: str) -> SearchOutcome:
        if self.google is None:
            raise ConfigurationError("Google search is not configured")
        return await self._search(
            self.google, query, self.google_ttl, throttled=False, cache_empty=False
        )

    async def _search(
        self,
        backend: SearchBackend,
        query: str,
        ttl: float,
        *,
        throttled: bool,
        cache_empty: bool,
    ) -> SearchOutcome:
        key = cache_key(backend.cache_prefix, query)
        entry = self.cache.lookup(key)
        if entry is not None:
            logger.info(f"Cache hit for {backend.name} query: {query[:50]}")
            return SearchOutcome(results=list(entry.results), cached=True)

        if throttled:
            waited = await self.throttle.wait()
            if waited:
                logger.debug(f"Throttled {backend.name} search for {waited:.2f}s")

        results = await backend.search(query)
        if results or cache_empty:
            self.cache.store(key, results, ttl)
        return SearchOutcome(results=results)
