"""Search backends."""

from typing import List, Protocol

from ...models import SearchResult
from .duckduckgo import DuckDuckGoBackend
from .oxylabs import OxylabsBackend


class SearchBackend(Protocol):
    name: str
    cache_prefix: str

    async def search(self, query: str) -> List[SearchResult]:
        ...


__all__ = [
    "SearchBackend",
    "DuckDuckGoBackend",
    "OxylabsBackend",
]
