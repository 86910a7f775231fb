"""Oxylabs realtime SERP API backend (Google engine)."""

import logging
from typing import Any, List

import httpx

from ...exceptions import ConfigurationError, NetworkError, UpstreamError
from ...models import SearchResult

logger = logging.getLogger(__name__)

OXYLABS_SERP_URL = "https://realtime.oxylabs.io/v1/queries"
MAX_RESULTS = 10


def _organic(data: Any) -> list[dict[str, Any]]:
    """Walk `results[0].content.results.organic`, tolerating any missing level."""
    if not isinstance(data, dict):
        return []
    pages = data.get("results") or []
    if not pages or not isinstance(pages[0], dict):
        return []
    content = pages[0].get("content") or {}
    parsed = content.get("results") if isinstance(content, dict) else None
    if not isinstance(parsed, dict):
        return []
    organic = parsed.get("organic") or []
    return [item for item in organic if isinstance(item, dict)]


class OxylabsBackend:
    """Google results through the Oxylabs realtime API."""

    name = "google"
    cache_prefix = "g:"

    def __init__(
        self,
        client: httpx.AsyncClient,
        username: str,
        password: str,
        url: str = OXYLABS_SERP_URL,
        timeout: float = 30.0,
    ):
        if not username or not password:
            raise ConfigurationError("Oxylabs SERP credentials are not configured")
        self.client = client
        self.auth = httpx.BasicAuth(username, password)
        self.url = url
        self.timeout = timeout

    async def search(self, query: str) -> List[SearchResult]:
        """
        Search Google via Oxylabs.

        Returns up to 10 organic results in provider order.

        Raises:
            UpstreamError: Oxylabs answered with a non-success status
            NetworkError: the request never completed
        """
        try:
            response = await self.client.post(
                self.url,
                json={
                    "source": "google_search",
                    "query": query,
                    "parse": True,
                    "context": [{"key": "filter", "value": 1}],
                },
                auth=self.auth,
                timeout=self.timeout,
            )
        except httpx.RequestError as e:
            logger.error(f"Oxylabs SERP request failed: {e}")
            raise NetworkError(f"Oxylabs SERP request failed: {e}") from e

        logger.info(f"Oxylabs SERP HTTP {response.status_code} for query: {query[:50]}")

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.is_success:
            message = data.get("message") if isinstance(data, dict) else None
            raise UpstreamError(
                status_code=response.status_code,
                message=message or "Oxylabs SERP error",
                response_text=response.text[:1000],
            )

        return [
            SearchResult(
                title=item.get("title") or "",
                url=item.get("url") or "",
                snippet=item.get("desc") or "",
            )
            for item in _organic(data)[:MAX_RESULTS]
        ]
