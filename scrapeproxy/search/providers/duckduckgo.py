"""DuckDuckGo HTML search backend (scraped)."""

import logging
from typing import List

import httpx

from ...exceptions import NetworkError, ScrapeProxyError
from ...models import SearchResult
from ...utils.html import has_class, parse_html, text_of
from ...utils.user_agents import random_user_agent

logger = logging.getLogger(__name__)

DUCKDUCKGO_HTML_URL = "https://html.duckduckgo.com/html/"
MAX_RESULTS = 10
_AD_REDIRECT = "duckduckgo.com/y.js"


def parse_results(html: str, max_results: int = MAX_RESULTS) -> List[SearchResult]:
    """
    Pull organic hits out of a DuckDuckGo HTML result page.

    Keeps the first `a.result__a` of each `.result` block, skipping relative
    links, ad redirects, repeated URLs and blank titles.
    """
    tree = parse_html(html)
    if tree is None:
        return []

    results: List[SearchResult] = []
    seen: set[str] = set()
    for block in tree.xpath(f"//*[{has_class('result')}]"):
        if len(results) >= max_results:
            break
        anchors = block.xpath(f".//a[{has_class('result__a')}]")
        if not anchors:
            continue
        anchor = anchors[0]
        href = anchor.get("href") or ""
        if not href.startswith("http") or _AD_REDIRECT in href or href in seen:
            continue
        seen.add(href)
        title = text_of(anchor).strip()
        if not title:
            continue
        snippets = block.xpath(f".//*[{has_class('result__snippet')}]")
        snippet = text_of(snippets[0]).strip() if snippets else ""
        results.append(SearchResult(title=title, url=href, snippet=snippet))
    return results


class DuckDuckGoBackend:
    """Scrapes the no-JS DuckDuckGo result page."""

    name = "duckduckgo"
    cache_prefix = "ddg:"

    def __init__(self, client: httpx.AsyncClient, url: str = DUCKDUCKGO_HTML_URL, timeout: float = 15.0):
        self.client = client
        self.url = url
        self.timeout = timeout

    async def search(self, query: str) -> List[SearchResult]:
        try:
            response = await self.client.post(
                self.url,
                data={"q": query},
                headers={
                    "User-Agent": random_user_agent(),
                    "Accept": "text/html",
                    "Accept-Language": "en-US,en;q=0.9",
                },
                timeout=self.timeout,
            )
        except httpx.RequestError as e:
            logger.warning(f"DuckDuckGo request failed: {e}")
            raise NetworkError(f"DuckDuckGo request failed: {e}") from e

        if not response.is_success:
            logger.warning(f"DuckDuckGo returned HTTP {response.status_code}")
            raise ScrapeProxyError(f"DuckDuckGo returned {response.status_code}")

        results = parse_results(response.text)
        logger.info(f"DuckDuckGo returned {len(results)} results for query: {query[:50]}")
        return results
