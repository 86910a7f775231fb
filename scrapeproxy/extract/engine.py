"""Tiered extraction: direct HTTP fetch first, full browser rendering on failure."""

import asyncio
import logging
from typing import List, Optional, Sequence

import httpx
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..browser.pool import BrowserPool
from ..models import BatchItem, ExtractionFound, ExtractionNotFound, ExtractionResult
from ..utils.user_agents import random_user_agent
from .text import NON_CONTENT_TAGS, extract_from_text, parse_page

logger = logging.getLogger(__name__)

HYDRATED_MIN_CHARS = 100

_HYDRATED_CHECK = (
    f"() => ((document.body && document.body.innerText) || '').length > {HYDRATED_MIN_CHARS}"
)

_READ_RENDERED_PAGE = """() => {
  document.querySelectorAll('%s').forEach((el) => el.remove());
  const root = document.querySelector('article, main, [role="main"]') || document.body;
  return {
    body: root ? root.innerText : '',
    title: document.title || '',
    url: window.location.href,
  };
}""" % ", ".join(NON_CONTENT_TAGS)


class ExtractionEngine:
    """Finds an excerpt on a live page and returns the text around it."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        pool: BrowserPool,
        *,
        fast_timeout: float = 8.0,
        navigation_timeout: float = 45.0,
        hydration_timeout: float = 25.0,
    ):
        self.client = client
        self.pool = pool
        self.fast_timeout = fast_timeout
        self.navigation_timeout = navigation_timeout
        self.hydration_timeout = hydration_timeout

    async def extract_fast(
        self, url: str, excerpt: str, chars_before: int, chars_after: int
    ) -> Optional[ExtractionFound]:
        """HTTP-only attempt. None means "escalate", never an error."""
        try:
            response = await self.client.get(
                url,
                headers={
                    "User-Agent": random_user_agent(),
                    "Accept": "text/html,application/xhtml+xml",
                    "Accept-Language": "en-US,en;q=0.9",
                },
                timeout=self.fast_timeout,
                follow_redirects=True,
            )
        except httpx.HTTPError as e:
            logger.debug(f"Fast fetch failed for {url}: {e}")
            return None

        if not response.is_success:
            logger.debug(f"Fast fetch got HTTP {response.status_code} for {url}")
            return None

        title, body = parse_page(response.text)
        result = extract_from_text(body, excerpt, chars_before, chars_after, title, url)
        if isinstance(result, ExtractionFound):
            return result
        return None

    async def extract(
        self,
        url: str,
        excerpt: str,
        chars_before: int,
        chars_after: int,
        user_id: str,
    ) -> ExtractionResult:
        fast = await self.extract_fast(url, excerpt, chars_before, chars_after)
        if fast is not None:
            return fast

        logger.info("Escalating to browser extraction", extra={"url": url, "user_id": user_id})
        return await self._extract_rendered(url, excerpt, chars_before, chars_after, user_id)

    async def extract_batch(
        self,
        items: Sequence[BatchItem],
        chars_before: int = 500,
        chars_after: int = 1000,
    ) -> List[ExtractionFound]:
        """Fast path for every item at once; failed or unmatched items are dropped."""
        settled = await asyncio.gather(
            *(
                self.extract_fast(
                    item.url,
                    item.excerpt,
                    item.chars_before if item.chars_before is not None else chars_before,
                    item.chars_after if item.chars_after is not None else chars_after,
                )
                for item in items
            ),
            return_exceptions=True,
        )

        results: List[ExtractionFound] = []
        for item, outcome in zip(items, settled):
            if isinstance(outcome, BaseException):
                logger.warning(f"Batch extraction failed for {item.url}: {outcome}")
                continue
            if outcome is not None:
                results.append(outcome)
        return results

    async def _extract_rendered(
        self,
        url: str,
        excerpt: str,
        chars_before: int,
        chars_after: int,
        user_id: str,
    ) -> ExtractionResult:
        async with self.pool.page(user_id) as page:
            await page.goto(url, wait_until="load", timeout=self.navigation_timeout * 1000)
            try:
                await page.wait_for_function(
                    _HYDRATED_CHECK, timeout=self.hydration_timeout * 1000
                )
            except PlaywrightTimeoutError:
                logger.debug(f"Rendered text stayed short for {url}")

            rendered = await page.evaluate(_READ_RENDERED_PAGE)

        body = (rendered.get("body") or "").strip()
        title = rendered.get("title") or ""
        final_url = rendered.get("url") or url
        result = extract_from_text(body, excerpt, chars_before, chars_after, title, final_url)
        if result is None:
            return ExtractionNotFound(title=title, url=final_url, full_text="")
        return result
