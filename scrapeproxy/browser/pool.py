"""Shared Chromium instance with one isolated context per user."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, AsyncIterator, Callable, Optional

from playwright.async_api import async_playwright

if TYPE_CHECKING:
    from playwright.async_api import Browser, BrowserContext, Page, Playwright

logger = logging.getLogger(__name__)

LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-extensions",
    "--disable-background-networking",
    "--no-first-run",
    "--disable-blink-features=AutomationControlled",
)

CONTEXT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
CONTEXT_VIEWPORT = {"width": 1366, "height": 768}
CONTEXT_LOCALE = "en-US"

STEALTH_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', { get: () => false });
Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
window.chrome = { runtime: {} };
"""

BLOCKED_RESOURCES = re.compile(
    r"\.(png|jpg|jpeg|gif|svg|woff2?|ttf|eot|mp4|mp3|webm|ico)$", re.IGNORECASE
)


@dataclass
class BrowserSession:
    context: "BrowserContext"
    page: "Page"
    created_at: float
    last_used: float
    in_use: int = 0


class BrowserPool:
    """
    Owns the process-wide browser and every user's context.

    Sessions are created on first use, reused afterwards, and closed either
    explicitly via `destroy` or once idle longer than `idle_ttl` seconds
    (checked on every `get_session`; 0 disables expiry). A session with a
    page open through `page()` is never considered idle.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        proxy: Optional[dict[str, str]] = None,
        idle_ttl: float = 1800.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.headless = headless
        self.proxy = proxy
        self.idle_ttl = idle_ttl
        self._clock = clock
        self._playwright: Optional["Playwright"] = None
        self._browser: Optional["Browser"] = None
        self._sessions: dict[str, BrowserSession] = {}
        self._lock = asyncio.Lock()

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    @property
    def started(self) -> bool:
        return self._browser is not None

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._sessions

    async def start(self) -> None:
        """Launch the shared Chromium instance. Failure here is fatal to the process."""
        if self._browser is not None:
            return
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=list(LAUNCH_ARGS),
            )
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.info("Browser launched")

    async def get_session(self, user_id: str) -> BrowserSession:
        if self._browser is None:
            raise RuntimeError("BrowserPool.start() must be awaited before use")

        async with self._lock:
            await self._sweep_idle_locked()
            session = self._sessions.get(user_id)
            if session is None:
                session = await self._create_session(user_id)
                self._sessions[user_id] = session
            session.last_used = self._clock()
            return session

    @asynccontextmanager
    async def page(self, user_id: str) -> AsyncIterator["Page"]:
        """Open a fresh page in the user's context; it is closed on exit."""
        session = await self.get_session(user_id)
        session.in_use += 1
        try:
            page = await session.context.new_page()
            try:
                yield page
            finally:
                await page.close()
        finally:
            session.in_use -= 1
            session.last_used = self._clock()

    async def destroy(self, user_id: str) -> bool:
        session = self._sessions.pop(user_id, None)
        if session is None:
            return False
        await session.context.close()
        logger.info("Browser session closed", extra={"user_id": user_id})
        return True

    async def sweep_idle(self) -> int:
        async with self._lock:
            return await self._sweep_idle_locked()

    async def close(self) -> None:
        """Close every session, the browser and Playwright."""
        for user_id in list(self._sessions):
            try:
                await self.destroy(user_id)
            except Exception as e:
                logger.warning(f"Failed to close session {user_id}: {e}")
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def _sweep_idle_locked(self) -> int:
        if not self.idle_ttl:
            return 0
        now = self._clock()
        idle = [
            uid
            for uid, s in self._sessions.items()
            if not s.in_use and now - s.last_used > self.idle_ttl
        ]
        for user_id in idle:
            try:
                await self.destroy(user_id)
            except Exception as e:
                logger.warning(f"Failed to close idle session {user_id}: {e}")
        return len(idle)

    async def _create_session(self, user_id: str) -> BrowserSession:
        if self._browser is None:
            raise RuntimeError("BrowserPool.start() must be awaited before use")
        options: dict = {
            "user_agent": CONTEXT_USER_AGENT,
            "locale": CONTEXT_LOCALE,
            "viewport": dict(CONTEXT_VIEWPORT),
        }
        if self.proxy:
            options["proxy"] = self.proxy

        context = await self._browser.new_context(**options)
        try:
            await context.add_init_script(STEALTH_SCRIPT)
            page = await context.new_page()
            await context.route(BLOCKED_RESOURCES, lambda route: route.abort())
        except Exception:
            await context.close()
            raise

        now = self._clock()
        logger.info("Browser session created", extra={"user_id": user_id})
        return BrowserSession(context=context, page=page, created_at=now, last_used=now)
