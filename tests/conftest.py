"""Shared fixtures: fake clock, fake browser pool, canned upstream pages."""

from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import AsyncMock

import httpx
import pytest

from scrapeproxy.config import Settings

API_SECRET = "test-secret"
AUTH = {"Authorization": f"Bearer {API_SECRET}"}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakePage:
    def __init__(self, rendered: Optional[Dict[str, Any]] = None, goto_error: Optional[Exception] = None):
        self.goto = AsyncMock(side_effect=goto_error)
        self.wait_for_function = AsyncMock()
        self.evaluate = AsyncMock(return_value=rendered or {"body": "", "title": "", "url": ""})
        self.close = AsyncMock()


class FakePool:
    """Stands in for BrowserPool: hands out one scripted page."""

    started = True

    def __init__(self, page: Optional[FakePage] = None):
        self.fake_page = page or FakePage()
        self.users: List[str] = []
        self.session_count = 0
        self.close = AsyncMock()

    @asynccontextmanager
    async def page(self, user_id: str):
        self.users.append(user_id)
        try:
            yield self.fake_page
        finally:
            await self.fake_page.close()


def html_page(body: str, title: str = "Test Page") -> str:
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        api_secret=API_SECRET,
        oxy_scraper_username="",
        oxy_scraper_password="",
        search_min_interval=0,
    )
