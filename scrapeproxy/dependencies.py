"""FastAPI dependencies."""

import secrets

from fastapi import Request

from scrapeproxy.browser.pool import BrowserPool
from scrapeproxy.config import Settings
from scrapeproxy.exceptions import Unauthorized
from scrapeproxy.extract.engine import ExtractionEngine
from scrapeproxy.search.service import SearchService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_search_service(request: Request) -> SearchService:
    """Get the process-wide search service via dependency injection."""
    return request.app.state.search_service


def get_extraction_engine(request: Request) -> ExtractionEngine:
    return request.app.state.extraction_engine


def get_browser_pool(request: Request) -> BrowserPool:
    return request.app.state.browser_pool


def require_token(request: Request) -> None:
    """Reject requests whose bearer token does not match API_SECRET."""
    settings: Settings = request.app.state.settings
    expected = f"Bearer {settings.api_secret}"
    supplied = request.headers.get("authorization", "")
    if not settings.api_secret or not secrets.compare_digest(supplied, expected):
        raise Unauthorized()
