"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from scrapeproxy.browser.pool import BrowserPool
from scrapeproxy.config import Settings, get_settings
from scrapeproxy.dependencies import get_browser_pool
from scrapeproxy.exceptions import ConfigurationError, ScrapeProxyError
from scrapeproxy.extract.engine import ExtractionEngine
from scrapeproxy.middleware.request_logging import RequestLoggingMiddleware
from scrapeproxy.models import HealthResponse
from scrapeproxy.routers import extract, search
from scrapeproxy.search.cache import SearchCache, Throttle
from scrapeproxy.search.providers import DuckDuckGoBackend, OxylabsBackend
from scrapeproxy.search.service import SearchService

logger = logging.getLogger(__name__)


def build_search_service(settings: Settings, client: httpx.AsyncClient) -> SearchService:
    google = None
    if settings.serp_configured:
        google = OxylabsBackend(
            client,
            settings.oxy_scraper_username,
            settings.oxy_scraper_password,
            url=settings.oxy_serp_url,
            timeout=settings.serp_timeout,
        )
    else:
        logger.warning("OXY_SCRAPER_USERNAME/OXY_SCRAPER_PASSWORD not set; /search/google disabled")

    return SearchService(
        cache=SearchCache(max_entries=settings.search_cache_max_entries),
        throttle=Throttle(min_interval=settings.search_min_interval),
        duckduckgo=DuckDuckGoBackend(client, url=settings.duckduckgo_url),
        google=google,
        duckduckgo_ttl=settings.duckduckgo_cache_ttl,
        google_ttl=settings.google_cache_ttl,
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
    browser_pool: Optional[BrowserPool] = None,
) -> FastAPI:
    """
    Build the application.

    `http_client` and `browser_pool` are created and torn down by the app
    unless supplied by the caller, in which case the caller owns them.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not settings.api_secret:
            raise ConfigurationError("API_SECRET is not configured")

        client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(20.0, read=30.0))
        pool = browser_pool or BrowserPool(
            headless=settings.browser_headless,
            proxy=settings.browser_proxy,
            idle_ttl=settings.session_idle_ttl,
        )
        try:
            if browser_pool is None:
                await pool.start()

            app.state.browser_pool = pool
            app.state.search_service = build_search_service(settings, client)
            app.state.extraction_engine = ExtractionEngine(
                client,
                pool,
                fast_timeout=settings.fast_fetch_timeout,
                navigation_timeout=settings.navigation_timeout,
                hydration_timeout=settings.hydration_timeout,
            )
            logger.info(f"{settings.app_title} {settings.app_version} ready")
            yield
        finally:
            if browser_pool is None:
                await pool.close()
            if http_client is None:
                await client.aclose()

    app = FastAPI(title=settings.app_title, version=settings.app_version, lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(RequestLoggingMiddleware)

    @app.exception_handler(ScrapeProxyError)
    async def scrape_proxy_error_handler(request: Request, exc: ScrapeProxyError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message or str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "invalid request") if errors else "invalid request"
        return JSONResponse(status_code=422, content={"error": message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.get("/health", response_model=HealthResponse)
    async def health(pool: BrowserPool = Depends(get_browser_pool)):
        """Liveness probe; no auth."""
        return HealthResponse(ok=True, sessions=pool.session_count)

    app.include_router(search.router)
    app.include_router(extract.router)
    return app
