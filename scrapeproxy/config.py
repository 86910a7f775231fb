"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Auth
    api_secret: str = Field(default="", description="Bearer token required on every route except /health")

    # Oxylabs SERP API (Google search backend)
    oxy_scraper_username: str = Field(default="", description="Oxylabs realtime API username")
    oxy_scraper_password: str = Field(default="", description="Oxylabs realtime API password")
    oxy_serp_url: str = Field(
        default="https://realtime.oxylabs.io/v1/queries", description="Oxylabs realtime endpoint"
    )
    serp_timeout: float = Field(default=30.0, description="SERP API request timeout in seconds")

    # Optional upstream proxy for browser contexts
    oxy_host: str | None = Field(default=None, description="Browser proxy host")
    oxy_port: int | None = Field(default=None, description="Browser proxy port")
    oxy_username: str | None = Field(default=None, description="Browser proxy username")
    oxy_password: str | None = Field(default=None, description="Browser proxy password")

    # DuckDuckGo HTML backend
    duckduckgo_url: str = Field(
        default="https://html.duckduckgo.com/html/", description="DuckDuckGo HTML endpoint"
    )

    # Search cache and throttle
    duckduckgo_cache_ttl: float = Field(default=600.0, description="DuckDuckGo result TTL in seconds")
    google_cache_ttl: float = Field(default=1800.0, description="Google result TTL in seconds")
    search_cache_max_entries: int = Field(default=500, ge=1, description="Entry count that triggers eviction")
    search_min_interval: float = Field(
        default=1.5, ge=0, description="Minimum seconds between DuckDuckGo requests"
    )

    # Extraction
    fast_fetch_timeout: float = Field(default=8.0, description="Direct HTTP fetch timeout in seconds")
    navigation_timeout: float = Field(default=45.0, description="Browser navigation timeout in seconds")
    hydration_timeout: float = Field(
        default=25.0, description="Best-effort wait for rendered text in seconds"
    )

    # Browser pool
    browser_headless: bool = Field(default=True, description="Launch Chromium headless")
    session_idle_ttl: float = Field(
        default=1800.0, ge=0, description="Close sessions idle this long (0 disables)"
    )

    # Server
    app_title: str = Field(default="scrapeproxy", description="Application title")
    app_version: str = Field(default="1.0.0", description="Application version")
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=3000, description="Bind port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    log_json: bool = Field(default=True, description="Use JSON log format")
    log_file: str | None = Field(default=None, description="Optional log file path")

    @property
    def serp_configured(self) -> bool:
        return bool(self.oxy_scraper_username and self.oxy_scraper_password)

    @property
    def browser_proxy(self) -> dict[str, str] | None:
        """Playwright proxy settings, or None when no proxy host is set."""
        if not self.oxy_host:
            return None
        server = f"http://{self.oxy_host}"
        if self.oxy_port:
            server = f"{server}:{self.oxy_port}"
        proxy = {"server": server}
        if self.oxy_username:
            proxy["username"] = self.oxy_username
        if self.oxy_password:
            proxy["password"] = self.oxy_password
        return proxy


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
