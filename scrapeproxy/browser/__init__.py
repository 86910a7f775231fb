"""Per-user Playwright browser sessions."""

from .pool import BrowserPool, BrowserSession

__all__ = ["BrowserPool", "BrowserSession"]
