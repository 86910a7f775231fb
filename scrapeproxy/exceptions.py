"""Custom exceptions for the scrapeproxy application."""


class ScrapeProxyError(Exception):
    """Base exception for scrapeproxy."""

    status_code = 500

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class UpstreamError(ScrapeProxyError):
    """Exception raised when a search upstream returns a non-success status."""

    def __init__(self, status_code: int, message: str, response_text: str = ""):
        self.status_code = status_code
        self.response_text = response_text
        super().__init__(message)


class ConfigurationError(ScrapeProxyError):
    """Exception raised for configuration errors."""

    status_code = 503


class NetworkError(ScrapeProxyError):
    """Exception raised for network/connection errors."""

    pass


class Unauthorized(ScrapeProxyError):
    """Missing or mismatched bearer token."""

    status_code = 401

    def __init__(self, message: str = "unauthorized"):
        super().__init__(message)
