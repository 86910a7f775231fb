"""Scraping and search proxy with excerpt-anchored extraction."""

__version__ = "1.0.0"
