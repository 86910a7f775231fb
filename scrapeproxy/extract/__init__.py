"""Excerpt-anchored text extraction."""
