"""
Database models for URL shortener.

A single table maps each long URL to its short code.
"""

from .url import URL

__all__ = ["URL"]
