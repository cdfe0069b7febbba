"""
Custom exceptions for the URL shortener.

InvalidURLError and ShortCodeNotFoundError are expected outcomes and are
turned into {"error": ...} payloads by the API. StorageError ends the
current request.
"""

from typing import Optional


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""

    message = "URL shortener error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidURLError(URLShortenerException):
    """Raised when URL validation fails or no URL was given."""

    message = "Invalid URL"

    def __init__(self, url: Optional[str] = None, message: Optional[str] = None):
        self.url = url
        super().__init__(message)


class ShortCodeNotFoundError(URLShortenerException):
    """Raised when a short code is not found in storage."""

    message = "Short URL not found"

    def __init__(self, short_code: Optional[str] = None):
        self.short_code = short_code
        super().__init__()


class StorageError(URLShortenerException):
    """Raised when a storage operation fails."""

    message = "Storage failure"

    def __init__(self, message: Optional[str] = None, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(message)


class DuplicateURLError(StorageError):
    """Raised when inserting a long URL that already has a record."""

    def __init__(self, url: str, original_error: Optional[Exception] = None):
        self.url = url
        super().__init__(f"URL already stored: {url}", original_error)
