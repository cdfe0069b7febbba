"""
URL storage module.

Implements the Strategy Pattern for pluggable URL storage backends.
"""

from .strategies import URLStorage, SQLAlchemyURLStorage, InMemoryURLStorage, InMemoryURLStore
from .factory import StorageFactory, StorageBackend

__all__ = [
    "URLStorage",
    "SQLAlchemyURLStorage",
    "InMemoryURLStorage",
    "InMemoryURLStore",
    "StorageFactory",
    "StorageBackend",
]
