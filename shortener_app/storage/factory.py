"""
Factory for creating URL storage instances.
"""

import logging
import threading
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from .strategies import URLStorage, SQLAlchemyURLStorage, InMemoryURLStorage, InMemoryURLStore
from shortener_app.config import settings

logger = logging.getLogger(__name__)


class StorageBackend(Enum):
    """Available URL storage backends"""
    SQLALCHEMY = "sqlalchemy"
    MEMORY = "memory"


class StorageFactory:
    """
    Simple factory for creating URL storage instances.

    SQLAlchemy storage wraps the request's session, so a new one is built
    per request. The in-memory backend also gets a fresh unit of work per
    request, staged over one shared (singleton) store so committed data
    survives between requests.
    """

    _memory_store: InMemoryURLStore = None
    _lock = threading.Lock()

    @classmethod
    def create(
        cls,
        backend: StorageBackend = None,
        db: Optional[Session] = None
    ) -> URLStorage:
        """
        Create a storage instance.

        Args:
            backend: Type of storage backend. If None, uses value from settings.
            db: Database session (required for the SQLAlchemy backend)

        Returns:
            URLStorage instance

        Raises:
            ValueError: If backend is unknown or a required session is missing
        """
        if backend is None:
            backend = StorageBackend(settings.storage_backend)

        if backend == StorageBackend.SQLALCHEMY:
            if db is None:
                raise ValueError("SQLAlchemy storage needs a database session")
            return SQLAlchemyURLStorage(db)

        if backend == StorageBackend.MEMORY:
            with cls._lock:
                if cls._memory_store is None:
                    cls._memory_store = InMemoryURLStore()
                    logger.info("In-memory URL store initialized")
            return InMemoryURLStorage(cls._memory_store)

        raise ValueError(f"Unknown storage backend: {backend}")

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._memory_store = None
