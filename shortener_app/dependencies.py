"""
FastAPI dependencies for dependency injection.

Routes depend on the service, the service on storage, storage on the
request's database session. Tests override get_db.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from shortener_app.config import settings
from shortener_app.database.connection import get_db
from shortener_app.services.url_service import URLService
from shortener_app.storage.factory import StorageFactory, StorageBackend
from shortener_app.storage.strategies import URLStorage


def get_storage(db: Session = Depends(get_db)) -> URLStorage:
    """
    Get URL storage for the current request.

    Backend comes from settings; the SQLAlchemy backend wraps the
    request-scoped session.
    """
    backend = StorageBackend(settings.storage_backend)
    return StorageFactory.create(backend, db=db)


def get_url_service(storage: URLStorage = Depends(get_storage)) -> URLService:
    """Get URLService with storage and settings injected."""
    return URLService(storage=storage, settings=settings)
