"""
URL storage strategies using Strategy Pattern.

Allows switching between storage backends:
- SQLAlchemy: any database SQLAlchemy can talk to (SQLite, MySQL, ...)
- In-memory: tests and running without a database

Writes are staged until commit() so the insert and the short code update
land together or not at all.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shortener_app.exceptions import DuplicateURLError, StorageError
from shortener_app.models.url import URL

logger = logging.getLogger(__name__)


class URLStorage(ABC):
    """
    Abstract base class for URL storage.

    Every operation raises StorageError (or a subclass) on failure;
    callers decide what to do with it.
    """

    @abstractmethod
    def find_by_url(self, long_url: str) -> Optional[URL]:
        """Return the record for long_url (exact match), or None."""
        pass

    @abstractmethod
    def find_by_code(self, short_code: str) -> Optional[URL]:
        """Return the record for short_code (exact match), or None."""
        pass

    @abstractmethod
    def insert(self, long_url: str) -> int:
        """
        Create a record with an empty short code.

        Returns:
            The id assigned by storage

        Raises:
            DuplicateURLError: If long_url already has a record
        """
        pass

    @abstractmethod
    def set_code(self, url_id: int, short_code: str) -> None:
        """Assign short_code to the record with id url_id."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """Make staged writes permanent."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged writes."""
        pass


class SQLAlchemyURLStorage(URLStorage):
    """URL storage backed by a SQLAlchemy session (one per request)."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_url(self, long_url: str) -> Optional[URL]:
        try:
            return self.db.query(URL).filter(URL.long_url == long_url).first()
        except SQLAlchemyError as e:
            raise StorageError("Lookup by URL failed", e) from e

    def find_by_code(self, short_code: str) -> Optional[URL]:
        try:
            return self.db.query(URL).filter(URL.short_code == short_code).first()
        except SQLAlchemyError as e:
            raise StorageError("Lookup by short code failed", e) from e

    def insert(self, long_url: str) -> int:
        # short_code stays NULL until set_code()
        url = URL(long_url=long_url, short_code=None)
        try:
            self.db.add(url)
            self.db.flush()  # Flush to get ID without committing
        except IntegrityError as e:
            raise DuplicateURLError(long_url, e) from e
        except SQLAlchemyError as e:
            raise StorageError("Insert failed", e) from e
        return url.id

    def set_code(self, url_id: int, short_code: str) -> None:
        try:
            result = self.db.execute(
                update(URL).where(URL.id == url_id).values(short_code=short_code)
            )
        except SQLAlchemyError as e:
            raise StorageError("Short code update failed", e) from e
        if result.rowcount != 1:
            raise StorageError(f"No URL record with id {url_id}")

    def commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            raise StorageError("Commit failed", e) from e

    def rollback(self) -> None:
        try:
            self.db.rollback()
        except SQLAlchemyError as e:
            raise StorageError("Rollback failed", e) from e


class InMemoryURLStore:
    """
    Committed rows shared by every in-memory unit of work.

    Keeps url -> id and code -> id indexes, like the table's unique
    indexes. All access goes through `lock`.
    """

    def __init__(self):
        # id -> (long_url, short_code)
        self.rows: Dict[int, Tuple[str, Optional[str]]] = {}
        self.ids_by_url: Dict[str, int] = {}
        self.ids_by_code: Dict[str, int] = {}
        self.last_id = 0
        self.lock = threading.RLock()

    def __len__(self):
        return len(self.rows)

    def next_id(self) -> int:
        with self.lock:
            # Like AUTOINCREMENT, ids are never reused after a rollback
            self.last_id += 1
            return self.last_id

    def write(self, url_id: int, long_url: str, short_code: Optional[str]) -> None:
        """Store a row and update the indexes. Caller holds the lock."""
        old = self.rows.get(url_id)
        if old is not None:
            self.ids_by_url.pop(old[0], None)
            if old[1] is not None:
                self.ids_by_code.pop(old[1], None)
        self.rows[url_id] = (long_url, short_code)
        self.ids_by_url[long_url] = url_id
        if short_code is not None:
            self.ids_by_code[short_code] = url_id


class InMemoryURLStorage(URLStorage):
    """
    Dict-backed URL storage, one instance per unit of work.

    Writes are staged on the instance and only reach the shared
    InMemoryURLStore on commit(), so a rollback in one request never
    touches rows written by another. Uniqueness of long_url and
    short_code is checked again at commit time.
    """

    def __init__(self, store: Optional[InMemoryURLStore] = None):
        self.store = store if store is not None else InMemoryURLStore()
        # id -> (long_url, short_code), uncommitted
        self._staged: Dict[int, Tuple[str, Optional[str]]] = {}

    def __len__(self):
        with self.store.lock:
            return len(self.store) + sum(
                1 for url_id in self._staged if url_id not in self.store.rows
            )

    def _row(self, url_id: int) -> Optional[Tuple[str, Optional[str]]]:
        if url_id in self._staged:
            return self._staged[url_id]
        return self.store.rows.get(url_id)

    def _to_model(self, url_id: int) -> URL:
        long_url, short_code = self._row(url_id)
        return URL(id=url_id, long_url=long_url, short_code=short_code)

    def _id_for_url(self, long_url: str) -> Optional[int]:
        for url_id, (staged_url, _) in self._staged.items():
            if staged_url == long_url:
                return url_id
        return self.store.ids_by_url.get(long_url)

    def _id_for_code(self, short_code: str) -> Optional[int]:
        for url_id, (_, staged_code) in self._staged.items():
            if staged_code == short_code:
                return url_id
        url_id = self.store.ids_by_code.get(short_code)
        # Committed code replaced by a staged one
        if url_id is not None and url_id in self._staged:
            return None
        return url_id

    def find_by_url(self, long_url: str) -> Optional[URL]:
        with self.store.lock:
            url_id = self._id_for_url(long_url)
            return self._to_model(url_id) if url_id is not None else None

    def find_by_code(self, short_code: str) -> Optional[URL]:
        with self.store.lock:
            url_id = self._id_for_code(short_code)
            return self._to_model(url_id) if url_id is not None else None

    def insert(self, long_url: str) -> int:
        with self.store.lock:
            if self._id_for_url(long_url) is not None:
                raise DuplicateURLError(long_url)
            url_id = self.store.next_id()
        self._staged[url_id] = (long_url, None)
        return url_id

    def set_code(self, url_id: int, short_code: str) -> None:
        with self.store.lock:
            row = self._row(url_id)
            if row is None:
                raise StorageError(f"No URL record with id {url_id}")
            owner = self._id_for_code(short_code)
            if owner is not None and owner != url_id:
                raise StorageError(f"Short code already assigned: {short_code}")
        self._staged[url_id] = (row[0], short_code)

    def commit(self) -> None:
        with self.store.lock:
            for url_id, (long_url, short_code) in self._staged.items():
                owner = self.store.ids_by_url.get(long_url)
                if owner is not None and owner != url_id:
                    raise DuplicateURLError(long_url)
                owner = self.store.ids_by_code.get(short_code) if short_code else None
                if owner is not None and owner != url_id:
                    raise StorageError(f"Short code already assigned: {short_code}")
            for url_id, (long_url, short_code) in self._staged.items():
                self.store.write(url_id, long_url, short_code)
        self._staged = {}

    def rollback(self) -> None:
        if self._staged:
            logger.debug("In-memory storage rolled back %d staged rows", len(self._staged))
        self._staged = {}
