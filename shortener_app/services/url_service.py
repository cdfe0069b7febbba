import logging
from typing import Optional

from shortener_app.config import Settings, settings as default_settings
from shortener_app.exceptions import (
    DuplicateURLError,
    InvalidURLError,
    ShortCodeNotFoundError,
    StorageError,
)
from shortener_app.services.short_code import Base62ShortCodeStrategy, ShortCodeStrategy
from shortener_app.storage.strategies import URLStorage
from shortener_app.validators import is_valid_url

logger = logging.getLogger(__name__)


class URLService:
    """
    Maps long URLs to short URLs and back.

    Storage and configuration are injected, so tests can run the service
    against in-memory storage and their own base URL.
    """

    def __init__(
        self,
        storage: URLStorage,
        settings: Optional[Settings] = None,
        short_code_strategy: Optional[ShortCodeStrategy] = None
    ):
        """
        Initialize URL service with dependencies.

        Args:
            storage: URL storage backend
            settings: Configuration (base_url, short_code_length)
            short_code_strategy: Code generator, Base62 by default
        """
        self.storage = storage
        self.settings = settings or default_settings
        self.short_code_strategy = short_code_strategy or Base62ShortCodeStrategy(
            length=self.settings.short_code_length
        )

    @property
    def base_url(self) -> str:
        return self.settings.base_url

    def encode(self, long_url: str) -> str:
        """Return the short URL for long_url, creating the record if needed.

        Process:
        1. Reuse the existing record if long_url was shortened before;
           a record left without a short_code gets one assigned
        2. Insert with an empty short_code to get the auto-increment ID
        3. Generate the short_code from the ID and store it
        4. Commit both writes together

        Raises:
            InvalidURLError: long_url is not a well-formed URL
            StorageError: the storage layer failed; nothing is persisted
        """
        if not is_valid_url(long_url):
            raise InvalidURLError(long_url)

        existing = self.storage.find_by_url(long_url)
        if existing is not None and existing.short_code:
            return self.base_url + existing.short_code

        try:
            if existing is None:
                url_id = self.storage.insert(long_url)
            else:
                # Row from an interrupted two-step write, finish it
                logger.warning("URL id %s has no short code, assigning one", existing.id)
                url_id = existing.id
            short_code = self.short_code_strategy.generate(url_id)
            self.storage.set_code(url_id, short_code)
            self.storage.commit()
        except DuplicateURLError:
            # Another request stored the same URL between lookup and insert
            self.storage.rollback()
            logger.info("Concurrent insert for %s, reusing stored record", long_url)
            winner = self.storage.find_by_url(long_url)
            if winner is None or not winner.short_code:
                raise
            return self.base_url + winner.short_code
        except StorageError:
            self.storage.rollback()
            logger.exception("Could not store short code for %s", long_url)
            raise
        except ValueError as e:
            # ID outside the short code range
            self.storage.rollback()
            raise StorageError(str(e), e) from e

        logger.info("Created short code %s for id %s", short_code, url_id)
        return self.base_url + short_code

    def decode(self, short_url: str) -> str:
        """Return the long URL behind short_url.

        The base URL is removed by plain substring replacement; input
        that does not contain it is treated as a bare short code.

        Raises:
            ShortCodeNotFoundError: no record has that short code
        """
        short_code = short_url.replace(self.base_url, "")
        return self.resolve(short_code)

    def resolve(self, short_code: str) -> str:
        """Return the long URL for a bare short code."""
        url = self.storage.find_by_code(short_code)
        if url is None:
            raise ShortCodeNotFoundError(short_code)
        return url.long_url
