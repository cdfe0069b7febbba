"""
Short code generation.

Short codes are the auto-increment id written in base 62 and left-padded
to a fixed width, so every id below 62**6 has exactly one 6-character code.
"""

from abc import ABC, abstractmethod


BASE62_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
BASE = len(BASE62_CHARS)
SHORT_CODE_LENGTH = 6


def generate_short_code(url_id: int, length: int = SHORT_CODE_LENGTH) -> str:
    """
    Convert a storage id to its fixed-width Base62 short code.

    Example:
        generate_short_code(0) -> "000000"
        generate_short_code(1) -> "000001"
        generate_short_code(62) -> "000010"

    Raises:
        ValueError: If url_id is negative or needs more than `length` digits
    """
    if url_id < 0:
        raise ValueError(f"Short codes need a non-negative id, got {url_id}")
    if url_id >= BASE ** length:
        raise ValueError(
            f"URL ID {url_id} does not fit in {length} Base62 characters"
        )

    code = ""
    while url_id > 0:
        code = BASE62_CHARS[url_id % BASE] + code
        url_id //= BASE

    return code.rjust(length, BASE62_CHARS[0])


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""

    @abstractmethod
    def generate(self, url_id: int) -> str:
        """
        Generate a short code.

        Args:
            url_id: The database ID of the URL record

        Returns:
            A short code string
        """
        pass


class Base62ShortCodeStrategy(ShortCodeStrategy):
    """
    Fixed-width Base62 encoding of the auto-increment id.

    No DB queries and no collisions: the id is unique, so is the code.
    """

    def __init__(self, length: int = SHORT_CODE_LENGTH):
        self.length = length

    def generate(self, url_id: int) -> str:
        return generate_short_code(url_id, self.length)
