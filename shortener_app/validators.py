"""
Input validators.

URLs are parsed with pydantic's AnyUrl and must carry a scheme and a
host. The parsed value is only used for the check: storage keeps the
caller's string exactly as given, never pydantic's normalised form.
"""

import re
from typing import Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError


MAX_URL_LENGTH = 2048

_url_adapter = TypeAdapter(AnyUrl)
_FORBIDDEN_CHARS_RE = re.compile(r"[\s\x00-\x1f\x7f]")


def is_valid_url(url: Optional[str]) -> bool:
    """
    Check that url is a well-formed absolute URL.

    Args:
        url: The URL string to validate

    Returns:
        True if url has a valid scheme and a non-empty host
    """
    if not url or not isinstance(url, str):
        return False

    if len(url) > MAX_URL_LENGTH:
        return False

    # pydantic silently strips surrounding whitespace and tabs/newlines
    if _FORBIDDEN_CHARS_RE.search(url):
        return False

    try:
        parsed = _url_adapter.validate_python(url)
    except ValidationError:
        return False

    return bool(parsed.host)
