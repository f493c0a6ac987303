"""URL helpers: sanitizing user input and resolving media paths."""

import re
from typing import Optional

from catalog_admin.config import MEDIA_BASE_URL

__all__ = ["sanitize_url", "resolve_media_url", "is_absolute_url"]


def sanitize_url(url: Optional[str]) -> str:
    """Strip whitespace, control characters and null bytes from a URL.

    Args:
        url: Raw URL string (may be None)

    Returns:
        Sanitized URL string; empty for empty input
    """
    if not url:
        return ""
    url = url.strip()
    url = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", url)
    return url.replace("%00", "")


def is_absolute_url(url: str) -> bool:
    """True for ``http://`` and ``https://`` URLs."""
    return url.lower().startswith("http")


def resolve_media_url(path: Optional[str], base_url: Optional[str] = None) -> str:
    """Resolve a media path returned by the backend to a displayable URL.

    Absolute URLs pass through unchanged; relative paths are joined onto
    the media base URL.
    """
    path = sanitize_url(path)
    if not path:
        return ""
    if is_absolute_url(path):
        return path
    base = (base_url if base_url is not None else MEDIA_BASE_URL).rstrip("/")
    if not path.startswith("/"):
        path = "/" + path
    return f"{base}{path}"
