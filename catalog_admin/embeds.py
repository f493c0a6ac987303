"""Rewrite video URLs into their iframe-embeddable form."""

from typing import Optional
from urllib.parse import parse_qs, urlparse

__all__ = ["normalize_embed_url", "YOUTUBE_EMBED_BASE", "YOUTUBE_HOSTS"]

YOUTUBE_EMBED_BASE = "https://www.youtube.com/embed/"

YOUTUBE_HOSTS = frozenset({"youtube.com", "www.youtube.com", "m.youtube.com"})
SHORT_LINK_HOST = "youtu.be"


def _first_segment(path: str) -> str:
    return path.lstrip("/").split("/", 1)[0]


def _youtube_id(url: str) -> Optional[str]:
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()

    if host == SHORT_LINK_HOST:
        return _first_segment(parsed.path) or None
    if host not in YOUTUBE_HOSTS:
        return None

    if parsed.path.rstrip("/") == "/watch":
        values = parse_qs(parsed.query).get("v")
        return values[0] if values and values[0] else None
    if parsed.path.startswith("/shorts/"):
        return _first_segment(parsed.path[len("/shorts/"):]) or None
    return None


def normalize_embed_url(url: Optional[str]) -> str:
    """Rewrite a YouTube watch/short-link/shorts URL to ``/embed/<id>``.

    Only youtube.com (www./m.) and youtu.be hosts are rewritten. Any other
    URL, including one already in embed form, is returned unchanged. The
    extracted id is not validated.

    >>> normalize_embed_url("https://youtu.be/ABC123")
    'https://www.youtube.com/embed/ABC123'
    """
    if not url:
        return url or ""
    video_id = _youtube_id(url)
    if video_id is None:
        return url
    return YOUTUBE_EMBED_BASE + video_id
