"""Tests for embed URL normalization and media URL resolution."""

import pytest

from catalog_admin.embeds import normalize_embed_url
from catalog_admin.urls import resolve_media_url, sanitize_url


class TestNormalizeEmbedUrl:
    """YouTube URLs are rewritten to /embed/<id>; others pass through."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=ABC123",
            "https://youtu.be/ABC123",
            "https://www.youtube.com/shorts/ABC123?x=1",
            "https://youtube.com/watch?v=ABC123&t=42s",
            "https://www.youtube.com/watch?feature=share&v=ABC123",
            "https://youtu.be/ABC123?si=tracking",
        ],
    )
    def test_youtube_shapes(self, url):
        assert normalize_embed_url(url) == "https://www.youtube.com/embed/ABC123"

    @pytest.mark.parametrize(
        "url",
        [
            "https://vimeo.com/123456",
            "https://notyoutube.com/watch?v=abc",
            "https://example.com/share?u=youtu.be/abc",
            "https://vimeo.com/redirect/youtube.com/shorts/abc",
            "https://www.youtube.com/watch?list=PL123",
        ],
    )
    def test_non_youtube_unchanged(self, url):
        """Only YouTube hosts are rewritten, wherever the text appears."""
        assert normalize_embed_url(url) == url

    def test_mobile_host(self):
        assert normalize_embed_url("https://m.youtube.com/watch?v=XYZ") == "https://www.youtube.com/embed/XYZ"

    def test_already_embedded_unchanged(self):
        url = "https://www.youtube.com/embed/ABC123"
        assert normalize_embed_url(url) == url

    def test_empty_input(self):
        assert normalize_embed_url("") == ""
        assert normalize_embed_url(None) == ""

    def test_id_not_validated(self):
        assert normalize_embed_url("https://youtu.be/!!") == "https://www.youtube.com/embed/!!"


class TestResolveMediaUrl:
    def test_relative_path_joined(self):
        assert resolve_media_url("/uploads/a.png", base_url="http://cdn.test") == "http://cdn.test/uploads/a.png"

    def test_missing_leading_slash(self):
        assert resolve_media_url("uploads/a.png", base_url="http://cdn.test/") == "http://cdn.test/uploads/a.png"

    def test_absolute_url_passes_through(self):
        url = "https://images.example.com/a.png"
        assert resolve_media_url(url, base_url="http://cdn.test") == url

    def test_empty(self):
        assert resolve_media_url("") == ""
        assert resolve_media_url(None) == ""

    def test_sanitize_strips_control_characters(self):
        assert sanitize_url("  /uploads/a\x00.png\n") == "/uploads/a.png"
