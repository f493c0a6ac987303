"""Shared test fixtures for the admin client test suite."""

import json
from io import BytesIO
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from catalog_admin.http_client import ApiClient
from catalog_admin.logging_config import get_logger
from catalog_admin.previews import LocalFile
from catalog_admin.session import SessionStore

BASE_URL = "http://api.test"


def make_response(status: int = 200, body: Any = None, text: Optional[str] = None) -> MagicMock:
    """Build a fake ``requests.Response``.

    ``body`` is served from ``.json()``; ``text`` simulates a non-JSON body.
    """
    resp = MagicMock()
    resp.status_code = status
    if body is not None:
        raw = json.dumps(body)
        resp.content = raw.encode("utf-8")
        resp.text = raw
        resp.json.return_value = body
    else:
        resp.content = (text or "").encode("utf-8")
        resp.text = text or ""
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    return resp


@pytest.fixture(autouse=True)
def quiet_logs():
    """Keep the package logger from writing files during tests."""
    logger = get_logger()
    saved = list(logger.handlers)
    logger.handlers.clear()
    yield
    logger.handlers[:] = saved


@pytest.fixture
def mock_session():
    """A stand-in for ``requests.Session`` answering 200 [] by default."""
    session = MagicMock()
    session.request.return_value = make_response(200, [])
    return session


@pytest.fixture
def store(tmp_path):
    """Session store backed by a temporary file."""
    return SessionStore(tmp_path / "session.json")


@pytest.fixture
def client(mock_session, store):
    return ApiClient(store, base_url=BASE_URL, session=mock_session)


@pytest.fixture
def png_bytes():
    """A real 800x600 PNG image."""
    from PIL import Image

    output = BytesIO()
    Image.new("RGB", (800, 600), (200, 30, 30)).save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def png_file(png_bytes):
    return LocalFile(name="photo.png", content=png_bytes, mime_type="image/png")


@pytest.fixture
def category_payload():
    return [
        {"id": 1, "name": "Lighting", "slug": "lighting", "description": "Lamps"},
        {"id": 2, "name": "Furniture", "slug": "furniture", "description": ""},
    ]


@pytest.fixture
def product_payload():
    return [
        {
            "id": 10,
            "name": "Desk Lamp",
            "slug": "desk-lamp",
            "thumbnail_url": "/uploads/lamp.png",
            "category_id": 1,
            "subcategory_id": None,
            "description": "Bright",
            "price": "49.90",
            "status": "published",
            "is_featured": True,
            "specifications": {"Color": "Black", "Power": "12W"},
            "requirements": {},
            "meta_title": "Desk Lamp",
            "meta_description": "",
            "meta_keywords": "",
            "media": [
                {"id": 2, "url": "/uploads/b.png", "sort_order": 2},
                {"id": 1, "url": "/uploads/a.png", "sort_order": 1},
            ],
            "embeds": [{"id": 5, "embed_url": "https://www.youtube.com/embed/abc", "sort_order": 0}],
            "category": {"id": 1, "name": "Lighting"},
        },
        {
            "id": 11,
            "name": "Chair",
            "category_id": 2,
            "price": None,
            "status": "draft",
            "is_featured": False,
            "category": {"id": 2, "name": "Furniture"},
        },
    ]
