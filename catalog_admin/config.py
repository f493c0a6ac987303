"""Configuration and constants for the admin client."""

import os
from pathlib import Path
from typing import Dict, Tuple

from dotenv import find_dotenv, load_dotenv

__all__ = [
    "API_BASE_URL",
    "API_PATH",
    "MEDIA_BASE_URL",
    "AUTH_BASE_URL",
    "HEADERS",
    "AUTH_HEADER",
    "REQUEST_TIMEOUT",
    "APP_DIR",
    "SESSION_FILE",
    "LOG_DIR",
    "PAGE_SIZE_OPTIONS",
    "DEFAULT_PAGE_SIZE",
    "MAX_UPLOAD_SIZE",
    "PREVIEW_MAX_DIMENSION",
    "PREVIEW_WORKERS",
    "PRODUCT_STATUSES",
    "GENERIC_ERROR_MESSAGE",
    "FALLBACK_MESSAGES",
]

# .env is looked up from the working directory, not the install location
load_dotenv(find_dotenv(usecwd=True))

# Backend locations
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:1987").rstrip("/")
API_PATH = "/api"
MEDIA_BASE_URL = os.getenv("MEDIA_BASE_URL", API_BASE_URL).rstrip("/")
AUTH_BASE_URL = os.getenv("AUTH_BASE_URL", API_BASE_URL).rstrip("/")

HEADERS = {
    "User-Agent": "catalog-admin/0.1",
    "Accept": "application/json",
}

# Header carrying the session token on every request
AUTH_HEADER = "access_token"

# Request timeout (seconds)
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))

# Per-user state directory
APP_DIR = Path(os.getenv("CATALOG_ADMIN_HOME", str(Path.home() / ".catalog_admin")))

# Session persistence (stands in for browser local storage)
SESSION_FILE = Path(os.getenv("CATALOG_ADMIN_SESSION", str(APP_DIR / "session.json")))

# JSONL event logs
LOG_DIR = Path(os.getenv("CATALOG_ADMIN_LOG_DIR", str(APP_DIR / "logs")))

# Table pagination
PAGE_SIZE_OPTIONS: Tuple[int, ...] = (5, 10, 25, 50)
DEFAULT_PAGE_SIZE = 10

# Uploads and previews
MAX_UPLOAD_SIZE = 5 * 1024 * 1024  # 5MB
PREVIEW_MAX_DIMENSION = 320
PREVIEW_WORKERS = int(os.getenv("PREVIEW_WORKERS", "4"))

PRODUCT_STATUSES: Tuple[str, ...] = ("draft", "published")

# User-facing error strings
GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."

FALLBACK_MESSAGES: Dict[str, Dict[str, str]] = {
    "category": {
        "list": "Failed to load categories. Please try again.",
        "create": "Failed to create category",
        "update": "Failed to update category",
        "delete": "Failed to delete category",
    },
    "sub-category": {
        "list": "Failed to load sub-categories. Please try again.",
        "create": "Failed to create sub-category",
        "update": "Failed to update sub-category",
        "delete": "Failed to delete sub-category",
    },
    "products": {
        "list": "Failed to fetch products",
        "create": "Failed to create product",
        "update": "Failed to update product",
        "delete": "Failed to delete product",
    },
    "login": {
        "create": "An error occurred during login",
    },
}
