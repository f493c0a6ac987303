"""Admin client for the catalogue REST API."""

__version__ = "0.1.0"

# Re-export main components for convenient imports
from catalog_admin.auth import SignInController, login, logout
from catalog_admin.controllers import RecordFormController, ResourceListController
from catalog_admin.embeds import normalize_embed_url
from catalog_admin.errors import (
    AdminClientError,
    ApiResponseError,
    TransportError,
    ValidationError,
    user_message,
)
from catalog_admin.forms import CategoryDraft, ProductDraft, SubCategoryDraft, map_to_rows, rows_to_map
from catalog_admin.http_client import ApiClient
from catalog_admin.models import Category, Media, Product, ProductEmbed, SubCategory, User
from catalog_admin.previews import FilePreviewAdapter, LocalFile, StagedFile, ThumbnailSlot
from catalog_admin.resources import (
    ResourceEndpoint,
    build_list_params,
    category_endpoint,
    product_endpoint,
    subcategory_endpoint,
)
from catalog_admin.session import SessionStore
from catalog_admin.urls import resolve_media_url

__all__ = [
    # Version
    "__version__",
    # Models
    "Category",
    "SubCategory",
    "Product",
    "Media",
    "ProductEmbed",
    "User",
    # Transport and session
    "ApiClient",
    "SessionStore",
    "ResourceEndpoint",
    "build_list_params",
    "category_endpoint",
    "subcategory_endpoint",
    "product_endpoint",
    # Controllers and forms
    "ResourceListController",
    "RecordFormController",
    "CategoryDraft",
    "SubCategoryDraft",
    "ProductDraft",
    "rows_to_map",
    "map_to_rows",
    "FilePreviewAdapter",
    "ThumbnailSlot",
    "LocalFile",
    "StagedFile",
    # Auth
    "login",
    "logout",
    "SignInController",
    # Helpers
    "normalize_embed_url",
    "resolve_media_url",
    # Errors
    "AdminClientError",
    "ApiResponseError",
    "TransportError",
    "ValidationError",
    "user_message",
]
