"""REST endpoints for each catalogue resource."""

from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar

from catalog_admin.config import FALLBACK_MESSAGES
from catalog_admin.forms import build_multipart
from catalog_admin.http_client import ApiClient, FilesList
from catalog_admin.logging_config import log_admin_event
from catalog_admin.models import Category, Product, SubCategory

__all__ = [
    "ResourceEndpoint",
    "build_list_params",
    "category_endpoint",
    "subcategory_endpoint",
    "product_endpoint",
    "LIST_FILTERS",
]

T = TypeVar("T")

# Query parameters the list endpoints understand
LIST_FILTERS = ("search", "category_id", "status", "is_featured")


def build_list_params(filters: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Build list query parameters, omitting empty filters.

    ``None``, empty and whitespace-only strings are dropped; booleans are
    sent as ``true``/``false``; everything else is stringified.
    """
    params: Dict[str, str] = {}
    for key, value in (filters or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
            continue
        text = str(value).strip()
        if text:
            params[key] = text
    return params


class ResourceEndpoint(Generic[T]):
    """CRUD calls for one resource path (e.g. ``/category``)."""

    def __init__(
        self,
        client: ApiClient,
        path: str,
        parse: Callable[[Dict[str, Any]], T],
        multipart: bool = False,
        name: Optional[str] = None,
        label: Optional[str] = None,
    ):
        self.client = client
        self.path = path
        self.parse = parse
        self.multipart = multipart
        self.name = name or path.strip("/")
        self.label = label or self.name

    def fallback(self, action: str) -> str:
        """User-facing message for a failed ``action`` with no server message."""
        messages = FALLBACK_MESSAGES.get(self.name, {})
        return messages.get(action, f"Failed to {action} {self.name}")

    def _item_path(self, record_id: int) -> str:
        return f"{self.path}/{record_id}"

    def list(self, filters: Optional[Mapping[str, Any]] = None) -> List[T]:
        params = build_list_params(filters)
        data = self.client.get(self.path, params=params)
        if isinstance(data, dict):
            # Some list routes wrap results
            data = data.get("data") or data.get("items") or []
        items = [self.parse(item) for item in data or [] if isinstance(item, dict)]
        log_admin_event("list_fetch", {"resource": self.name, "params": params, "count": len(items)})
        return items

    def create(self, payload: Dict[str, Any], files: Optional[FilesList] = None) -> Any:
        if self.multipart:
            result = self.client.post_multipart(self.path, build_multipart(payload, files))
        else:
            result = self.client.post_json(self.path, payload)
        log_admin_event("record_create", {"resource": self.name, "name": payload.get("name")})
        return result

    def update(self, record_id: int, payload: Dict[str, Any], files: Optional[FilesList] = None) -> Any:
        path = self._item_path(record_id)
        if self.multipart:
            result = self.client.put_multipart(path, build_multipart(payload, files))
        else:
            result = self.client.put_json(path, payload)
        log_admin_event("record_update", {"resource": self.name, "id": record_id})
        return result

    def delete(self, record_id: int) -> Any:
        result = self.client.delete(self._item_path(record_id))
        log_admin_event("record_delete", {"resource": self.name, "id": record_id})
        return result


def category_endpoint(client: ApiClient) -> ResourceEndpoint[Category]:
    return ResourceEndpoint(client, "/category", Category.from_dict, label="category")


def subcategory_endpoint(client: ApiClient) -> ResourceEndpoint[SubCategory]:
    return ResourceEndpoint(client, "/sub-category", SubCategory.from_dict, label="sub-category")


def product_endpoint(client: ApiClient) -> ResourceEndpoint[Product]:
    return ResourceEndpoint(client, "/products", Product.from_dict, multipart=True, label="product")
