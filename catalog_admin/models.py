"""Data models mirrored from the catalogue backend.

These are plain records. The backend is the only source of truth; the
client never persists them and refetches after every mutation.
"""

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

__all__ = [
    "Category",
    "SubCategory",
    "Media",
    "ProductEmbed",
    "Product",
    "User",
]


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _string_map(value: Any) -> Dict[str, str]:
    """Decode a key/value collection the backend may send as JSON text."""
    if not value:
        return {}
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return {}
    if not isinstance(value, dict):
        return {}
    return {str(k): "" if v is None else str(v) for k, v in value.items()}


@dataclass
class Category:
    """A top-level product category."""

    name: str
    id: Optional[int] = None
    slug: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=_optional_int(data.get("id")),
            name=data.get("name") or "",
            slug=data.get("slug") or "",
            description=data.get("description") or "",
        )


@dataclass
class SubCategory:
    """A category nested under a Category."""

    name: str
    category_id: Optional[int] = None
    id: Optional[int] = None
    slug: str = ""
    description: str = ""
    category: Optional[Category] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubCategory":
        parent = data.get("category")
        return cls(
            id=_optional_int(data.get("id")),
            name=data.get("name") or "",
            slug=data.get("slug") or "",
            description=data.get("description") or "",
            category_id=_optional_int(data.get("category_id")),
            category=Category.from_dict(parent) if isinstance(parent, dict) else None,
        )


@dataclass
class Media:
    """An image attached to a product."""

    url: str
    id: Optional[int] = None
    sort_order: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Media":
        return cls(
            id=_optional_int(data.get("id")),
            url=data.get("url") or "",
            sort_order=_optional_int(data.get("sort_order")) or 0,
        )


@dataclass
class ProductEmbed:
    """An embeddable video attached to a product."""

    embed_url: str
    id: Optional[int] = None
    sort_order: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductEmbed":
        return cls(
            id=_optional_int(data.get("id")),
            embed_url=data.get("embed_url") or "",
            sort_order=_optional_int(data.get("sort_order")) or 0,
        )


@dataclass
class Product:
    """A catalogue product with its media and embeds."""

    # Required fields
    name: str
    category_id: Optional[int] = None

    id: Optional[int] = None
    slug: str = ""
    thumbnail_url: str = ""
    subcategory_id: Optional[int] = None
    description: str = ""
    price: Optional[float] = None
    status: str = "draft"
    is_featured: bool = False

    specifications: Dict[str, str] = field(default_factory=dict)
    requirements: Dict[str, str] = field(default_factory=dict)

    meta_title: str = ""
    meta_description: str = ""
    meta_keywords: str = ""

    media: List[Media] = field(default_factory=list)
    embeds: List[ProductEmbed] = field(default_factory=list)

    # Nested parents, when the backend includes them
    category: Optional[Category] = None
    subcategory: Optional[SubCategory] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        category = data.get("category")
        subcategory = data.get("subcategory") or data.get("sub_category")
        media = sorted(
            (Media.from_dict(m) for m in data.get("media") or [] if isinstance(m, dict)),
            key=lambda m: m.sort_order,
        )
        embeds = sorted(
            (ProductEmbed.from_dict(e) for e in data.get("embeds") or [] if isinstance(e, dict)),
            key=lambda e: e.sort_order,
        )
        return cls(
            id=_optional_int(data.get("id")),
            name=data.get("name") or "",
            slug=data.get("slug") or "",
            thumbnail_url=data.get("thumbnail_url") or "",
            category_id=_optional_int(data.get("category_id")),
            subcategory_id=_optional_int(data.get("subcategory_id")),
            description=data.get("description") or "",
            price=_optional_float(data.get("price")),
            status=data.get("status") or "draft",
            is_featured=_as_bool(data.get("is_featured")),
            specifications=_string_map(data.get("specifications")),
            requirements=_string_map(data.get("requirements")),
            meta_title=data.get("meta_title") or "",
            meta_description=data.get("meta_description") or "",
            meta_keywords=data.get("meta_keywords") or "",
            media=media,
            embeds=embeds,
            category=Category.from_dict(category) if isinstance(category, dict) else None,
            subcategory=SubCategory.from_dict(subcategory) if isinstance(subcategory, dict) else None,
        )


@dataclass
class User:
    """The signed-in administrator, as held in the session store."""

    id: str
    username: str
    email: str
    role: str
    token: str

    @classmethod
    def from_login_response(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=str(data.get("id", "")),
            username=data.get("username") or "",
            email=data.get("email") or "",
            role=data.get("role") or "",
            token=data.get("access_token") or "",
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=str(data.get("id", "")),
            username=data.get("username") or "",
            email=data.get("email") or "",
            role=data.get("role") or "",
            token=data.get("token") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
