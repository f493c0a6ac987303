"""Form drafts: client-held edit state for one record.

A draft is either new (no ``id``) or an edit of an existing record. It knows
which fields are required, how to turn its UI-shaped fields into the wire
payload, and which files travel with it.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from catalog_admin.config import PRODUCT_STATUSES
from catalog_admin.embeds import normalize_embed_url
from catalog_admin.errors import ValidationError
from catalog_admin.http_client import FilesList
from catalog_admin.models import Category, Media, Product, SubCategory
from catalog_admin.previews import FilePreviewAdapter, ThumbnailSlot

__all__ = [
    "rows_to_map",
    "map_to_rows",
    "build_multipart",
    "KeyValueRows",
    "Draft",
    "CategoryDraft",
    "SubCategoryDraft",
    "ProductDraft",
]

IdValue = Union[int, str, None]


def rows_to_map(rows: Iterable[Mapping[str, Any]]) -> Dict[str, str]:
    """Convert ``[{key, value}]`` rows into a map.

    Rows whose key or value is blank (empty or whitespace only) are dropped.
    Kept keys and values are sent as entered. A repeated key keeps the last
    value.
    """
    result: Dict[str, str] = {}
    for row in rows:
        key = str(row.get("key") or "")
        value = str(row.get("value") or "")
        if key.strip() and value.strip():
            result[key] = value
    return result


def map_to_rows(mapping: Optional[Mapping[str, Any]]) -> List[Dict[str, str]]:
    """Convert a map back into editable ``[{key, value}]`` rows."""
    if not mapping:
        return []
    return [{"key": str(k), "value": "" if v is None else str(v)} for k, v in mapping.items()]


def build_multipart(payload: Dict[str, Any], files: Optional[FilesList] = None) -> FilesList:
    """Package a payload as the ``data`` field plus any file parts."""
    parts: FilesList = [("data", (None, json.dumps(payload), "application/json"))]
    parts.extend(files or [])
    return parts


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_int(value: IdValue) -> Optional[int]:
    if _blank(value):
        return None
    return int(value)  # type: ignore[arg-type]


class KeyValueRows:
    """Editable list of key/value rows (product specifications, requirements)."""

    def __init__(self, rows: Optional[Iterable[Mapping[str, Any]]] = None):
        self.rows: List[Dict[str, str]] = [
            {"key": str(r.get("key") or ""), "value": str(r.get("value") or "")} for r in rows or []
        ]

    @classmethod
    def from_map(cls, mapping: Optional[Mapping[str, Any]]) -> "KeyValueRows":
        return cls(map_to_rows(mapping))

    def __len__(self) -> int:
        return len(self.rows)

    def add(self, key: str = "", value: str = "") -> None:
        self.rows.append({"key": key, "value": value})

    def update(self, index: int, key: Optional[str] = None, value: Optional[str] = None) -> None:
        row = self.rows[index]
        if key is not None:
            row["key"] = key
        if value is not None:
            row["value"] = value

    def remove(self, index: int) -> None:
        del self.rows[index]

    def to_map(self) -> Dict[str, str]:
        return rows_to_map(self.rows)


class Draft:
    resource = ""
    required: tuple = ()

    id: Optional[int]

    @property
    def is_edit(self) -> bool:
        return self.id is not None

    def missing_fields(self) -> List[str]:
        return [name for name in self.required if _blank(getattr(self, name))]

    def validate(self) -> List[str]:
        """Names of fields that block submission (empty when valid)."""
        return self.missing_fields()

    def check(self) -> None:
        """Raise ``ValidationError`` if the draft cannot be submitted."""
        problems = self.validate()
        if problems:
            raise ValidationError(problems)

    def to_payload(self) -> Dict[str, Any]:
        raise NotImplementedError

    def files(self) -> FilesList:
        return []


@dataclass
class CategoryDraft(Draft):
    resource = "category"
    required = ("name",)

    name: str = ""
    description: str = ""
    id: Optional[int] = None

    @classmethod
    def from_record(cls, record: Category) -> "CategoryDraft":
        return cls(name=record.name, description=record.description, id=record.id)

    def to_payload(self) -> Dict[str, Any]:
        return {"name": self.name.strip(), "description": self.description}


@dataclass
class SubCategoryDraft(Draft):
    resource = "sub-category"
    required = ("name", "category_id")

    name: str = ""
    description: str = ""
    category_id: IdValue = ""
    id: Optional[int] = None

    @classmethod
    def from_record(cls, record: SubCategory) -> "SubCategoryDraft":
        return cls(
            name=record.name,
            description=record.description,
            category_id=record.category_id if record.category_id is not None else "",
            id=record.id,
        )

    def validate(self) -> List[str]:
        problems = self.missing_fields()
        if "category_id" not in problems:
            try:
                _to_int(self.category_id)
            except (TypeError, ValueError):
                problems.append("category_id")
        return problems

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name.strip(),
            "description": self.description,
            "category_id": _to_int(self.category_id),
        }


@dataclass
class ProductDraft(Draft):
    """Draft for a product, including its key/value rows, embeds and files."""

    resource = "products"
    required = ("name", "category_id")

    name: str = ""
    category_id: IdValue = ""
    subcategory_id: IdValue = ""
    description: str = ""
    price: Union[float, str, None] = ""
    status: str = "draft"
    is_featured: bool = False
    meta_title: str = ""
    meta_description: str = ""
    meta_keywords: str = ""

    specifications: KeyValueRows = field(default_factory=KeyValueRows)
    requirements: KeyValueRows = field(default_factory=KeyValueRows)
    embeds: List[str] = field(default_factory=list)

    thumbnail: ThumbnailSlot = field(default_factory=ThumbnailSlot)
    media: FilePreviewAdapter = field(default_factory=FilePreviewAdapter)
    existing_media: List[Media] = field(default_factory=list)

    id: Optional[int] = None

    @classmethod
    def from_record(cls, record: Product) -> "ProductDraft":
        return cls(
            id=record.id,
            name=record.name,
            category_id=record.category_id if record.category_id is not None else "",
            subcategory_id=record.subcategory_id if record.subcategory_id is not None else "",
            description=record.description,
            price=record.price if record.price is not None else "",
            status=record.status,
            is_featured=record.is_featured,
            meta_title=record.meta_title,
            meta_description=record.meta_description,
            meta_keywords=record.meta_keywords,
            specifications=KeyValueRows.from_map(record.specifications),
            requirements=KeyValueRows.from_map(record.requirements),
            embeds=[e.embed_url for e in record.embeds],
            thumbnail=ThumbnailSlot(existing_url=record.thumbnail_url),
            existing_media=list(record.media),
        )

    def add_embed(self, url: str = "") -> None:
        self.embeds.append(url)

    def update_embed(self, index: int, url: str) -> None:
        self.embeds[index] = url

    def remove_embed(self, index: int) -> None:
        del self.embeds[index]

    def validate(self) -> List[str]:
        problems = self.missing_fields()
        # New products must come with a thumbnail
        if not self.is_edit and self.thumbnail.file is None:
            problems.append("thumbnail")
        for name in ("category_id", "subcategory_id"):
            if name in problems:
                continue
            try:
                _to_int(getattr(self, name))
            except (TypeError, ValueError):
                problems.append(name)
        if not _blank(self.price):
            try:
                float(self.price)  # type: ignore[arg-type]
            except (TypeError, ValueError):
                problems.append("price")
        if self.status not in PRODUCT_STATUSES:
            problems.append("status")
        return problems

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name.strip(),
            "category_id": _to_int(self.category_id),
            "subcategory_id": _to_int(self.subcategory_id),
            "description": self.description,
            "specifications": self.specifications.to_map(),
            "requirements": self.requirements.to_map(),
            "price": None if _blank(self.price) else float(self.price),  # type: ignore[arg-type]
            "is_featured": bool(self.is_featured),
            "status": self.status,
            "meta_title": self.meta_title,
            "meta_description": self.meta_description,
            "meta_keywords": self.meta_keywords,
            "embeds": [normalize_embed_url(url.strip()) for url in self.embeds if url.strip()],
        }

    def files(self) -> FilesList:
        return self.thumbnail.to_parts("thumbnail") + self.media.to_parts("media")

    def close(self) -> None:
        self.thumbnail.close()
        self.media.close()
