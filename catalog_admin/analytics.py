"""Dashboard statistics across categories, sub-categories and products."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pandas as pd

from catalog_admin.config import PRODUCT_STATUSES
from catalog_admin.http_client import ApiClient
from catalog_admin.logging_config import log_admin_event
from catalog_admin.models import Category, Product, SubCategory
from catalog_admin.resources import category_endpoint, product_endpoint, subcategory_endpoint

__all__ = ["CategoryCount", "DashboardStats", "build_dashboard", "fetch_dashboard"]

UNCATEGORIZED = "Uncategorized"

# Group key for products without a category
_NO_CATEGORY = ""


@dataclass
class CategoryCount:
    """Products in one category. ``category_id`` is None for uncategorized."""

    category_id: Optional[int]
    name: str
    count: int


@dataclass
class DashboardStats:
    """Summary numbers shown on the analytics dashboard."""

    total_categories: int = 0
    total_subcategories: int = 0
    total_products: int = 0
    featured_products: int = 0
    products_by_status: Dict[str, int] = field(default_factory=dict)
    products_by_category: List[CategoryCount] = field(default_factory=list)
    average_price: Optional[float] = None


def _category_id(product: Product) -> Optional[int]:
    if product.category_id is not None:
        return product.category_id
    if product.category is not None:
        return product.category.id
    return None


def _products_frame(products: Sequence[Product]) -> pd.DataFrame:
    rows = []
    for p in products:
        category_id = _category_id(p)
        rows.append({
            "category_key": _NO_CATEGORY if category_id is None else str(category_id),
            "status": p.status,
            "is_featured": bool(p.is_featured),
            "price": p.price,
        })
    return pd.DataFrame(rows, columns=["category_key", "status", "is_featured", "price"])


def _category_labels(categories: Sequence[Category], products: Sequence[Product]) -> Dict[int, str]:
    labels: Dict[int, str] = {}
    for p in products:
        if p.category is not None and p.category.id is not None:
            labels[p.category.id] = p.category.name
    # The category list wins over names nested in products
    labels.update({c.id: c.name for c in categories if c.id is not None})
    return labels


def build_dashboard(
    categories: Sequence[Category],
    subcategories: Sequence[SubCategory],
    products: Sequence[Product],
) -> DashboardStats:
    """Aggregate the three resource lists into dashboard statistics.

    Every known status is reported even when zero. Categories without
    products are listed with a zero count. Per-category counts are keyed
    by id, so categories sharing a name stay separate.
    """
    df = _products_frame(products)
    labels = _category_labels(categories, products)

    by_status: Dict[str, int] = {status: 0 for status in PRODUCT_STATUSES}
    by_category: Dict[Optional[int], int] = {c.id: 0 for c in categories if c.id is not None}
    average_price: Optional[float] = None

    if not df.empty:
        for status, count in df.groupby("status").size().items():
            by_status[str(status)] = int(count)
        for key, count in df.groupby("category_key").size().items():
            by_category[int(key) if key != _NO_CATEGORY else None] = int(count)
        prices = pd.to_numeric(df["price"], errors="coerce").dropna()
        if not prices.empty:
            average_price = round(float(prices.mean()), 2)

    category_counts = [
        CategoryCount(
            category_id=cid,
            name=UNCATEGORIZED if cid is None else labels.get(cid, f"Category {cid}"),
            count=count,
        )
        for cid, count in by_category.items()
    ]
    category_counts.sort(key=lambda c: (-c.count, c.name, -1 if c.category_id is None else c.category_id))

    return DashboardStats(
        total_categories=len(categories),
        total_subcategories=len(subcategories),
        total_products=len(products),
        featured_products=int(df["is_featured"].sum()) if not df.empty else 0,
        products_by_status=by_status,
        products_by_category=category_counts,
        average_price=average_price,
    )


def fetch_dashboard(client: ApiClient) -> DashboardStats:
    """Load all three lists and build the dashboard.

    Errors from the backend propagate; the caller decides how to show them.
    """
    categories: List[Category] = category_endpoint(client).list()
    subcategories: List[SubCategory] = subcategory_endpoint(client).list()
    products: List[Product] = product_endpoint(client).list()
    stats = build_dashboard(categories, subcategories, products)
    log_admin_event("dashboard", {"products": stats.total_products, "categories": stats.total_categories})
    return stats
