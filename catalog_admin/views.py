"""Plain-text rendering of tables, forms and the dashboard.

Views only read controller state; they never call the backend.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from catalog_admin.analytics import DashboardStats
from catalog_admin.controllers import RecordFormController, ResourceListController
from catalog_admin.urls import resolve_media_url

__all__ = [
    "Column",
    "render_table",
    "render_page",
    "render_messages",
    "render_form",
    "render_dashboard",
    "CATEGORY_COLUMNS",
    "SUBCATEGORY_COLUMNS",
    "PRODUCT_COLUMNS",
    "columns_for",
]

MAX_CELL_WIDTH = 40


@dataclass(frozen=True)
class Column:
    header: str
    accessor: str
    format: Optional[Callable[[Any], str]] = None

    def value(self, record: Any) -> str:
        """Read a (possibly dotted) attribute, e.g. ``category.name``."""
        value = record
        for part in self.accessor.split("."):
            if value is None:
                break
            value = value.get(part) if isinstance(value, dict) else getattr(value, part, None)
        if self.format is not None:
            return self.format(value)
        return "" if value is None else str(value)


def _truncate(text: str, width: int = MAX_CELL_WIDTH) -> str:
    text = " ".join(text.split())
    return text if len(text) <= width else text[: width - 1] + "…"


def _yes_no(value: Any) -> str:
    return "yes" if value else "no"


def _price(value: Any) -> str:
    return "" if value is None else f"{float(value):.2f}"


CATEGORY_COLUMNS = [
    Column("ID", "id"),
    Column("Name", "name"),
    Column("Slug", "slug"),
    Column("Description", "description"),
]

SUBCATEGORY_COLUMNS = [
    Column("ID", "id"),
    Column("Name", "name"),
    Column("Slug", "slug"),
    Column("Category", "category.name"),
    Column("Description", "description"),
]

PRODUCT_COLUMNS = [
    Column("ID", "id"),
    Column("Name", "name"),
    Column("Category", "category.name"),
    Column("Status", "status"),
    Column("Featured", "is_featured", _yes_no),
    Column("Price", "price", _price),
    Column("Thumbnail", "thumbnail_url", lambda v: resolve_media_url(v)),
]

_COLUMNS_BY_RESOURCE = {
    "category": CATEGORY_COLUMNS,
    "sub-category": SUBCATEGORY_COLUMNS,
    "products": PRODUCT_COLUMNS,
}


def columns_for(resource: str) -> List[Column]:
    return _COLUMNS_BY_RESOURCE[resource]


def render_table(columns: Sequence[Column], records: Sequence[Any], empty: str = "No records found.") -> str:
    """Render records as an aligned text table."""
    if not records:
        return empty
    cells = [[_truncate(col.value(r)) for col in columns] for r in records]
    widths = [
        max(len(col.header), *(len(row[i]) for row in cells)) for i, col in enumerate(columns)
    ]
    header = "  ".join(col.header.ljust(w) for col, w in zip(columns, widths))
    rule = "  ".join("-" * w for w in widths)
    body = ["  ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip() for row in cells]
    return "\n".join([header.rstrip(), rule, *body])


def render_messages(controller: Any) -> str:
    """Error and notice lines for any controller exposing ``error``/``notice``."""
    lines = []
    if getattr(controller, "error", None):
        lines.append(f"Error: {controller.error}")
    if getattr(controller, "notice", None):
        lines.append(controller.notice)
    return "\n".join(lines)


def render_page(controller: ResourceListController, columns: Optional[Sequence[Column]] = None) -> str:
    """Render the controller's current page with a pagination footer."""
    if controller.loading:
        return "Loading..."
    cols = columns or columns_for(controller.endpoint.name)
    parts = []
    messages = render_messages(controller)
    if messages:
        parts.append(messages)
    parts.append(render_table(cols, controller.page_items))
    total = len(controller.items)
    parts.append(
        f"Page {controller.current_page} of {controller.page_count} "
        f"({total} record{'s' if total != 1 else ''}, {controller.page_size} per page)"
    )
    return "\n".join(parts)


def render_form(form: RecordFormController, media_base_url: Optional[str] = None) -> str:
    """Summarize an open form: title, payload fields, current and staged files."""
    if not form.is_open or form.draft is None:
        return ""
    lines = [form.title]
    for key, value in form.draft.to_payload().items():
        lines.append(f"  {key}: {value}")
    thumbnail = getattr(form.draft, "thumbnail", None)
    if thumbnail is not None and thumbnail.file is None and thumbnail.existing_url:
        # Kept unless a replacement is selected
        lines.append(f"  [current thumbnail] {resolve_media_url(thumbnail.existing_url, media_base_url)}")
    for media in getattr(form.draft, "existing_media", None) or []:
        lines.append(f"  [current media] {resolve_media_url(media.url, media_base_url)}")
    for name, part in form.draft.files():
        filename, content = part[0], part[1]
        lines.append(f"  [{name}] {filename} ({len(content)} bytes)")
    messages = render_messages(form)
    if messages:
        lines.append(messages)
    return "\n".join(lines)


def render_dashboard(stats: DashboardStats) -> str:
    lines = [
        "Analytics",
        "=" * 40,
        f"Categories:      {stats.total_categories}",
        f"Sub-categories:  {stats.total_subcategories}",
        f"Products:        {stats.total_products}",
        f"Featured:        {stats.featured_products}",
        f"Average price:   {_price(stats.average_price) or 'n/a'}",
        "",
        "Products by status:",
    ]
    lines += [f"  {status}: {count}" for status, count in stats.products_by_status.items()]
    lines.append("")
    lines.append("Products by category:")
    for entry in stats.products_by_category:
        label = entry.name if entry.category_id is None else f"{entry.name} (#{entry.category_id})"
        lines.append(f"  {label}: {entry.count}")
    return "\n".join(lines)
