"""List and form controllers shared by every admin screen.

``ResourceListController`` owns the records shown in a table: filters,
client-side pages, loading flag and the last error. ``RecordFormController``
owns the create/edit form for the same resource and refreshes the list
after each successful mutation.

Neither raises on backend failures. Errors end up as one user-visible
string in ``error`` and the caller re-renders.
"""

import logging
import math
import threading
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from catalog_admin.config import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS
from catalog_admin.errors import AdminClientError, ValidationError, describe, user_message
from catalog_admin.forms import CategoryDraft, ProductDraft, SubCategoryDraft, Draft
from catalog_admin.logging_config import get_logger, log_admin_event
from catalog_admin.resources import ResourceEndpoint, build_list_params

__all__ = [
    "ResourceListController",
    "RecordFormController",
    "DRAFT_TYPES",
]

logger = get_logger("controllers")

T = TypeVar("T")

DRAFT_TYPES: Dict[str, Type[Draft]] = {
    "category": CategoryDraft,
    "sub-category": SubCategoryDraft,
    "products": ProductDraft,
}


class ResourceListController(Generic[T]):
    """Records of one resource, refetched whenever the filters change.

    Responses are applied last-request-wins: every fetch takes a new
    generation number and a response whose generation is no longer the
    latest is dropped.
    """

    def __init__(
        self,
        endpoint: ResourceEndpoint[T],
        filters: Optional[Dict[str, Any]] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.endpoint = endpoint
        self.filters: Dict[str, Any] = dict(filters or {})
        self.items: List[T] = []
        self.loading = False
        self.error: Optional[str] = None
        self.current_page = 1
        self._page_size = DEFAULT_PAGE_SIZE
        self.page_size = page_size
        self._generation = 0
        self._lock = threading.Lock()

    # ---------- Fetching ----------

    def refresh(self) -> bool:
        """Fetch the list with the current filters.

        Returns:
            True if this response was applied
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            filters = dict(self.filters)
            self.loading = True
            self.error = None

        try:
            items = self.endpoint.list(filters)
        except AdminClientError as e:
            with self._lock:
                if generation != self._generation:
                    logger.debug(f"Dropping stale {self.endpoint.name} error (generation {generation})")
                    return False
                self.loading = False
                self.error = user_message(e, self.endpoint.fallback("list"))
            log_admin_event(
                "list_error",
                {"resource": self.endpoint.name, **describe(e)},
                level=logging.ERROR,
            )
            return False

        with self._lock:
            if generation != self._generation:
                logger.debug(
                    f"Dropping stale {self.endpoint.name} response "
                    f"(generation {generation}, latest {self._generation})"
                )
                return False
            self.items = items
            self.loading = False
            self.current_page = min(self.current_page, self.page_count)
        return True

    def set_filters(self, **changes: Any) -> bool:
        """Merge filter changes and refetch if the effective query changed.

        Returns:
            True if a fetch was issued
        """
        before = build_list_params(self.filters)
        merged = {**self.filters, **changes}
        self.filters = {k: v for k, v in merged.items() if v is not None}
        if build_list_params(self.filters) == before:
            return False
        self.current_page = 1
        self.refresh()
        return True

    def clear_filters(self) -> bool:
        had_filters = bool(build_list_params(self.filters))
        self.filters = {}
        if not had_filters:
            return False
        self.current_page = 1
        self.refresh()
        return True

    def find(self, record_id: int) -> Optional[T]:
        for item in self.items:
            if getattr(item, "id", None) == record_id:
                return item
        return None

    # ---------- Pagination ----------

    @property
    def page_size(self) -> int:
        return self._page_size

    @page_size.setter
    def page_size(self, size: int) -> None:
        if size not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"Page size must be one of {list(PAGE_SIZE_OPTIONS)}, got {size}")
        self._page_size = size
        self.current_page = 1

    @property
    def page_count(self) -> int:
        return max(1, math.ceil(len(self.items) / self._page_size))

    def page(self, number: int) -> List[T]:
        """Records on page ``number`` (1-based, clamped to the valid range)."""
        number = min(max(1, number), self.page_count)
        start = (number - 1) * self._page_size
        return self.items[start:start + self._page_size]

    def go_to_page(self, number: int) -> List[T]:
        self.current_page = min(max(1, number), self.page_count)
        return self.page(self.current_page)

    @property
    def page_items(self) -> List[T]:
        return self.page(self.current_page)


class RecordFormController(Generic[T]):
    """Create/edit form for one resource.

    Args:
        endpoint: The resource's REST endpoint
        list_controller: List refreshed after every successful mutation
        confirm: Asked before a delete; returning False cancels it
        draft_type: Draft class (defaults by resource name)
    """

    def __init__(
        self,
        endpoint: ResourceEndpoint[T],
        list_controller: Optional[ResourceListController[T]],
        confirm: Callable[[str], bool],
        draft_type: Optional[Type[Draft]] = None,
    ):
        self.endpoint = endpoint
        self.list_controller = list_controller
        self.confirm = confirm
        self.draft_type = draft_type or DRAFT_TYPES[endpoint.name]
        self.draft: Optional[Draft] = None
        self.is_open = False
        self.submitting = False
        self.error: Optional[str] = None
        self.notice: Optional[str] = None

    @property
    def mode(self) -> str:
        if self.draft is not None and self.draft.is_edit:
            return "edit"
        return "create"

    @property
    def title(self) -> str:
        verb = "Edit" if self.mode == "edit" else "Create"
        return f"{verb} {self.endpoint.label.replace('-', ' ').title()}"

    def open_create(self) -> Draft:
        self._discard_draft()
        self.draft = self.draft_type()
        self.is_open = True
        self.error = None
        return self.draft

    def open_edit(self, record: T) -> Draft:
        self._discard_draft()
        self.draft = self.draft_type.from_record(record)  # type: ignore[attr-defined]
        self.is_open = True
        self.error = None
        return self.draft

    def close(self) -> None:
        self._discard_draft()
        self.is_open = False
        self.error = None

    def _discard_draft(self) -> None:
        if self.draft is not None and hasattr(self.draft, "close"):
            self.draft.close()
        self.draft = None

    def _refresh_list(self) -> None:
        if self.list_controller is not None:
            self.list_controller.refresh()

    def submit(self) -> bool:
        """Validate and send the draft.

        On success the list is refreshed and the form closes. On failure
        the form stays open with ``error`` set.

        Returns:
            True if the backend accepted the draft
        """
        if not self.is_open or self.draft is None:
            raise RuntimeError("No form is open")

        draft = self.draft
        action = "update" if draft.is_edit else "create"
        self.error = None
        self.notice = None

        try:
            draft.check()
        except ValidationError as e:
            self.error = user_message(e)
            log_admin_event(
                "validation_error",
                {"resource": self.endpoint.name, "action": action, "fields": e.fields},
                level=logging.WARNING,
            )
            return False

        self.submitting = True
        try:
            payload = draft.to_payload()
            files = draft.files()
            if draft.is_edit:
                self.endpoint.update(draft.id, payload, files)  # type: ignore[arg-type]
            else:
                self.endpoint.create(payload, files)
        except AdminClientError as e:
            self.error = user_message(e, self.endpoint.fallback(action))
            log_admin_event(
                "record_error",
                {"resource": self.endpoint.name, "action": action, **describe(e)},
                level=logging.ERROR,
            )
            return False
        finally:
            self.submitting = False

        self.notice = f"{self.endpoint.label.capitalize()} {action}d successfully!"
        self._refresh_list()
        self.close()
        return True

    def delete(self, record_id: int) -> bool:
        """Delete a record after confirmation.

        Returns:
            True if the record was deleted
        """
        self.error = None
        self.notice = None
        if not self.confirm(f"Are you sure you want to delete this {self.endpoint.label}?"):
            logger.info(f"Delete of {self.endpoint.label} {record_id} cancelled")
            return False

        try:
            self.endpoint.delete(record_id)
        except AdminClientError as e:
            self.error = user_message(e, self.endpoint.fallback("delete"))
            log_admin_event(
                "record_error",
                {"resource": self.endpoint.name, "action": "delete", "id": record_id, **describe(e)},
                level=logging.ERROR,
            )
            return False

        self.notice = f"{self.endpoint.label.capitalize()} deleted successfully!"
        self._refresh_list()
        return True
