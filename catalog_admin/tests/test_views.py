"""Tests for text rendering."""

from unittest.mock import MagicMock

from catalog_admin.controllers import RecordFormController, ResourceListController
from catalog_admin.models import Category, Product
from catalog_admin.resources import ResourceEndpoint
from catalog_admin.views import PRODUCT_COLUMNS, Column, render_form, render_page, render_table


class TestRenderTable:
    def test_dotted_accessor_and_formatters(self, product_payload):
        products = [Product.from_dict(p) for p in product_payload]
        text = render_table(PRODUCT_COLUMNS, products)
        lines = text.splitlines()
        assert lines[0].split() == ["ID", "Name", "Category", "Status", "Featured", "Price", "Thumbnail"]
        assert "Lighting" in lines[2] and "yes" in lines[2] and "49.90" in lines[2]
        assert "Furniture" in lines[3] and "no" in lines[3]

    def test_empty(self):
        assert render_table([Column("ID", "id")], []) == "No records found."

    def test_missing_nested_value_is_blank(self):
        assert Column("Category", "category.name").value(Product(name="x")) == ""


class TestRenderPage:
    def _lister(self, items):
        endpoint = ResourceEndpoint(MagicMock(), "/category", Category.from_dict, label="category")
        endpoint.list = MagicMock(return_value=items)
        lister = ResourceListController(endpoint, page_size=5)
        lister.refresh()
        return lister

    def test_footer(self):
        lister = self._lister([Category(name=f"C{i}", id=i) for i in range(7)])
        lister.go_to_page(2)
        text = render_page(lister)
        assert "C6" in text and "C0" not in text
        assert text.endswith("Page 2 of 2 (7 records, 5 per page)")

    def test_loading(self):
        lister = self._lister([])
        lister.loading = True
        assert render_page(lister) == "Loading..."

    def test_error_shown_above_table(self):
        lister = self._lister([])
        lister.error = "Failed to load categories. Please try again."
        assert render_page(lister).startswith("Error: Failed to load categories.")


class TestRenderForm:
    def test_product_edit_shows_current_files(self, product_payload):
        """Editing shows the record's thumbnail and media until replaced."""
        endpoint = ResourceEndpoint(MagicMock(), "/products", Product.from_dict, multipart=True, label="product")
        form = RecordFormController(endpoint, None, confirm=lambda _m: True)
        form.open_edit(Product.from_dict(product_payload[0]))
        try:
            text = render_form(form, media_base_url="http://cdn.test")
        finally:
            form.close()

        assert text.startswith("Edit Product")
        assert "[current thumbnail] http://cdn.test/uploads/lamp.png" in text
        assert "[current media] http://cdn.test/uploads/a.png" in text
        assert text.index("/uploads/a.png") < text.index("/uploads/b.png")

    def test_replaced_thumbnail_not_listed_as_current(self, product_payload, png_file):
        endpoint = ResourceEndpoint(MagicMock(), "/products", Product.from_dict, multipart=True, label="product")
        form = RecordFormController(endpoint, None, confirm=lambda _m: True)
        draft = form.open_edit(Product.from_dict(product_payload[0]))
        draft.thumbnail.select(png_file)
        try:
            text = render_form(form)
        finally:
            form.close()
        assert "[current thumbnail]" not in text
        assert "[thumbnail] photo.png" in text

    def test_closed_form_renders_nothing(self):
        endpoint = ResourceEndpoint(MagicMock(), "/category", Category.from_dict, label="category")
        assert render_form(RecordFormController(endpoint, None, confirm=lambda _m: True)) == ""
