"""Tests for form drafts and key/value row conversion."""

import json

import pytest

from catalog_admin.errors import ValidationError
from catalog_admin.forms import (
    CategoryDraft,
    KeyValueRows,
    ProductDraft,
    SubCategoryDraft,
    build_multipart,
    map_to_rows,
    rows_to_map,
)
from catalog_admin.models import Product
from catalog_admin.previews import LocalFile


class TestRowsToMap:
    def test_drops_rows_with_empty_key_or_value(self):
        rows = [
            {"key": "Color", "value": "Black"},
            {"key": "", "value": "orphan"},
            {"key": "Weight", "value": ""},
            {"key": "   ", "value": "  "},
            {"key": "Power", "value": "12W"},
        ]
        assert rows_to_map(rows) == {"Color": "Black", "Power": "12W"}

    def test_kept_rows_are_not_rewritten(self):
        """Whitespace only decides blankness; kept entries go out as entered."""
        assert rows_to_map([{"key": " Size ", "value": " XL "}]) == {" Size ": " XL "}

    def test_round_trip_preserves_padded_keys(self):
        mapping = {" Size": "XL ", "Color": "Black"}
        assert rows_to_map(map_to_rows(mapping)) == mapping

    def test_missing_fields_treated_as_empty(self):
        assert rows_to_map([{"key": "Color"}, {}]) == {}

    def test_round_trip_is_identity(self):
        mapping = {"Color": "Black", "Power": "12W", "Material": "Steel"}
        assert rows_to_map(map_to_rows(mapping)) == mapping

    def test_round_trip_of_converted_rows(self):
        rows = [{"key": "a", "value": "1"}, {"key": "", "value": "2"}]
        once = rows_to_map(rows)
        assert rows_to_map(map_to_rows(once)) == once

    def test_map_to_rows_empty(self):
        assert map_to_rows(None) == []
        assert map_to_rows({}) == []


class TestKeyValueRows:
    def test_add_update_remove(self):
        rows = KeyValueRows()
        rows.add("Color", "Red")
        rows.add()
        rows.update(1, key="Size", value="M")
        rows.update(0, value="Blue")
        assert rows.to_map() == {"Color": "Blue", "Size": "M"}
        rows.remove(0)
        assert rows.to_map() == {"Size": "M"}
        assert len(rows) == 1


class TestCategoryDrafts:
    def test_empty_name_is_missing(self):
        assert CategoryDraft(name="  ").validate() == ["name"]

    def test_check_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            CategoryDraft().check()
        assert exc_info.value.fields == ["name"]

    def test_category_payload(self):
        draft = CategoryDraft(name=" Lighting ", description="Lamps")
        assert draft.to_payload() == {"name": "Lighting", "description": "Lamps"}
        assert not draft.is_edit

    def test_subcategory_requires_category(self):
        assert SubCategoryDraft(name="Desk").validate() == ["category_id"]

    def test_subcategory_rejects_non_numeric_category(self):
        assert SubCategoryDraft(name="Desk", category_id="abc").validate() == ["category_id"]

    def test_subcategory_payload_coerces_id(self):
        draft = SubCategoryDraft(name="Desk", category_id="3", id=9)
        assert draft.is_edit
        assert draft.to_payload() == {"name": "Desk", "description": "", "category_id": 3}


class TestProductDraft:
    @pytest.fixture
    def draft(self):
        d = ProductDraft(name="Lamp", category_id="1")
        yield d
        d.close()

    def test_create_requires_thumbnail(self, draft):
        assert draft.validate() == ["thumbnail"]

    def test_valid_with_thumbnail(self, draft, png_file):
        draft.thumbnail.select(png_file)
        assert draft.validate() == []

    def test_edit_does_not_require_thumbnail(self):
        draft = ProductDraft(name="Lamp", category_id=1, id=4)
        assert draft.validate() == []

    def test_invalid_price_and_status(self):
        draft = ProductDraft(name="Lamp", category_id=1, id=4, price="cheap", status="archived")
        assert draft.validate() == ["price", "status"]

    def test_missing_name_and_category(self):
        draft = ProductDraft(id=4)
        assert draft.validate() == ["name", "category_id"]

    def test_payload_shape(self, draft):
        draft.subcategory_id = ""
        draft.price = "49.90"
        draft.is_featured = True
        draft.status = "published"
        draft.specifications.add("Color", "Black")
        draft.specifications.add("", "ignored")
        draft.requirements.add("Voltage", "230V")
        draft.add_embed("https://youtu.be/abc")
        draft.add_embed("   ")
        draft.add_embed("https://vimeo.com/1")

        payload = draft.to_payload()

        assert set(payload) == {
            "name", "category_id", "subcategory_id", "description", "specifications",
            "requirements", "price", "is_featured", "status", "meta_title",
            "meta_description", "meta_keywords", "embeds",
        }
        assert payload["category_id"] == 1
        assert payload["subcategory_id"] is None
        assert payload["price"] == 49.9
        assert payload["specifications"] == {"Color": "Black"}
        assert payload["requirements"] == {"Voltage": "230V"}
        assert payload["embeds"] == ["https://www.youtube.com/embed/abc", "https://vimeo.com/1"]

    def test_empty_price_is_null(self, draft):
        assert draft.to_payload()["price"] is None

    def test_files_include_thumbnail_and_media(self, draft, png_file):
        draft.thumbnail.select(png_file)
        draft.media.stage([LocalFile("a.txt", b"aaa", "text/plain"), LocalFile("b.txt", b"bb", "text/plain")])
        fields = [name for name, _part in draft.files()]
        assert fields == ["thumbnail", "media", "media"]

    def test_from_record_prefills(self, product_payload):
        record = Product.from_dict(product_payload[0])
        draft = ProductDraft.from_record(record)
        try:
            assert draft.is_edit
            assert draft.specifications.to_map() == {"Color": "Black", "Power": "12W"}
            assert draft.embeds == ["https://www.youtube.com/embed/abc"]
            assert draft.thumbnail.existing_url == "/uploads/lamp.png"
            assert [m.url for m in draft.existing_media] == ["/uploads/a.png", "/uploads/b.png"]
            assert draft.to_payload()["specifications"] == record.specifications
        finally:
            draft.close()


class TestBuildMultipart:
    def test_data_field_first(self):
        parts = build_multipart({"name": "Lamp"}, [("thumbnail", ("t.png", b"x", "image/png"))])
        field_name, (filename, content, mime) = parts[0]
        assert field_name == "data"
        assert filename is None
        assert json.loads(content) == {"name": "Lamp"}
        assert mime == "application/json"
        assert parts[1][0] == "thumbnail"

    def test_without_files(self):
        assert [name for name, _ in build_multipart({})] == ["data"]
