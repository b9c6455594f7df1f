"""
tests/test_template_registry.py

Template headers, rendering, and strict header conformance.
"""

from __future__ import annotations

import pytest

from app.domain.errors import UnknownEntityTypeError
from app.services.template_registry import TemplateRegistry, quote_csv_field


@pytest.fixture()
def registry() -> TemplateRegistry:
    return TemplateRegistry()


class TestHeaders:
    def test_products_headers_in_template_order(self, registry: TemplateRegistry) -> None:
        assert registry.list_canonical_headers("products") == [
            "name",
            "description",
            "category",
            "price",
            "stock_quantity",
            "min_stock_level",
            "sku",
            "brand",
        ]

    @pytest.mark.parametrize(
        ("entity_type", "required"),
        [
            ("products", {"name", "price"}),
            ("bills", {"customer_name", "total_amount"}),
            ("customers", {"name", "email"}),
        ],
    )
    def test_required_fields(self, registry: TemplateRegistry, entity_type: str, required: set[str]) -> None:
        assert registry.required_fields(entity_type) == required

    def test_optional_is_headers_minus_required(self, registry: TemplateRegistry) -> None:
        assert registry.optional_fields("customers") == {"phone", "address", "company"}

    def test_unknown_entity_type(self, registry: TemplateRegistry) -> None:
        with pytest.raises(UnknownEntityTypeError, match="Unknown import type: suppliers"):
            registry.list_canonical_headers("suppliers")


class TestRenderTemplate:
    def test_header_plus_two_samples(self, registry: TemplateRegistry) -> None:
        lines = registry.render_template("bills").splitlines()

        assert lines[0] == "customer_name,customer_email,customer_phone,total_amount,status,notes,due_date"
        assert len(lines) == 3

    def test_fields_with_commas_are_quoted(self, registry: TemplateRegistry) -> None:
        content = registry.render_template("customers")
        assert '"123 Main St, City, State 12345"' in content

    def test_quote_csv_field_doubles_embedded_quotes(self) -> None:
        assert quote_csv_field('15" screen') == '"15"" screen"'
        assert quote_csv_field("plain") == "plain"


class TestTemplateInfo:
    def test_info_lists_fields_and_instructions(self, registry: TemplateRegistry) -> None:
        info = registry.template_info("products")

        assert info["required_fields"] == ["name", "price"]
        assert "brand" in info["optional_fields"]
        assert info["instructions"][0] == "Required fields: name, price"
        assert info["sample_count"] == 2

    def test_check_template_headers_is_strict(self, registry: TemplateRegistry) -> None:
        errors = registry.check_template_headers("customers", ["name", "Phone Number", "fax"])

        assert errors == [
            "Missing required columns: email",
            "Invalid columns: Phone Number, fax",
        ]

    def test_check_template_headers_accepts_exact_template(self, registry: TemplateRegistry) -> None:
        headers = registry.list_canonical_headers("bills")
        assert registry.check_template_headers("bills", headers) == []
