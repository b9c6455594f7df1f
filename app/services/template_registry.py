"""
app/services/template_registry.py

Downloadable CSV templates for each importable entity type.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from app.domain.entity_schemas import EntityType, get_entity_schema
from app.domain.errors import UnknownEntityTypeError


@dataclass(frozen=True)
class ImportTemplate:
    headers: tuple[str, ...]
    sample_rows: tuple[dict[str, str], ...]
    instructions: tuple[str, ...]


TEMPLATES: dict[str, ImportTemplate] = {
    EntityType.PRODUCTS: ImportTemplate(
        headers=(
            "name",
            "description",
            "category",
            "price",
            "stock_quantity",
            "min_stock_level",
            "sku",
            "brand",
        ),
        sample_rows=(
            {
                "name": "Wireless Headphones",
                "description": "High-quality wireless headphones with noise cancellation",
                "category": "Electronics",
                "price": "99.99",
                "stock_quantity": "50",
                "min_stock_level": "10",
                "sku": "WH-001",
                "brand": "TechBrand",
            },
            {
                "name": "Laptop Stand",
                "description": "Adjustable aluminum laptop stand",
                "category": "Accessories",
                "price": "49.99",
                "stock_quantity": "25",
                "min_stock_level": "5",
                "sku": "LS-002",
                "brand": "OfficePro",
            },
        ),
        instructions=(
            "Required fields: name, price",
            "Optional fields: description, category, stock_quantity, min_stock_level, sku, brand",
            "Price must be a number (e.g., 99.99)",
            "Stock quantities must be whole numbers",
            "Category should be consistent (e.g., Electronics, Clothing, Food)",
        ),
    ),
    EntityType.BILLS: ImportTemplate(
        headers=(
            "customer_name",
            "customer_email",
            "customer_phone",
            "total_amount",
            "status",
            "notes",
            "due_date",
        ),
        sample_rows=(
            {
                "customer_name": "John Smith",
                "customer_email": "john.smith@email.com",
                "customer_phone": "+1-555-0123",
                "total_amount": "299.99",
                "status": "pending",
                "notes": "Payment due in 30 days",
                "due_date": "2024-02-15",
            },
            {
                "customer_name": "Jane Doe",
                "customer_email": "jane.doe@company.com",
                "customer_phone": "+1-555-0456",
                "total_amount": "149.50",
                "status": "paid",
                "notes": "Paid via credit card",
                "due_date": "2024-01-30",
            },
        ),
        instructions=(
            "Required fields: customer_name, total_amount",
            "Optional fields: customer_email, customer_phone, status, notes, due_date",
            "Status options: draft, pending, paid, overdue, cancelled",
            "Due date format: YYYY-MM-DD (e.g., 2024-02-15)",
            "Total amount must be a number (e.g., 299.99)",
        ),
    ),
    EntityType.CUSTOMERS: ImportTemplate(
        headers=("name", "email", "phone", "address", "company"),
        sample_rows=(
            {
                "name": "Alice Johnson",
                "email": "alice.johnson@email.com",
                "phone": "+1-555-0789",
                "address": "123 Main St, City, State 12345",
                "company": "ABC Corporation",
            },
            {
                "name": "Bob Wilson",
                "email": "bob.wilson@company.com",
                "phone": "+1-555-0321",
                "address": "456 Oak Ave, City, State 67890",
                "company": "XYZ Ltd",
            },
        ),
        instructions=(
            "Required fields: name, email",
            "Optional fields: phone, address, company",
            "Email must be a valid email address",
            "Phone can include country code and formatting",
            "Address can be a single line or multiple lines",
        ),
    ),
}


def quote_csv_field(value: str) -> str:
    """
    Quote a field only when it contains a comma or a double quote.
    """

    if "," in value or '"' in value:
        return '"' + value.replace('"', '""') + '"'
    return value


class TemplateRegistry:
    """
    Read-only lookup of template headers, samples, and instructions.
    """

    def __init__(self, templates: dict[str, ImportTemplate] | None = None) -> None:
        self._templates = dict(templates or TEMPLATES)

    def list_canonical_headers(self, entity_type: str) -> list[str]:
        return list(self._template(entity_type).headers)

    def required_fields(self, entity_type: str) -> set[str]:
        self._template(entity_type)
        return set(get_entity_schema(entity_type).required_fields)

    def optional_fields(self, entity_type: str) -> set[str]:
        return set(self.list_canonical_headers(entity_type)) - self.required_fields(entity_type)

    def instructions(self, entity_type: str) -> list[str]:
        return list(self._template(entity_type).instructions)

    def render_template(self, entity_type: str) -> str:
        """
        Header row plus sample rows as CSV text, one trailing newline per line.
        """

        template = self._template(entity_type)
        lines = [",".join(template.headers)]
        for sample in template.sample_rows:
            lines.append(
                ",".join(quote_csv_field(sample.get(header, "")) for header in template.headers)
            )
        return "".join(f"{line}\n" for line in lines)

    def template_info(self, entity_type: str) -> dict[str, Any]:
        template = self._template(entity_type)
        headers = list(template.headers)
        required = self.required_fields(entity_type)
        return {
            "entity_type": entity_type,
            "headers": headers,
            "required_fields": [header for header in headers if header in required],
            "optional_fields": [header for header in headers if header not in required],
            "instructions": list(template.instructions),
            "sample_count": len(template.sample_rows),
        }

    def check_template_headers(self, entity_type: str, headers: Sequence[str]) -> list[str]:
        """
        Strict conformance check against the template itself.

        Unlike the import validator this does not normalize aliases and it
        rejects columns the template does not define.
        """

        template_headers = self.list_canonical_headers(entity_type)
        required = [header for header in template_headers if header in self.required_fields(entity_type)]
        errors: list[str] = []

        missing = [field for field in required if field not in headers]
        if missing:
            errors.append(f"Missing required columns: {', '.join(missing)}")

        unknown = [header for header in headers if header not in template_headers]
        if unknown:
            errors.append(f"Invalid columns: {', '.join(unknown)}")

        return errors

    def _template(self, entity_type: str) -> ImportTemplate:
        template = self._templates.get(entity_type)
        if template is None:
            raise UnknownEntityTypeError(entity_type)
        return template
