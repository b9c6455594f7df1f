"""
app/domain/entity_schemas.py

Canonical field definitions for each importable entity type.

Each field declares its semantic type, optional numeric bounds, and the
alias header strings that normalize onto it. Required fields are listed
first so composite keys follow declaration order.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.errors import UnknownEntityTypeError


class EntityType:
    PRODUCTS = "products"
    BILLS = "bills"
    CUSTOMERS = "customers"

    ALL = (PRODUCTS, BILLS, CUSTOMERS)


class FieldType:
    STRING = "string"
    NUMBER = "number"
    EMAIL = "email"
    DATE = "date"


@dataclass(frozen=True)
class FieldSpec:
    """
    Schema metadata for one canonical column.
    """

    name: str
    type: str = FieldType.STRING
    required: bool = False
    min_value: float | None = None
    max_value: float | None = None
    aliases: tuple[str, ...] = ()

    @property
    def has_constraints(self) -> bool:
        return self.min_value is not None or self.max_value is not None


@dataclass(frozen=True)
class EntitySchema:
    entity_type: str
    table_name: str
    fields: tuple[FieldSpec, ...]

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields if spec.required)

    @property
    def optional_fields(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields if not spec.required)

    def get_field(self, name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None


PRODUCT_SCHEMA = EntitySchema(
    entity_type=EntityType.PRODUCTS,
    table_name="products",
    fields=(
        FieldSpec(
            "name",
            required=True,
            aliases=("Product_Name", "product_name", "Product Name", "Name"),
        ),
        FieldSpec(
            "price",
            FieldType.NUMBER,
            required=True,
            min_value=0,
            aliases=("Unit_Price", "unit_price", "Unit Price", "Price"),
        ),
        FieldSpec("description", aliases=("Description",)),
        FieldSpec("category", aliases=("Catagory", "Category")),
        FieldSpec(
            "stock_quantity",
            FieldType.NUMBER,
            min_value=0,
            aliases=("Stock_Quantity", "Stock Quantity", "Quantity"),
        ),
        FieldSpec(
            "min_stock_level",
            FieldType.NUMBER,
            min_value=0,
            aliases=("Min_Stock_Level", "Min Stock Level"),
        ),
        FieldSpec("sku", aliases=("Product_ID", "product_id", "SKU")),
        FieldSpec("brand", aliases=("Supplier_Name", "supplier_name", "Brand")),
    ),
)

BILL_SCHEMA = EntitySchema(
    entity_type=EntityType.BILLS,
    table_name="bills",
    fields=(
        FieldSpec(
            "customer_name",
            required=True,
            aliases=("Customer_Name", "Customer Name", "Customer"),
        ),
        FieldSpec(
            "total_amount",
            FieldType.NUMBER,
            required=True,
            min_value=0,
            aliases=("Total_Amount", "Total Amount", "Total", "Amount"),
        ),
        FieldSpec(
            "customer_email",
            FieldType.EMAIL,
            aliases=("Customer_Email", "Customer Email"),
        ),
        FieldSpec("customer_phone", aliases=("Customer_Phone", "Customer Phone")),
        FieldSpec("status", aliases=("Status",)),
        FieldSpec("notes", aliases=("Notes",)),
        FieldSpec("due_date", FieldType.DATE, aliases=("Due_Date", "Due Date")),
    ),
)

CUSTOMER_SCHEMA = EntitySchema(
    entity_type=EntityType.CUSTOMERS,
    table_name="customers",
    fields=(
        FieldSpec("name", required=True, aliases=("Name", "Customer_Name", "Customer Name")),
        FieldSpec(
            "email",
            FieldType.EMAIL,
            required=True,
            aliases=("Email", "Email Address", "email_address"),
        ),
        FieldSpec("phone", aliases=("Phone", "Phone Number")),
        FieldSpec("address", aliases=("Address",)),
        FieldSpec("company", aliases=("Company",)),
    ),
)

ENTITY_SCHEMAS: dict[str, EntitySchema] = {
    EntityType.PRODUCTS: PRODUCT_SCHEMA,
    EntityType.BILLS: BILL_SCHEMA,
    EntityType.CUSTOMERS: CUSTOMER_SCHEMA,
}


def get_entity_schema(entity_type: str) -> EntitySchema:
    """
    Return the schema for an entity type or raise UnknownEntityTypeError.
    """

    schema = ENTITY_SCHEMAS.get(entity_type)
    if schema is None:
        raise UnknownEntityTypeError(entity_type)
    return schema
