"""
app/mappers/record_mapper.py

Materializes validated, normalized rows into typed per-entity records.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping

from app.domain.entity_schemas import EntityType
from app.domain.errors import UnknownEntityTypeError
from app.domain.imports import BillRecord, CustomerRecord, EntityRecord, NormalizedRow, ProductRecord
from app.validators.value_parsers import clean_number_value, parse_date

DEFAULT_BILL_STATUS = "draft"


class RecordMapper:
    """
    Maps canonical fields onto target table columns, filling defaults.
    """

    def to_record(
        self,
        entity_type: str,
        row: NormalizedRow,
        *,
        business_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> EntityRecord:
        values = row.values()
        if entity_type == EntityType.PRODUCTS:
            return self._product(values, business_id=business_id, user_id=user_id)
        if entity_type == EntityType.BILLS:
            return self._bill(values, business_id=business_id, user_id=user_id)
        if entity_type == EntityType.CUSTOMERS:
            return self._customer(values, business_id=business_id, user_id=user_id)
        raise UnknownEntityTypeError(entity_type)

    @staticmethod
    def _product(
        values: Mapping[str, str],
        *,
        business_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> ProductRecord:
        return ProductRecord(
            business_id=business_id,
            created_by=user_id,
            name=values.get("name", ""),
            description=values.get("description") or "",
            category=values.get("category") or "",
            price=_number_or_zero(values.get("price")),
            stock_quantity=_int_or_zero(values.get("stock_quantity")),
            min_stock_level=_int_or_zero(values.get("min_stock_level")),
            sku=values.get("sku") or "",
            brand=values.get("brand") or "",
        )

    @staticmethod
    def _bill(
        values: Mapping[str, str],
        *,
        business_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> BillRecord:
        return BillRecord(
            business_id=business_id,
            created_by=user_id,
            customer_name=values.get("customer_name", ""),
            customer_email=values.get("customer_email") or "",
            customer_phone=values.get("customer_phone") or "",
            total_amount=_number_or_zero(values.get("total_amount")),
            status=values.get("status") or DEFAULT_BILL_STATUS,
            notes=values.get("notes") or "",
            due_date=parse_date(values.get("due_date")),
        )

    @staticmethod
    def _customer(
        values: Mapping[str, str],
        *,
        business_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> CustomerRecord:
        return CustomerRecord(
            business_id=business_id,
            created_by=user_id,
            name=values.get("name", ""),
            email=values.get("email", ""),
            phone=values.get("phone") or "",
            address=values.get("address") or "",
            company=values.get("company") or "",
        )


def _number_or_zero(value: str | None) -> float:
    parsed = clean_number_value(value)
    return parsed if parsed is not None else 0.0


def _int_or_zero(value: str | None) -> int:
    parsed = clean_number_value(value)
    return int(parsed) if parsed is not None else 0
