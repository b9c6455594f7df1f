"""
app/domain/discounts.py

Read-only snapshots used by discount rule evaluation.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from app.validators.value_parsers import parse_date


@dataclass(frozen=True)
class DiscountConditions:
    min_amount: float | None = None
    min_quantity: float | None = None
    categories: tuple[str, ...] = ()
    start_date: datetime | None = None
    end_date: datetime | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "DiscountConditions":
        """
        Build conditions from the JSON stored on a rule row.
        Unparseable dates are treated as unset.
        """

        raw = raw or {}
        categories = raw.get("categories") or ()
        return cls(
            min_amount=_optional_float(raw.get("min_amount")),
            min_quantity=_optional_float(raw.get("min_quantity")),
            categories=tuple(str(item) for item in categories if item),
            start_date=parse_date(raw.get("start_date")),
            end_date=parse_date(raw.get("end_date")),
        )


@dataclass(frozen=True)
class DiscountRuleSnapshot:
    id: uuid.UUID | None
    name: str
    type: str
    discount_value: float
    conditions: DiscountConditions = field(default_factory=DiscountConditions)
    is_active: bool = True


@dataclass(frozen=True)
class BillItem:
    quantity: float = 1
    category: str | None = None


@dataclass(frozen=True)
class BillSnapshot:
    """
    The candidate transaction a rule set is evaluated against.
    """

    total_amount: float
    items: tuple[BillItem, ...] = ()
    total_quantity: float | None = None
    created_at: datetime | None = None

    @property
    def quantity(self) -> float:
        if self.total_quantity is not None:
            return self.total_quantity
        return sum(item.quantity for item in self.items)

    @property
    def categories(self) -> set[str]:
        return {item.category for item in self.items if item.category}


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
