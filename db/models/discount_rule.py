"""
db/models/discount_rule.py

Automatic discount rules evaluated at bill time.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Boolean, Float, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, BusinessScopedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class DiscountType:
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    BULK = "bulk"

    ALL = (PERCENTAGE, FIXED, BULK)


class DiscountRule(Base, UUIDPrimaryKeyMixin, BusinessScopedMixin, TimestampMixin):
    """
    discount_value is a percent for ``percentage`` and ``bulk`` rules and
    a currency amount for ``fixed`` rules.
    """

    __tablename__ = "discount_rules"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="percentage, fixed, bulk",
    )
    discount_value: Mapped[float] = mapped_column(Float, nullable=False)
    conditions: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        comment="min_amount, min_quantity, categories, start_date, end_date",
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_discount_rules_business_active", "business_id", "is_active"),
    )
