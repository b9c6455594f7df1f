"""
db/models/product.py

Product catalogue rows, created by hand or through CSV imports.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, BusinessScopedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Product(Base, UUIDPrimaryKeyMixin, BusinessScopedMixin, TimestampMixin):
    __tablename__ = "products"

    created_by: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    min_stock_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sku: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    brand: Mapped[str] = mapped_column(String(120), nullable=False, default="")

    __table_args__ = (
        Index("ix_products_business_id", "business_id"),
        Index("ix_products_business_category", "business_id", "category"),
    )
