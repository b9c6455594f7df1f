"""
db/models/bill.py

Customer bills (invoices).
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, BusinessScopedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class BillStatus:
    DRAFT = "draft"
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class Bill(Base, UUIDPrimaryKeyMixin, BusinessScopedMixin, TimestampMixin):
    __tablename__ = "bills"

    created_by: Mapped[uuid.UUID | None] = mapped_column(nullable=True)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    customer_phone: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    total_amount: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=BillStatus.DRAFT,
        comment="draft, pending, paid, overdue, cancelled",
    )
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_bills_business_id", "business_id"),
        Index("ix_bills_business_status", "business_id", "status"),
    )
