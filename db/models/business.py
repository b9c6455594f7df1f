"""
db/models/business.py

Business tenant and the user memberships that scope every query.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, BusinessScopedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class MemberRole:
    OWNER = "owner"
    MANAGER = "manager"
    STAFF = "staff"


class Business(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    One small business. Products, bills, customers, imports and discount
    rules all carry a business_id pointing here.
    """

    __tablename__ = "businesses"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    members: Mapped[list["BusinessMember"]] = relationship(
        "BusinessMember",
        back_populates="business",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Business id={self.id} name={self.name!r}>"


class BusinessMember(Base, UUIDPrimaryKeyMixin, BusinessScopedMixin, TimestampMixin):
    __tablename__ = "business_members"

    user_id: Mapped[uuid.UUID] = mapped_column(nullable=False)
    role: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=MemberRole.STAFF,
        comment="owner, manager, staff",
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    business: Mapped[Business] = relationship("Business", back_populates="members")

    __table_args__ = (
        UniqueConstraint("business_id", "user_id", name="uq_business_members_business_user"),
        Index("ix_business_members_user_active", "user_id", "is_active"),
    )
