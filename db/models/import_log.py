"""
db/models/import_log.py

Import run log and its per-row error details.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, BusinessScopedMixin, TimestampMixin, UUIDPrimaryKeyMixin


class ImportStatus:
    PROCESSING = "processing"
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"

    TERMINAL = frozenset({SUCCESS, PARTIAL, FAILED})


class ImportErrorCategory:
    VALIDATION = "validation"
    DATABASE = "database"


class ImportLog(Base, UUIDPrimaryKeyMixin, BusinessScopedMixin, TimestampMixin):
    """
    One user-initiated import attempt.

    Created with status ``processing`` and updated exactly once more when
    the run reaches a terminal status. Never deleted by the import flow.
    """

    __tablename__ = "import_logs"

    user_id: Mapped[uuid.UUID] = mapped_column(nullable=False)
    import_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="products, bills, customers",
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_rows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    successful_rows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed_rows: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=ImportStatus.PROCESSING,
        comment="processing, success, partial, failed",
    )
    validation_errors: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSONB,
        nullable=True,
        comment="Header-level validation errors, null when headers passed",
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    details: Mapped[list["ImportLogDetail"]] = relationship(
        "ImportLogDetail",
        back_populates="import_log",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ImportLogDetail.row_number",
    )

    __table_args__ = (
        Index("ix_import_logs_business_created", "business_id", "created_at"),
        Index("ix_import_logs_business_status", "business_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<ImportLog id={self.id} type={self.import_type!r} status={self.status!r}>"


class ImportLogDetail(Base, UUIDPrimaryKeyMixin):
    """
    One immutable row-level error attached to an import run.
    """

    __tablename__ = "import_log_details"

    import_log_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("import_logs.id", ondelete="CASCADE"),
        nullable=False,
    )
    row_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="1-based data row number, 0 for header-level errors",
    )
    row_data: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        comment="Original header -> raw value map",
    )
    error_message: Mapped[str] = mapped_column(Text, nullable=False)
    error_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="validation, database",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    import_log: Mapped[ImportLog] = relationship("ImportLog", back_populates="details")

    __table_args__ = (
        Index("ix_import_log_details_import_log_id", "import_log_id"),
    )
