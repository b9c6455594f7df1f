"""create business, catalogue, import log and discount rule tables

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _business_fk() -> sa.Column:
    return sa.Column(
        "business_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "businesses",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "business_members",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        _business_fk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False, comment="owner, manager, staff"),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("business_id", "user_id", name="uq_business_members_business_user"),
    )
    op.create_index(
        "ix_business_members_user_active",
        "business_members",
        ["user_id", "is_active"],
        unique=False,
    )

    op.create_table(
        "products",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        _business_fk(),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=120), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("stock_quantity", sa.Integer(), nullable=False),
        sa.Column("min_stock_level", sa.Integer(), nullable=False),
        sa.Column("sku", sa.String(length=120), nullable=False),
        sa.Column("brand", sa.String(length=120), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_products_business_id", "products", ["business_id"], unique=False)
    op.create_index("ix_products_business_category", "products", ["business_id", "category"], unique=False)

    op.create_table(
        "bills",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        _business_fk(),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("customer_email", sa.String(length=255), nullable=False),
        sa.Column("customer_phone", sa.String(length=64), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "status",
            sa.String(length=32),
            nullable=False,
            comment="draft, pending, paid, overdue, cancelled",
        ),
        sa.Column("notes", sa.Text(), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_bills_business_id", "bills", ["business_id"], unique=False)
    op.create_index("ix_bills_business_status", "bills", ["business_id", "status"], unique=False)

    op.create_table(
        "customers",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        _business_fk(),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=64), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("company", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_customers_business_id", "customers", ["business_id"], unique=False)
    op.create_index("ix_customers_business_email", "customers", ["business_id", "email"], unique=False)

    op.create_table(
        "import_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        _business_fk(),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("import_type", sa.String(length=32), nullable=False, comment="products, bills, customers"),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("total_rows", sa.Integer(), nullable=False),
        sa.Column("successful_rows", sa.Integer(), nullable=False),
        sa.Column("failed_rows", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.String(length=32),
            nullable=False,
            comment="processing, success, partial, failed",
        ),
        sa.Column(
            "validation_errors",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=True,
            comment="Header-level validation errors, null when headers passed",
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_import_logs_business_created",
        "import_logs",
        ["business_id", "created_at"],
        unique=False,
    )
    op.create_index(
        "ix_import_logs_business_status",
        "import_logs",
        ["business_id", "status"],
        unique=False,
    )

    op.create_table(
        "import_log_details",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "import_log_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("import_logs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "row_number",
            sa.Integer(),
            nullable=False,
            comment="1-based data row number, 0 for header-level errors",
        ),
        sa.Column(
            "row_data",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="Original header -> raw value map",
        ),
        sa.Column("error_message", sa.Text(), nullable=False),
        sa.Column("error_type", sa.String(length=32), nullable=False, comment="validation, database"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_import_log_details_import_log_id",
        "import_log_details",
        ["import_log_id"],
        unique=False,
    )

    op.create_table(
        "discount_rules",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        _business_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False, comment="percentage, fixed, bulk"),
        sa.Column("discount_value", sa.Float(), nullable=False),
        sa.Column(
            "conditions",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment="min_amount, min_quantity, categories, start_date, end_date",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_discount_rules_business_active",
        "discount_rules",
        ["business_id", "is_active"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_discount_rules_business_active", table_name="discount_rules")
    op.drop_table("discount_rules")
    op.drop_index("ix_import_log_details_import_log_id", table_name="import_log_details")
    op.drop_table("import_log_details")
    op.drop_index("ix_import_logs_business_status", table_name="import_logs")
    op.drop_index("ix_import_logs_business_created", table_name="import_logs")
    op.drop_table("import_logs")
    op.drop_index("ix_customers_business_email", table_name="customers")
    op.drop_index("ix_customers_business_id", table_name="customers")
    op.drop_table("customers")
    op.drop_index("ix_bills_business_status", table_name="bills")
    op.drop_index("ix_bills_business_id", table_name="bills")
    op.drop_table("bills")
    op.drop_index("ix_products_business_category", table_name="products")
    op.drop_index("ix_products_business_id", table_name="products")
    op.drop_table("products")
    op.drop_index("ix_business_members_user_active", table_name="business_members")
    op.drop_table("business_members")
    op.drop_table("businesses")
