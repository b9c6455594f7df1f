"""
app/domain/imports.py

Typed values passed between the import pipeline stages.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Union


class IssueCode:
    MISSING_HEADERS = "missing_headers"
    MISSING_REQUIRED = "missing_required"
    INVALID_TYPE = "invalid_type"
    CONSTRAINT_VIOLATION = "constraint_violation"
    DUPLICATE_ROWS = "duplicate_rows"
    DATABASE = "database"


@dataclass(frozen=True)
class ImportFile:
    """
    An uploaded file as received from the caller.
    """

    file_name: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        _, dot, suffix = self.file_name.rpartition(".")
        return suffix.strip().lower() if dot else ""


@dataclass(frozen=True)
class ParsedFile:
    headers: list[str]
    rows: list[dict[str, str]]


@dataclass(frozen=True)
class NormalizedRow:
    """
    One data row relabelled onto canonical keys.

    ``pairs`` keeps source column order; ``source`` is the untouched
    header -> raw value mapping, kept for error reporting.
    """

    row_number: int
    pairs: tuple[tuple[str, str], ...]
    source: Mapping[str, str]

    def values(self) -> dict[str, str]:
        return dict(self.pairs)

    def get(self, key: str) -> str | None:
        return self.values().get(key)


@dataclass(frozen=True)
class ImportIssue:
    """
    One structured validation or persistence problem.

    ``row_number`` is 1-based and None for file-level issues.
    """

    code: str
    message: str
    row_number: int | None = None
    field: str | None = None
    value: str | None = None
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "row_number": self.row_number,
            "field": self.field,
            "value": self.value,
            "details": self.details,
        }


@dataclass(frozen=True)
class ValidationReport:
    """
    Outcome of validating a whole file.

    ``valid_rows`` is ``total_rows`` minus the number of errors that are not
    ``missing_required``. It is an approximation, not a distinct-row count.
    """

    errors: list[ImportIssue]
    warnings: list[ImportIssue]
    is_valid: bool
    total_rows: int
    valid_rows: int


@dataclass(frozen=True)
class ProductRecord:
    business_id: uuid.UUID
    created_by: uuid.UUID
    name: str
    description: str
    category: str
    price: float
    stock_quantity: int
    min_stock_level: int
    sku: str
    brand: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "business_id": self.business_id,
            "created_by": self.created_by,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price": self.price,
            "stock_quantity": self.stock_quantity,
            "min_stock_level": self.min_stock_level,
            "sku": self.sku,
            "brand": self.brand,
        }


@dataclass(frozen=True)
class BillRecord:
    business_id: uuid.UUID
    created_by: uuid.UUID
    customer_name: str
    customer_email: str
    customer_phone: str
    total_amount: float
    status: str
    notes: str
    due_date: datetime | None

    def to_payload(self) -> dict[str, Any]:
        return {
            "business_id": self.business_id,
            "created_by": self.created_by,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "total_amount": self.total_amount,
            "status": self.status,
            "notes": self.notes,
            "due_date": self.due_date,
        }


@dataclass(frozen=True)
class CustomerRecord:
    business_id: uuid.UUID
    created_by: uuid.UUID
    name: str
    email: str
    phone: str
    address: str
    company: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "business_id": self.business_id,
            "created_by": self.created_by,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "company": self.company,
        }


EntityRecord = Union[ProductRecord, BillRecord, CustomerRecord]


@dataclass(frozen=True)
class RowFailure:
    """
    A row-level error destined for ``import_log_details``.
    """

    row_number: int
    row_data: dict[str, str]
    message: str
    category: str


@dataclass(frozen=True)
class ImportResult:
    """
    Structured outcome handed back to the caller of an import.
    """

    success: bool
    message: str
    import_log_id: uuid.UUID | None = None
    status: str | None = None
    total_rows: int = 0
    processed_rows: int = 0
    failed_rows: int = 0
    errors: list[ImportIssue] = field(default_factory=list)
    warnings: list[ImportIssue] = field(default_factory=list)
    error: str | None = None

    def display_errors(self, limit: int = 5) -> list[str]:
        """
        First ``limit`` error messages, plus a "... and M more errors" line.
        """

        limit = max(0, limit)
        lines = [
            f"Row {issue.row_number}: {issue.message}" if issue.row_number else issue.message
            for issue in self.errors[:limit]
        ]
        remaining = len(self.errors) - limit
        if remaining > 0:
            lines.append(f"... and {remaining} more errors")
        return lines
