"""
app/schemas/imports.py

Response schemas for import endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.imports import ImportIssue, ImportResult


class ImportIssueResponse(BaseModel):
    """
    API response model for one validation, duplicate, or database issue.
    """

    code: str
    message: str
    row_number: int | None = Field(default=None, ge=1)
    field: str | None = None
    value: str | None = None
    details: dict[str, Any] | None = None

    @classmethod
    def from_issue(cls, issue: ImportIssue) -> "ImportIssueResponse":
        return cls(**issue.to_dict())


class ImportResultResponse(BaseModel):
    """
    API response model for one import attempt.
    """

    success: bool
    message: str
    import_log_id: uuid.UUID | None = None
    status: str | None = None
    total_rows: int = Field(default=0, ge=0)
    processed_rows: int = Field(default=0, ge=0)
    failed_rows: int = Field(default=0, ge=0)
    errors: list[ImportIssueResponse] = Field(default_factory=list)
    warnings: list[ImportIssueResponse] = Field(default_factory=list)
    display_errors: list[str] = Field(default_factory=list)
    error: str | None = None

    @classmethod
    def from_result(cls, result: ImportResult, *, display_limit: int) -> "ImportResultResponse":
        return cls(
            success=result.success,
            message=result.message,
            import_log_id=result.import_log_id,
            status=result.status,
            total_rows=result.total_rows,
            processed_rows=result.processed_rows,
            failed_rows=result.failed_rows,
            errors=[ImportIssueResponse.from_issue(issue) for issue in result.errors],
            warnings=[ImportIssueResponse.from_issue(issue) for issue in result.warnings],
            display_errors=result.display_errors(display_limit),
            error=result.error,
        )


class TemplateInfoResponse(BaseModel):
    entity_type: str
    headers: list[str]
    required_fields: list[str]
    optional_fields: list[str]
    instructions: list[str]
    sample_count: int = Field(..., ge=0)


class ImportRowErrorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    row_number: int = Field(..., ge=0)
    row_data: dict[str, Any] = Field(default_factory=dict)
    error_message: str
    error_type: str


class ImportRunResponse(BaseModel):
    """
    API response model for one import_logs row.
    """

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    import_type: str
    file_name: str
    file_size: int
    total_rows: int
    successful_rows: int
    failed_rows: int
    status: str
    validation_errors: list[dict[str, Any]] | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None


class ImportRunDetailResponse(ImportRunResponse):
    row_errors: list[ImportRowErrorResponse] = Field(default_factory=list)


class ImportRunListResponse(BaseModel):
    items: list[ImportRunResponse] = Field(default_factory=list)
    count: int = Field(..., ge=0)
