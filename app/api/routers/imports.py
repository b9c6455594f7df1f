"""
app/api/routers/imports.py

Bulk import HTTP endpoints: templates, uploads, and run history.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.dependencies import (
    get_business_id,
    get_current_user_id,
    get_import_log_repository,
    get_import_processor,
    get_import_upload,
    get_template_registry,
)
from app.config import ImportSettings, get_import_settings
from app.domain.errors import (
    EmptyFileError,
    FileTooLargeError,
    SpreadsheetNotSupportedError,
    UnknownEntityTypeError,
    UnsupportedFormatError,
)
from app.domain.imports import ImportFile
from app.repositories.import_log_repository import ImportLogRepository
from app.schemas.imports import (
    ImportResultResponse,
    ImportRowErrorResponse,
    ImportRunDetailResponse,
    ImportRunListResponse,
    ImportRunResponse,
    TemplateInfoResponse,
)
from app.services.import_processor import ImportProcessor
from app.services.template_registry import TemplateRegistry

router = APIRouter(prefix="/imports", tags=["imports"])


@router.get("/templates/{entity_type}")
def download_template(
    entity_type: str,
    registry: TemplateRegistry = Depends(get_template_registry),
) -> Response:
    """
    Download a CSV template with headers and sample rows.
    """

    try:
        content = registry.render_template(entity_type)
    except UnknownEntityTypeError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={entity_type}_template.csv"},
    )


@router.get("/templates/{entity_type}/info", response_model=TemplateInfoResponse)
def template_info(
    entity_type: str,
    registry: TemplateRegistry = Depends(get_template_registry),
) -> TemplateInfoResponse:
    try:
        return TemplateInfoResponse(**registry.template_info(entity_type))
    except UnknownEntityTypeError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("/{entity_type}", response_model=ImportResultResponse)
def import_file(
    entity_type: str,
    upload: ImportFile = Depends(get_import_upload),
    user_id: uuid.UUID = Depends(get_current_user_id),
    business_id: uuid.UUID = Depends(get_business_id),
    processor: ImportProcessor = Depends(get_import_processor),
    settings: ImportSettings = Depends(get_import_settings),
) -> ImportResultResponse:
    """
    Import one CSV file into products, bills, or customers.

    A file that fails validation still returns 200 with ``success=false``.
    """

    try:
        processor.check_upload(upload, entity_type)
    except UnknownEntityTypeError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except SpreadsheetNotSupportedError as exc:
        raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail=str(exc)) from exc
    except (EmptyFileError, FileTooLargeError, UnsupportedFormatError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    result = processor.process_file(
        upload=upload,
        entity_type=entity_type,
        business_id=business_id,
        user_id=user_id,
    )
    return ImportResultResponse.from_result(result, display_limit=settings.display_error_limit)


@router.get("", response_model=ImportRunListResponse)
def list_import_runs(
    status_filter: str | None = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=500),
    business_id: uuid.UUID = Depends(get_business_id),
    repository: ImportLogRepository = Depends(get_import_log_repository),
) -> ImportRunListResponse:
    runs = repository.list_runs(business_id=business_id, status=status_filter, limit=limit)
    items = [ImportRunResponse.model_validate(run) for run in runs]
    return ImportRunListResponse(items=items, count=len(items))


@router.get("/{run_id}", response_model=ImportRunDetailResponse)
def get_import_run(
    run_id: uuid.UUID,
    business_id: uuid.UUID = Depends(get_business_id),
    repository: ImportLogRepository = Depends(get_import_log_repository),
) -> ImportRunDetailResponse:
    run = repository.get_run(business_id=business_id, run_id=run_id)
    if run is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Import run not found: {run_id}",
        )

    row_errors = [
        ImportRowErrorResponse.model_validate(detail)
        for detail in repository.list_row_errors(run_id=run_id)
    ]
    return ImportRunDetailResponse(
        **ImportRunResponse.model_validate(run).model_dump(),
        row_errors=row_errors,
    )
