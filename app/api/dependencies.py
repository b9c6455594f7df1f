"""
app/api/dependencies.py

Shared FastAPI dependencies: caller identity, business scope, uploads,
and service wiring.
"""

from __future__ import annotations

import uuid

from fastapi import Depends, File, Header, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.config import ImportSettings, get_import_settings
from app.domain.errors import NoBusinessFoundError
from app.domain.imports import ImportFile
from app.repositories.business_repository import BusinessRepository
from app.repositories.discount_rule_repository import DiscountRuleRepository
from app.repositories.import_log_repository import ImportLogRepository
from app.services.discount_evaluator import DiscountRuleEvaluator
from app.services.import_processor import ImportProcessor, build_import_processor
from app.services.template_registry import TemplateRegistry
from db.session import get_db


def get_current_user_id(x_user_id: str = Header(..., alias="X-User-Id")) -> uuid.UUID:
    """
    Read the acting user from the X-User-Id header.
    """

    try:
        return uuid.UUID(x_user_id.strip())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id must be a valid UUID.",
        ) from exc


def get_business_id(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> uuid.UUID:
    try:
        return BusinessRepository(db).resolve_active_business_id(user_id)
    except NoBusinessFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(exc),
        ) from exc


def get_import_upload(
    file: UploadFile = File(...),
    settings: ImportSettings = Depends(get_import_settings),
) -> ImportFile:
    """
    Read the multipart upload into memory, never more than one byte past
    IMPORT_MAX_FILE_BYTES.
    """

    limit = settings.max_file_bytes
    content: bytes | None = None
    try:
        if file.size is None or file.size <= limit:
            content = file.file.read(limit + 1)
    finally:
        file.file.close()

    if content is None or len(content) > limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File is larger than the limit of {limit} bytes.",
        )
    return ImportFile(file_name=(file.filename or "").strip(), content=content)


def get_template_registry() -> TemplateRegistry:
    return TemplateRegistry()


def get_discount_evaluator() -> DiscountRuleEvaluator:
    return DiscountRuleEvaluator()


def get_import_processor(
    db: Session = Depends(get_db),
    settings: ImportSettings = Depends(get_import_settings),
) -> ImportProcessor:
    return build_import_processor(db, settings)


def get_import_log_repository(db: Session = Depends(get_db)) -> ImportLogRepository:
    return ImportLogRepository(db)


def get_discount_rule_repository(db: Session = Depends(get_db)) -> DiscountRuleRepository:
    return DiscountRuleRepository(db)
