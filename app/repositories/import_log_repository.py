"""
app/repositories/import_log_repository.py

Persistence for import runs (import_logs) and row errors (import_log_details).
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from app.domain.imports import RowFailure
from db.models.import_log import ImportLog, ImportLogDetail, ImportStatus


class ImportLogRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_run(
        self,
        *,
        business_id: uuid.UUID,
        user_id: uuid.UUID,
        import_type: str,
        file_name: str,
        file_size: int,
        total_rows: int,
        validation_errors: list[dict[str, Any]] | None = None,
    ) -> uuid.UUID:
        run = ImportLog(
            business_id=business_id,
            user_id=user_id,
            import_type=import_type,
            file_name=file_name,
            file_size=file_size,
            total_rows=total_rows,
            successful_rows=0,
            failed_rows=0,
            status=ImportStatus.PROCESSING,
            validation_errors=validation_errors or None,
        )
        self._session.add(run)
        self._session.commit()
        return run.id

    def finalize_run(
        self,
        *,
        run_id: uuid.UUID,
        status: str,
        successful_rows: int,
        failed_rows: int,
    ) -> None:
        run = self._session.get(ImportLog, run_id)
        if run is None:
            raise LookupError(f"Import run not found: {run_id}")
        if run.completed_at is not None:
            raise RuntimeError(f"Import run {run_id} is already finalized.")
        run.status = status
        run.successful_rows = successful_rows
        run.failed_rows = failed_rows
        run.completed_at = datetime.now(timezone.utc)
        self._session.commit()

    def add_row_errors(self, *, run_id: uuid.UUID, failures: Sequence[RowFailure]) -> int:
        if not failures:
            return 0
        self._session.add_all(
            [
                ImportLogDetail(
                    import_log_id=run_id,
                    row_number=failure.row_number,
                    row_data=failure.row_data,
                    error_message=failure.message,
                    error_type=failure.category,
                )
                for failure in failures
            ]
        )
        self._session.commit()
        return len(failures)

    def get_run(self, *, business_id: uuid.UUID, run_id: uuid.UUID) -> ImportLog | None:
        stmt = select(ImportLog).where(
            ImportLog.id == run_id,
            ImportLog.business_id == business_id,
        )
        return self._session.execute(stmt).scalars().first()

    def list_runs(
        self,
        *,
        business_id: uuid.UUID,
        status: str | None = None,
        limit: int = 100,
    ) -> list[ImportLog]:
        stmt: Select[tuple[ImportLog]] = select(ImportLog).where(ImportLog.business_id == business_id)
        if status:
            stmt = stmt.where(ImportLog.status == status)
        stmt = stmt.order_by(ImportLog.created_at.desc()).limit(max(1, limit))
        return list(self._session.scalars(stmt).all())

    def list_row_errors(self, *, run_id: uuid.UUID) -> list[ImportLogDetail]:
        stmt = (
            select(ImportLogDetail)
            .where(ImportLogDetail.import_log_id == run_id)
            .order_by(ImportLogDetail.row_number)
        )
        return list(self._session.scalars(stmt).all())
