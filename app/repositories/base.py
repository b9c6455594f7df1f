"""
app/repositories/base.py

Storage interfaces the import processor depends on.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any, Protocol

from app.domain.imports import EntityRecord, RowFailure


class ImportLogStore(Protocol):
    """
    Persists import runs and their row-level errors.
    """

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
        ...

    def finalize_run(
        self,
        *,
        run_id: uuid.UUID,
        status: str,
        successful_rows: int,
        failed_rows: int,
    ) -> None:
        ...

    def add_row_errors(self, *, run_id: uuid.UUID, failures: Sequence[RowFailure]) -> int:
        ...


class RecordStore(Protocol):
    """
    Writes typed entity records into their target table.

    Each call is its own unit of work; a failure raises
    RecordPersistenceError and leaves earlier writes committed.
    """

    def insert_one(self, record: EntityRecord) -> None:
        ...

    def insert_many(self, records: Sequence[EntityRecord]) -> int:
        ...
