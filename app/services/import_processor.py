"""
app/services/import_processor.py

Orchestrates one bulk import: parse, validate, log the run, insert rows,
and finalize the run status.

Rows are written under an explicit RowWritePolicy. Each insert call is
its own unit of work, so a failing row never rolls back rows already
written and the run can legitimately end ``partial``.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.config import ImportSettings, get_import_settings
from app.domain.entity_schemas import get_entity_schema
from app.domain.errors import (
    EmptyFileError,
    FileTooLargeError,
    ImportPipelineError,
    RecordPersistenceError,
    SpreadsheetNotSupportedError,
    UnsupportedFormatError,
    ValidationFailedError,
)
from app.domain.imports import (
    EntityRecord,
    ImportFile,
    ImportIssue,
    ImportResult,
    IssueCode,
    ParsedFile,
    RowFailure,
    ValidationReport,
)
from app.mappers.record_mapper import RecordMapper
from app.repositories.base import ImportLogStore, RecordStore
from app.repositories.entity_record_repository import EntityRecordRepository
from app.repositories.import_log_repository import ImportLogRepository
from app.validators.import_validator import ImportValidator
from db.models.import_log import ImportErrorCategory, ImportStatus

logger = logging.getLogger(__name__)

SPREADSHEET_EXTENSIONS = frozenset({"xlsx", "xls"})
NOT_ATTEMPTED_MESSAGE = "not attempted"


@dataclass(frozen=True)
class RowWritePolicy:
    """
    How validated rows are written.

    ``continue_on_row_error``: keep inserting after a failed row. When
    False, the first failure stops the run and the remaining rows are
    recorded as failed without being attempted.

    ``batch_size``: rows per insert call. A failed batch is retried one row
    at a time so each failure is attributed to its own source row.
    """

    continue_on_row_error: bool = True
    batch_size: int = 1

    @classmethod
    def from_settings(cls, settings: ImportSettings) -> "RowWritePolicy":
        return cls(
            continue_on_row_error=settings.continue_on_row_error,
            batch_size=max(1, settings.insert_batch_size),
        )


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def strip_outer_quotes(value: str) -> str:
    """
    Trim and drop one leading and one trailing double quote.
    """

    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def parse_csv_text(text: str) -> ParsedFile:
    """
    Naive delimited-text parser: split lines on newline and fields on comma.

    Quoted fields containing commas or newlines are NOT supported; such a
    field is split like any other. Missing trailing values become "".
    """

    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return ParsedFile(headers=[], rows=[])

    headers = [strip_outer_quotes(cell) for cell in lines[0].split(",")]
    rows: list[dict[str, str]] = []
    for line in lines[1:]:
        values = [strip_outer_quotes(cell) for cell in line.split(",")]
        rows.append(
            {header: values[index] if index < len(values) else "" for index, header in enumerate(headers)}
        )
    return ParsedFile(headers=headers, rows=rows)


def parse_file(upload: ImportFile) -> ParsedFile:
    """
    Dispatch on file extension. Only CSV is parsed.
    """

    extension = upload.extension
    if extension == "csv":
        try:
            text = upload.content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise UnsupportedFormatError("CSV must be UTF-8 encoded.") from exc
        return parse_csv_text(text)
    if extension in SPREADSHEET_EXTENSIONS:
        raise SpreadsheetNotSupportedError(
            "Excel parsing not yet implemented. Please use CSV format."
        )
    raise UnsupportedFormatError("Unsupported file format")


def final_status(*, processed_rows: int, failed_rows: int) -> str:
    if failed_rows == 0:
        return ImportStatus.SUCCESS
    if processed_rows == 0:
        return ImportStatus.FAILED
    return ImportStatus.PARTIAL


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ImportProcessor:
    """
    Coordinates parsing, validation, run logging, and row persistence.
    """

    def __init__(
        self,
        *,
        import_log_repository: ImportLogStore,
        record_repository: RecordStore,
        validator: ImportValidator | None = None,
        record_mapper: RecordMapper | None = None,
        policy: RowWritePolicy | None = None,
        max_file_bytes: int | None = None,
        log_validation_errors: bool = True,
    ) -> None:
        self._import_logs = import_log_repository
        self._records = record_repository
        self._validator = validator or ImportValidator()
        self._mapper = record_mapper or RecordMapper()
        self._policy = policy or RowWritePolicy()
        self._max_file_bytes = max_file_bytes
        self._log_validation_errors = log_validation_errors

    @property
    def policy(self) -> RowWritePolicy:
        return self._policy

    def check_upload(self, upload: ImportFile, entity_type: str) -> None:
        """
        Preconditions checked before anything is parsed or logged.

        Raises UnknownEntityTypeError, EmptyFileError, FileTooLargeError,
        SpreadsheetNotSupportedError, or UnsupportedFormatError.
        """

        get_entity_schema(entity_type)
        if upload.size == 0:
            raise EmptyFileError("The uploaded file is empty.")
        if self._max_file_bytes is not None and upload.size > self._max_file_bytes:
            raise FileTooLargeError(
                f"File is {upload.size} bytes; the limit is {self._max_file_bytes} bytes."
            )
        if upload.extension in SPREADSHEET_EXTENSIONS:
            raise SpreadsheetNotSupportedError(
                "Excel parsing not yet implemented. Please use CSV format."
            )
        if upload.extension != "csv":
            raise UnsupportedFormatError("Unsupported file format")

    def process_file(
        self,
        *,
        upload: ImportFile,
        entity_type: str,
        business_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> ImportResult:
        """
        Run one import end to end. Never raises: every failure is returned
        as an ImportResult with ``success=False``.
        """

        try:
            return self._process(
                upload=upload,
                entity_type=entity_type,
                business_id=business_id,
                user_id=user_id,
            )
        except ImportPipelineError as exc:
            logger.warning(
                "Import rejected file=%r entity_type=%r: %s",
                upload.file_name,
                entity_type,
                exc,
            )
            return ImportResult(success=False, message=str(exc), error=str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception(
                "Import failed unexpectedly file=%r entity_type=%r",
                upload.file_name,
                entity_type,
            )
            return ImportResult(
                success=False,
                message="Import failed due to an unexpected error.",
                error=str(exc),
            )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _process(
        self,
        *,
        upload: ImportFile,
        entity_type: str,
        business_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> ImportResult:
        self.check_upload(upload, entity_type)
        parsed = parse_file(upload)
        report = self._validator.validate_file(entity_type, parsed.rows, parsed.headers)

        # Mapping runs before the run exists so a mapper error leaves no orphan run.
        records: list[EntityRecord] = []
        if report.is_valid:
            records = self._build_records(
                entity_type,
                parsed.rows,
                business_id=business_id,
                user_id=user_id,
            )

        header_errors = [error for error in report.errors if error.row_number is None]
        run_id = self._import_logs.create_run(
            business_id=business_id,
            user_id=user_id,
            import_type=entity_type,
            file_name=upload.file_name,
            file_size=upload.size,
            total_rows=report.total_rows,
            validation_errors=[error.to_dict() for error in header_errors] or None,
        )
        logger.info(
            "Import run created run_id=%s entity_type=%r file=%r rows=%d",
            run_id,
            entity_type,
            upload.file_name,
            report.total_rows,
        )

        try:
            if not report.is_valid:
                failure = ValidationFailedError("Validation failed", errors=report.errors)
                return self._fail_validation(run_id=run_id, parsed=parsed, report=report, failure=failure)
            failures = self._write_records(records, parsed.rows)
            self._import_logs.add_row_errors(run_id=run_id, failures=failures)
        except Exception:
            self._abort_run(run_id, total_rows=report.total_rows)
            raise

        processed_rows = len(records) - len(failures)
        failed_rows = len(failures)
        status = final_status(processed_rows=processed_rows, failed_rows=failed_rows)
        self._import_logs.finalize_run(
            run_id=run_id,
            status=status,
            successful_rows=processed_rows,
            failed_rows=failed_rows,
        )
        logger.info(
            "Import run finalized run_id=%s status=%s processed=%d failed=%d",
            run_id,
            status,
            processed_rows,
            failed_rows,
        )

        database_errors = [
            ImportIssue(
                code=IssueCode.DATABASE,
                message=failure.message,
                row_number=failure.row_number,
            )
            for failure in failures
        ]
        return ImportResult(
            success=status != ImportStatus.FAILED,
            message=_summary_message(
                status=status,
                total_rows=len(records),
                processed_rows=processed_rows,
                failed_rows=failed_rows,
            ),
            import_log_id=run_id,
            status=status,
            total_rows=len(records),
            processed_rows=processed_rows,
            failed_rows=failed_rows,
            errors=database_errors,
            warnings=list(report.warnings),
        )

    def _abort_run(self, run_id: uuid.UUID, *, total_rows: int) -> None:
        """
        Close a run that hit an unexpected error so it never stays
        ``processing``. The original error is re-raised by the caller.
        """

        try:
            self._import_logs.finalize_run(
                run_id=run_id,
                status=ImportStatus.FAILED,
                successful_rows=0,
                failed_rows=total_rows,
            )
        except Exception:  # noqa: BLE001
            logger.exception("Could not mark import run %s as failed", run_id)
            return
        logger.error("Import run aborted run_id=%s", run_id)

    def _fail_validation(
        self,
        *,
        run_id: uuid.UUID,
        parsed: ParsedFile,
        report: ValidationReport,
        failure: ValidationFailedError,
    ) -> ImportResult:
        failures: list[RowFailure] = []
        for error in failure.errors:
            if error.row_number is None:
                failures.append(
                    RowFailure(
                        row_number=0,
                        row_data={},
                        message=error.message,
                        category=ImportErrorCategory.VALIDATION,
                    )
                )
                continue
            if self._log_validation_errors:
                logger.warning(
                    "Row validation failed run_id=%s row=%d field=%r: %s",
                    run_id,
                    error.row_number,
                    error.field,
                    error.message,
                )
            failures.append(
                RowFailure(
                    row_number=error.row_number,
                    row_data=dict(parsed.rows[error.row_number - 1]),
                    message=error.message,
                    category=ImportErrorCategory.VALIDATION,
                )
            )

        self._import_logs.add_row_errors(run_id=run_id, failures=failures)
        self._import_logs.finalize_run(
            run_id=run_id,
            status=ImportStatus.FAILED,
            successful_rows=0,
            failed_rows=report.total_rows,
        )
        logger.info(
            "Import run failed validation run_id=%s errors=%d",
            run_id,
            len(report.errors),
        )
        return ImportResult(
            success=False,
            message=str(failure),
            import_log_id=run_id,
            status=ImportStatus.FAILED,
            total_rows=report.total_rows,
            processed_rows=0,
            failed_rows=report.total_rows,
            errors=list(failure.errors),
            warnings=list(report.warnings),
            error=str(failure),
        )

    def _build_records(
        self,
        entity_type: str,
        rows: Sequence[dict[str, str]],
        *,
        business_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> list[EntityRecord]:
        normalizer = self._validator.normalizer
        return [
            self._mapper.to_record(
                entity_type,
                normalizer.normalize_row(entity_type, raw_row, row_number=index + 1),
                business_id=business_id,
                user_id=user_id,
            )
            for index, raw_row in enumerate(rows)
        ]

    def _write_records(
        self,
        records: Sequence[EntityRecord],
        rows: Sequence[dict[str, str]],
    ) -> list[RowFailure]:
        """
        Insert records in source order. Returns one failure per row that
        was not written.
        """

        failures: list[RowFailure] = []
        batch_size = max(1, self._policy.batch_size)

        for start in range(0, len(records), batch_size):
            chunk = records[start:start + batch_size]
            if len(chunk) > 1 and self._try_insert_many(chunk):
                continue

            for offset, record in enumerate(chunk):
                index = start + offset
                try:
                    self._records.insert_one(record)
                except RecordPersistenceError as exc:
                    logger.warning("Row insert failed row=%d: %s", index + 1, exc)
                    failures.append(
                        RowFailure(
                            row_number=index + 1,
                            row_data=dict(rows[index]),
                            message=str(exc),
                            category=ImportErrorCategory.DATABASE,
                        )
                    )
                    if not self._policy.continue_on_row_error:
                        failures.extend(_not_attempted(rows, first_index=index + 1))
                        return failures

        return failures

    def _try_insert_many(self, chunk: Sequence[EntityRecord]) -> bool:
        try:
            self._records.insert_many(chunk)
        except RecordPersistenceError as exc:
            logger.info(
                "Batch insert of %d rows failed; retrying row by row: %s",
                len(chunk),
                exc,
            )
            return False
        return True


def _not_attempted(rows: Sequence[dict[str, str]], *, first_index: int) -> list[RowFailure]:
    return [
        RowFailure(
            row_number=index + 1,
            row_data=dict(rows[index]),
            message=NOT_ATTEMPTED_MESSAGE,
            category=ImportErrorCategory.DATABASE,
        )
        for index in range(first_index, len(rows))
    ]


def _summary_message(
    *,
    status: str,
    total_rows: int,
    processed_rows: int,
    failed_rows: int,
) -> str:
    if status == ImportStatus.SUCCESS:
        return f"Successfully imported {processed_rows} rows"
    if status == ImportStatus.PARTIAL:
        return f"Imported {processed_rows} of {total_rows} rows; {failed_rows} failed"
    return f"Import failed: none of the {total_rows} rows could be saved"


def build_import_processor(session: Session, settings: ImportSettings | None = None) -> ImportProcessor:
    """
    Wire an ImportProcessor onto SQLAlchemy repositories sharing one session.
    """

    settings = settings or get_import_settings()
    return ImportProcessor(
        import_log_repository=ImportLogRepository(session),
        record_repository=EntityRecordRepository(session),
        policy=RowWritePolicy.from_settings(settings),
        max_file_bytes=settings.max_file_bytes,
        log_validation_errors=settings.log_validation_errors,
    )
