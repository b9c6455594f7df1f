"""
app/validators/import_validator.py

Header, row, and file-level validation for bulk imports.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from app.domain.entity_schemas import EntitySchema, FieldSpec, FieldType, get_entity_schema
from app.domain.imports import ImportIssue, IssueCode, NormalizedRow, ValidationReport
from app.mappers.column_normalizer import ColumnNormalizer
from app.validators.value_parsers import clean_number_value, is_valid_email, parse_date, parse_plain_number

DUPLICATE_KEY_SEPARATOR = "|"

RECOMMENDATIONS: tuple[tuple[str, str], ...] = (
    (
        IssueCode.MISSING_HEADERS,
        "Download the template file to ensure you have all required columns",
    ),
    (
        IssueCode.INVALID_TYPE,
        "Check that numeric fields contain only numbers and dates are in YYYY-MM-DD format",
    ),
    (
        IssueCode.CONSTRAINT_VIOLATION,
        "Ensure all numeric values meet the minimum/maximum requirements",
    ),
    (
        IssueCode.MISSING_REQUIRED,
        "Fill in all required fields before uploading",
    ),
)


class ImportValidator:
    """
    Validates parsed import files against the canonical entity schemas.

    Headers and row keys are normalized through the same ColumnNormalizer
    the processor uses, so aliases resolve identically in both passes.
    """

    def __init__(self, *, normalizer: ColumnNormalizer | None = None) -> None:
        self._normalizer = normalizer or ColumnNormalizer()

    @property
    def normalizer(self) -> ColumnNormalizer:
        return self._normalizer

    def validate_headers(self, entity_type: str, raw_headers: Sequence[str]) -> list[ImportIssue]:
        """
        Check that every required field is present after alias normalization.
        Extra columns are never an error.
        """

        schema = get_entity_schema(entity_type)
        present = set(self._normalizer.normalize_headers(entity_type, raw_headers))
        missing = [name for name in schema.required_fields if name not in present]
        if not missing:
            return []

        return [
            ImportIssue(
                code=IssueCode.MISSING_HEADERS,
                message=f"Missing required columns: {', '.join(missing)}",
                details={"missing": missing},
            )
        ]

    def validate_row(
        self,
        entity_type: str,
        raw_row: Mapping[str, str],
        row_index: int,
    ) -> list[ImportIssue]:
        """
        Validate one row. ``row_index`` is 0-based; issues carry ``row_index + 1``.
        """

        schema = get_entity_schema(entity_type)
        row = self._normalizer.normalize_row(entity_type, raw_row, row_number=row_index + 1)
        return self._validate_normalized_row(schema, row)

    def validate_file(
        self,
        entity_type: str,
        rows: Sequence[Mapping[str, str]],
        raw_headers: Sequence[str],
    ) -> ValidationReport:
        """
        Validate headers, then every row, then look for duplicate rows.

        Header errors short-circuit: rows are not inspected.
        """

        header_errors = self.validate_headers(entity_type, raw_headers)
        if header_errors:
            return ValidationReport(
                errors=header_errors,
                warnings=[],
                is_valid=False,
                total_rows=len(rows),
                valid_rows=0,
            )

        errors: list[ImportIssue] = []
        for index, raw_row in enumerate(rows):
            errors.extend(self.validate_row(entity_type, raw_row, index))

        warnings: list[ImportIssue] = []
        duplicates = self.find_duplicate_rows(entity_type, rows)
        if duplicates:
            duplicate_rows = [duplicate for _, duplicate in duplicates]
            warnings.append(
                ImportIssue(
                    code=IssueCode.DUPLICATE_ROWS,
                    message=f"Found {len(duplicate_rows)} duplicate rows",
                    details={
                        "rows": duplicate_rows,
                        "pairs": [
                            {"first_row": first, "duplicate_row": duplicate}
                            for first, duplicate in duplicates
                        ],
                    },
                )
            )

        not_missing = sum(1 for error in errors if error.code != IssueCode.MISSING_REQUIRED)
        return ValidationReport(
            errors=errors,
            warnings=warnings,
            is_valid=not errors,
            total_rows=len(rows),
            valid_rows=len(rows) - not_missing,
        )

    def find_duplicate_rows(
        self,
        entity_type: str,
        rows: Sequence[Mapping[str, str]],
    ) -> list[tuple[int, int]]:
        """
        Return ``(first_row, duplicate_row)`` pairs, both 1-based.

        The composite key joins the raw values of the required fields in
        declaration order.
        """

        schema = get_entity_schema(entity_type)
        first_seen: dict[str, int] = {}
        duplicates: list[tuple[int, int]] = []

        for index, raw_row in enumerate(rows):
            values = self._normalizer.normalize_row(entity_type, raw_row, row_number=index + 1).values()
            key = DUPLICATE_KEY_SEPARATOR.join(values.get(name) or "" for name in schema.required_fields)
            if key in first_seen:
                duplicates.append((first_seen[key], index + 1))
            else:
                first_seen[key] = index + 1

        return duplicates

    def build_error_report(self, report: ValidationReport) -> dict[str, Any]:
        """
        Summarize a validation report for display: counts, errors grouped
        by code, warnings, and fix-it recommendations.
        """

        grouped: dict[str, list[dict[str, Any]]] = {}
        for error in report.errors:
            grouped.setdefault(error.code, []).append(error.to_dict())

        codes = set(grouped)
        return {
            "summary": {
                "total_errors": len(report.errors),
                "total_warnings": len(report.warnings),
                "is_valid": report.is_valid,
            },
            "errors": grouped,
            "warnings": [warning.to_dict() for warning in report.warnings],
            "recommendations": [text for code, text in RECOMMENDATIONS if code in codes],
        }

    def _validate_normalized_row(self, schema: EntitySchema, row: NormalizedRow) -> list[ImportIssue]:
        errors: list[ImportIssue] = []
        values = row.values()

        for name in schema.required_fields:
            if _is_blank(values.get(name)):
                errors.append(
                    ImportIssue(
                        code=IssueCode.MISSING_REQUIRED,
                        message=f"{name} is required",
                        row_number=row.row_number,
                        field=name,
                        value=values.get(name),
                    )
                )

        for name, value in values.items():
            if _is_blank(value):
                continue
            spec = schema.get_field(name)
            if spec is None:
                continue

            type_message = self._check_type(spec, value)
            if type_message:
                errors.append(
                    ImportIssue(
                        code=IssueCode.INVALID_TYPE,
                        message=type_message,
                        row_number=row.row_number,
                        field=name,
                        value=value,
                    )
                )

            constraint_message = self._check_constraints(spec, value)
            if constraint_message:
                errors.append(
                    ImportIssue(
                        code=IssueCode.CONSTRAINT_VIOLATION,
                        message=constraint_message,
                        row_number=row.row_number,
                        field=name,
                        value=value,
                    )
                )

        return errors

    @staticmethod
    def _check_type(spec: FieldSpec, value: str) -> str | None:
        stripped = value.strip()
        if spec.type == FieldType.NUMBER:
            if clean_number_value(stripped) is None:
                return f"{spec.name} must be a number"
        elif spec.type == FieldType.EMAIL:
            if not is_valid_email(stripped):
                return f"{spec.name} must be a valid email address"
        elif spec.type == FieldType.DATE:
            if parse_date(stripped) is None:
                return f"{spec.name} must be a valid date (YYYY-MM-DD)"
        return None

    @staticmethod
    def _check_constraints(spec: FieldSpec, value: str) -> str | None:
        if not spec.has_constraints:
            return None

        # Non-numeric values are reported by the type check.
        number = parse_plain_number(value)
        if number is None:
            return None

        if spec.min_value is not None and number < spec.min_value:
            return f"{spec.name} must be at least {_format_bound(spec.min_value)}"
        if spec.max_value is not None and number > spec.max_value:
            return f"{spec.name} must be at most {_format_bound(spec.max_value)}"
        return None


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def _format_bound(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)
