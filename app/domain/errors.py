"""
app/domain/errors.py

Exceptions raised by the import pipeline and the discount rule store.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.domain.imports import ImportIssue


class ImportPipelineError(Exception):
    """Base class for every import pipeline failure."""


class UnknownEntityTypeError(ImportPipelineError, ValueError):
    """Raised when an entity type is not one of products, bills, customers."""

    def __init__(self, entity_type: str) -> None:
        super().__init__(f"Unknown import type: {entity_type}")
        self.entity_type = entity_type


class UnsupportedFormatError(ImportPipelineError):
    """Raised when an uploaded file extension has no parser."""


class SpreadsheetNotSupportedError(ImportPipelineError, NotImplementedError):
    """Raised for .xlsx / .xls uploads, which are not parsed yet."""


class FileTooLargeError(ImportPipelineError):
    """Raised when an upload exceeds the configured byte limit."""


class EmptyFileError(ImportPipelineError):
    """Raised when an upload carries no bytes."""


class ValidationFailedError(ImportPipelineError):
    """
    Raised when a file fails header or row validation.
    """

    def __init__(self, message: str, *, errors: Sequence["ImportIssue"]) -> None:
        super().__init__(message)
        self.errors = tuple(errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": str(self),
            "errors": [error.to_dict() for error in self.errors],
        }


class RecordPersistenceError(ImportPipelineError):
    """Raised when one insert into a target table fails."""


class NoBusinessFoundError(ImportPipelineError):
    """Raised when the acting user has no single active business membership."""


class DiscountRuleNotFoundError(LookupError):
    """Raised when a discount rule id does not exist within the business."""
