"""
app/domain package marker.
"""

from app.domain.entity_schemas import ENTITY_SCHEMAS, EntitySchema, EntityType, FieldSpec, FieldType
from app.domain.imports import ImportFile, ImportIssue, ImportResult, IssueCode, ValidationReport

__all__ = [
    "ENTITY_SCHEMAS",
    "EntitySchema",
    "EntityType",
    "FieldSpec",
    "FieldType",
    "ImportFile",
    "ImportIssue",
    "ImportResult",
    "IssueCode",
    "ValidationReport",
]
