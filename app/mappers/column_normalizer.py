"""
app/mappers/column_normalizer.py

Alias-table relabelling of source headers onto canonical field names.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from app.domain.entity_schemas import ENTITY_SCHEMAS, EntitySchema
from app.domain.errors import UnknownEntityTypeError
from app.domain.imports import NormalizedRow


class ColumnNormalizer:
    """
    Maps known alias headers (``Product_Name``, ``Unit_Price``...) onto
    canonical names. Unknown names pass through unchanged.

    Stateless after construction; the same instance must be used for the
    validation and persistence passes of one run.
    """

    def __init__(self, schemas: Mapping[str, EntitySchema] | None = None) -> None:
        self._schemas = dict(schemas or ENTITY_SCHEMAS)
        self._aliases: dict[str, dict[str, str]] = {
            entity_type: self._build_alias_table(schema)
            for entity_type, schema in self._schemas.items()
        }

    def normalize(self, entity_type: str, name: str) -> str:
        """
        Return the canonical name for one header or field name.
        """

        return self._alias_table(entity_type).get(name, name)

    def normalize_headers(self, entity_type: str, headers: Sequence[str]) -> list[str]:
        table = self._alias_table(entity_type)
        return [table.get(header, header) for header in headers]

    def normalize_row(
        self,
        entity_type: str,
        raw_row: Mapping[str, str],
        *,
        row_number: int,
    ) -> NormalizedRow:
        """
        Relabel one row's keys. When two source columns share a canonical
        name, the later column's value wins in ``NormalizedRow.values()``.
        """

        table = self._alias_table(entity_type)
        pairs = tuple(
            (table.get(key, key), "" if value is None else str(value))
            for key, value in raw_row.items()
        )
        return NormalizedRow(row_number=row_number, pairs=pairs, source=dict(raw_row))

    def _alias_table(self, entity_type: str) -> dict[str, str]:
        table = self._aliases.get(entity_type)
        if table is None:
            raise UnknownEntityTypeError(entity_type)
        return table

    @staticmethod
    def _build_alias_table(schema: EntitySchema) -> dict[str, str]:
        table: dict[str, str] = {}
        for spec in schema.fields:
            table[spec.name] = spec.name
            for alias in spec.aliases:
                table.setdefault(alias, spec.name)
        return table
