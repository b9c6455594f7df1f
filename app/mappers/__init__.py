"""
app/mappers package marker.
"""

from app.mappers.column_normalizer import ColumnNormalizer
from app.mappers.record_mapper import RecordMapper

__all__ = [
    "ColumnNormalizer",
    "RecordMapper",
]
