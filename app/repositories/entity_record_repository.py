"""
app/repositories/entity_record_repository.py

Inserts imported records into products, bills, or customers.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.errors import RecordPersistenceError
from app.domain.imports import BillRecord, CustomerRecord, EntityRecord, ProductRecord
from db.base import Base
from db.models.bill import Bill
from db.models.customer import Customer
from db.models.product import Product

logger = logging.getLogger(__name__)

_MODEL_BY_RECORD: dict[type, type[Base]] = {
    ProductRecord: Product,
    BillRecord: Bill,
    CustomerRecord: Customer,
}


class EntityRecordRepository:
    """
    Commits every insert call on its own so a failed row never rolls back
    rows written before it.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def insert_one(self, record: EntityRecord) -> None:
        self.insert_many([record])

    def insert_many(self, records: Sequence[EntityRecord]) -> int:
        if not records:
            return 0

        try:
            self._session.add_all([self._to_model(record) for record in records])
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            reason = getattr(exc, "orig", None) or exc
            logger.debug("Insert of %d record(s) failed: %s", len(records), reason)
            raise RecordPersistenceError(f"Database error: {reason}") from exc
        return len(records)

    @staticmethod
    def _to_model(record: EntityRecord) -> Base:
        model = _MODEL_BY_RECORD.get(type(record))
        if model is None:
            raise TypeError(f"Unsupported record type: {type(record).__name__}")
        return model(**record.to_payload())
