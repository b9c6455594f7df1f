"""
app/repositories/discount_rule_repository.py

CRUD for discount rules, always scoped by business_id.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.errors import DiscountRuleNotFoundError
from db.models.discount_rule import DiscountRule

_UPDATABLE_FIELDS = frozenset({"name", "type", "discount_value", "conditions", "is_active"})


class DiscountRuleRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create(
        self,
        *,
        business_id: uuid.UUID,
        name: str,
        type: str,
        discount_value: float,
        conditions: dict[str, Any] | None = None,
        is_active: bool = True,
    ) -> DiscountRule:
        rule = DiscountRule(
            business_id=business_id,
            name=name.strip(),
            type=type,
            discount_value=discount_value,
            conditions=conditions or {},
            is_active=is_active,
        )
        self._session.add(rule)
        self._session.commit()
        self._session.refresh(rule)
        return rule

    def list_active(self, *, business_id: uuid.UUID) -> list[DiscountRule]:
        stmt = (
            select(DiscountRule)
            .where(
                DiscountRule.business_id == business_id,
                DiscountRule.is_active.is_(True),
            )
            .order_by(DiscountRule.created_at.desc())
        )
        return list(self._session.scalars(stmt).all())

    def get(self, *, business_id: uuid.UUID, rule_id: uuid.UUID) -> DiscountRule:
        stmt = select(DiscountRule).where(
            DiscountRule.id == rule_id,
            DiscountRule.business_id == business_id,
        )
        rule = self._session.execute(stmt).scalars().first()
        if rule is None:
            raise DiscountRuleNotFoundError(f"Discount rule not found: {rule_id}")
        return rule

    def update(
        self,
        *,
        business_id: uuid.UUID,
        rule_id: uuid.UUID,
        changes: dict[str, Any],
    ) -> DiscountRule:
        rule = self.get(business_id=business_id, rule_id=rule_id)
        for key, value in changes.items():
            if key in _UPDATABLE_FIELDS:
                setattr(rule, key, value)
        self._session.commit()
        self._session.refresh(rule)
        return rule

    def delete(self, *, business_id: uuid.UUID, rule_id: uuid.UUID) -> None:
        rule = self.get(business_id=business_id, rule_id=rule_id)
        self._session.delete(rule)
        self._session.commit()
