"""
app/services/discount_evaluator.py

Matches discount rules against a candidate bill and computes amounts.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from app.domain.discounts import BillSnapshot, DiscountConditions, DiscountRuleSnapshot
from db.models.discount_rule import DiscountType

logger = logging.getLogger(__name__)

BULK_QUANTITY_THRESHOLD = 10


@dataclass(frozen=True)
class AppliedDiscount:
    rule: DiscountRuleSnapshot
    amount: float


def snapshot_from_model(rule: Any) -> DiscountRuleSnapshot:
    """
    Convert a DiscountRule row (or any object with the same attributes).
    """

    return DiscountRuleSnapshot(
        id=rule.id,
        name=rule.name,
        type=rule.type,
        discount_value=float(rule.discount_value),
        conditions=DiscountConditions.from_mapping(rule.conditions),
        is_active=bool(rule.is_active),
    )


def describe_conditions(conditions: DiscountConditions) -> str:
    parts: list[str] = []
    if conditions.min_amount:
        parts.append(f"Min amount: {conditions.min_amount:g}")
    if conditions.min_quantity:
        parts.append(f"Min quantity: {conditions.min_quantity:g}")
    if conditions.categories:
        parts.append(f"Categories: {', '.join(conditions.categories)}")
    if conditions.start_date or conditions.end_date:
        start = conditions.start_date.date().isoformat() if conditions.start_date else "Any"
        end = conditions.end_date.date().isoformat() if conditions.end_date else "Any"
        parts.append(f"Valid: {start} - {end}")
    return "; ".join(parts) if parts else "No conditions"


class DiscountRuleEvaluator:
    """
    Pure evaluation over rule and bill snapshots; nothing is mutated.
    """

    def __init__(self, *, clock=None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def evaluate(
        self,
        rules: Iterable[DiscountRuleSnapshot],
        bill: BillSnapshot,
    ) -> list[DiscountRuleSnapshot]:
        """
        Active rules whose conditions the bill satisfies, highest
        ``discount_value`` first.

        The ordering compares raw values, so a 10% rule sorts above a
        fixed 5.00 rule regardless of the bill total.
        """

        applicable = [rule for rule in rules if rule.is_active and self.is_applicable(rule, bill)]
        return sorted(applicable, key=lambda rule: rule.discount_value, reverse=True)

    def is_applicable(self, rule: DiscountRuleSnapshot, bill: BillSnapshot) -> bool:
        conditions = rule.conditions

        if conditions.min_amount and bill.total_amount < conditions.min_amount:
            return False

        if conditions.categories and not bill.categories.intersection(conditions.categories):
            return False

        if conditions.min_quantity and bill.quantity < conditions.min_quantity:
            return False

        if conditions.start_date or conditions.end_date:
            bill_date = self._bill_date(bill)
            if conditions.start_date and bill_date < conditions.start_date:
                return False
            if conditions.end_date and bill_date > conditions.end_date:
                return False

        return True

    def compute_discount(self, rule: DiscountRuleSnapshot, bill: BillSnapshot) -> float:
        total = bill.total_amount
        value = rule.discount_value

        if rule.type == DiscountType.PERCENTAGE:
            return total * value / 100
        if rule.type == DiscountType.FIXED:
            return min(value, total)
        if rule.type == DiscountType.BULK:
            if bill.quantity >= BULK_QUANTITY_THRESHOLD:
                return total * value / 100
            return 0.0

        logger.warning("Unknown discount type %r on rule %r", rule.type, rule.name)
        return 0.0

    def apply_all(
        self,
        rules: Sequence[DiscountRuleSnapshot],
        bill: BillSnapshot,
    ) -> list[AppliedDiscount]:
        return [
            AppliedDiscount(rule=rule, amount=self.compute_discount(rule, bill))
            for rule in self.evaluate(rules, bill)
        ]

    def best_discount(
        self,
        rules: Sequence[DiscountRuleSnapshot],
        bill: BillSnapshot,
    ) -> AppliedDiscount | None:
        """
        First rule in evaluation order with its computed amount.
        """

        applicable = self.evaluate(rules, bill)
        if not applicable:
            return None
        rule = applicable[0]
        return AppliedDiscount(rule=rule, amount=self.compute_discount(rule, bill))

    def _bill_date(self, bill: BillSnapshot) -> datetime:
        bill_date = bill.created_at or self._clock()
        if bill_date.tzinfo is None:
            bill_date = bill_date.replace(tzinfo=timezone.utc)
        return bill_date
