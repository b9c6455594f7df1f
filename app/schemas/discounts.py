"""
app/schemas/discounts.py

Request and response schemas for discount rule endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DiscountTypeLiteral = Literal["percentage", "fixed", "bulk"]


class DiscountConditionsPayload(BaseModel):
    min_amount: float | None = Field(default=None, ge=0)
    min_quantity: float | None = Field(default=None, ge=0)
    categories: list[str] = Field(default_factory=list)
    start_date: datetime | None = None
    end_date: datetime | None = None

    def to_storage(self) -> dict[str, object]:
        """
        JSON-ready dict for the ``conditions`` column, unset keys dropped.
        """

        return self.model_dump(mode="json", exclude_none=True, exclude_defaults=True)


class DiscountRuleCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: DiscountTypeLiteral
    discount_value: float = Field(..., ge=0)
    conditions: DiscountConditionsPayload = Field(default_factory=DiscountConditionsPayload)
    is_active: bool = True


class DiscountRuleUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: DiscountTypeLiteral | None = None
    discount_value: float | None = Field(default=None, ge=0)
    conditions: DiscountConditionsPayload | None = None
    is_active: bool | None = None

    def to_changes(self) -> dict[str, object]:
        """
        Fields the caller actually sent. An explicit null leaves the column
        as it is, since every updatable column is NOT NULL.
        """

        changes = self.model_dump(exclude_unset=True, exclude_none=True, exclude={"conditions"})
        if self.conditions is not None:
            changes["conditions"] = self.conditions.to_storage()
        return changes


class DiscountRuleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    type: str
    discount_value: float
    conditions: dict[str, object] = Field(default_factory=dict)
    is_active: bool
    created_at: datetime | None = None


class BillItemPayload(BaseModel):
    quantity: float = Field(default=1, ge=0)
    category: str | None = None


class DiscountEvaluationRequest(BaseModel):
    total_amount: float = Field(..., ge=0)
    items: list[BillItemPayload] = Field(default_factory=list)
    total_quantity: float | None = Field(default=None, ge=0)
    created_at: datetime | None = None


class AppliedDiscountResponse(BaseModel):
    rule_id: uuid.UUID | None = None
    name: str
    type: str
    discount_value: float
    amount: float
    conditions_summary: str


class DiscountEvaluationResponse(BaseModel):
    applicable: list[AppliedDiscountResponse] = Field(default_factory=list)
    best: AppliedDiscountResponse | None = None
