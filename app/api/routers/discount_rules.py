"""
app/api/routers/discount_rules.py

Discount rule CRUD and evaluation endpoints.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.dependencies import get_business_id, get_discount_evaluator, get_discount_rule_repository
from app.domain.discounts import BillItem, BillSnapshot
from app.domain.errors import DiscountRuleNotFoundError
from app.repositories.discount_rule_repository import DiscountRuleRepository
from app.schemas.discounts import (
    AppliedDiscountResponse,
    DiscountEvaluationRequest,
    DiscountEvaluationResponse,
    DiscountRuleCreateRequest,
    DiscountRuleResponse,
    DiscountRuleUpdateRequest,
)
from app.services.discount_evaluator import (
    AppliedDiscount,
    DiscountRuleEvaluator,
    describe_conditions,
    snapshot_from_model,
)

router = APIRouter(prefix="/discount-rules", tags=["discounts"])


def _not_found(exc: DiscountRuleNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _applied_response(applied: AppliedDiscount) -> AppliedDiscountResponse:
    return AppliedDiscountResponse(
        rule_id=applied.rule.id,
        name=applied.rule.name,
        type=applied.rule.type,
        discount_value=applied.rule.discount_value,
        amount=applied.amount,
        conditions_summary=describe_conditions(applied.rule.conditions),
    )


@router.get("", response_model=list[DiscountRuleResponse])
def list_discount_rules(
    business_id: uuid.UUID = Depends(get_business_id),
    repository: DiscountRuleRepository = Depends(get_discount_rule_repository),
) -> list[DiscountRuleResponse]:
    """
    Active rules for the caller's business, newest first.
    """

    return [
        DiscountRuleResponse.model_validate(rule)
        for rule in repository.list_active(business_id=business_id)
    ]


@router.post("", response_model=DiscountRuleResponse, status_code=status.HTTP_201_CREATED)
def create_discount_rule(
    payload: DiscountRuleCreateRequest,
    business_id: uuid.UUID = Depends(get_business_id),
    repository: DiscountRuleRepository = Depends(get_discount_rule_repository),
) -> DiscountRuleResponse:
    rule = repository.create(
        business_id=business_id,
        name=payload.name,
        type=payload.type,
        discount_value=payload.discount_value,
        conditions=payload.conditions.to_storage(),
        is_active=payload.is_active,
    )
    return DiscountRuleResponse.model_validate(rule)


@router.patch("/{rule_id}", response_model=DiscountRuleResponse)
def update_discount_rule(
    rule_id: uuid.UUID,
    payload: DiscountRuleUpdateRequest,
    business_id: uuid.UUID = Depends(get_business_id),
    repository: DiscountRuleRepository = Depends(get_discount_rule_repository),
) -> DiscountRuleResponse:
    try:
        rule = repository.update(
            business_id=business_id,
            rule_id=rule_id,
            changes=payload.to_changes(),
        )
    except DiscountRuleNotFoundError as exc:
        raise _not_found(exc) from exc
    return DiscountRuleResponse.model_validate(rule)


@router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_discount_rule(
    rule_id: uuid.UUID,
    business_id: uuid.UUID = Depends(get_business_id),
    repository: DiscountRuleRepository = Depends(get_discount_rule_repository),
) -> Response:
    try:
        repository.delete(business_id=business_id, rule_id=rule_id)
    except DiscountRuleNotFoundError as exc:
        raise _not_found(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/evaluate", response_model=DiscountEvaluationResponse)
def evaluate_discount_rules(
    payload: DiscountEvaluationRequest,
    business_id: uuid.UUID = Depends(get_business_id),
    repository: DiscountRuleRepository = Depends(get_discount_rule_repository),
    evaluator: DiscountRuleEvaluator = Depends(get_discount_evaluator),
) -> DiscountEvaluationResponse:
    """
    Applicable rules for a candidate bill, highest discount value first.
    """

    rules = [snapshot_from_model(rule) for rule in repository.list_active(business_id=business_id)]
    bill = BillSnapshot(
        total_amount=payload.total_amount,
        items=tuple(BillItem(quantity=item.quantity, category=item.category) for item in payload.items),
        total_quantity=payload.total_quantity,
        created_at=payload.created_at,
    )

    best = evaluator.best_discount(rules, bill)
    return DiscountEvaluationResponse(
        applicable=[_applied_response(item) for item in evaluator.apply_all(rules, bill)],
        best=_applied_response(best) if best is not None else None,
    )
