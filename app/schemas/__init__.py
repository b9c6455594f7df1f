"""
app/schemas package marker.
"""

from app.schemas.discounts import (
    DiscountEvaluationRequest,
    DiscountEvaluationResponse,
    DiscountRuleCreateRequest,
    DiscountRuleResponse,
    DiscountRuleUpdateRequest,
)
from app.schemas.imports import (
    ImportResultResponse,
    ImportRunDetailResponse,
    ImportRunListResponse,
    TemplateInfoResponse,
)

__all__ = [
    "DiscountEvaluationRequest",
    "DiscountEvaluationResponse",
    "DiscountRuleCreateRequest",
    "DiscountRuleResponse",
    "DiscountRuleUpdateRequest",
    "ImportResultResponse",
    "ImportRunDetailResponse",
    "ImportRunListResponse",
    "TemplateInfoResponse",
]
