"""
app/repositories package marker.
"""

from app.repositories.business_repository import BusinessRepository
from app.repositories.discount_rule_repository import DiscountRuleRepository
from app.repositories.entity_record_repository import EntityRecordRepository
from app.repositories.import_log_repository import ImportLogRepository

__all__ = [
    "BusinessRepository",
    "DiscountRuleRepository",
    "EntityRecordRepository",
    "ImportLogRepository",
]
