"""
app/services package marker.
"""

from app.services.discount_evaluator import DiscountRuleEvaluator
from app.services.import_processor import ImportProcessor, RowWritePolicy, build_import_processor
from app.services.template_registry import TemplateRegistry

__all__ = [
    "DiscountRuleEvaluator",
    "ImportProcessor",
    "RowWritePolicy",
    "TemplateRegistry",
    "build_import_processor",
]
