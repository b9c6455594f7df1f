"""
Model package exports.

Every SQLAlchemy model is imported here so metadata registration and
Alembic autogeneration work without extra imports.
"""

from db.models.bill import Bill
from db.models.business import Business, BusinessMember
from db.models.customer import Customer
from db.models.discount_rule import DiscountRule
from db.models.import_log import ImportLog, ImportLogDetail
from db.models.product import Product

__all__ = [
    "Bill",
    "Business",
    "BusinessMember",
    "Customer",
    "DiscountRule",
    "ImportLog",
    "ImportLogDetail",
    "Product",
]
