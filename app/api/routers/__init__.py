"""
app/api/routers package marker.
"""

from app.api.routers.discount_rules import router as discount_rules_router
from app.api.routers.imports import router as imports_router

__all__ = [
    "discount_rules_router",
    "imports_router",
]
