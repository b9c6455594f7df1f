"""
app/validators package marker.
"""

from app.validators.import_validator import ImportValidator
from app.validators.value_parsers import clean_number_value, is_valid_email, parse_date

__all__ = [
    "ImportValidator",
    "clean_number_value",
    "is_valid_email",
    "parse_date",
]
