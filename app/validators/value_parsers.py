"""
app/validators/value_parsers.py

Pure value parsing shared by the validation pass and the record mapper,
so both agree on what counts as a number, an email, or a date.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any

CURRENCY_SYMBOLS = "₹$€£¥"

_CURRENCY_AND_SEPARATORS = re.compile(r"[₹$€£¥,\s]")
_NON_NUMERIC = re.compile(r"[^\d.\-]")
_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d %b %Y",
    "%b %d, %Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
)


def clean_number_value(value: Any) -> float | None:
    """
    Parse a human-entered amount such as ``"₹1,234.50"`` or ``"$ 99"``.

    Currency symbols, thousands separators and whitespace are dropped, then
    anything other than digits, ``.`` and ``-`` is discarded. Returns None
    when nothing numeric is left or the remainder is not a valid float.
    """

    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None

    cleaned = _CURRENCY_AND_SEPARATORS.sub("", str(value))
    cleaned = _NON_NUMERIC.sub("", cleaned)
    if cleaned in ("", "-"):
        return None
    try:
        parsed = float(cleaned)
    except ValueError:
        return None
    # Digit strings past the float range overflow to inf.
    return parsed if math.isfinite(parsed) else None


def parse_plain_number(value: Any) -> float | None:
    """
    Parse a value as a float without any cleaning. Used for min/max checks.
    """

    if value is None:
        return None
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def is_valid_email(value: Any) -> bool:
    if value is None:
        return False
    return _EMAIL_PATTERN.match(str(value).strip()) is not None


def parse_date(value: Any) -> datetime | None:
    """
    Parse a calendar date or timestamp into an aware UTC datetime.

    Naive values are assumed to be UTC. Returns None when the value is
    blank or not a real calendar date.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    raw = str(value).strip()
    if not raw:
        return None

    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        parsed = None

    if parsed is None:
        for fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(raw, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
