"""
services/validators.py
----------------------
Boundary checks shared by the services. Each helper returns the cleaned
value or raises ValidationError; nothing is silently coerced.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from utils.date_helpers import parse_date, parse_optional_date
from utils.errors import ValidationError

AMOUNT_DECIMALS = 2
MAX_AMOUNT = 10 ** 10
CATEGORY_MAX_LENGTH = 100


def require_text(value: Any, field: str, max_length: Optional[int] = None) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    text = str(value).strip()
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return text


def require_amount(value: Any, field: str = "amount") -> float:
    """
    A finite, non-negative number below MAX_AMOUNT with at most two decimal
    places, matching the NUMERIC(12,2) columns. Booleans and numeric strings
    are rejected.
    """
    if value is None:
        raise ValidationError(f"{field} is required")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a number")
    amount = float(value)
    if amount != amount or amount in (float("inf"), float("-inf")):
        raise ValidationError(f"{field} must be a finite number")
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative")
    if amount >= MAX_AMOUNT:
        raise ValidationError(f"{field} must be less than {MAX_AMOUNT:,}")
    if Decimal(str(value)).as_tuple().exponent < -AMOUNT_DECIMALS:
        raise ValidationError(f"{field} can have at most {AMOUNT_DECIMALS} decimal places")
    return amount


def require_choice(value: Any, field: str, choices: tuple) -> str:
    if value not in choices:
        raise ValidationError(f"{field} must be one of: {', '.join(choices)}")
    return value


def require_positive_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{field} must be a positive integer")
    return value


def require_date(value: Any, field: str) -> date:
    if value is None or value == "":
        raise ValidationError(f"{field} is required")
    return parse_date(value)


def optional_date(value: Any) -> Optional[date]:
    return parse_optional_date(value)


def require_month(month: Any, year: Any) -> tuple[int, int]:
    """Validate a (month, year) pair, month being 1-12."""
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9999:
        raise ValidationError("year must be a valid year")
    return month, year
