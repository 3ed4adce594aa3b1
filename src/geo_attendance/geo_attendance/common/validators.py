from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def require_number(value, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def require_latitude(value) -> float:
    lat = require_number(value, "latitude")
    if not -90.0 <= lat <= 90.0:
        raise ValidationError("latitude must be between -90 and 90")
    return lat


def require_longitude(value) -> float:
    lon = require_number(value, "longitude")
    if not -180.0 <= lon <= 180.0:
        raise ValidationError("longitude must be between -180 and 180")
    return lon


def require_positive_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return number


def require_date(value, field_name: str) -> date:
    if isinstance(value, date):
        return value
    text = require_non_empty(value if isinstance(value, str) else None, field_name)
    try:
        return parse_iso_date(text)
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def optional_date(value, field_name: str) -> Optional[date]:
    if value in (None, ""):
        return None
    return require_date(value, field_name)


def parse_id_list(value) -> Optional[list[int]]:
    """Accept ``[1, 2]`` or ``"1,2"``; None/empty means no filter."""
    if value in (None, "", []):
        return None
    parts = value if isinstance(value, (list, tuple)) else str(value).split(",")
    try:
        return [int(p) for p in parts if str(p).strip()]
    except (TypeError, ValueError):
        raise ValidationError("Employee ids must be integers")
