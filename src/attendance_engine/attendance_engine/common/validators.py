from __future__ import annotations

from datetime import date

from ..core.exceptions import InvalidRangeError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_non_negative(value: int | float, field_name: str) -> int | float:
    if value is None or value < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return value


def require_date_range(start: date, end: date) -> None:
    if start > end:
        raise InvalidRangeError(f"start date {start.isoformat()} is after end date {end.isoformat()}")
