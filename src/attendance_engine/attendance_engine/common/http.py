from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Dict, Optional

from flask import jsonify, request

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime


def ok(status: int = 200, **payload: Any):
    return jsonify({"success": True, **payload}), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_field(data: Dict[str, Any], name: str) -> Any:
    value = data.get(name)
    if value is None or value == "":
        raise ValidationError(f"{name} is required")
    return value


def as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer") from None


def as_date(value: Any, name: str) -> date:
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)") from None


def as_datetime(value: Any, name: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{name} must be an ISO timestamp (YYYY-MM-DDTHH:MM[:SS])") from None


def as_time(value: Any, name: str) -> time:
    try:
        return time.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"{name} must be a time (HH:MM[:SS])") from None


def date_range_args(*, default_start: date, default_end: date) -> tuple[date, date]:
    """start/end query arguments, falling back to the given defaults."""
    start_s = request.args.get("start")
    end_s = request.args.get("end")
    start = as_date(start_s, "start") if start_s else default_start
    end = as_date(end_s, "end") if end_s else default_end
    return start, end
