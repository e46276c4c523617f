from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (``YYYY-MM-DDTHH:MM[:SS]``) as naive local time.

    An explicit UTC offset is converted to the local zone and dropped.
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, both inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def first_of_month(day: date) -> date:
    return day.replace(day=1)


def hours(delta: timedelta) -> float:
    return delta.total_seconds() / 3600


def whole_minutes(delta: timedelta | None) -> int | None:
    if delta is None:
        return None
    return int(delta.total_seconds() // 60)
