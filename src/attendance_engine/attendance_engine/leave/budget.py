from __future__ import annotations

from datetime import date
from typing import Optional, Tuple

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


class LeaveBudget:
    """Monthly leave allowance consumed day by day.

    Unaccounted working days are fed in chronological order: the first
    `allowance` days of each month come back as Leave, the rest as Absent.
    The counter resets when a day from a new month arrives. Feeding days out
    of order is rejected, since which day gets Leave depends on the order.
    """

    def __init__(self, allowance: int):
        if allowance is None or int(allowance) < 0:
            raise ValidationError("leave allowance must not be negative")
        self._allowance = int(allowance)
        self._month: Optional[Tuple[int, int]] = None
        self._used = 0
        self._last_day: Optional[date] = None

    @property
    def allowance(self) -> int:
        return self._allowance

    @property
    def used(self) -> int:
        return self._used

    @property
    def remaining(self) -> int:
        return self._allowance - self._used

    def allocate(self, day: date) -> AttendanceStatus:
        if self._last_day is not None and day <= self._last_day:
            raise ValidationError(f"leave days must be allocated in order: {day} after {self._last_day}")
        self._last_day = day

        month = (day.year, day.month)
        if month != self._month:
            self._month = month
            self._used = 0

        if self._used < self._allowance:
            self._used += 1
            return AttendanceStatus.LEAVE
        return AttendanceStatus.ABSENT
