from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import CalendarEntry


class CalendarRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[CalendarEntry]:
        raise NotImplementedError

    def find_for_date(self, day: date) -> Optional[CalendarEntry]:
        """Entry matching the exact date, or a recurring entry on the same day and month.

        Exact-year entries are preferred over recurring ones; ties go to the lowest entry_id.
        """

        raise NotImplementedError

    def list_in_range(self, *, start: date, end: date) -> Sequence[CalendarEntry]:
        raise NotImplementedError

    def list_recurring_for_month(self, month: int) -> Sequence[CalendarEntry]:
        raise NotImplementedError

    def create(self, entry: CalendarEntry) -> int:
        raise NotImplementedError

    def update(self, entry: CalendarEntry) -> bool:
        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError
