from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import CalendarEntryType


@dataclass(frozen=True)
class CalendarEntry:
    """Domain entity: a holiday, non-working day or short day.

    A recurring entry matches its day and month in every year.
    """

    entry_id: int
    entry_date: date
    name: str
    entry_type: CalendarEntryType
    description: str = ""
    is_recurring_annually: bool = False

    def matches(self, day: date) -> bool:
        if self.entry_date.day != day.day or self.entry_date.month != day.month:
            return False
        return self.is_recurring_annually or self.entry_date.year == day.year

    @property
    def is_working(self) -> bool:
        return self.entry_type == CalendarEntryType.SHORT_DAY
