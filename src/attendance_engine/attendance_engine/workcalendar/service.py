from __future__ import annotations

import calendar
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_date_range, require_non_empty
from ..core.enums import CalendarEntryType
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.notifier import ChangeNotifier
from .model import CalendarEntry
from .repository import CalendarRepository


class CalendarService:
    """Use cases: maintain the organization calendar."""

    def __init__(self, calendar_repo: CalendarRepository, notifier: Optional[ChangeNotifier] = None):
        self._calendar = calendar_repo
        self._notifier = notifier or ChangeNotifier()

    def get(self, entry_id: int) -> CalendarEntry:
        entry = self._calendar.get_by_id(entry_id)
        if not entry:
            raise NotFoundError("CalendarEntry", entry_id)
        return entry

    def create(
        self,
        *,
        entry_date: date,
        name: str,
        entry_type: CalendarEntryType,
        description: str = "",
        is_recurring_annually: bool = False,
    ) -> CalendarEntry:
        entry = CalendarEntry(
            entry_id=0,
            entry_date=entry_date,
            name=require_non_empty(name, "name"),
            entry_type=CalendarEntryType(entry_type),
            description=(description or "").strip(),
            is_recurring_annually=bool(is_recurring_annually),
        )
        entry = replace(entry, entry_id=self._calendar.create(entry))
        self._notifier.calendar_changed(entry_id=entry.entry_id)
        return entry

    def update(self, entry: CalendarEntry) -> CalendarEntry:
        require_non_empty(entry.name, "name")
        if not self._calendar.update(entry):
            raise NotFoundError("CalendarEntry", entry.entry_id)
        self._notifier.calendar_changed(entry_id=entry.entry_id)
        return entry

    def delete(self, entry_id: int) -> None:
        # Deleting a missing entry is a no-op.
        if self._calendar.delete(entry_id):
            self._notifier.calendar_changed(entry_id=entry_id)

    def list_in_range(self, *, start: date, end: date) -> Sequence[CalendarEntry]:
        require_date_range(start, end)
        return self._calendar.list_in_range(start=start, end=end)

    def recurring_for_month(self, month: int) -> Sequence[CalendarEntry]:
        if not 1 <= int(month) <= 12:
            raise ValidationError(f"month must be 1..12, got {month}")
        return self._calendar.list_recurring_for_month(int(month))

    def list_for_month(self, *, year: int, month: int) -> Sequence[CalendarEntry]:
        """Entries dated in the month plus recurring entries falling in it, by day."""
        if not 1 <= int(month) <= 12:
            raise ValidationError(f"month must be 1..12, got {month}")
        _, days_in_month = calendar.monthrange(year, month)
        exact = self._calendar.list_in_range(start=date(year, month, 1), end=date(year, month, days_in_month))
        seen = {e.entry_id for e in exact}
        recurring = [e for e in self._calendar.list_recurring_for_month(month) if e.entry_id not in seen]
        return sorted([*exact, *recurring], key=lambda e: (e.entry_date.day, e.entry_id))
