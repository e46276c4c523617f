from __future__ import annotations

from datetime import date
from typing import Optional

from ..employees.model import Employee
from ..schedules.model import WorkSchedule
from ..schedules.resolver import ScheduleResolver
from .model import CalendarEntry
from .repository import CalendarRepository

SATURDAY = 5
SUNDAY = 6


class CalendarResolver:
    """Decides whether a date is a working day for the organization or an employee."""

    def __init__(self, calendar: CalendarRepository, schedules: ScheduleResolver):
        self._calendar = calendar
        self._schedules = schedules

    def entry_for(self, day: date) -> Optional[CalendarEntry]:
        return self._calendar.find_for_date(day)

    def is_working_date(self, day: date) -> bool:
        entry = self.entry_for(day)
        if entry is not None:
            return entry.is_working
        return day.weekday() not in (SATURDAY, SUNDAY)

    def is_working_date_for_employee(self, employee_id: int, day: date) -> bool:
        if not self.is_working_date(day):
            return False
        return self.schedule_allows(self._schedules.resolve(employee_id), day)

    def is_working_date_for(self, employee: Employee, day: date) -> bool:
        if not self.is_working_date(day):
            return False
        return self.schedule_allows(self._schedules.resolve_for(employee), day)

    @staticmethod
    def schedule_allows(schedule: Optional[WorkSchedule], day: date) -> bool:
        # No schedule anywhere: the day is excluded rather than counted.
        if schedule is None:
            return False
        return schedule.is_working_day(day)
