from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Optional, Tuple

from ..core.constants import DEFAULT_GRACE_MINUTES, DEFAULT_TOTAL_WORK_HOURS

if TYPE_CHECKING:
    from ..employees.model import Employee

# Index matches date.weekday(): Monday is 0, Sunday is 6.
WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
MONDAY_TO_FRIDAY = (True, True, True, True, True, False, False)


@dataclass(frozen=True)
class WorkSchedule:
    """Domain entity: a work schedule (fixed clock times or flexible total hours).

    `start_time`/`end_time` are ignored for flexible schedules. An `end_time`
    earlier than `start_time` describes a night shift ending the next day.
    """

    schedule_id: int
    name: str
    start_time: time = time(9, 0)
    end_time: time = time(17, 0)
    working_days: Tuple[bool, ...] = MONDAY_TO_FRIDAY
    grace_minutes: int = DEFAULT_GRACE_MINUTES
    is_flexible: bool = False
    total_work_hours: float = DEFAULT_TOTAL_WORK_HOURS
    department_id: Optional[int] = None
    description: str = ""

    def __post_init__(self) -> None:
        if len(self.working_days) != 7:
            raise ValueError("working_days needs one flag per weekday (Monday..Sunday)")

    def is_working_day(self, day: date | int) -> bool:
        weekday = day if isinstance(day, int) else day.weekday()
        return bool(self.working_days[weekday])

    def expected_start(self, day: date) -> datetime:
        return datetime.combine(day, self.start_time)

    def expected_end(self, day: date) -> datetime:
        end = datetime.combine(day, self.end_time)
        if self.end_time < self.start_time:
            end += timedelta(days=1)
        return end

    def expected_work_hours(self, day: date) -> float:
        if not self.is_working_day(day):
            return 0.0
        if self.is_flexible:
            return float(self.total_work_hours)
        return (self.expected_end(day) - self.expected_start(day)).total_seconds() / 3600

    def allowed_attendance_times(self, day: date) -> Optional[Tuple[datetime, datetime]]:
        """(latest allowed check-in, earliest allowed check-out) with grace applied."""
        if not self.is_working_day(day):
            return None
        grace = timedelta(minutes=self.grace_minutes)
        return self.expected_start(day) + grace, self.expected_end(day) - grace

    def for_employee(self, employee: "Employee") -> "WorkSchedule":
        """Effective schedule: an employee's flexible-hours flag overrides the schedule."""
        if not employee.is_flexible_hours:
            return self
        return replace(self, is_flexible=True, total_work_hours=float(employee.required_hours_per_day))
