from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.constants import DEFAULT_LEAVE_DAYS_PER_MONTH, DEFAULT_REQUIRED_HOURS_PER_DAY


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    `work_schedule_id` is optional; without it the department's schedule applies.
    When `is_flexible_hours` is set the employee is judged on total hours only
    (`required_hours_per_day`), whatever the assigned schedule says.
    """

    employee_id: int
    full_name: str
    department_id: Optional[int]
    hire_date: date
    work_schedule_id: Optional[int] = None
    leave_days_per_month: int = DEFAULT_LEAVE_DAYS_PER_MONTH
    is_flexible_hours: bool = False
    required_hours_per_day: float = DEFAULT_REQUIRED_HOURS_PER_DAY
