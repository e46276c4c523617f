from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import WorkSchedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleResolutionStrategy(ABC):
    """One step of the schedule fallback chain."""

    name: str = "base"

    @abstractmethod
    def resolve(self, employee: Employee) -> Optional[WorkSchedule]:
        raise NotImplementedError


class DirectAssignmentStrategy(ScheduleResolutionStrategy):
    """The schedule assigned to the employee."""

    name = "direct"

    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def resolve(self, employee: Employee) -> Optional[WorkSchedule]:
        if employee.work_schedule_id is None:
            return None
        return self._schedules.get_by_id(employee.work_schedule_id)


class DepartmentScheduleStrategy(ScheduleResolutionStrategy):
    """A schedule attached to the employee's department.

    Several schedules on one department is ambiguous; the lowest schedule_id wins.
    """

    name = "department"

    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def resolve(self, employee: Employee) -> Optional[WorkSchedule]:
        if employee.department_id is None:
            return None
        candidates = sorted(self._schedules.list_by_department(employee.department_id), key=lambda s: s.schedule_id)
        if len(candidates) > 1:
            logger.debug(
                "Department %s has %d schedules, using schedule %s",
                employee.department_id,
                len(candidates),
                candidates[0].schedule_id,
            )
        return candidates[0] if candidates else None


class SystemDefaultStrategy(ScheduleResolutionStrategy):
    """Last resort: the lowest-id schedule in the system."""

    name = "system-default"

    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def resolve(self, employee: Employee) -> Optional[WorkSchedule]:
        candidates = self._schedules.list_all()
        if not candidates:
            return None
        return min(candidates, key=lambda s: s.schedule_id)


class ScheduleResolver:
    """Resolves the effective work schedule of an employee.

    Strategies are tried in order and the first hit wins. A miss everywhere
    returns None; callers treat that day as non-working instead of failing.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        schedules: ScheduleRepository,
        *,
        strategies: Optional[Sequence[ScheduleResolutionStrategy]] = None,
    ):
        self._employees = employees
        self._strategies = list(
            strategies
            if strategies is not None
            else (
                DirectAssignmentStrategy(schedules),
                DepartmentScheduleStrategy(schedules),
                SystemDefaultStrategy(schedules),
            )
        )

    @property
    def strategies(self) -> Sequence[ScheduleResolutionStrategy]:
        return tuple(self._strategies)

    def resolve(self, employee_id: int) -> Optional[WorkSchedule]:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee", employee_id)
        return self.resolve_for(employee)

    def resolve_for(self, employee: Employee) -> Optional[WorkSchedule]:
        for strategy in self._strategies:
            schedule = strategy.resolve(employee)
            if schedule is not None:
                logger.debug(
                    "Employee %s resolved to schedule %s via %s",
                    employee.employee_id,
                    schedule.schedule_id,
                    strategy.name,
                )
                return schedule

        logger.warning("No work schedule configured for employee %s", employee.employee_id)
        return None

    def effective_for(self, employee: Employee) -> Optional[WorkSchedule]:
        """Resolved schedule with the employee's flexible-hours override applied."""
        schedule = self.resolve_for(employee)
        return schedule.for_employee(employee) if schedule else None
