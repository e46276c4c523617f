from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import Dict, Optional, Sequence, Set

from ..attendance.service import AttendanceService, RecalculationSummary
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_non_negative
from ..core.constants import DEFAULT_RECALC_WINDOW_DAYS
from ..core.exceptions import NotFoundError
from ..employees.repository import DepartmentRepository, EmployeeRepository
from ..notifications.notifier import ChangeNotifier
from .model import WorkSchedule
from .repository import ScheduleRepository
from .resolver import ScheduleResolver

logger = logging.getLogger(__name__)


class ScheduleService:
    """Use cases: maintain work schedules and their assignments.

    Any change that can move an employee to another schedule, or alter the
    schedule they already resolve to, reclassifies that employee's records
    over the trailing `recalc_window_days`.
    """

    def __init__(
        self,
        schedules: ScheduleRepository,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        schedule_resolver: ScheduleResolver,
        attendance_service: AttendanceService,
        *,
        recalc_window_days: int = DEFAULT_RECALC_WINDOW_DAYS,
        notifier: Optional[ChangeNotifier] = None,
    ):
        self._schedules = schedules
        self._employees = employees
        self._departments = departments
        self._resolver = schedule_resolver
        self._attendance = attendance_service
        self._window = timedelta(days=int(recalc_window_days))
        self._notifier = notifier or ChangeNotifier()

    def get(self, schedule_id: int) -> WorkSchedule:
        schedule = self._schedules.get_by_id(schedule_id)
        if not schedule:
            raise NotFoundError("WorkSchedule", schedule_id)
        return schedule

    def list_all(self) -> Sequence[WorkSchedule]:
        return self._schedules.list_all()

    @staticmethod
    def _validate(schedule: WorkSchedule) -> None:
        require_non_empty(schedule.name, "name")
        require_non_negative(schedule.grace_minutes, "grace_minutes")
        require_non_negative(schedule.total_work_hours, "total_work_hours")

    def create_schedule(self, schedule: WorkSchedule) -> WorkSchedule:
        self._validate(schedule)
        created = replace(schedule, schedule_id=self._schedules.create(schedule))
        self._notifier.schedules_changed(schedule_id=created.schedule_id)
        logger.info("Work schedule %s created", created.schedule_id)
        return created

    def update_schedule(self, schedule: WorkSchedule, *, today: Optional[date] = None) -> RecalculationSummary:
        self._validate(schedule)
        self.get(schedule.schedule_id)

        before = self._resolved_ids()
        self._schedules.update(schedule)
        return self._after_change(schedule.schedule_id, before, today=today)

    def assign_to_employee(
        self,
        *,
        employee_id: int,
        schedule_id: Optional[int],
        today: Optional[date] = None,
    ) -> RecalculationSummary:
        """Set (or clear, with None) the employee's direct schedule."""
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee", employee_id)
        if schedule_id is not None:
            self.get(schedule_id)

        before = self._resolved_ids()
        self._employees.set_work_schedule(employee_id=employee_id, work_schedule_id=schedule_id)
        return self._after_change(schedule_id, before, today=today, extra={int(employee_id)})

    def assign_to_department(
        self,
        *,
        schedule_id: int,
        department_id: Optional[int],
        today: Optional[date] = None,
    ) -> RecalculationSummary:
        """Attach the schedule to a department (or detach it, with None)."""
        schedule = self.get(schedule_id)
        if department_id is not None and not self._departments.get_by_id(department_id):
            raise NotFoundError("Department", department_id)

        before = self._resolved_ids()
        self._schedules.update(replace(schedule, department_id=department_id))
        return self._after_change(schedule_id, before, today=today)

    def _resolved_ids(self) -> Dict[int, Optional[int]]:
        resolved = {}
        for employee in self._employees.list_all():
            schedule = self._resolver.resolve_for(employee)
            resolved[employee.employee_id] = schedule.schedule_id if schedule else None
        return resolved

    def _after_change(
        self,
        schedule_id: Optional[int],
        before: Dict[int, Optional[int]],
        *,
        today: Optional[date],
        extra: Optional[Set[int]] = None,
    ) -> RecalculationSummary:
        if schedule_id is not None:
            self._notifier.schedules_changed(schedule_id=schedule_id)

        after = self._resolved_ids()
        affected = set(extra or ())
        for employee_id in before.keys() | after.keys():
            old, new = before.get(employee_id), after.get(employee_id)
            if old != new or (schedule_id is not None and schedule_id in (old, new)):
                affected.add(employee_id)

        if not affected:
            return RecalculationSummary()

        end = today or now_local().date()
        start = end - self._window
        logger.info("Schedule %s changed, recalculating %d employees from %s", schedule_id, len(affected), start)
        return self._attendance.recalculate(sorted(affected), start, end)
