from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from ..attendance.classifier import AttendanceClassifier
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import first_of_month, iter_days, now_local
from ..common.validators import require_date_range
from ..core.constants import DEFAULT_REPORT_MAX_WORKERS
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from ..employees.repository import DepartmentRepository, EmployeeRepository
from ..leave.budget import LeaveBudget
from ..schedules.resolver import ScheduleResolver
from ..workcalendar.resolver import CalendarResolver
from .model import AttendanceReportItem, AttendanceReportStatistics

logger = logging.getLogger(__name__)


def _latest_per_day(records: Iterable[AttendanceRecord]) -> Dict[date, AttendanceRecord]:
    """One record per day; a duplicate left by a race loses to the newest id."""
    by_day: Dict[date, AttendanceRecord] = {}
    for record in records:
        current = by_day.get(record.work_date)
        if current is None or record.attendance_id > current.attendance_id:
            by_day[record.work_date] = record
    return by_day


class ReportService:
    """Builds per-day attendance reports for an employee, a department or the company."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        schedule_resolver: ScheduleResolver,
        calendar_resolver: CalendarResolver,
        *,
        classifier: Optional[AttendanceClassifier] = None,
        max_workers: int = DEFAULT_REPORT_MAX_WORKERS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._departments = departments
        self._schedules = schedule_resolver
        self._calendar = calendar_resolver
        self._classifier = classifier or AttendanceClassifier()
        self._max_workers = max(1, int(max_workers))

    def _department_name(self, department_id: Optional[int]) -> Optional[str]:
        if department_id is None:
            return None
        department = self._departments.get_by_id(department_id)
        return department.name if department else None

    def build_employee_report(
        self,
        employee_id: int,
        start: date,
        end: date,
        *,
        today: Optional[date] = None,
    ) -> List[AttendanceReportItem]:
        require_date_range(start, end)
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee", employee_id)
        return self._build_for(employee, start, end, today or now_local().date())

    def _build_for(self, employee: Employee, start: date, end: date, today: date) -> List[AttendanceReportItem]:
        department_name = self._department_name(employee.department_id)
        schedule = self._schedules.resolve_for(employee)
        effective = schedule.for_employee(employee) if schedule else None

        # The leave budget is a fold from the 1st of the month, so days
        # before `start` are walked but not emitted.
        fold_start = first_of_month(start)
        records = _latest_per_day(self._attendance.list_for_employee(employee.employee_id, start=fold_start, end=end))
        budget = LeaveBudget(employee.leave_days_per_month)

        items: List[AttendanceReportItem] = []
        for day in iter_days(fold_start, end):
            record = records.get(day)
            if day < start and record is not None:
                continue

            is_holiday = not self._calendar.is_working_date(day)
            is_non_working = is_holiday or not CalendarResolver.schedule_allows(schedule, day)

            if record is not None:
                item = self._record_item(employee, department_name, record, effective, day, is_holiday, is_non_working)
            else:
                if is_holiday:
                    status = AttendanceStatus.HOLIDAY
                elif is_non_working:
                    status = AttendanceStatus.NON_WORKING_DAY
                elif day > today:
                    status = AttendanceStatus.SCHEDULED
                else:
                    status = budget.allocate(day)
                if day < start:
                    continue
                item = AttendanceReportItem(
                    work_date=day,
                    employee_id=employee.employee_id,
                    employee_name=employee.full_name,
                    department_name=department_name,
                    status=status,
                    is_holiday=is_holiday,
                    is_non_working_day=is_non_working,
                    is_flexible_schedule=bool(effective and effective.is_flexible),
                    expected_work_hours=effective.expected_work_hours(day) if effective and not is_non_working else 0.0,
                )
            items.append(item)

        logger.debug("Report for employee %s: %d days from %s to %s", employee.employee_id, len(items), start, end)
        return items

    def _record_item(self, employee, department_name, record, schedule, day, is_holiday, is_non_working) -> AttendanceReportItem:
        fields = self._classifier.classify(record, schedule, day)
        return AttendanceReportItem(
            work_date=day,
            employee_id=employee.employee_id,
            employee_name=employee.full_name,
            department_name=department_name,
            status=fields.status,
            is_holiday=is_holiday,
            is_non_working_day=is_non_working,
            check_in_time=record.check_in_time,
            check_out_time=record.check_out_time,
            work_duration=fields.work_duration,
            is_late=fields.is_late_arrival,
            is_early_departure=fields.is_early_departure,
            is_early_arrival=fields.is_early_arrival,
            is_overtime=fields.is_overtime,
            late_duration=fields.late_duration,
            early_departure_duration=fields.early_departure_duration,
            early_arrival_duration=fields.early_arrival_duration,
            overtime_duration=fields.overtime_duration,
            is_flexible_schedule=fields.is_flexible_schedule,
            expected_work_hours=fields.expected_work_hours,
            notes=record.notes,
        )

    def _fan_out(self, employees: Sequence[Employee], start: date, end: date, today: date) -> List[AttendanceReportItem]:
        # Employees are independent; each one's days stay sequential inside _build_for.
        if not employees:
            return []
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(employees))) as pool:
            parts = list(pool.map(lambda e: self._build_for(e, start, end, today), employees))
        items = [item for part in parts for item in part]
        items.sort(key=lambda i: (i.work_date, i.employee_name, i.employee_id))
        return items

    def build_department_report(
        self,
        department_id: int,
        start: date,
        end: date,
        *,
        today: Optional[date] = None,
    ) -> List[AttendanceReportItem]:
        require_date_range(start, end)
        if not self._departments.get_by_id(department_id):
            raise NotFoundError("Department", department_id)
        employees = list(self._employees.list_by_department(department_id))
        logger.info("Building department %s report for %d employees", department_id, len(employees))
        return self._fan_out(employees, start, end, today or now_local().date())

    def build_company_report(self, start: date, end: date, *, today: Optional[date] = None) -> List[AttendanceReportItem]:
        require_date_range(start, end)
        employees = list(self._employees.list_all())
        logger.info("Building company report for %d employees", len(employees))
        return self._fan_out(employees, start, end, today or now_local().date())

    @staticmethod
    def statistics(items: Iterable[AttendanceReportItem]) -> AttendanceReportStatistics:
        """Aggregate a report.

        Present means both timestamps exist, whatever the day type, so worked
        weekends and holidays count. Day-type buckets come from the item flags:
        holidays first, then the remaining non-working days. Future (Scheduled)
        days are left out of the working-day total.
        """
        counts = dict.fromkeys(AttendanceReportStatistics.__dataclass_fields__, 0)
        for item in items:
            if item.check_in_time is not None and item.check_out_time is not None:
                counts["present_days"] += 1
            counts["late_arrivals"] += int(item.is_late)
            counts["early_departures"] += int(item.is_early_departure)
            counts["early_arrivals"] += int(item.is_early_arrival)
            counts["overtime_days"] += int(item.is_overtime)
            if item.status == AttendanceStatus.INCOMPLETE:
                counts["incomplete_days"] += 1

            if item.is_holiday:
                counts["holidays"] += 1
                continue
            if item.is_non_working_day:
                counts["non_working_days"] += 1
                continue
            if item.status == AttendanceStatus.SCHEDULED:
                continue

            counts["total_working_days"] += 1
            if item.status == AttendanceStatus.ABSENT:
                counts["absent_days"] += 1
            elif item.status == AttendanceStatus.LEAVE:
                counts["leave_days"] += 1
            elif item.status == AttendanceStatus.HALF_DAY:
                counts["half_days"] += 1
        return AttendanceReportStatistics(**counts)
