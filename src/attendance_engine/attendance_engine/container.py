from __future__ import annotations

from dataclasses import dataclass

from .attendance.classifier import AttendanceClassifier
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_RECALC_WINDOW_DAYS, DEFAULT_REPORT_MAX_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLDepartmentRepository, MySQLEmployeeRepository
from .employees.repository import DepartmentRepository, EmployeeRepository
from .notifications.notifier import ChangeNotifier
from .reports.service import ReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.resolver import ScheduleResolver
from .schedules.service import ScheduleService
from .workcalendar.mysql_calendar_repository import MySQLCalendarRepository
from .workcalendar.repository import CalendarRepository
from .workcalendar.resolver import CalendarResolver
from .workcalendar.service import CalendarService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    departments_repo: DepartmentRepository
    schedules_repo: ScheduleRepository
    calendar_repo: CalendarRepository
    attendance_repo: AttendanceRepository

    notifier: ChangeNotifier
    schedule_resolver: ScheduleResolver
    calendar_resolver: CalendarResolver

    attendance_service: AttendanceService
    schedule_service: ScheduleService
    calendar_service: CalendarService
    report_service: ReportService


def wire(
    *,
    employees_repo: EmployeeRepository,
    departments_repo: DepartmentRepository,
    schedules_repo: ScheduleRepository,
    calendar_repo: CalendarRepository,
    attendance_repo: AttendanceRepository,
    recalc_window_days: int = DEFAULT_RECALC_WINDOW_DAYS,
    report_max_workers: int = DEFAULT_REPORT_MAX_WORKERS,
) -> Container:
    """Assemble services over any set of repositories (MySQL or in-memory)."""
    notifier = ChangeNotifier()
    classifier = AttendanceClassifier()
    schedule_resolver = ScheduleResolver(employees_repo, schedules_repo)
    calendar_resolver = CalendarResolver(calendar_repo, schedule_resolver)

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        schedule_resolver,
        classifier=classifier,
        notifier=notifier,
    )
    schedule_service = ScheduleService(
        schedules_repo,
        employees_repo,
        departments_repo,
        schedule_resolver,
        attendance_service,
        recalc_window_days=recalc_window_days,
        notifier=notifier,
    )
    calendar_service = CalendarService(calendar_repo, notifier)
    report_service = ReportService(
        attendance_repo,
        employees_repo,
        departments_repo,
        schedule_resolver,
        calendar_resolver,
        classifier=classifier,
        max_workers=report_max_workers,
    )

    return Container(
        employees_repo=employees_repo,
        departments_repo=departments_repo,
        schedules_repo=schedules_repo,
        calendar_repo=calendar_repo,
        attendance_repo=attendance_repo,
        notifier=notifier,
        schedule_resolver=schedule_resolver,
        calendar_resolver=calendar_resolver,
        attendance_service=attendance_service,
        schedule_service=schedule_service,
        calendar_service=calendar_service,
        report_service=report_service,
    )


def build_container(
    *,
    db_config: dict,
    recalc_window_days: int = DEFAULT_RECALC_WINDOW_DAYS,
    report_max_workers: int = DEFAULT_REPORT_MAX_WORKERS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        employees_repo=MySQLEmployeeRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        calendar_repo=MySQLCalendarRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        recalc_window_days=recalc_window_days,
        report_max_workers=report_max_workers,
    )
