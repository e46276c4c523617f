from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.attendance_engine.attendance_engine.container import wire
from src.attendance_engine.attendance_engine.employees.department_model import Department
from src.attendance_engine.attendance_engine.employees.model import Employee
from src.attendance_engine.attendance_engine.schedules.model import WorkSchedule
from tests.fakes import (
    InMemoryAttendance,
    InMemoryCalendar,
    InMemoryDepartments,
    InMemoryEmployees,
    InMemorySchedules,
)

# 2025-03-10 is a Monday.
MONDAY = date(2025, 3, 10)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 9, 0)


@pytest.fixture
def standard_schedule() -> WorkSchedule:
    return WorkSchedule(schedule_id=1, name="Office", start_time=time(9, 0), end_time=time(17, 0), grace_minutes=15)


@pytest.fixture
def flexible_schedule() -> WorkSchedule:
    return WorkSchedule(schedule_id=2, name="Flexible", is_flexible=True, total_work_hours=8.0)


@pytest.fixture
def employees() -> InMemoryEmployees:
    repo = InMemoryEmployees()
    repo.add(Employee(employee_id=1, full_name="Alice Nguyen", department_id=10, hire_date=date(2024, 1, 1), work_schedule_id=1))
    repo.add(Employee(employee_id=2, full_name="Bao Tran", department_id=10, hire_date=date(2024, 1, 1)))
    return repo


@pytest.fixture
def departments() -> InMemoryDepartments:
    repo = InMemoryDepartments()
    repo.add(Department(department_id=10, name="Engineering"))
    repo.add(Department(department_id=20, name="Sales"))
    return repo


@pytest.fixture
def schedules(standard_schedule) -> InMemorySchedules:
    repo = InMemorySchedules()
    repo.add(standard_schedule)
    return repo


@pytest.fixture
def calendar() -> InMemoryCalendar:
    return InMemoryCalendar()


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def container(employees, departments, schedules, calendar, attendance):
    return wire(
        employees_repo=employees,
        departments_repo=departments,
        schedules_repo=schedules,
        calendar_repo=calendar,
        attendance_repo=attendance,
        report_max_workers=2,
    )
