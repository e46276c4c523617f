from datetime import date, time

import pytest

from src.attendance_engine.attendance_engine.core.exceptions import NotFoundError
from src.attendance_engine.attendance_engine.employees.model import Employee
from src.attendance_engine.attendance_engine.schedules.model import WorkSchedule
from src.attendance_engine.attendance_engine.schedules.resolver import ScheduleResolver
from tests.fakes import InMemoryEmployees, InMemorySchedules

HIRED = date(2024, 1, 1)


def _employee(employee_id=1, *, department_id=10, work_schedule_id=None, **kw):
    return Employee(
        employee_id=employee_id,
        full_name=f"E{employee_id}",
        department_id=department_id,
        hire_date=HIRED,
        work_schedule_id=work_schedule_id,
        **kw,
    )


def test_direct_assignment_wins():
    schedules = InMemorySchedules()
    schedules.add(WorkSchedule(schedule_id=1, name="Default"))
    schedules.add(WorkSchedule(schedule_id=5, name="Dept", department_id=10))
    schedules.add(WorkSchedule(schedule_id=7, name="Direct"))
    employees = InMemoryEmployees()
    employees.add(_employee(work_schedule_id=7))

    assert ScheduleResolver(employees, schedules).resolve(1).schedule_id == 7


def test_department_schedule_lowest_id_wins():
    schedules = InMemorySchedules()
    schedules.add(WorkSchedule(schedule_id=1, name="Default"))
    schedules.add(WorkSchedule(schedule_id=9, name="Dept B", department_id=10))
    schedules.add(WorkSchedule(schedule_id=4, name="Dept A", department_id=10))
    employees = InMemoryEmployees()
    employees.add(_employee())

    assert ScheduleResolver(employees, schedules).resolve(1).schedule_id == 4


def test_dangling_direct_reference_falls_back_to_department():
    schedules = InMemorySchedules()
    schedules.add(WorkSchedule(schedule_id=4, name="Dept", department_id=10))
    employees = InMemoryEmployees()
    employees.add(_employee(work_schedule_id=99))

    assert ScheduleResolver(employees, schedules).resolve(1).schedule_id == 4


def test_system_default_is_lowest_id():
    schedules = InMemorySchedules()
    schedules.add(WorkSchedule(schedule_id=3, name="Other", department_id=20))
    schedules.add(WorkSchedule(schedule_id=2, name="Default"))
    employees = InMemoryEmployees()
    employees.add(_employee(department_id=None))

    assert ScheduleResolver(employees, schedules).resolve(1).schedule_id == 2


def test_no_schedule_anywhere_returns_none(caplog):
    employees = InMemoryEmployees()
    employees.add(_employee())

    with caplog.at_level("WARNING"):
        assert ScheduleResolver(employees, InMemorySchedules()).resolve(1) is None
    assert "No work schedule" in caplog.text


def test_unknown_employee_is_not_found():
    with pytest.raises(NotFoundError):
        ScheduleResolver(InMemoryEmployees(), InMemorySchedules()).resolve(42)


def test_effective_schedule_applies_flexible_hours_flag():
    schedules = InMemorySchedules()
    schedules.add(WorkSchedule(schedule_id=1, name="Office", start_time=time(9, 0), end_time=time(17, 0)))
    employees = InMemoryEmployees()
    employee = employees.add(_employee(is_flexible_hours=True, required_hours_per_day=6.5))

    effective = ScheduleResolver(employees, schedules).effective_for(employee)

    assert effective.is_flexible
    assert effective.total_work_hours == 6.5


def test_expected_hours_and_allowed_window():
    schedule = WorkSchedule(schedule_id=1, name="Office", start_time=time(9, 0), end_time=time(17, 30), grace_minutes=10)
    monday, sunday = date(2025, 3, 10), date(2025, 3, 16)

    assert schedule.expected_work_hours(monday) == 8.5
    assert schedule.expected_work_hours(sunday) == 0
    latest_in, earliest_out = schedule.allowed_attendance_times(monday)
    assert latest_in.time() == time(9, 10)
    assert earliest_out.time() == time(17, 20)
    assert schedule.allowed_attendance_times(sunday) is None
