from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time

import pytest

from src.attendance_engine.attendance_engine.attendance.model import PunchRecord
from src.attendance_engine.attendance_engine.core.enums import AttendanceStatus, ChangeTopic
from src.attendance_engine.attendance_engine.core.exceptions import NotFoundError, ValidationError
from src.attendance_engine.attendance_engine.schedules.model import WorkSchedule

TODAY = date(2025, 3, 20)


def punch(container, employee_id: int, day: date, start: time, end: time):
    return container.attendance_service.record_punch(
        PunchRecord(
            employee_id=employee_id,
            work_date=day,
            check_in_time=datetime.combine(day, start),
            check_out_time=datetime.combine(day, end),
        )
    )


def status_of(container, employee_id: int, day: date) -> AttendanceStatus:
    return container.attendance_service.get_for_date(employee_id, day).classification.status


def test_update_schedule_recalculates_records_in_window(container, schedules):
    punch(container, 1, date(2025, 3, 10), time(9, 30), time(17, 30))
    punch(container, 2, date(2025, 3, 11), time(9, 30), time(17, 30))
    punch(container, 1, date(2025, 1, 6), time(9, 30), time(17, 30))

    summary = container.schedule_service.update_schedule(
        replace(schedules.get_by_id(1), start_time=time(9, 30), end_time=time(17, 30)),
        today=TODAY,
    )

    assert summary.processed == 2
    assert status_of(container, 1, date(2025, 3, 10)) == AttendanceStatus.PRESENT
    assert status_of(container, 2, date(2025, 3, 11)) == AttendanceStatus.PRESENT
    # Outside the trailing window: left as classified before.
    assert status_of(container, 1, date(2025, 1, 6)) == AttendanceStatus.LATE_ARRIVAL


def test_update_schedule_notifies(container, schedules):
    events = []
    container.notifier.subscribe(ChangeTopic.SCHEDULES, events.append)

    container.schedule_service.update_schedule(replace(schedules.get_by_id(1), grace_minutes=5), today=TODAY)

    assert events[0].details == {"schedule_id": 1}


def test_assign_to_employee_switches_to_flexible(container):
    punch(container, 1, date(2025, 3, 12), time(10, 0), time(18, 0))
    assert status_of(container, 1, date(2025, 3, 12)) == AttendanceStatus.LATE_ARRIVAL
    flexible = container.schedule_service.create_schedule(
        WorkSchedule(schedule_id=0, name="Flexible", is_flexible=True, total_work_hours=8.0)
    )

    summary = container.schedule_service.assign_to_employee(employee_id=1, schedule_id=flexible.schedule_id, today=TODAY)

    assert summary.processed == 1
    record = container.attendance_service.get_for_date(1, date(2025, 3, 12))
    assert record.classification.is_flexible_schedule
    assert record.classification.status == AttendanceStatus.PRESENT


def test_assign_to_department_only_touches_employees_whose_schedule_changed(container, employees):
    punch(container, 1, date(2025, 3, 12), time(9, 0), time(17, 0))
    punch(container, 2, date(2025, 3, 12), time(7, 0), time(15, 0))
    early = container.schedule_service.create_schedule(
        WorkSchedule(schedule_id=0, name="Early", start_time=time(7, 0), end_time=time(15, 0))
    )

    summary = container.schedule_service.assign_to_department(
        schedule_id=early.schedule_id, department_id=10, today=TODAY
    )

    # Employee 1 keeps the direct assignment; employee 2 moves to the department schedule.
    assert summary.processed == 1
    assert status_of(container, 2, date(2025, 3, 12)) == AttendanceStatus.PRESENT
    assert container.schedule_resolver.resolve(2).schedule_id == early.schedule_id
    assert container.schedule_resolver.resolve(1).schedule_id == 1


def test_assign_to_unknown_department(container):
    with pytest.raises(NotFoundError):
        container.schedule_service.assign_to_department(schedule_id=1, department_id=999, today=TODAY)


def test_update_unknown_schedule(container):
    with pytest.raises(NotFoundError):
        container.schedule_service.update_schedule(WorkSchedule(schedule_id=77, name="Ghost"), today=TODAY)


def test_negative_grace_is_rejected(container, schedules):
    with pytest.raises(ValidationError):
        container.schedule_service.update_schedule(replace(schedules.get_by_id(1), grace_minutes=-5), today=TODAY)
