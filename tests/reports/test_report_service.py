from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.attendance_engine.attendance_engine.attendance.model import AttendanceRecord, PunchRecord
from src.attendance_engine.attendance_engine.core.enums import AttendanceStatus, CalendarEntryType
from src.attendance_engine.attendance_engine.core.exceptions import InvalidRangeError, NotFoundError
from src.attendance_engine.attendance_engine.employees.model import Employee
from src.attendance_engine.attendance_engine.workcalendar.model import CalendarEntry

S = AttendanceStatus
TODAY = date(2025, 3, 20)


def punch(container, employee_id: int, day: date, start: time, end: time):
    container.attendance_service.record_punch(
        PunchRecord(
            employee_id=employee_id,
            work_date=day,
            check_in_time=datetime.combine(day, start),
            check_out_time=datetime.combine(day, end),
        )
    )


def statuses(items):
    return {i.work_date: i.status for i in items}


def test_holiday_without_record_is_not_leave_or_absent(container, calendar):
    calendar.add(CalendarEntry(1, date(2025, 3, 5), "Founders day", CalendarEntryType.HOLIDAY))

    items = container.report_service.build_employee_report(1, date(2025, 3, 3), date(2025, 3, 7), today=TODAY)

    assert [i.status for i in items] == [S.LEAVE, S.LEAVE, S.HOLIDAY, S.ABSENT, S.ABSENT]
    assert items[2].is_holiday and items[2].is_non_working_day


def test_one_item_per_day_and_weekends_are_holidays(container):
    items = container.report_service.build_employee_report(1, date(2025, 3, 10), date(2025, 3, 16), today=TODAY)

    assert [i.work_date.day for i in items] == [10, 11, 12, 13, 14, 15, 16]
    assert items[5].status == S.HOLIDAY
    assert items[6].status == S.HOLIDAY


def test_future_days_are_scheduled(container):
    items = container.report_service.build_employee_report(1, date(2025, 3, 3), date(2025, 3, 7), today=date(2025, 3, 5))

    assert [i.status for i in items] == [S.LEAVE, S.LEAVE, S.ABSENT, S.SCHEDULED, S.SCHEDULED]


def test_mid_month_start_carries_leave_budget_from_the_first(container):
    for day in (3, 4, 5, 6, 7, 10):
        punch(container, 1, date(2025, 3, day), time(9, 0), time(17, 0))

    partial = container.report_service.build_employee_report(1, date(2025, 3, 11), date(2025, 3, 14), today=TODAY)
    full = container.report_service.build_employee_report(1, date(2025, 3, 1), date(2025, 3, 14), today=TODAY)

    assert [i.status for i in partial] == [S.LEAVE, S.LEAVE, S.ABSENT, S.ABSENT]
    assert {d: s for d, s in statuses(full).items() if d >= date(2025, 3, 11)} == statuses(partial)


def test_budget_resets_at_month_boundary(container):
    items = container.report_service.build_employee_report(1, date(2025, 3, 27), date(2025, 4, 2), today=TODAY.replace(month=5))

    assert statuses(items) == {
        date(2025, 3, 27): S.ABSENT,
        date(2025, 3, 28): S.ABSENT,
        date(2025, 3, 29): S.HOLIDAY,
        date(2025, 3, 30): S.HOLIDAY,
        date(2025, 3, 31): S.ABSENT,
        date(2025, 4, 1): S.LEAVE,
        date(2025, 4, 2): S.LEAVE,
    }


def test_days_with_records_are_classified(container):
    punch(container, 1, date(2025, 3, 10), time(9, 20), time(17, 0))

    item = container.report_service.build_employee_report(1, date(2025, 3, 10), date(2025, 3, 10), today=TODAY)[0]

    assert item.status == S.LATE_ARRIVAL
    assert item.is_late
    assert item.to_dict()["late_minutes"] == 20


def test_duplicate_records_newest_wins(container, attendance):
    day = date(2025, 3, 10)
    attendance.add_raw(AttendanceRecord(50, 1, day, datetime(2025, 3, 10, 10, 0), datetime(2025, 3, 10, 17, 0)))
    attendance.add_raw(AttendanceRecord(51, 1, day, datetime(2025, 3, 10, 9, 0), datetime(2025, 3, 10, 17, 0)))

    item = container.report_service.build_employee_report(1, day, day, today=TODAY)[0]

    assert item.status == S.PRESENT


def test_pre_hire_days_are_emitted(container, employees):
    employees.add(Employee(employee_id=3, full_name="Chi Le", department_id=20, hire_date=date(2025, 3, 12)))

    items = container.report_service.build_employee_report(3, date(2025, 3, 10), date(2025, 3, 14), today=TODAY)

    assert len(items) == 5
    assert items[0].work_date == date(2025, 3, 10)


def test_without_any_schedule_weekdays_are_non_working(container, schedules):
    schedules.schedules.clear()

    items = container.report_service.build_employee_report(1, date(2025, 3, 14), date(2025, 3, 15), today=TODAY)

    assert [i.status for i in items] == [S.NON_WORKING_DAY, S.HOLIDAY]


def test_department_report_sorted_by_date_then_name(container):
    items = container.report_service.build_department_report(10, date(2025, 3, 10), date(2025, 3, 11), today=TODAY)

    assert [(i.work_date.day, i.employee_name) for i in items] == [
        (10, "Alice Nguyen"),
        (10, "Bao Tran"),
        (11, "Alice Nguyen"),
        (11, "Bao Tran"),
    ]
    assert {i.department_name for i in items} == {"Engineering"}


def test_company_report_covers_every_employee(container, employees):
    employees.add(Employee(employee_id=3, full_name="Chi Le", department_id=20, hire_date=date(2024, 1, 1)))

    items = container.report_service.build_company_report(date(2025, 3, 10), date(2025, 3, 10), today=TODAY)

    assert [i.employee_name for i in items] == ["Alice Nguyen", "Bao Tran", "Chi Le"]


def test_empty_department_report(container):
    assert container.report_service.build_department_report(20, date(2025, 3, 10), date(2025, 3, 11), today=TODAY) == []


def test_inverted_range_rejected_before_lookup(container):
    with pytest.raises(InvalidRangeError):
        container.report_service.build_employee_report(404, date(2025, 3, 11), date(2025, 3, 10))


def test_unknown_employee_and_department(container):
    with pytest.raises(NotFoundError):
        container.report_service.build_employee_report(404, date(2025, 3, 10), date(2025, 3, 11))
    with pytest.raises(NotFoundError):
        container.report_service.build_department_report(404, date(2025, 3, 10), date(2025, 3, 11))


def test_statistics(container, calendar):
    calendar.add(CalendarEntry(1, date(2025, 3, 5), "Founders day", CalendarEntryType.HOLIDAY))
    punch(container, 1, date(2025, 3, 3), time(9, 20), time(17, 0))
    punch(container, 1, date(2025, 3, 4), time(8, 50), time(17, 30))

    items = container.report_service.build_employee_report(1, date(2025, 3, 3), date(2025, 3, 9), today=TODAY)
    stats = container.report_service.statistics(items)

    assert stats.holidays == 3
    assert stats.total_working_days == 4
    assert stats.present_days == 2
    assert stats.leave_days == 2
    assert stats.absent_days == 0
    assert stats.late_arrivals == 1
    assert stats.early_arrivals == 1
    assert stats.overtime_days == 1
    assert stats.attendance_rate == pytest.approx(50.0)
    assert stats.punctuality_rate == pytest.approx(50.0)
    assert stats.absence_rate == 0


def test_statistics_count_worked_weekend_and_not_incomplete_day(container):
    container.attendance_service.record_punch(
        PunchRecord(employee_id=1, work_date=date(2025, 3, 10), check_in_time=datetime(2025, 3, 10, 9, 0))
    )
    punch(container, 1, date(2025, 3, 15), time(10, 0), time(14, 0))

    items = container.report_service.build_employee_report(1, date(2025, 3, 10), date(2025, 3, 16), today=TODAY)
    stats = container.report_service.statistics(items)

    assert statuses(items)[date(2025, 3, 10)] == S.INCOMPLETE
    assert stats.present_days == 1
    assert stats.incomplete_days == 1
    assert stats.holidays == 2
    assert stats.non_working_days == 0
    assert stats.total_working_days == 5
    assert stats.absent_days == 4


def test_statistics_of_nothing_has_zero_rates(container):
    stats = container.report_service.statistics([])

    assert stats.attendance_rate == 0
    assert stats.punctuality_rate == 0
