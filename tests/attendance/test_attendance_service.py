from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, time, timedelta

import pytest

from src.attendance_engine.attendance_engine.attendance.model import AttendanceRecord, PunchRecord
from src.attendance_engine.attendance_engine.core.constants import ATTENDANCE_LOCK_STRIPES
from src.attendance_engine.attendance_engine.core.enums import AttendanceStatus, ChangeTopic
from src.attendance_engine.attendance_engine.core.exceptions import InvalidRangeError, NotFoundError, ValidationError
from src.attendance_engine.attendance_engine.schedules.model import WorkSchedule

MONDAY = date(2025, 3, 10)


def at(hour: int, minute: int = 0, day: date = MONDAY) -> datetime:
    return datetime.combine(day, time(hour, minute))


def test_check_in_stores_classified_record(container, attendance):
    record = container.attendance_service.check_in(1, now=at(9, 20))

    assert record.attendance_id > 0
    assert record.classification.status == AttendanceStatus.INCOMPLETE
    assert record.classification.is_late_arrival
    assert attendance.get_by_id(record.attendance_id) == record


def test_repeated_check_in_is_a_no_op(container, attendance):
    first = container.attendance_service.check_in(1, now=at(9, 0))
    second = container.attendance_service.check_in(1, now=at(9, 45))

    assert second == first
    assert second.check_in_time == at(9, 0)
    assert attendance.saves == 1


def test_check_out_completes_record(container):
    container.attendance_service.check_in(1, now=at(9, 0))
    record = container.attendance_service.check_out(1, now=at(16, 40))

    assert record.classification.status == AttendanceStatus.EARLY_DEPARTURE
    assert record.is_complete


def test_repeated_check_out_keeps_first(container):
    container.attendance_service.check_in(1, now=at(9, 0))
    first = container.attendance_service.check_out(1, now=at(17, 0))
    second = container.attendance_service.check_out(1, now=at(18, 0))

    assert second.check_out_time == first.check_out_time == at(17, 0)


def test_check_out_without_check_in_is_rejected(container):
    with pytest.raises(ValidationError):
        container.attendance_service.check_out(1, now=at(17, 0))


def test_check_in_for_unknown_employee(container):
    with pytest.raises(NotFoundError):
        container.attendance_service.check_in(404, now=at(9, 0))


def test_check_out_after_midnight_closes_previous_day(container, schedules):
    schedules.add(WorkSchedule(schedule_id=1, name="Night", start_time=time(22, 0), end_time=time(6, 0)))
    container.attendance_service.check_in(1, now=at(22, 0))

    record = container.attendance_service.check_out(1, now=datetime(2025, 3, 11, 6, 0))

    assert record.work_date == MONDAY
    assert record.classification.status == AttendanceStatus.PRESENT


def test_concurrent_check_ins_produce_one_record(container, attendance):
    barrier = threading.Barrier(8)
    errors = []

    def worker(minute: int):
        try:
            barrier.wait()
            container.attendance_service.check_in(1, now=at(9, minute))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(m,)) for m in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert len(attendance.all()) == 1


def test_lock_pool_does_not_grow_with_punched_days(container):
    service = container.attendance_service
    stripes = len(service._locks)

    for offset in range(40):
        day = date(2025, 1, 1) + timedelta(days=offset)
        service.check_in(1, now=at(9, 0, day=day))

    assert len(service._locks) == stripes == ATTENDANCE_LOCK_STRIPES
    assert service._lock_for(1, MONDAY) is service._lock_for(1, MONDAY)


def test_mutations_publish_change_events(container):
    events = []
    container.notifier.subscribe(ChangeTopic.ATTENDANCE, events.append)

    container.attendance_service.check_in(1, now=at(9, 0))
    container.attendance_service.check_out(1, now=at(17, 0))

    assert [(e.employee_id, e.work_date) for e in events] == [(1, MONDAY), (1, MONDAY)]


def test_failing_subscriber_does_not_break_check_in(container):
    def boom(event):
        raise RuntimeError("subscriber down")

    container.notifier.subscribe(ChangeTopic.ATTENDANCE, boom)

    record = container.attendance_service.check_in(1, now=at(9, 0))

    assert record.attendance_id > 0


def test_punch_merges_into_existing_record(container):
    container.attendance_service.check_in(1, now=at(8, 55))

    record = container.attendance_service.record_punch(PunchRecord(employee_id=1, work_date=MONDAY, check_out_time=at(17, 30)))

    assert record.check_in_time == at(8, 55)
    assert record.check_out_time == at(17, 30)
    assert record.classification.status == AttendanceStatus.EARLY_ARRIVAL


def test_punch_with_inverted_times_is_rejected(container):
    with pytest.raises(ValidationError):
        container.attendance_service.record_punch(
            PunchRecord(employee_id=1, work_date=MONDAY, check_in_time=at(17, 0), check_out_time=at(9, 0))
        )


def test_update_record_reclassifies(container):
    record = container.attendance_service.record_punch(
        PunchRecord(employee_id=1, work_date=MONDAY, check_in_time=at(9, 30), check_out_time=at(17, 0))
    )
    assert record.classification.status == AttendanceStatus.LATE_ARRIVAL

    updated = container.attendance_service.update_record(record.attendance_id, check_in_time=at(9, 0), notes=" fixed ")

    assert updated.classification.status == AttendanceStatus.PRESENT
    assert updated.notes == "fixed"


def test_delete_record(container):
    record = container.attendance_service.check_in(1, now=at(9, 0))

    container.attendance_service.delete_record(record.attendance_id)

    with pytest.raises(NotFoundError):
        container.attendance_service.get_record(record.attendance_id)


def test_recalculate_applies_edited_schedule(container, schedules):
    container.attendance_service.record_punch(
        PunchRecord(employee_id=1, work_date=MONDAY, check_in_time=at(9, 30), check_out_time=at(17, 30))
    )
    schedules.add(replace(schedules.get_by_id(1), start_time=time(9, 30), end_time=time(17, 30)))

    summary = container.attendance_service.recalculate([1], MONDAY, MONDAY)

    assert (summary.processed, summary.failed, summary.cancelled) == (1, 0, False)
    assert container.attendance_service.get_for_date(1, MONDAY).classification.status == AttendanceStatus.PRESENT


def test_recalculate_honours_cancellation(container):
    container.attendance_service.check_in(1, now=at(9, 0))
    cancel = threading.Event()
    cancel.set()

    summary = container.attendance_service.recalculate([1, 2], MONDAY, MONDAY, cancel_event=cancel)

    assert summary.cancelled
    assert summary.processed == 0


def test_recalculate_counts_failures_and_continues(container, attendance, monkeypatch):
    for day in (10, 11, 12):
        attendance.add_raw(
            AttendanceRecord(attendance_id=day, employee_id=1, work_date=date(2025, 3, day), check_in_time=at(9, 0, date(2025, 3, day)))
        )
    real_save = attendance.save

    def flaky_save(record):
        if record.work_date == date(2025, 3, 11):
            raise RuntimeError("db hiccup")
        return real_save(record)

    monkeypatch.setattr(attendance, "save", flaky_save)

    summary = container.attendance_service.recalculate([1], date(2025, 3, 10), date(2025, 3, 12))

    assert summary.processed == 2
    assert summary.failed == 1
    assert not summary.cancelled


def test_recalculate_rejects_inverted_range(container):
    with pytest.raises(InvalidRangeError):
        container.attendance_service.recalculate([1], date(2025, 3, 12), date(2025, 3, 10))
