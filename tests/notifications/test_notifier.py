from __future__ import annotations

import logging
from datetime import date

from src.attendance_engine.attendance_engine.core.enums import ChangeTopic
from src.attendance_engine.attendance_engine.notifications.notifier import ChangeNotifier


def test_subscribers_receive_only_their_topic():
    notifier = ChangeNotifier()
    attendance_events, calendar_events = [], []
    notifier.subscribe(ChangeTopic.ATTENDANCE, attendance_events.append)
    notifier.subscribe(ChangeTopic.CALENDAR, calendar_events.append)

    notifier.attendance_changed(employee_id=1, work_date=date(2025, 3, 3))

    assert len(attendance_events) == 1
    assert attendance_events[0].employee_id == 1
    assert attendance_events[0].work_date == date(2025, 3, 3)
    assert calendar_events == []


def test_failing_subscriber_is_logged_and_others_still_run(caplog):
    notifier = ChangeNotifier()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    notifier.subscribe(ChangeTopic.SCHEDULES, broken)
    notifier.subscribe(ChangeTopic.SCHEDULES, received.append)

    with caplog.at_level(logging.ERROR):
        notifier.schedules_changed(schedule_id=7)

    assert [e.details["schedule_id"] for e in received] == [7]
    assert "failed on schedules change" in caplog.text


def test_unsubscribe_stops_delivery():
    notifier = ChangeNotifier()
    received = []
    notifier.subscribe(ChangeTopic.CALENDAR, received.append)
    notifier.unsubscribe(ChangeTopic.CALENDAR, received.append)

    notifier.calendar_changed(entry_id=3)

    assert received == []
