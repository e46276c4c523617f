from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from ...common.datetime_utils import hours
from ...core.enums import ArrivalKind, AttendanceStatus, DepartureKind
from ...core.exceptions import ValidationError
from ...schedules.model import WorkSchedule
from ..model import Arrival, ClassifiedFields, Departure
from .base import ClassificationStrategy, worked


class FixedScheduleStrategy(ClassificationStrategy):
    """Clock-time evaluation against the schedule's start/end.

    Grace only moves the label boundaries (late, early departure); the
    reported durations are always measured from the expected start/end.
    Overtime has no grace.
    """

    def classify(
        self,
        *,
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        schedule: Optional[WorkSchedule],
        day: date,
    ) -> ClassifiedFields:
        if schedule is None:
            raise ValidationError("Fixed schedule evaluation needs a work schedule")
        expected_start = schedule.expected_start(day)
        expected_end = schedule.expected_end(day)
        grace = timedelta(minutes=schedule.grace_minutes)
        expected = schedule.expected_work_hours(day)

        arrival = self._arrival(check_in, expected_start, grace)
        departure = self._departure(check_out, expected_end, grace)
        duration, complete = worked(check_in, check_out)

        return ClassifiedFields(
            status=self._status(arrival, departure, duration, complete, expected),
            work_duration=duration,
            is_complete=complete,
            arrival=arrival,
            departure=departure,
            is_flexible_schedule=False,
            expected_work_hours=expected,
        )

    @staticmethod
    def _arrival(check_in: Optional[datetime], expected_start: datetime, grace: timedelta) -> Arrival:
        if check_in is None:
            return Arrival.on_time()
        if check_in > expected_start + grace:
            return Arrival.late(check_in - expected_start)
        if check_in < expected_start:
            return Arrival.early(expected_start - check_in)
        return Arrival.on_time()

    @staticmethod
    def _departure(check_out: Optional[datetime], expected_end: datetime, grace: timedelta) -> Departure:
        if check_out is None:
            return Departure.on_time()
        if check_out < expected_end - grace:
            return Departure.early(expected_end - check_out)
        if check_out > expected_end:
            return Departure.overtime(check_out - expected_end)
        return Departure.on_time()

    @staticmethod
    def _status(
        arrival: Arrival,
        departure: Departure,
        duration: Optional[timedelta],
        complete: bool,
        expected_hours: float,
    ) -> AttendanceStatus:
        if not complete:
            return AttendanceStatus.INCOMPLETE
        if arrival.kind == ArrivalKind.LATE and departure.kind == DepartureKind.EARLY:
            return AttendanceStatus.LATE_AND_LEFT_EARLY

        half_day = duration is not None and hours(duration) <= expected_hours / 2
        if arrival.kind == ArrivalKind.LATE:
            return AttendanceStatus.HALF_DAY if half_day else AttendanceStatus.LATE_ARRIVAL
        if departure.kind == DepartureKind.EARLY:
            return AttendanceStatus.HALF_DAY if half_day else AttendanceStatus.EARLY_DEPARTURE
        if arrival.kind == ArrivalKind.EARLY:
            return AttendanceStatus.EARLY_ARRIVAL
        if departure.kind == DepartureKind.OVERTIME:
            return AttendanceStatus.OVERTIME
        return AttendanceStatus.PRESENT
