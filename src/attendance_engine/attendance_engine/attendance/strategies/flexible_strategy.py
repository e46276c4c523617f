from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from ...common.datetime_utils import hours
from ...core.constants import HALF_DAY_MAX_PERCENT, HALF_DAY_MIN_PERCENT
from ...core.enums import AttendanceStatus
from ...core.exceptions import ValidationError
from ...schedules.model import WorkSchedule
from ..model import ClassifiedFields, Departure
from .base import ClassificationStrategy, worked


class FlexibleScheduleStrategy(ClassificationStrategy):
    """Total-hours evaluation: clock times never produce late/early flags.

    Worked time under HALF_DAY_MIN_PERCENT of the expected hours is reported
    as Present. That gap is kept as-is; see DESIGN.md.
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
            raise ValidationError("Flexible schedule evaluation needs a work schedule")
        expected = schedule.expected_work_hours(day)
        duration, complete = worked(check_in, check_out)

        if not complete:
            return ClassifiedFields(
                status=AttendanceStatus.INCOMPLETE,
                work_duration=None,
                is_complete=False,
                is_flexible_schedule=True,
                expected_work_hours=expected,
            )

        actual = hours(duration)
        percentage = actual / expected * 100 if expected > 0 else 0.0
        departure = Departure.on_time()

        if HALF_DAY_MIN_PERCENT <= percentage < HALF_DAY_MAX_PERCENT:
            status = AttendanceStatus.HALF_DAY
        elif expected > 0 and actual > expected:
            status = AttendanceStatus.OVERTIME
            departure = Departure.overtime(duration - timedelta(hours=expected))
        else:
            status = AttendanceStatus.PRESENT

        return ClassifiedFields(
            status=status,
            work_duration=duration,
            is_complete=True,
            departure=departure,
            is_flexible_schedule=True,
            expected_work_hours=expected,
        )
