from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...schedules.model import WorkSchedule
from ..model import ClassifiedFields
from .base import ClassificationStrategy, worked


class NonWorkingDayStrategy(ClassificationStrategy):
    """Record on a day the schedule does not cover (or with no schedule at all).

    Timestamps are kept but never produce late/early/overtime flags.
    """

    def classify(
        self,
        *,
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        schedule: Optional[WorkSchedule],
        day: date,
    ) -> ClassifiedFields:
        duration, complete = worked(check_in, check_out)
        return ClassifiedFields(
            status=AttendanceStatus.PRESENT if complete else AttendanceStatus.INCOMPLETE,
            work_duration=duration,
            is_complete=complete,
            is_flexible_schedule=bool(schedule and schedule.is_flexible),
            expected_work_hours=0.0,
        )
