from __future__ import annotations

from datetime import date
from typing import Optional

from ..schedules.model import WorkSchedule
from .factory import ClassificationStrategyFactory
from .model import AttendanceRecord, ClassifiedFields


class AttendanceClassifier:
    """Derives status, deviations and durations for one attendance record.

    Pure: the result depends only on the record's timestamps, the effective
    schedule and the date, so classifying the same triple twice gives equal
    fields. Pass the schedule through `WorkSchedule.for_employee` first when
    the employee's flexible-hours flag has to be honoured.
    """

    def __init__(self, strategy_factory: Optional[ClassificationStrategyFactory] = None):
        self._factory = strategy_factory or ClassificationStrategyFactory()

    def classify(self, record: AttendanceRecord, schedule: Optional[WorkSchedule], day: Optional[date] = None) -> ClassifiedFields:
        day = day or record.work_date
        strategy = self._factory.for_day(schedule=schedule, day=day)
        return strategy.classify(
            check_in=record.check_in_time,
            check_out=record.check_out_time,
            schedule=schedule,
            day=day,
        )

    def reclassify(self, record: AttendanceRecord, schedule: Optional[WorkSchedule]) -> AttendanceRecord:
        return record.with_classification(self.classify(record, schedule))
