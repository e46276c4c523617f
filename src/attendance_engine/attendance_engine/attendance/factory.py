from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..schedules.model import WorkSchedule
from .strategies.base import ClassificationStrategy
from .strategies.fixed_strategy import FixedScheduleStrategy
from .strategies.flexible_strategy import FlexibleScheduleStrategy
from .strategies.non_working_strategy import NonWorkingDayStrategy


@dataclass
class ClassificationStrategyFactory:
    """Factory Pattern: choose the classification strategy for a schedule and day."""

    fixed: ClassificationStrategy = field(default_factory=FixedScheduleStrategy)
    flexible: ClassificationStrategy = field(default_factory=FlexibleScheduleStrategy)
    non_working: ClassificationStrategy = field(default_factory=NonWorkingDayStrategy)

    def for_day(self, *, schedule: Optional[WorkSchedule], day: date) -> ClassificationStrategy:
        if schedule is None or not schedule.is_working_day(day):
            return self.non_working
        if schedule.is_flexible:
            return self.flexible
        return self.fixed
