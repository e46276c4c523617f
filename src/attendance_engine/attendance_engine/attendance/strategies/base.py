from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional

from ...schedules.model import WorkSchedule
from ..model import ClassifiedFields


class ClassificationStrategy(ABC):
    """Strategy Pattern: encapsulate how one kind of day is classified."""

    @abstractmethod
    def classify(
        self,
        *,
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        schedule: Optional[WorkSchedule],
        day: date,
    ) -> ClassifiedFields:
        raise NotImplementedError


def worked(check_in: Optional[datetime], check_out: Optional[datetime]):
    """(work_duration, is_complete) for a pair of optional timestamps."""
    if check_in is None or check_out is None:
        return None, False
    return check_out - check_in, True
