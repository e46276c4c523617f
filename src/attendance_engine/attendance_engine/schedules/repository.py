from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import WorkSchedule


class ScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        raise NotImplementedError

    def list_all(self) -> Sequence[WorkSchedule]:
        """All schedules ordered by schedule_id."""

        raise NotImplementedError

    def list_by_department(self, department_id: int) -> Sequence[WorkSchedule]:
        """Schedules attached to a department, ordered by schedule_id."""

        raise NotImplementedError

    def create(self, schedule: WorkSchedule) -> int:
        """Insert a schedule. Returns schedule_id."""

        raise NotImplementedError

    def update(self, schedule: WorkSchedule) -> bool:
        raise NotImplementedError
