from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        """Newest record (highest id) when several exist for the day."""

        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def save(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert or update the single record for (employee, work_date).

        A record with attendance_id 0 is new. Returns the stored record with its id.
        """

        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError
