from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional

from ..common.datetime_utils import whole_minutes
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceReportItem:
    """One employee on one day, as shown in a report."""

    work_date: date
    employee_id: int
    employee_name: str
    department_name: Optional[str]
    status: AttendanceStatus
    is_holiday: bool = False
    is_non_working_day: bool = False
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    work_duration: Optional[timedelta] = None
    is_late: bool = False
    is_early_departure: bool = False
    is_early_arrival: bool = False
    is_overtime: bool = False
    late_duration: Optional[timedelta] = None
    early_departure_duration: Optional[timedelta] = None
    early_arrival_duration: Optional[timedelta] = None
    overtime_duration: Optional[timedelta] = None
    is_flexible_schedule: bool = False
    expected_work_hours: float = 0.0
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.work_date.isoformat(),
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "department_name": self.department_name,
            "status": self.status.value,
            "is_holiday": self.is_holiday,
            "is_non_working_day": self.is_non_working_day,
            "check_in": self.check_in_time.isoformat() if self.check_in_time else None,
            "check_out": self.check_out_time.isoformat() if self.check_out_time else None,
            "work_minutes": whole_minutes(self.work_duration),
            "is_late": self.is_late,
            "is_early_departure": self.is_early_departure,
            "is_early_arrival": self.is_early_arrival,
            "is_overtime": self.is_overtime,
            "late_minutes": whole_minutes(self.late_duration),
            "early_departure_minutes": whole_minutes(self.early_departure_duration),
            "early_arrival_minutes": whole_minutes(self.early_arrival_duration),
            "overtime_minutes": whole_minutes(self.overtime_duration),
            "is_flexible_schedule": self.is_flexible_schedule,
            "expected_work_hours": self.expected_work_hours,
            "notes": self.notes,
        }


def _rate(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


@dataclass(frozen=True)
class AttendanceReportStatistics:
    """Counts over a report; rates are percentages and 0 on an empty denominator.

    `total_working_days` counts assessed working days: holidays, non-working
    days and future (Scheduled) days are left out.
    """

    total_working_days: int = 0
    present_days: int = 0
    absent_days: int = 0
    leave_days: int = 0
    half_days: int = 0
    incomplete_days: int = 0
    late_arrivals: int = 0
    early_departures: int = 0
    early_arrivals: int = 0
    overtime_days: int = 0
    holidays: int = 0
    non_working_days: int = 0

    @property
    def attendance_rate(self) -> float:
        return _rate(self.present_days, self.total_working_days)

    @property
    def absence_rate(self) -> float:
        return _rate(self.absent_days, self.total_working_days)

    @property
    def punctuality_rate(self) -> float:
        return _rate(self.present_days - self.late_arrivals, self.present_days)

    @property
    def overtime_rate(self) -> float:
        return _rate(self.overtime_days, self.present_days)

    @property
    def early_arrival_rate(self) -> float:
        return _rate(self.early_arrivals, self.present_days)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.update(
            attendance_rate=round(self.attendance_rate, 2),
            absence_rate=round(self.absence_rate, 2),
            punctuality_rate=round(self.punctuality_rate, 2),
            overtime_rate=round(self.overtime_rate, 2),
            early_arrival_rate=round(self.early_arrival_rate, 2),
        )
        return data
