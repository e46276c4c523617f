from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Optional

from ..core.enums import ArrivalKind, AttendanceStatus, DepartureKind


@dataclass(frozen=True)
class Arrival:
    """How the check-in relates to the expected start.

    LATE and EARLY carry the deviation measured from the expected start;
    ON_TIME carries none. Late and early arrival cannot both hold.
    """

    kind: ArrivalKind = ArrivalKind.ON_TIME
    duration: Optional[timedelta] = None

    def __post_init__(self) -> None:
        if (self.kind == ArrivalKind.ON_TIME) != (self.duration is None):
            raise ValueError(f"{self.kind.value} arrival with duration={self.duration!r}")

    @classmethod
    def on_time(cls) -> "Arrival":
        return cls()

    @classmethod
    def late(cls, duration: timedelta) -> "Arrival":
        return cls(ArrivalKind.LATE, duration)

    @classmethod
    def early(cls, duration: timedelta) -> "Arrival":
        return cls(ArrivalKind.EARLY, duration)


@dataclass(frozen=True)
class Departure:
    """How the check-out relates to the expected end.

    EARLY carries the time missed before the expected end, OVERTIME the time
    worked past it. The two are mutually exclusive.
    """

    kind: DepartureKind = DepartureKind.ON_TIME
    duration: Optional[timedelta] = None

    def __post_init__(self) -> None:
        if (self.kind == DepartureKind.ON_TIME) != (self.duration is None):
            raise ValueError(f"{self.kind.value} departure with duration={self.duration!r}")

    @classmethod
    def on_time(cls) -> "Departure":
        return cls()

    @classmethod
    def early(cls, duration: timedelta) -> "Departure":
        return cls(DepartureKind.EARLY, duration)

    @classmethod
    def overtime(cls, duration: timedelta) -> "Departure":
        return cls(DepartureKind.OVERTIME, duration)


@dataclass(frozen=True)
class ClassifiedFields:
    """Everything the classifier derives for one (record, schedule, date)."""

    status: AttendanceStatus
    work_duration: Optional[timedelta]
    is_complete: bool
    arrival: Arrival = Arrival()
    departure: Departure = Departure()
    is_flexible_schedule: bool = False
    expected_work_hours: float = 0.0

    @property
    def is_late_arrival(self) -> bool:
        return self.arrival.kind == ArrivalKind.LATE

    @property
    def is_early_arrival(self) -> bool:
        return self.arrival.kind == ArrivalKind.EARLY

    @property
    def is_early_departure(self) -> bool:
        return self.departure.kind == DepartureKind.EARLY

    @property
    def is_overtime(self) -> bool:
        return self.departure.kind == DepartureKind.OVERTIME

    @property
    def late_duration(self) -> Optional[timedelta]:
        return self.arrival.duration if self.is_late_arrival else None

    @property
    def early_arrival_duration(self) -> Optional[timedelta]:
        return self.arrival.duration if self.is_early_arrival else None

    @property
    def early_departure_duration(self) -> Optional[timedelta]:
        return self.departure.duration if self.is_early_departure else None

    @property
    def overtime_duration(self) -> Optional[timedelta]:
        return self.departure.duration if self.is_overtime else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one day.

    Raw data is `check_in_time`/`check_out_time`/`notes`; `classification`
    holds the derived fields as of the last (re)classification.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    notes: str = ""
    classification: Optional[ClassifiedFields] = None

    @property
    def work_duration(self) -> Optional[timedelta]:
        if self.check_in_time is None or self.check_out_time is None:
            return None
        return self.check_out_time - self.check_in_time

    @property
    def is_complete(self) -> bool:
        return self.check_in_time is not None and self.check_out_time is not None

    def with_classification(self, fields: ClassifiedFields) -> "AttendanceRecord":
        return replace(self, classification=fields)


@dataclass(frozen=True)
class PunchRecord:
    """Raw punch handed over by device sync or file import."""

    employee_id: int
    work_date: date
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
