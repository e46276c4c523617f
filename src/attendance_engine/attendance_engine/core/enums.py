from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Final per-day label shown on reports."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"
    LATE_ARRIVAL = "Late Arrival"
    EARLY_DEPARTURE = "Early Departure"
    LATE_AND_LEFT_EARLY = "Late & Left Early"
    EARLY_ARRIVAL = "Early Arrival"
    OVERTIME = "Overtime"
    HALF_DAY = "Half Day"
    HOLIDAY = "Holiday"
    NON_WORKING_DAY = "Non-Working Day"
    SCHEDULED = "Scheduled"
    INCOMPLETE = "Incomplete"


class CalendarEntryType(str, Enum):
    """Kinds of organization calendar entries.

    Only SHORT_DAY keeps the date a working day.
    """

    HOLIDAY = "HOLIDAY"
    NON_WORKING_DAY = "NON_WORKING_DAY"
    SHORT_DAY = "SHORT_DAY"


class ArrivalKind(str, Enum):
    ON_TIME = "ON_TIME"
    LATE = "LATE"
    EARLY = "EARLY"


class DepartureKind(str, Enum):
    ON_TIME = "ON_TIME"
    EARLY = "EARLY"
    OVERTIME = "OVERTIME"


class ChangeTopic(str, Enum):
    ATTENDANCE = "attendance"
    SCHEDULES = "schedules"
    CALENDAR = "calendar"
