from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import ArrivalKind, AttendanceStatus, DepartureKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, seconds_to_timedelta, timedelta_to_seconds
from .model import Arrival, AttendanceRecord, ClassifiedFields, Departure
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, employee_id, work_date, check_in_time, check_out_time, notes,
           status, work_duration_seconds, is_complete,
           arrival_kind, arrival_seconds, departure_kind, departure_seconds,
           is_flexible_schedule, expected_work_hours
    FROM attendance_records
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    classification = None
    if r.get("status"):
        arrival_kind = ArrivalKind(r.get("arrival_kind") or ArrivalKind.ON_TIME.value)
        departure_kind = DepartureKind(r.get("departure_kind") or DepartureKind.ON_TIME.value)
        classification = ClassifiedFields(
            status=AttendanceStatus(r["status"]),
            work_duration=seconds_to_timedelta(r.get("work_duration_seconds")),
            is_complete=bool(r.get("is_complete")),
            arrival=Arrival(
                arrival_kind,
                None if arrival_kind == ArrivalKind.ON_TIME else seconds_to_timedelta(r.get("arrival_seconds")),
            ),
            departure=Departure(
                departure_kind,
                None if departure_kind == DepartureKind.ON_TIME else seconds_to_timedelta(r.get("departure_seconds")),
            ),
            is_flexible_schedule=bool(r.get("is_flexible_schedule")),
            expected_work_hours=float(r.get("expected_work_hours") or 0),
        )

    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        notes=r.get("notes") or "",
        classification=classification,
    )


def _derived_params(fields: Optional[ClassifiedFields]) -> tuple:
    if fields is None:
        return (None, None, 0, None, None, None, None, 0, 0.0)
    return (
        fields.status.value,
        timedelta_to_seconds(fields.work_duration),
        int(fields.is_complete),
        fields.arrival.kind.value,
        timedelta_to_seconds(fields.arrival.duration),
        fields.departure.kind.value,
        timedelta_to_seconds(fields.departure.duration),
        int(fields.is_flexible_schedule),
        float(fields.expected_work_hours),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """attendance_records has UNIQUE(employee_id, work_date); save() upserts on it."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE employee_id=%s AND work_date=%s ORDER BY attendance_id DESC LIMIT 1",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_employee(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE employee_id=%s AND work_date BETWEEN %s AND %s ORDER BY work_date ASC, attendance_id ASC",
                (int(employee_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def save(self, record: AttendanceRecord) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    employee_id, work_date, check_in_time, check_out_time, notes,
                    status, work_duration_seconds, is_complete,
                    arrival_kind, arrival_seconds, departure_kind, departure_seconds,
                    is_flexible_schedule, expected_work_hours
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    attendance_id=LAST_INSERT_ID(attendance_id),
                    check_in_time=VALUES(check_in_time),
                    check_out_time=VALUES(check_out_time),
                    notes=VALUES(notes),
                    status=VALUES(status),
                    work_duration_seconds=VALUES(work_duration_seconds),
                    is_complete=VALUES(is_complete),
                    arrival_kind=VALUES(arrival_kind),
                    arrival_seconds=VALUES(arrival_seconds),
                    departure_kind=VALUES(departure_kind),
                    departure_seconds=VALUES(departure_seconds),
                    is_flexible_schedule=VALUES(is_flexible_schedule),
                    expected_work_hours=VALUES(expected_work_hours)
                """,
                (
                    int(record.employee_id),
                    record.work_date,
                    record.check_in_time,
                    record.check_out_time,
                    record.notes,
                    *_derived_params(record.classification),
                ),
            )
            attendance_id = int(cur.lastrowid)

        return replace(record, attendance_id=attendance_id)

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
