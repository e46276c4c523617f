from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import WEEKDAY_NAMES, WorkSchedule
from .repository import ScheduleRepository

_DAY_COLUMNS = [f"works_{name}" for name in WEEKDAY_NAMES]

_SELECT = f"""
    SELECT schedule_id, name, start_time, end_time, {", ".join(_DAY_COLUMNS)},
           grace_minutes, is_flexible, total_work_hours, department_id, description
    FROM work_schedules
"""


def _to_schedule(r: Dict[str, Any]) -> WorkSchedule:
    return WorkSchedule(
        schedule_id=int(r["schedule_id"]),
        name=r["name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        working_days=tuple(bool(r[col]) for col in _DAY_COLUMNS),
        grace_minutes=int(r.get("grace_minutes") or 0),
        is_flexible=bool(r.get("is_flexible")),
        total_work_hours=float(r.get("total_work_hours") or 0),
        department_id=r.get("department_id"),
        description=r.get("description") or "",
    )


def _params(schedule: WorkSchedule) -> tuple:
    return (
        schedule.name,
        schedule.start_time,
        schedule.end_time,
        *[int(flag) for flag in schedule.working_days],
        int(schedule.grace_minutes),
        int(schedule.is_flexible),
        float(schedule.total_work_hours),
        schedule.department_id,
        schedule.description,
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def list_all(self) -> Sequence[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY schedule_id ASC")
            return [_to_schedule(r) for r in fetchall(cur)]

    def list_by_department(self, department_id: int) -> Sequence[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE department_id=%s ORDER BY schedule_id ASC", (int(department_id),))
            return [_to_schedule(r) for r in fetchall(cur)]

    def create(self, schedule: WorkSchedule) -> int:
        columns = ["name", "start_time", "end_time", *_DAY_COLUMNS,
                   "grace_minutes", "is_flexible", "total_work_hours", "department_id", "description"]
        placeholders = ",".join(["%s"] * len(columns))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO work_schedules({', '.join(columns)}) VALUES({placeholders})",
                _params(schedule),
            )
            return int(cur.lastrowid)

    def update(self, schedule: WorkSchedule) -> bool:
        assignments = ", ".join(
            f"{col}=%s"
            for col in ["name", "start_time", "end_time", *_DAY_COLUMNS,
                        "grace_minutes", "is_flexible", "total_work_hours", "department_id", "description"]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE work_schedules SET {assignments} WHERE schedule_id=%s",
                (*_params(schedule), int(schedule.schedule_id)),
            )
            # MySQL reports 0 affected rows when nothing changed; existence is what matters here.
            cur.execute("SELECT 1 AS found FROM work_schedules WHERE schedule_id=%s", (int(schedule.schedule_id),))
            return fetchone(cur) is not None
