from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import CalendarEntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CalendarEntry
from .repository import CalendarRepository

_SELECT = """
    SELECT entry_id, entry_date, name, description, entry_type, is_recurring_annually
    FROM calendar_entries
"""


def _to_entry(r: Dict[str, Any]) -> CalendarEntry:
    return CalendarEntry(
        entry_id=int(r["entry_id"]),
        entry_date=r["entry_date"],
        name=r["name"],
        description=r.get("description") or "",
        entry_type=CalendarEntryType(r["entry_type"]),
        is_recurring_annually=bool(r.get("is_recurring_annually")),
    )


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[CalendarEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def find_for_date(self, day: date) -> Optional[CalendarEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE DAY(entry_date)=%s AND MONTH(entry_date)=%s
                  AND (YEAR(entry_date)=%s OR is_recurring_annually=1)
                ORDER BY (YEAR(entry_date)=%s) DESC, entry_id ASC
                LIMIT 1
                """,
                (day.day, day.month, day.year, day.year),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_in_range(self, *, start: date, end: date) -> Sequence[CalendarEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE entry_date BETWEEN %s AND %s ORDER BY entry_date ASC", (start, end))
            return [_to_entry(r) for r in fetchall(cur)]

    def list_recurring_for_month(self, month: int) -> Sequence[CalendarEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE is_recurring_annually=1 AND MONTH(entry_date)=%s ORDER BY DAY(entry_date) ASC",
                (int(month),),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def create(self, entry: CalendarEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO calendar_entries(entry_date, name, description, entry_type, is_recurring_annually)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (entry.entry_date, entry.name, entry.description, entry.entry_type.value, int(entry.is_recurring_annually)),
            )
            return int(cur.lastrowid)

    def update(self, entry: CalendarEntry) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE calendar_entries
                SET entry_date=%s, name=%s, description=%s, entry_type=%s, is_recurring_annually=%s
                WHERE entry_id=%s
                """,
                (
                    entry.entry_date,
                    entry.name,
                    entry.description,
                    entry.entry_type.value,
                    int(entry.is_recurring_annually),
                    int(entry.entry_id),
                ),
            )
            cur.execute("SELECT 1 AS found FROM calendar_entries WHERE entry_id=%s", (int(entry.entry_id),))
            return fetchone(cur) is not None

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM calendar_entries WHERE entry_id=%s", (int(entry_id),))
            return cur.rowcount > 0
