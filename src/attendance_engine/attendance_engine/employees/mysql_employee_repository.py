from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .department_model import Department
from .model import Employee
from .repository import DepartmentRepository, EmployeeRepository

_EMPLOYEE_COLUMNS = """
    employee_id, full_name, department_id, work_schedule_id, hire_date,
    leave_days_per_month, is_flexible_hours, required_hours_per_day
"""


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        full_name=r["full_name"],
        department_id=r.get("department_id"),
        work_schedule_id=r.get("work_schedule_id"),
        hire_date=r["hire_date"],
        leave_days_per_month=int(r.get("leave_days_per_month") or 0),
        is_flexible_hours=bool(r.get("is_flexible_hours")),
        required_hours_per_day=float(r.get("required_hours_per_day") or 0),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees ORDER BY employee_id")
            return [_to_employee(r) for r in fetchall(cur)]

    def list_by_department(self, department_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE department_id=%s ORDER BY employee_id",
                (int(department_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def set_work_schedule(self, *, employee_id: int, work_schedule_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET work_schedule_id=%s WHERE employee_id=%s",
                (work_schedule_id, int(employee_id)),
            )
            return cur.rowcount > 0


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department_id, name FROM departments WHERE department_id=%s", (int(department_id),))
            r = fetchone(cur)
            if not r:
                return None
            return Department(department_id=int(r["department_id"]), name=r["name"])

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department_id, name FROM departments ORDER BY name")
            return [Department(department_id=int(r["department_id"]), name=r["name"]) for r in fetchall(cur)]
