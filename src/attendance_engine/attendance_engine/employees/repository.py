from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .department_model import Department
from .model import Employee


class EmployeeRepository(Protocol):
    """Persistence gateway for employees.

    Note (DIP): services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_by_department(self, department_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def set_work_schedule(self, *, employee_id: int, work_schedule_id: Optional[int]) -> bool:
        raise NotImplementedError


class DepartmentRepository(Protocol):
    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError
