from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .model import Employee
from .repository import EmployeeRepository


class InMemoryEmployeeRepository(EmployeeRepository):
    """Dict-backed directory for tests, demos and `STORAGE=memory`."""

    def __init__(self, employees: Iterable[Employee] = ()):
        self._by_code: dict[str, Employee] = {}
        for e in employees:
            self.add(e)

    def add(self, employee: Employee) -> None:
        self._by_code[employee.employee_code] = employee

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        return self._by_code.get(employee_code)

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return next((e for e in self._by_code.values() if e.id == int(employee_id)), None)

    def count_active(self) -> int:
        return sum(1 for e in self._by_code.values() if e.is_active)

    def list_active(self) -> Sequence[Employee]:
        return sorted((e for e in self._by_code.values() if e.is_active), key=lambda e: e.employee_code)
