from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Read-only employee directory.

    Note: the attendance core never writes employees; CRUD lives outside it.
    """

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        """Return the employee whether active or not; callers check `is_active`."""

        raise NotImplementedError

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def list_active(self) -> Sequence[Employee]:
        raise NotImplementedError
