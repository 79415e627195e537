from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee as seen by the attendance core.

    `employee_code` is the business identifier typed at the kiosk; `id` is the
    internal row id that attendance records reference.
    """

    id: int
    employee_code: str
    name: str
    department: str = ""
    position: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
