from __future__ import annotations

from datetime import date, datetime, time

import pytest

from qr_attendance.container import build_memory_container
from qr_attendance.employees.model import Employee
from qr_attendance.policy.policy import FixedSchedulePolicy

WORK_DATE = date(2024, 1, 2)


@pytest.fixture
def work_date() -> date:
    return WORK_DATE


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 2, 8, 10, 0)


@pytest.fixture
def policy() -> FixedSchedulePolicy:
    return FixedSchedulePolicy(start_time=time(8, 0), late_tolerance_minutes=15, code_validity_hours=24)


@pytest.fixture
def employees() -> list[Employee]:
    return [
        Employee(id=1, employee_code="E1", name="Ana Putri", department="Engineering"),
        Employee(id=2, employee_code="E2", name="Budi Santoso", department="Finance"),
        Employee(id=9, employee_code="E9", name="Dewi Anggraini", is_active=False),
    ]


@pytest.fixture
def container(policy, employees):
    return build_memory_container(policy=policy, employees=employees, prefix="TEST")


@pytest.fixture
def issued_code(container):
    """Code for 2024-01-02 issued at midnight, so it expires 2024-01-03 00:00."""
    return container.qr_code_service.issue(WORK_DATE, now=datetime(2024, 1, 2, 0, 0, 0))
