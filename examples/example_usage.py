"""Example: drive the service layer directly (no Flask, in-memory storage).

A kiosk day in miniature: the admin issues today's code, an employee checks
in late, the admin regenerates the code, and the stale code is refused.
"""

import sys
from datetime import date, datetime
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from qr_attendance.container import build_memory_container
from qr_attendance.core.exceptions import ScanRejected
from qr_attendance.employees.model import Employee


def main():
    container = build_memory_container(employees=[Employee(id=1, employee_code="EMP001", name="Ana Putri")])
    day = date(2024, 1, 2)

    first = container.qr_code_service.issue(day, now=datetime(2024, 1, 2, 6, 0))
    print("issued", first.code)

    outcome = container.attendance_service.process_scan("EMP001", first.code, now=datetime(2024, 1, 2, 8, 20))
    print(outcome.result.value, outcome.status.value, outcome.note)

    second = container.qr_code_service.issue(day, now=datetime(2024, 1, 2, 12, 0))
    print("rotated to", second.code)

    try:
        container.attendance_service.process_scan("EMP001", first.code, now=datetime(2024, 1, 2, 17, 0))
    except ScanRejected as e:
        print("old code refused:", e.kind.value)

    outcome = container.attendance_service.process_scan("EMP001", second.code, now=datetime(2024, 1, 2, 17, 0))
    print(outcome.result.value)
    print(container.report_service.build_daily_summary(day).to_dict())


if __name__ == "__main__":
    main()
