from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, ScanResult


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's check-in/check-out pair for one date."""

    id: int
    employee_id: int
    work_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    daily_code_id: int
    note: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.check_out_time is not None


@dataclass(frozen=True)
class ScanOutcome:
    """Result of a scan that changed state (check-in or check-out)."""

    result: ScanResult
    employee_code: str
    employee_name: str
    work_date: date
    timestamp: datetime
    status: AttendanceStatus
    record_id: int
    note: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "result": self.result.value,
            "employee_id": self.employee_code,
            "employee_name": self.employee_name,
            "date": self.work_date.isoformat(),
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "record_id": self.record_id,
            "note": self.note,
        }


@dataclass(frozen=True)
class AttendanceFeedRow:
    """Read-model for the "today's attendance" list (record + employee names)."""

    employee_code: str
    employee_name: str
    department: str
    work_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_code,
            "employee_name": self.employee_name,
            "department": self.department,
            "date": self.work_date.isoformat(),
            "check_in": self.check_in_time.isoformat(),
            "check_out": self.check_out_time.isoformat() if self.check_out_time else None,
            "status": self.status.value,
        }
