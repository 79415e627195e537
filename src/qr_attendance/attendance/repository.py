from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Storage for attendance records.

    Both writes are conditional so that the service's read-then-write cannot
    double check-in or lose a check-out under concurrent scans.
    """

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        daily_code_id: int,
        note: Optional[str] = None,
    ) -> int:
        """Insert if absent; raises ConcurrentConflict if a record already exists."""

        raise NotImplementedError

    def update_checkout(self, *, record_id: int, check_out_time: datetime) -> bool:
        """Set check-out only while it is still empty; False when it was not."""

        raise NotImplementedError

    def list_for_date(self, work_date: date, *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        """Most recent check-ins first."""

        raise NotImplementedError

    def count_by_status(self, work_date: date) -> dict[AttendanceStatus, int]:
        raise NotImplementedError
