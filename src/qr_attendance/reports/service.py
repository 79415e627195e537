from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..attendance.repository import AttendanceRepository
from ..core.enums import AttendanceStatus
from ..employees.repository import EmployeeRepository


@dataclass(frozen=True)
class DailySummary:
    """Dashboard counters for one date.

    `absent` is derived (active employees without a record); it is not a
    record state and nothing is ever stored for it.
    """

    work_date: date
    total_employees: int
    present: int
    late: int
    absent: int

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.isoformat(),
            "total_employees": self.total_employees,
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
        }


class AttendanceReportService:
    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def build_daily_summary(self, work_date: date) -> DailySummary:
        counts = self._attendance.count_by_status(work_date)
        total = self._employees.count_active()
        present = counts.get(AttendanceStatus.PRESENT, 0)
        late = counts.get(AttendanceStatus.LATE, 0)
        return DailySummary(
            work_date=work_date,
            total_employees=total,
            present=present,
            late=late,
            absent=max(0, total - present - late),
        )

    def build_range_summary(self, start: date, end: date) -> list[DailySummary]:
        """One summary per day, oldest first (the dashboard's weekly chart)."""

        if end < start:
            return []
        days = (end - start).days + 1
        return [self.build_daily_summary(date.fromordinal(start.toordinal() + i)) for i in range(days)]
