from __future__ import annotations

from datetime import date, datetime

from ...core.enums import AttendanceStatus
from ...policy.policy import AttendancePolicy
from .base import CheckInStrategy, StatusDecision


class LateStrategy(CheckInStrategy):
    """Check-in at or after work start + tolerance; notes how late."""

    def decide_checkin(self, *, now: datetime, work_date: date, policy: AttendancePolicy) -> StatusDecision:
        minutes = int((now - policy.work_start(work_date)).total_seconds() // 60)
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Late by {minutes} min")
