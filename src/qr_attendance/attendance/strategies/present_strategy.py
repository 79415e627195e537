from __future__ import annotations

from datetime import date, datetime

from ...core.enums import AttendanceStatus
from ...policy.policy import AttendancePolicy
from .base import CheckInStrategy, StatusDecision


class PresentStrategy(CheckInStrategy):
    """Check-in before the late threshold."""

    def decide_checkin(self, *, now: datetime, work_date: date, policy: AttendancePolicy) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
