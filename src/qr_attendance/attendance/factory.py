from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..policy.policy import AttendancePolicy
from .strategies.base import CheckInStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class CheckInStrategyFactory:
    """Factory Pattern: choose the check-in strategy from the policy."""

    def for_checkin(self, *, now: datetime, work_date: date, policy: AttendancePolicy) -> CheckInStrategy:
        if policy.is_late(work_date, now):
            return LateStrategy()
        return PresentStrategy()
