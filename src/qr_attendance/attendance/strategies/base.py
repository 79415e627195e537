from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...policy.policy import AttendancePolicy


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class CheckInStrategy(ABC):
    """Strategy Pattern: encapsulate how a check-in is classified.

    Only check-in is classified; a check-out keeps the status decided here.
    """

    @abstractmethod
    def decide_checkin(self, *, now: datetime, work_date: date, policy: AttendancePolicy) -> StatusDecision:
        raise NotImplementedError
