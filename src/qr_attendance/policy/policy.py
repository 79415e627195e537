from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from ..core.constants import DEFAULT_CODE_VALIDITY_HOURS, DEFAULT_LATE_TOLERANCE_MINUTES
from ..core.exceptions import ValidationError
from .model import CompanySettings


class AttendancePolicy(ABC):
    """Working-hours rules consulted by the code lifecycle and the scan processor.

    Implementations are stateless.
    """

    @abstractmethod
    def work_start(self, work_date: date) -> datetime:
        raise NotImplementedError

    @property
    @abstractmethod
    def late_tolerance(self) -> timedelta:
        raise NotImplementedError

    @property
    @abstractmethod
    def code_validity(self) -> timedelta:
        raise NotImplementedError

    def late_threshold(self, work_date: date) -> datetime:
        return self.work_start(work_date) + self.late_tolerance

    def is_late(self, work_date: date, check_in_time: datetime) -> bool:
        # The threshold instant itself already counts as late.
        return check_in_time >= self.late_threshold(work_date)


@dataclass(frozen=True)
class FixedSchedulePolicy(AttendancePolicy):
    """Same start time every day."""

    start_time: time = time(8, 0)
    late_tolerance_minutes: int = DEFAULT_LATE_TOLERANCE_MINUTES
    code_validity_hours: int = DEFAULT_CODE_VALIDITY_HOURS

    def __post_init__(self):
        if self.late_tolerance_minutes < 0:
            raise ValidationError("late_tolerance_minutes must not be negative")
        if self.code_validity_hours < 1:
            raise ValidationError("code_validity_hours must be at least 1")

    def work_start(self, work_date: date) -> datetime:
        return datetime.combine(work_date, self.start_time)

    @property
    def late_tolerance(self) -> timedelta:
        return timedelta(minutes=self.late_tolerance_minutes)

    @property
    def code_validity(self) -> timedelta:
        return timedelta(hours=self.code_validity_hours)


def policy_from_company_settings(
    settings: CompanySettings, *, code_validity_hours: int = DEFAULT_CODE_VALIDITY_HOURS
) -> FixedSchedulePolicy:
    return FixedSchedulePolicy(
        start_time=settings.work_hours_start,
        late_tolerance_minutes=int(settings.late_tolerance_minutes),
        code_validity_hours=code_validity_hours,
    )
