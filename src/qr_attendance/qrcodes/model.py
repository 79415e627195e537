from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class DailyCode:
    """Domain entity: one rotation of the scannable code for a calendar date.

    Rows are never deleted. A rotation only ever flips `is_active` to False on
    the previous code, so the table doubles as an audit trail.
    """

    id: int
    code: str
    code_date: date
    issued_at: datetime
    expires_at: datetime
    is_active: bool = True

    def is_expired(self, now: datetime) -> bool:
        # Valid on [issued_at, expires_at): the expiry instant itself is expired.
        return now >= self.expires_at

    def is_current(self, now: datetime) -> bool:
        return self.is_active and not self.is_expired(now)
