from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import DailyCode


class DailyCodeRepository(Protocol):
    def get_by_code(self, code: str) -> Optional[DailyCode]:
        raise NotImplementedError

    def get_active_for_date(self, code_date: date) -> Optional[DailyCode]:
        """Row flagged active for the date, expired or not."""

        raise NotImplementedError

    def list_for_date(self, code_date: date) -> Sequence[DailyCode]:
        raise NotImplementedError

    def rotate(self, *, code: str, code_date: date, issued_at: datetime, expires_at: datetime) -> DailyCode:
        """Deactivate the date's active code and insert `code` as active, atomically.

        Raises ConcurrentConflict when another rotation for the same date (or a
        duplicate code string) wins; in that case nothing is changed.
        """

        raise NotImplementedError
