from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.exceptions import ConcurrentConflict
from .model import DailyCode
from .repository import DailyCodeRepository


class InMemoryDailyCodeRepository(DailyCodeRepository):
    """Process-local store; every read and the rotation run under one lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[int, DailyCode] = {}
        self._id_by_code: dict[str, int] = {}
        self._next_id = 1

    def get_by_code(self, code: str) -> Optional[DailyCode]:
        with self._lock:
            code_id = self._id_by_code.get(code)
            return self._by_id.get(code_id) if code_id is not None else None

    def get_active_for_date(self, code_date: date) -> Optional[DailyCode]:
        with self._lock:
            return self._active_for_date(code_date)

    def list_for_date(self, code_date: date) -> Sequence[DailyCode]:
        with self._lock:
            return sorted(
                (c for c in self._by_id.values() if c.code_date == code_date),
                key=lambda c: (c.issued_at, c.id),
            )

    def rotate(self, *, code: str, code_date: date, issued_at: datetime, expires_at: datetime) -> DailyCode:
        with self._lock:
            if code in self._id_by_code:
                raise ConcurrentConflict(f"Code {code!r} already issued")

            previous = self._active_for_date(code_date)
            new_code = DailyCode(
                id=self._next_id,
                code=code,
                code_date=code_date,
                issued_at=issued_at,
                expires_at=expires_at,
                is_active=True,
            )
            self._next_id += 1

            if previous is not None:
                self._by_id[previous.id] = replace(previous, is_active=False)
            self._by_id[new_code.id] = new_code
            self._id_by_code[code] = new_code.id
            return new_code

    def _active_for_date(self, code_date: date) -> Optional[DailyCode]:
        return next((c for c in self._by_id.values() if c.code_date == code_date and c.is_active), None)
