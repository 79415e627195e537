from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConcurrentConflict
from .model import AttendanceRecord
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local store with the same conditional-write contract as MySQL.

    Writes lock only their own (employee, date) key, so scans for different
    employees or dates never wait on each other.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._key_locks: dict[tuple[int, date], threading.Lock] = {}
        self._by_key: dict[tuple[int, date], AttendanceRecord] = {}
        self._key_by_id: dict[int, tuple[int, date]] = {}
        self._next_id = 1

    def _lock_for(self, key: tuple[int, date]) -> threading.Lock:
        with self._guard:
            return self._key_locks.setdefault(key, threading.Lock())

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_key.get((int(employee_id), work_date))

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
        key = (int(employee_id), work_date)
        with self._lock_for(key):
            if key in self._by_key:
                raise ConcurrentConflict(f"Employee {employee_id} already has a record for {work_date.isoformat()}")

            with self._guard:
                record_id = self._next_id
                self._next_id += 1
                self._key_by_id[record_id] = key

            self._by_key[key] = AttendanceRecord(
                id=record_id,
                employee_id=int(employee_id),
                work_date=work_date,
                check_in_time=check_in_time,
                check_out_time=None,
                status=status,
                daily_code_id=int(daily_code_id),
                note=note,
            )
            return record_id

    def update_checkout(self, *, record_id: int, check_out_time: datetime) -> bool:
        key = self._key_by_id.get(int(record_id))
        if key is None:
            return False

        with self._lock_for(key):
            record = self._by_key[key]
            if record.check_out_time is not None:
                return False
            self._by_key[key] = replace(record, check_out_time=check_out_time)
            return True

    def list_for_date(self, work_date: date, *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        items = [r for r in list(self._by_key.values()) if r.work_date == work_date]
        items.sort(key=lambda r: (r.check_in_time, r.id), reverse=True)
        return items if limit is None else items[: int(limit)]

    def count_by_status(self, work_date: date) -> dict[AttendanceStatus, int]:
        counts = {s: 0 for s in AttendanceStatus}
        for r in self.list_for_date(work_date):
            counts[r.status] += 1
        return counts
