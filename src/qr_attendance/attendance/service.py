from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_positive
from ..core.constants import DEFAULT_SCAN_RETRY_ATTEMPTS
from ..core.enums import ScanResult
from ..core.exceptions import (
    AlreadyCompleted,
    ConcurrentConflict,
    EmployeeInactive,
    EmployeeNotFound,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications.broadcaster import AttendanceNotifier, NullNotifier
from ..policy.policy import AttendancePolicy
from ..qrcodes.model import DailyCode
from ..qrcodes.service import QRCodeService
from .factory import CheckInStrategyFactory
from .model import AttendanceFeedRow, AttendanceRecord, ScanOutcome
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Turns a scan into a check-in or check-out.

    Per (employee, date) the record moves NoRecord -> CheckedIn -> CheckedOut
    and never leaves CheckedOut. The repository's conditional writes make the
    read-then-write atomic per key; losing a race raises ConcurrentConflict
    with nothing applied.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        codes: QRCodeService,
        policy: AttendancePolicy,
        *,
        strategy_factory: CheckInStrategyFactory | None = None,
        notifier: AttendanceNotifier | None = None,
        retry_attempts: int = DEFAULT_SCAN_RETRY_ATTEMPTS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._codes = codes
        self._policy = policy
        self._factory = strategy_factory or CheckInStrategyFactory()
        self._notifier = notifier or NullNotifier()
        self._retry_attempts = require_positive(retry_attempts, "retry_attempts")

    def process_scan(self, employee_code: str, code: str, *, now: datetime | None = None) -> ScanOutcome:
        return self._process(employee_code, code, now=now or now_local(), after_conflict=False)

    def _process(self, employee_code: str, code: str, *, now: datetime, after_conflict: bool) -> ScanOutcome:
        employee = self._resolve_employee(employee_code)
        daily_code = self._codes.validate(code, now=now)

        # The code's date, not now.date(): a scan just after midnight still
        # belongs to the day the code was issued for.
        work_date = daily_code.code_date
        record = self._attendance.get_for_employee_and_date(employee.id, work_date)

        if record is None:
            outcome = self._check_in(employee, daily_code, now)
        elif record.check_out_time is None:
            if after_conflict and now < record.check_in_time:
                # Lost the check-in race to a later scan: this tap is a duplicate of that check-in.
                logger.info("Duplicate check-in for %s on %s", employee.employee_code, work_date.isoformat())
                return self._outcome(ScanResult.CHECKED_IN, employee, record, record.check_in_time)
            outcome = self._check_out(employee, record, now)
        else:
            logger.info("Scan rejected: %s already completed %s", employee.employee_code, work_date.isoformat())
            raise AlreadyCompleted("Check-in and check-out are already recorded for today")

        self._notify(outcome)
        return outcome

    def process_scan_with_retry(self, employee_code: str, code: str, *, now: datetime | None = None) -> ScanOutcome:
        """Repeat `process_scan` after a lost race; the retry sees the winner's state."""

        now = now or now_local()
        attempt = 1
        while True:
            try:
                return self._process(employee_code, code, now=now, after_conflict=attempt > 1)
            except ConcurrentConflict:
                if attempt >= self._retry_attempts:
                    raise
                logger.warning("Concurrent scan for %s, retrying (%d/%d)", employee_code, attempt, self._retry_attempts)
                attempt += 1

    def get_record(self, employee_code: str, work_date: date) -> Optional[AttendanceRecord]:
        employee = self._employees.get_by_code(employee_code)
        if employee is None:
            return None
        return self._attendance.get_for_employee_and_date(employee.id, work_date)

    def list_for_date(self, work_date: date, *, limit: Optional[int] = None) -> list[AttendanceFeedRow]:
        rows = []
        for r in self._attendance.list_for_date(work_date, limit=limit):
            employee = self._employees.get_by_id(r.employee_id)
            rows.append(
                AttendanceFeedRow(
                    employee_code=employee.employee_code if employee else str(r.employee_id),
                    employee_name=employee.name if employee else "-",
                    department=employee.department if employee else "",
                    work_date=r.work_date,
                    check_in_time=r.check_in_time,
                    check_out_time=r.check_out_time,
                    status=r.status,
                )
            )
        return rows

    def _resolve_employee(self, employee_code: str) -> Employee:
        employee = self._employees.get_by_code(employee_code)
        if employee is None:
            raise EmployeeNotFound(f"Employee {employee_code!r} not found")
        if not employee.is_active:
            raise EmployeeInactive(f"Employee {employee_code!r} is not active")
        return employee

    def _check_in(self, employee: Employee, daily_code: DailyCode, now: datetime) -> ScanOutcome:
        work_date = daily_code.code_date
        strategy = self._factory.for_checkin(now=now, work_date=work_date, policy=self._policy)
        decision = strategy.decide_checkin(now=now, work_date=work_date, policy=self._policy)

        record_id = self._attendance.create_checkin(
            employee_id=employee.id,
            work_date=work_date,
            check_in_time=now,
            status=decision.status,
            daily_code_id=daily_code.id,
            note=decision.note,
        )
        logger.info("Check-in %s on %s: %s", employee.employee_code, work_date.isoformat(), decision.status.value)

        return ScanOutcome(
            result=ScanResult.CHECKED_IN,
            employee_code=employee.employee_code,
            employee_name=employee.name,
            work_date=work_date,
            timestamp=now,
            status=decision.status,
            record_id=record_id,
            note=decision.note,
        )

    def _check_out(self, employee: Employee, record: AttendanceRecord, now: datetime) -> ScanOutcome:
        if now < record.check_in_time:
            raise ValidationError("Check-out time is earlier than check-in time")

        if not self._attendance.update_checkout(record_id=record.id, check_out_time=now):
            raise ConcurrentConflict(f"Record {record.id} was checked out concurrently")
        logger.info("Check-out %s on %s", employee.employee_code, record.work_date.isoformat())
        return self._outcome(ScanResult.CHECKED_OUT, employee, record, now)

    def _outcome(self, result: ScanResult, employee: Employee, record: AttendanceRecord, timestamp: datetime) -> ScanOutcome:
        return ScanOutcome(
            result=result,
            employee_code=employee.employee_code,
            employee_name=employee.name,
            work_date=record.work_date,
            timestamp=timestamp,
            status=record.status,
            record_id=record.id,
            note=record.note,
        )

    def _notify(self, outcome: ScanOutcome) -> None:
        try:
            self._notifier.attendance_changed(outcome)
        except Exception:
            # The outcome is already recorded; a notifier failure must not change it.
            logger.warning("Attendance notifier failed for record %s", outcome.record_id, exc_info=True)
