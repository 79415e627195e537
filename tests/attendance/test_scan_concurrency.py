from __future__ import annotations

from datetime import datetime
import threading

import pytest

from qr_attendance.attendance.service import AttendanceService
from qr_attendance.core.enums import ScanResult
from qr_attendance.core.exceptions import AlreadyCompleted, ConcurrentConflict


class StaleReadAttendance:
    """Wraps a repository and serves queued stale reads first.

    Simulates another scan committing between this scan's read and write.
    """

    def __init__(self, inner, stale_reads):
        self._inner = inner
        self._stale = list(stale_reads)

    def get_for_employee_and_date(self, employee_id, work_date):
        if self._stale:
            return self._stale.pop(0)
        return self._inner.get_for_employee_and_date(employee_id, work_date)

    def __getattr__(self, name):
        return getattr(self._inner, name)


def _service(container, repo, retry_attempts=3):
    return AttendanceService(
        repo,
        container.employees_repo,
        container.qr_code_service,
        container.policy,
        retry_attempts=retry_attempts,
    )


def test_lost_check_in_race_is_conflict_then_check_out_on_retry(container, issued_code, work_date):
    container.attendance_service.process_scan("E1", issued_code.code, now=datetime(2024, 1, 2, 8, 10))

    racing = _service(container, StaleReadAttendance(container.attendance_repo, [None]))
    with pytest.raises(ConcurrentConflict):
        racing.process_scan("E1", issued_code.code, now=datetime(2024, 1, 2, 8, 10))

    # Nothing was applied by the losing scan.
    rec = container.attendance_repo.get_for_employee_and_date(1, work_date)
    assert rec.check_out_time is None
    assert len(container.attendance_repo.list_for_date(work_date)) == 1

    retrying = _service(container, StaleReadAttendance(container.attendance_repo, [None]))
    out = retrying.process_scan_with_retry("E1", issued_code.code, now=datetime(2024, 1, 2, 8, 10))
    assert out.result == ScanResult.CHECKED_OUT


def test_lost_check_in_race_to_later_scan_is_a_duplicate_check_in(container, issued_code, work_date):
    container.attendance_service.process_scan("E1", issued_code.code, now=datetime(2024, 1, 2, 8, 10, 0, 500000))

    racing = _service(container, StaleReadAttendance(container.attendance_repo, [None]))
    out = racing.process_scan_with_retry("E1", issued_code.code, now=datetime(2024, 1, 2, 8, 10, 0, 200000))

    assert out.result == ScanResult.CHECKED_IN
    assert out.timestamp == datetime(2024, 1, 2, 8, 10, 0, 500000)
    rec = container.attendance_repo.get_for_employee_and_date(1, work_date)
    assert rec.id == out.record_id
    assert rec.check_out_time is None


def test_lost_check_out_race_resolves_to_already_completed(container, issued_code, work_date):
    svc = container.attendance_service
    svc.process_scan("E1", issued_code.code, now=datetime(2024, 1, 2, 8, 0))
    open_record = container.attendance_repo.get_for_employee_and_date(1, work_date)
    svc.process_scan("E1", issued_code.code, now=datetime(2024, 1, 2, 17, 0))

    racing = _service(container, StaleReadAttendance(container.attendance_repo, [open_record]))
    with pytest.raises(AlreadyCompleted):
        racing.process_scan_with_retry("E1", issued_code.code, now=datetime(2024, 1, 2, 17, 1))

    # The first check-out time is preserved.
    assert container.attendance_repo.get_for_employee_and_date(1, work_date).check_out_time == datetime(2024, 1, 2, 17, 0)


def test_conflict_reraised_after_last_attempt(container, issued_code, work_date):
    container.attendance_service.process_scan("E1", issued_code.code, now=datetime(2024, 1, 2, 8, 0))

    racing = _service(container, StaleReadAttendance(container.attendance_repo, [None, None]), retry_attempts=2)
    with pytest.raises(ConcurrentConflict):
        racing.process_scan_with_retry("E1", issued_code.code, now=datetime(2024, 1, 2, 8, 1))


def test_simultaneous_scans_same_employee_never_duplicate(container, issued_code, work_date):
    n = 16
    barrier = threading.Barrier(n)
    results = []
    errors = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            out = container.attendance_service.process_scan_with_retry(
                "E1", issued_code.code, now=datetime(2024, 1, 2, 8, 10)
            )
            with lock:
                results.append(out.result)
        except AlreadyCompleted as e:
            with lock:
                errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(ScanResult.CHECKED_IN) == 1
    assert results.count(ScanResult.CHECKED_OUT) == 1
    assert len(errors) == n - 2

    records = container.attendance_repo.list_for_date(work_date)
    assert len(records) == 1
    assert records[0].check_out_time >= records[0].check_in_time


def test_simultaneous_scans_different_employees_all_check_in(container, issued_code, work_date):
    from qr_attendance.employees.model import Employee

    for i in range(100, 120):
        container.employees_repo.add(Employee(id=i, employee_code=f"X{i}", name=f"Worker {i}"))

    barrier = threading.Barrier(20)
    results = []

    def worker(i):
        barrier.wait()
        results.append(container.attendance_service.process_scan(f"X{i}", issued_code.code, now=datetime(2024, 1, 2, 8, 0)))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(100, 120)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert all(r.result == ScanResult.CHECKED_IN for r in results)
    assert len(container.attendance_repo.list_for_date(work_date)) == 20
