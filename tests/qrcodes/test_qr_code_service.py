from __future__ import annotations

from datetime import date, datetime, timedelta
import threading

import pytest

from qr_attendance.core.exceptions import CodeExpired, CodeInactive, CodeNotFound, ConcurrentConflict
from qr_attendance.qrcodes.memory_daily_code_repository import InMemoryDailyCodeRepository
from qr_attendance.qrcodes.service import QRCodeService


def test_issue_sets_expiry_from_policy(container, work_date):
    now = datetime(2024, 1, 2, 6, 30)

    issued = container.qr_code_service.issue(work_date, now=now)

    assert issued.is_active
    assert issued.code_date == work_date
    assert issued.issued_at == now
    assert issued.expires_at == now + timedelta(hours=24)
    assert issued.code.startswith("TEST_2024-01-02_")


def test_issue_n_times_leaves_only_last_active(container, work_date):
    svc = container.qr_code_service
    issued = [svc.issue(work_date, now=datetime(2024, 1, 2, 6, i)) for i in range(5)]

    history = svc.history(work_date)

    assert [c.code for c in history] == [c.code for c in issued]
    assert [c.is_active for c in history] == [False, False, False, False, True]
    assert len({c.code for c in history}) == 5


def test_codes_for_other_dates_are_untouched(container):
    svc = container.qr_code_service
    monday = svc.issue(date(2024, 1, 1), now=datetime(2024, 1, 1, 6, 0))
    svc.issue(date(2024, 1, 2), now=datetime(2024, 1, 2, 6, 0))

    assert svc.validate(monday.code, now=datetime(2024, 1, 1, 9, 0)) == monday


def test_rotation_makes_previous_code_inactive_before_expiry(container, work_date):
    svc = container.qr_code_service
    old = svc.issue(work_date, now=datetime(2024, 1, 2, 6, 0))
    new = svc.issue(work_date, now=datetime(2024, 1, 2, 7, 0))

    with pytest.raises(CodeInactive):
        svc.validate(old.code, now=datetime(2024, 1, 2, 7, 1))
    assert svc.validate(new.code, now=datetime(2024, 1, 2, 7, 1)).code == new.code


def test_expiry_boundary_is_half_open(container, work_date):
    svc = container.qr_code_service
    issued = svc.issue(work_date, now=datetime(2024, 1, 2, 0, 0))
    expiry = issued.expires_at

    assert svc.validate(issued.code, now=expiry - timedelta(milliseconds=1)) == issued
    with pytest.raises(CodeExpired):
        svc.validate(issued.code, now=expiry)


def test_superseded_and_expired_reports_inactive(container, work_date):
    svc = container.qr_code_service
    old = svc.issue(work_date, now=datetime(2024, 1, 2, 0, 0))
    svc.issue(work_date, now=datetime(2024, 1, 2, 1, 0))

    with pytest.raises(CodeInactive):
        svc.validate(old.code, now=datetime(2024, 1, 5, 0, 0))


def test_unknown_code_not_found(container):
    with pytest.raises(CodeNotFound):
        container.qr_code_service.validate("NOPE", now=datetime(2024, 1, 2, 8, 0))


def test_current_active_uses_lazy_expiry(container, work_date):
    svc = container.qr_code_service
    issued = svc.issue(work_date, now=datetime(2024, 1, 2, 0, 0))

    assert svc.current_active(work_date, now=datetime(2024, 1, 2, 12, 0)) == issued
    assert svc.current_active(work_date, now=issued.expires_at) is None
    # Still flagged active in storage until the next rotation.
    assert container.codes_repo.get_active_for_date(work_date).is_active


def test_current_active_absent_when_never_issued(container, work_date):
    assert container.qr_code_service.current_active(work_date, now=datetime(2024, 1, 2, 8, 0)) is None


def test_failed_rotation_keeps_previous_code_active(policy, work_date):
    repo = InMemoryDailyCodeRepository()
    svc = QRCodeService(repo, policy, prefix="FIXED", code_generator=lambda prefix, d, now: f"{prefix}_{d}")

    first = svc.issue(work_date, now=datetime(2024, 1, 2, 6, 0))
    with pytest.raises(ConcurrentConflict):
        svc.issue(work_date, now=datetime(2024, 1, 2, 7, 0))

    assert repo.get_active_for_date(work_date) == first
    assert len(repo.list_for_date(work_date)) == 1


def test_concurrent_issues_leave_one_active_code(container, work_date):
    svc = container.qr_code_service
    barrier = threading.Barrier(8)

    def worker(i):
        barrier.wait()
        svc.issue(work_date, now=datetime(2024, 1, 2, 6, 0, i))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    history = svc.history(work_date)
    assert len(history) == 8
    assert sum(1 for c in history if c.is_active) == 1
