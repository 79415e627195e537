from __future__ import annotations

from datetime import date, datetime

import mysql.connector
import pytest

from qr_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from qr_attendance.core.enums import AttendanceStatus
from qr_attendance.core.exceptions import ConcurrentConflict
from qr_attendance.qrcodes.mysql_daily_code_repository import MySQLDailyCodeRepository


class FakeCursor:
    """Fails the n-th execute with errors[n] (None means success)."""

    def __init__(self, errors=(), rowcount=1, lastrowid=7):
        self.errors = list(errors)
        self.rowcount = rowcount
        self.lastrowid = lastrowid
        self.executed = []
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))
        err = self.errors.pop(0) if self.errors else None
        if err is not None:
            raise err

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, cursor):
        self.connection = FakeConnection(cursor)

    def connect(self, *, with_database=True):
        return self.connection


def _checkin(repo):
    return repo.create_checkin(
        employee_id=1,
        work_date=date(2024, 1, 2),
        check_in_time=datetime(2024, 1, 2, 8, 0),
        status=AttendanceStatus.PRESENT,
        daily_code_id=3,
    )


def test_create_checkin_returns_new_id_and_commits():
    factory = FakeConnFactory(FakeCursor(lastrowid=42))

    assert _checkin(MySQLAttendanceRepository(factory)) == 42
    assert factory.connection.committed
    assert factory.connection.closed


def test_duplicate_checkin_becomes_conflict_and_rolls_back():
    factory = FakeConnFactory(FakeCursor(errors=[mysql.connector.IntegrityError(msg="dup", errno=1062)]))

    with pytest.raises(ConcurrentConflict):
        _checkin(MySQLAttendanceRepository(factory))

    assert factory.connection.rolled_back
    assert not factory.connection.committed
    assert factory.connection.closed


def test_other_integrity_errors_propagate_from_checkin():
    factory = FakeConnFactory(FakeCursor(errors=[mysql.connector.IntegrityError(msg="fk", errno=1452)]))

    with pytest.raises(mysql.connector.IntegrityError):
        _checkin(MySQLAttendanceRepository(factory))

    assert factory.connection.rolled_back


@pytest.mark.parametrize("rowcount, expected", [(1, True), (0, False)])
def test_update_checkout_only_touches_open_records(rowcount, expected):
    cursor = FakeCursor(rowcount=rowcount)
    factory = FakeConnFactory(cursor)

    result = MySQLAttendanceRepository(factory).update_checkout(
        record_id=5, check_out_time=datetime(2024, 1, 2, 17, 0)
    )

    assert result is expected
    sql, params = cursor.executed[0]
    assert "WHERE id=%s AND check_out_time IS NULL" in sql
    assert params == (datetime(2024, 1, 2, 17, 0), 5)


def test_update_checkout_deadlock_becomes_conflict():
    factory = FakeConnFactory(FakeCursor(errors=[mysql.connector.DatabaseError(msg="deadlock", errno=1213)]))

    with pytest.raises(ConcurrentConflict):
        MySQLAttendanceRepository(factory).update_checkout(record_id=5, check_out_time=datetime(2024, 1, 2, 17, 0))

    assert factory.connection.rolled_back


def _rotate(repo):
    return repo.rotate(
        code="TEST_2024-01-02_1_ab",
        code_date=date(2024, 1, 2),
        issued_at=datetime(2024, 1, 2, 7, 0),
        expires_at=datetime(2024, 1, 3, 7, 0),
    )


def test_rotate_deactivates_then_inserts_in_one_transaction():
    cursor = FakeCursor(lastrowid=11)
    factory = FakeConnFactory(cursor)

    issued = _rotate(MySQLDailyCodeRepository(factory))

    assert [sql.split()[0] for sql, _ in cursor.executed] == ["UPDATE", "INSERT"]
    assert issued.id == 11
    assert issued.is_active
    assert factory.connection.committed


@pytest.mark.parametrize(
    "errors",
    [
        [None, mysql.connector.IntegrityError(msg="dup", errno=1062)],
        [mysql.connector.DatabaseError(msg="deadlock", errno=1213)],
        [mysql.connector.DatabaseError(msg="lock wait", errno=1205)],
    ],
)
def test_rotate_race_becomes_conflict_and_rolls_back(errors):
    factory = FakeConnFactory(FakeCursor(errors=errors))

    with pytest.raises(ConcurrentConflict):
        _rotate(MySQLDailyCodeRepository(factory))

    # The deactivating UPDATE is rolled back with the failed INSERT.
    assert factory.connection.rolled_back
    assert not factory.connection.committed


def test_rotate_non_conflict_error_propagates():
    factory = FakeConnFactory(FakeCursor(errors=[mysql.connector.ProgrammingError(msg="no table", errno=1146)]))

    with pytest.raises(mysql.connector.ProgrammingError):
        _rotate(MySQLDailyCodeRepository(factory))

    assert factory.connection.rolled_back
