from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConcurrentConflict
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_conflict_error
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, employee_id, work_date, check_in_time, check_out_time, status, daily_code_id, note"


def _to_record(row: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(row["id"]),
        employee_id=int(row["employee_id"]),
        work_date=row["work_date"],
        check_in_time=row["check_in_time"],
        check_out_time=row.get("check_out_time"),
        status=AttendanceStatus(row["status"]),
        daily_code_id=int(row["daily_code_id"]),
        note=row.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

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
        # uq_attendance_employee_date turns a racing second insert into a duplicate-key error.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, check_in_time, status, daily_code_id, note)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), work_date, check_in_time, status.value, int(daily_code_id), note),
                )
                return int(cur.lastrowid)
        except mysql.connector.Error as e:
            if is_conflict_error(e):
                raise ConcurrentConflict(
                    f"Employee {employee_id} already has a record for {work_date.isoformat()}"
                ) from e
            raise

    def update_checkout(self, *, record_id: int, check_out_time: datetime) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE attendance_records
                    SET check_out_time=%s
                    WHERE id=%s AND check_out_time IS NULL
                    """,
                    (check_out_time, int(record_id)),
                )
                return cur.rowcount > 0
        except mysql.connector.Error as e:
            if is_conflict_error(e):
                raise ConcurrentConflict(f"Record {record_id} was updated concurrently") from e
            raise

    def list_for_date(self, work_date: date, *, limit: Optional[int] = None) -> Sequence[AttendanceRecord]:
        sql = f"SELECT {_COLUMNS} FROM attendance_records WHERE work_date=%s ORDER BY check_in_time DESC, id DESC"
        params: list[object] = [work_date]
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def count_by_status(self, work_date: date) -> dict[AttendanceStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, COUNT(*) AS total
                FROM attendance_records
                WHERE work_date=%s
                GROUP BY status
                """,
                (work_date,),
            )
            counts = {s: 0 for s in AttendanceStatus}
            for r in fetchall(cur):
                counts[AttendanceStatus(r["status"])] = int(r["total"])
            return counts
