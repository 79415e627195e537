from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.exceptions import ConcurrentConflict
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_conflict_error
from .model import DailyCode
from .repository import DailyCodeRepository

_COLUMNS = "id, code, code_date, issued_at, expires_at, is_active"


def _to_daily_code(row: Dict[str, Any]) -> DailyCode:
    return DailyCode(
        id=int(row["id"]),
        code=row["code"],
        code_date=row["code_date"],
        issued_at=row["issued_at"],
        expires_at=row["expires_at"],
        is_active=bool(row["is_active"]),
    )


class MySQLDailyCodeRepository(DailyCodeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_code(self, code: str) -> Optional[DailyCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM daily_codes WHERE code=%s", (code,))
            row = fetchone(cur)
            return _to_daily_code(row) if row else None

    def get_active_for_date(self, code_date: date) -> Optional[DailyCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM daily_codes WHERE active_date=%s", (code_date,))
            row = fetchone(cur)
            return _to_daily_code(row) if row else None

    def list_for_date(self, code_date: date) -> Sequence[DailyCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM daily_codes WHERE code_date=%s ORDER BY issued_at, id",
                (code_date,),
            )
            return [_to_daily_code(r) for r in fetchall(cur)]

    def rotate(self, *, code: str, code_date: date, issued_at: datetime, expires_at: datetime) -> DailyCode:
        # Both statements share one transaction; uq_daily_codes_active_date
        # rejects a second concurrent activation for the same date.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "UPDATE daily_codes SET is_active=0 WHERE code_date=%s AND is_active=1",
                    (code_date,),
                )
                cur.execute(
                    """
                    INSERT INTO daily_codes(code, code_date, issued_at, expires_at, is_active)
                    VALUES(%s,%s,%s,%s,1)
                    """,
                    (code, code_date, issued_at, expires_at),
                )
                new_id = int(cur.lastrowid)
        except mysql.connector.Error as e:
            if is_conflict_error(e):
                raise ConcurrentConflict(f"Concurrent code rotation for {code_date.isoformat()}") from e
            raise

        return DailyCode(
            id=new_id,
            code=code,
            code_date=code_date,
            issued_at=issued_at,
            expires_at=expires_at,
            is_active=True,
        )
