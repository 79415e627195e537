from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import CompanySettings
from .repository import CompanySettingsRepository


class MySQLCompanySettingsRepository(CompanySettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_current(self) -> Optional[CompanySettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT company_name, work_hours_start, work_hours_end, late_tolerance_minutes
                FROM company_settings
                ORDER BY id
                LIMIT 1
                """
            )
            row = fetchone(cur)
            if not row:
                return None
            return CompanySettings(
                company_name=row.get("company_name") or "",
                work_hours_start=normalize_mysql_time(row["work_hours_start"]),
                work_hours_end=normalize_mysql_time(row["work_hours_end"]),
                late_tolerance_minutes=int(row.get("late_tolerance_minutes") or 0),
            )
