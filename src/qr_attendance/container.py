from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import parse_hhmm
from .core.constants import (
    DEFAULT_CODE_VALIDITY_HOURS,
    DEFAULT_LATE_TOLERANCE_MINUTES,
    DEFAULT_QR_CODE_PREFIX,
    DEFAULT_SCAN_RETRY_ATTEMPTS,
    DEFAULT_WORK_START,
)
from .core.exceptions import ValidationError
from .database.connection import DatabaseConnection, DBConfig
from .employees.memory_employee_repository import InMemoryEmployeeRepository
from .employees.model import Employee
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .notifications.broadcaster import AttendanceEventBroadcaster
from .policy.mysql_company_settings_repository import MySQLCompanySettingsRepository
from .policy.policy import AttendancePolicy, FixedSchedulePolicy, policy_from_company_settings
from .qrcodes.memory_daily_code_repository import InMemoryDailyCodeRepository
from .qrcodes.mysql_daily_code_repository import MySQLDailyCodeRepository
from .qrcodes.repository import DailyCodeRepository
from .qrcodes.service import QRCodeService
from .reports.service import AttendanceReportService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    codes_repo: DailyCodeRepository
    attendance_repo: AttendanceRepository

    policy: AttendancePolicy
    broadcaster: AttendanceEventBroadcaster

    qr_code_service: QRCodeService
    attendance_service: AttendanceService
    report_service: AttendanceReportService


def _build_services(
    *,
    conn: Optional[DatabaseConnection],
    employees_repo: EmployeeRepository,
    codes_repo: DailyCodeRepository,
    attendance_repo: AttendanceRepository,
    policy: AttendancePolicy,
    prefix: str,
    retry_attempts: int,
) -> Container:
    broadcaster = AttendanceEventBroadcaster()
    qr_code_service = QRCodeService(codes_repo, policy, prefix=prefix)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        qr_code_service,
        policy,
        notifier=broadcaster,
        retry_attempts=retry_attempts,
    )
    report_service = AttendanceReportService(attendance_repo, employees_repo)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        codes_repo=codes_repo,
        attendance_repo=attendance_repo,
        policy=policy,
        broadcaster=broadcaster,
        qr_code_service=qr_code_service,
        attendance_service=attendance_service,
        report_service=report_service,
    )


def build_policy(settings: Any, conn: Optional[DatabaseConnection] = None) -> AttendancePolicy:
    validity = int(getattr(settings, "CODE_VALIDITY_HOURS", DEFAULT_CODE_VALIDITY_HOURS))

    if conn is not None and bool(getattr(settings, "USE_COMPANY_SETTINGS", False)):
        company = MySQLCompanySettingsRepository(conn).get_current()
        if company is not None:
            logger.info("Using company_settings policy for %s", company.company_name or "<unnamed>")
            return policy_from_company_settings(company, code_validity_hours=validity)
        logger.warning("USE_COMPANY_SETTINGS is on but company_settings is empty; using configured hours")

    return FixedSchedulePolicy(
        start_time=parse_hhmm(str(getattr(settings, "WORK_START", DEFAULT_WORK_START))),
        late_tolerance_minutes=int(getattr(settings, "LATE_TOLERANCE_MINUTES", DEFAULT_LATE_TOLERANCE_MINUTES)),
        code_validity_hours=validity,
    )


def build_memory_container(
    *,
    policy: Optional[AttendancePolicy] = None,
    employees: Iterable[Employee] = (),
    prefix: str = DEFAULT_QR_CODE_PREFIX,
    retry_attempts: int = DEFAULT_SCAN_RETRY_ATTEMPTS,
) -> Container:
    return _build_services(
        conn=None,
        employees_repo=InMemoryEmployeeRepository(employees),
        codes_repo=InMemoryDailyCodeRepository(),
        attendance_repo=InMemoryAttendanceRepository(),
        policy=policy or FixedSchedulePolicy(),
        prefix=prefix,
        retry_attempts=retry_attempts,
    )


def build_container(*, settings: Any) -> Container:
    storage = str(getattr(settings, "STORAGE", "mysql")).lower()
    prefix = str(getattr(settings, "QR_CODE_PREFIX", DEFAULT_QR_CODE_PREFIX))
    retry_attempts = int(getattr(settings, "SCAN_RETRY_ATTEMPTS", DEFAULT_SCAN_RETRY_ATTEMPTS))

    if storage == "memory":
        return build_memory_container(policy=build_policy(settings), prefix=prefix, retry_attempts=retry_attempts)

    if storage != "mysql":
        raise ValidationError(f"Unknown STORAGE {storage!r} (expected 'mysql' or 'memory')")

    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
    return _build_services(
        conn=conn,
        employees_repo=MySQLEmployeeRepository(conn),
        codes_repo=MySQLDailyCodeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        policy=build_policy(settings, conn),
        prefix=prefix,
        retry_attempts=retry_attempts,
    )
