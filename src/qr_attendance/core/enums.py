from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Session roles supplied by the external login layer."""

    ADMIN = "admin"
    KIOSK = "kiosk"


class AttendanceStatus(str, Enum):
    """Check-in classification, fixed when the record is created."""

    PRESENT = "present"
    LATE = "late"


class ScanResult(str, Enum):
    """Successful transitions of the per-day attendance state machine."""

    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"


class ScanError(str, Enum):
    """Every way a scan can be refused."""

    EMPLOYEE_NOT_FOUND = "employee_not_found"
    EMPLOYEE_INACTIVE = "employee_inactive"
    CODE_NOT_FOUND = "code_not_found"
    CODE_INACTIVE = "code_inactive"
    CODE_EXPIRED = "code_expired"
    ALREADY_COMPLETED = "already_completed"
    CONCURRENT_CONFLICT = "concurrent_conflict"
