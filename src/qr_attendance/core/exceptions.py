from __future__ import annotations

from .enums import ScanError


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ScanRejected(DomainError):
    """A scan (or code validation) was refused before any state changed."""

    kind: ScanError

    def __init__(self, message: str | None = None):
        super().__init__(message or self.kind.value)


class EmployeeNotFound(ScanRejected):
    kind = ScanError.EMPLOYEE_NOT_FOUND


class EmployeeInactive(ScanRejected):
    kind = ScanError.EMPLOYEE_INACTIVE


class CodeNotFound(ScanRejected):
    kind = ScanError.CODE_NOT_FOUND


class CodeInactive(ScanRejected):
    kind = ScanError.CODE_INACTIVE


class CodeExpired(ScanRejected):
    kind = ScanError.CODE_EXPIRED


class AlreadyCompleted(ScanRejected):
    kind = ScanError.ALREADY_COMPLETED


class ConcurrentConflict(DomainError):
    """A conditional write lost a race on the same key.

    Nothing was applied, so the caller can safely repeat the whole operation.
    """

    kind = ScanError.CONCURRENT_CONFLICT

    def __init__(self, message: str | None = None):
        super().__init__(message or self.kind.value)
