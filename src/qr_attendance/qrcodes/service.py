from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_QR_CODE_PREFIX
from ..core.exceptions import CodeExpired, CodeInactive, CodeNotFound
from ..policy.policy import AttendancePolicy
from .generator import generate_code
from .model import DailyCode
from .repository import DailyCodeRepository

logger = logging.getLogger(__name__)


class QRCodeService:
    """Owns "which code is scannable right now" for every calendar date.

    Expiry is evaluated lazily whenever a code is read; there is no sweeper,
    so an expired code may keep `is_active=True` until the next rotation.
    """

    def __init__(
        self,
        codes: DailyCodeRepository,
        policy: AttendancePolicy,
        *,
        prefix: str = DEFAULT_QR_CODE_PREFIX,
        code_generator: Callable[[str, date, datetime], str] = generate_code,
    ):
        self._codes = codes
        self._policy = policy
        self._prefix = require_non_empty(prefix, "QR code prefix")
        self._generate = code_generator

    def issue(self, code_date: date, *, now: datetime | None = None) -> DailyCode:
        """Rotate the date's code: the new one becomes the only active code.

        Raises ConcurrentConflict if a simultaneous rotation for the same date
        won; the previously active code is then left untouched.
        """

        now = now or now_local()
        issued = self._codes.rotate(
            code=self._generate(self._prefix, code_date, now),
            code_date=code_date,
            issued_at=now,
            expires_at=now + self._policy.code_validity,
        )
        logger.info("Issued code %s for %s (expires %s)", issued.code, code_date.isoformat(), issued.expires_at.isoformat())
        return issued

    def current_active(self, code_date: date, *, now: datetime | None = None) -> Optional[DailyCode]:
        now = now or now_local()
        active = self._codes.get_active_for_date(code_date)
        if active is None or not active.is_current(now):
            return None
        return active

    def validate(self, code: str, *, now: datetime) -> DailyCode:
        """Return the DailyCode for `code` if it can be scanned at `now`.

        A superseded code is rejected as inactive even before its own expiry.
        """

        daily_code = self._codes.get_by_code(code)
        if daily_code is None:
            raise CodeNotFound("Unknown QR code")
        if not daily_code.is_active:
            raise CodeInactive("QR code has been replaced by a newer one")
        if daily_code.is_expired(now):
            raise CodeExpired("QR code has expired")
        return daily_code

    def history(self, code_date: date) -> Sequence[DailyCode]:
        return self._codes.list_for_date(code_date)
