from __future__ import annotations

import secrets
from datetime import date, datetime


def generate_code(prefix: str, code_date: date, now: datetime) -> str:
    """Build an opaque code string, e.g. ``ATTEND_2024-01-02_1704182400000_9f3a61c2``.

    The date keeps codes from different days apart, the millisecond stamp
    orders rotations, and the random suffix separates two rotations issued
    in the same millisecond.
    """

    millis = int(now.timestamp() * 1000)
    return f"{prefix}_{code_date.isoformat()}_{millis}_{secrets.token_hex(4)}"
