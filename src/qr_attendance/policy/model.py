from __future__ import annotations

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class CompanySettings:
    """Per-deployment working hours, as stored in `company_settings`."""

    company_name: str
    work_hours_start: time
    work_hours_end: time
    late_tolerance_minutes: int
