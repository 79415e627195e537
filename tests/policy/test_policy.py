from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest

from qr_attendance.core.exceptions import ValidationError
from qr_attendance.policy.model import CompanySettings
from qr_attendance.policy.policy import FixedSchedulePolicy, policy_from_company_settings


def test_late_boundary_is_inclusive(policy):
    day = date(2024, 1, 2)

    assert policy.is_late(day, datetime(2024, 1, 2, 8, 14, 59)) is False
    assert policy.is_late(day, datetime(2024, 1, 2, 8, 15, 0)) is True


def test_defaults_match_office_hours():
    p = FixedSchedulePolicy()

    assert p.work_start(date(2024, 5, 6)) == datetime(2024, 5, 6, 8, 0)
    assert p.late_tolerance == timedelta(minutes=15)
    assert p.code_validity == timedelta(hours=24)


def test_zero_tolerance_makes_start_instant_late():
    p = FixedSchedulePolicy(start_time=time(9, 0), late_tolerance_minutes=0)

    assert p.is_late(date(2024, 1, 2), datetime(2024, 1, 2, 9, 0)) is True
    assert p.is_late(date(2024, 1, 2), datetime(2024, 1, 2, 8, 59, 59)) is False


@pytest.mark.parametrize("kwargs", [{"late_tolerance_minutes": -1}, {"code_validity_hours": 0}])
def test_invalid_policy_values_rejected(kwargs):
    with pytest.raises(ValidationError):
        FixedSchedulePolicy(**kwargs)


def test_policy_from_company_settings():
    settings = CompanySettings(
        company_name="Demo",
        work_hours_start=time(7, 30),
        work_hours_end=time(16, 30),
        late_tolerance_minutes=10,
    )

    p = policy_from_company_settings(settings, code_validity_hours=12)

    assert p.late_threshold(date(2024, 1, 2)) == datetime(2024, 1, 2, 7, 40)
    assert p.code_validity == timedelta(hours=12)
