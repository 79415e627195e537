from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_positive(value: int, field_name: str) -> int:
    if int(value) < 1:
        raise ValidationError(f"{field_name} must be at least 1")
    return int(value)
