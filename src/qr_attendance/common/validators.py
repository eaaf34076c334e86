from __future__ import annotations

import math
from typing import Any, Optional

from ..core.exceptions import ValidationError


def _check_length(value: str, field_name: str, max_length: Optional[int]) -> str:
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field_name} must be at most {max_length} characters")
    return value


def require_non_empty(value: Optional[str], field_name: str, *, max_length: Optional[int] = None) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return _check_length(str(value).strip(), field_name, max_length)


def optional_text(value: Optional[str], field_name: str = "value", *, max_length: Optional[int] = None) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None
    return _check_length(value, field_name, max_length)


def require_int(value: Any, field_name: str) -> int:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required")
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer") from None


def require_positive_minutes(value: Any, field_name: str, *, maximum: float) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
    if not math.isfinite(minutes):
        raise ValidationError(f"{field_name} must be a number")
    if minutes <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    if minutes > maximum:
        raise ValidationError(f"{field_name} must be at most {maximum:g}")
    return minutes
