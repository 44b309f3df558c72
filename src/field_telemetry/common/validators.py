from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from ..core.exceptions import ValidationError


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (dict, list, tuple)):
        return len(value) == 0
    return False


def require_fields(data: Mapping[str, Any], *names: str) -> None:
    """Raise a single ValidationError naming every missing or blank field."""

    missing = [n for n in names if _is_blank(data.get(n))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def require_non_empty(value: Any, field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    if not value or not value.strip():
        raise ValidationError(f"Missing required fields: {field_name}")
    return value.strip()


def require_present(value: Any, field_name: str) -> Any:
    if _is_blank(value):
        raise ValidationError(f"{field_name} is required")
    return value


def _to_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    return number


def require_coordinate(value: Any, field_name: str) -> float:
    """Coordinate that must be present and non-zero (SOS fixes)."""

    if _is_blank(value):
        raise ValidationError(f"Missing required fields: {field_name}")
    number = _to_float(value, field_name)
    if number == 0:
        raise ValidationError(f"Missing required fields: {field_name}")
    return number


def optional_coordinate(value: Any, field_name: str) -> Optional[float]:
    if _is_blank(value):
        return None
    return _to_float(value, field_name)
