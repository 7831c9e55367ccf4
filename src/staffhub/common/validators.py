from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_str(value: Any) -> Optional[str]:
    """Blank strings are treated as absent."""
    if value is None:
        return None
    v = str(value).strip()
    return v or None


def coerce_positive_int(value: Any, default: int) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    return n if n >= 1 else default


def coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def require_non_negative_number(value: Any, field_name: str) -> float:
    try:
        n = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if n < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return int(n) if n.is_integer() else n


def require_pin(value: Any, min_len: int) -> str:
    pin = str(value or "").strip()
    if len(pin) < min_len or not pin.isdigit():
        raise ValidationError(f"PIN must be at least {min_len} digits")
    return pin
