from __future__ import annotations

import math

from ..core.exceptions import ValidationError


def optional_text(value: str | None) -> str | None:
    return (value or "").strip() or None


def require_number(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} inválido.")
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field_name} inválido.")
    return number


def require_non_negative_number(value, field_name: str) -> float:
    number = require_number(value, field_name)
    if number < 0:
        raise ValidationError(f"{field_name} inválido.")
    return number


def require_coordinate(value, field_name: str, *, limit: float) -> float:
    number = require_number(value, field_name)
    if abs(number) > limit:
        raise ValidationError(f"{field_name} inválido.")
    return number
