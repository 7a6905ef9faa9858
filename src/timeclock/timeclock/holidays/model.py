from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Holiday:
    """Domain entity: a calendar exception (no time component)."""

    holiday_id: int
    holiday_date: date
    title: str
