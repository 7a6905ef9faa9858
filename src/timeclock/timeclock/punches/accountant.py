from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from ..core.enums import PunchKind
from .model import PunchRecord

_ZERO = timedelta(0)


@dataclass(frozen=True)
class PunchFields:
    """Accounting columns stored on a punch "as of" the moment it was taken."""

    accumulated_hours: Optional[Decimal] = None
    lunch_hours: Optional[Decimal] = None


def to_decimal_hours(duration: timedelta) -> Decimal:
    hours = Decimal(str(duration.total_seconds())) / Decimal(3600)
    return hours.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _by_ordinal(day_punches: Sequence[PunchRecord], ordinal: int) -> Optional[PunchRecord]:
    return next((p for p in day_punches if p.ordinal == ordinal), None)


def _by_kind(day_punches: Sequence[PunchRecord], kind: PunchKind) -> Optional[PunchRecord]:
    return next((p for p in day_punches if p.kind is kind), None)


def worked_duration(day_punches: Sequence[PunchRecord], now: datetime) -> timedelta:
    """Worked time for one day: (p2 - p1) + (p4 - p3).

    Open segments run until ``now``. Missing punches simply contribute
    nothing; the result is never negative.
    """
    p1, p2, p3, p4 = (_by_ordinal(day_punches, n) for n in (1, 2, 3, 4))

    total = _ZERO
    if p1:
        total += (p2.punched_at if p2 else now) - p1.punched_at
    if p3:
        total += (p4.punched_at if p4 else now) - p3.punched_at
    return max(total, _ZERO)


def punch_fields(today_punches: Sequence[PunchRecord], kind: PunchKind, at: datetime) -> PunchFields:
    """Accounting fields for a punch of ``kind`` taken at ``at``.

    LUNCH_IN keeps the accumulated hours frozen at LunchOut - Entry while
    EXIT adds the afternoon segment on top. Historical rows are displayed from
    these stored values, so the asymmetry must stay as it is.
    """
    entry = _by_kind(today_punches, PunchKind.ENTRY)
    lunch_out = _by_kind(today_punches, PunchKind.LUNCH_OUT)
    lunch_in = _by_kind(today_punches, PunchKind.LUNCH_IN)

    if kind is PunchKind.LUNCH_OUT:
        if not entry:
            return PunchFields()
        return PunchFields(accumulated_hours=to_decimal_hours(at - entry.punched_at))

    if kind is PunchKind.LUNCH_IN:
        accumulated = None
        lunch = None
        if entry and lunch_out:
            accumulated = to_decimal_hours(lunch_out.punched_at - entry.punched_at)
        if lunch_out:
            lunch = to_decimal_hours(at - lunch_out.punched_at)
        return PunchFields(accumulated_hours=accumulated, lunch_hours=lunch)

    if kind is PunchKind.EXIT:
        if not entry:
            return PunchFields()
        if lunch_out and lunch_in:
            morning = lunch_out.punched_at - entry.punched_at
            afternoon = at - lunch_in.punched_at
            return PunchFields(accumulated_hours=to_decimal_hours(morning + afternoon))
        return PunchFields(accumulated_hours=to_decimal_hours(at - entry.punched_at))

    return PunchFields()
