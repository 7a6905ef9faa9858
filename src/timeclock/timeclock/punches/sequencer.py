from __future__ import annotations

from typing import Sequence

from ..core.enums import PunchKind, Role
from .model import NextPunch, PunchRecord

_STANDARD_SEQUENCE = (PunchKind.ENTRY, PunchKind.LUNCH_OUT, PunchKind.LUNCH_IN, PunchKind.EXIT)
_RESTRICTED_SEQUENCE = (PunchKind.ENTRY, PunchKind.EXIT)


def sequence_for(role: Role) -> tuple[PunchKind, ...]:
    return _RESTRICTED_SEQUENCE if role.is_restricted else _STANDARD_SEQUENCE


def count_sequence_punches(today_punches: Sequence[PunchRecord]) -> int:
    return sum(1 for p in today_punches if p.counts_toward_sequence())


def next_punch(today_punches: Sequence[PunchRecord], role: Role) -> NextPunch:
    """Kind and ordinal of the next punch for the day.

    Uses the count of non-absence punches, never the highest stored ordinal:
    approved justifications can leave gaps in the ordinals. Saturates at the
    last kind of the sequence; the daily cap is enforced by the caller.
    """
    count = count_sequence_punches(today_punches)
    sequence = sequence_for(role)
    kind = sequence[min(count, len(sequence) - 1)]
    return NextPunch(kind=kind, ordinal=count + 1)


def max_punches(role: Role) -> int:
    return role.max_daily_punches


def is_day_complete(today_punches: Sequence[PunchRecord], role: Role) -> bool:
    return count_sequence_punches(today_punches) >= max_punches(role)
