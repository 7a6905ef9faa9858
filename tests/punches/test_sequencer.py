from __future__ import annotations

from datetime import datetime

from src.timeclock.timeclock.core.enums import PunchKind, Role
from src.timeclock.timeclock.punches import sequencer
from tests.fakes import make_punch


def _day(kinds):
    return [make_punch("u1", datetime(2026, 3, 2, 8 + i), kind, i + 1) for i, kind in enumerate(kinds)]


def test_standard_sequence_saturates_at_exit():
    expected = [PunchKind.ENTRY, PunchKind.LUNCH_OUT, PunchKind.LUNCH_IN, PunchKind.EXIT, PunchKind.EXIT, PunchKind.EXIT]
    for count, kind in enumerate(expected):
        nxt = sequencer.next_punch(_day([PunchKind.ENTRY] * count), Role.STANDARD)
        assert nxt.kind is kind
        assert nxt.ordinal == count + 1


def test_restricted_sequence_is_entry_then_exit():
    expected = [PunchKind.ENTRY, PunchKind.EXIT, PunchKind.EXIT, PunchKind.EXIT]
    for count, kind in enumerate(expected):
        assert sequencer.next_punch(_day([PunchKind.ENTRY] * count), Role.INTERN).kind is kind


def test_absence_rows_do_not_count():
    today = _day([PunchKind.ENTRY, PunchKind.ABSENCE])
    nxt = sequencer.next_punch(today, Role.STANDARD)
    assert nxt.kind is PunchKind.LUNCH_OUT
    assert nxt.ordinal == 2


def test_uses_count_not_highest_ordinal():
    # A gap left by an approved justification.
    today = [
        make_punch("u1", datetime(2026, 3, 2, 8), PunchKind.ENTRY, 1),
        make_punch("u1", datetime(2026, 3, 2, 13), PunchKind.LUNCH_IN, 3),
    ]
    nxt = sequencer.next_punch(today, Role.STANDARD)
    assert nxt.kind is PunchKind.LUNCH_IN
    assert nxt.ordinal == 3


def test_day_complete_per_role():
    assert sequencer.is_day_complete(_day([PunchKind.ENTRY] * 4), Role.STANDARD)
    assert not sequencer.is_day_complete(_day([PunchKind.ENTRY] * 3), Role.STANDARD)
    assert sequencer.is_day_complete(_day([PunchKind.ENTRY] * 2), Role.INTERN)
    assert sequencer.max_punches(Role.INTERN) == 2
