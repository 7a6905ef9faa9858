from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.timeclock.timeclock.core.enums import PunchKind, Role
from src.timeclock.timeclock.holidays.model import Holiday
from src.timeclock.timeclock.reports.aggregator import BalanceAggregator
from tests.fakes import InMemoryPunchRepository, full_day, make_punch

MONDAY = date(2026, 3, 2)
FRIDAY = date(2026, 3, 6)
SUNDAY = date(2026, 3, 8)
NOW = datetime(2026, 3, 9, 9, 0)


def _week_repo():
    records = []
    for i in range(5):
        records += full_day("u1", MONDAY + timedelta(days=i))
    return InMemoryPunchRepository(records)


def test_exact_target_every_weekday_balances_to_zero():
    summary = BalanceAggregator(_week_repo()).compute("u1", MONDAY, SUNDAY, role=Role.STANDARD, holidays=[], now=NOW)

    assert summary.business_days == 5
    assert summary.days_worked == 5
    assert summary.total_worked_hours == pytest.approx(43.75)
    assert summary.expected_hours == pytest.approx(43.75)
    assert summary.balance == pytest.approx(0.0)
    assert summary.last_record_date == datetime(2026, 3, 6, 17, 45)


def test_weekday_holiday_reduces_business_days():
    aggregator = BalanceAggregator(_week_repo())
    base = aggregator.compute("u1", MONDAY, SUNDAY, role=Role.STANDARD, holidays=[], now=NOW)
    wednesday = [Holiday(1, date(2026, 3, 4), "Feriado municipal")]
    with_holiday = aggregator.compute("u1", MONDAY, SUNDAY, role=Role.STANDARD, holidays=wednesday, now=NOW)

    assert with_holiday.business_days == base.business_days - 1
    assert with_holiday.balance == pytest.approx(base.balance + 8.75)


def test_saturday_holiday_has_no_effect():
    aggregator = BalanceAggregator(_week_repo())
    saturday = [Holiday(1, date(2026, 3, 7), "Sábado")]
    summary = aggregator.compute("u1", MONDAY, SUNDAY, role=Role.STANDARD, holidays=saturday, now=NOW)
    assert summary.business_days == 5


def test_duplicate_holiday_dates_count_once():
    aggregator = BalanceAggregator(_week_repo())
    dup = [Holiday(1, date(2026, 3, 4), "A"), Holiday(2, date(2026, 3, 4), "B")]
    assert aggregator.compute("u1", MONDAY, FRIDAY, role=Role.STANDARD, holidays=dup, now=NOW).business_days == 4


def test_restricted_role_target():
    repo = InMemoryPunchRepository(
        [
            make_punch("u1", datetime(2026, 3, 2, 9), PunchKind.ENTRY, 1),
            make_punch("u1", datetime(2026, 3, 2, 15), PunchKind.EXIT, 2),
        ]
    )
    summary = BalanceAggregator(repo).compute("u1", MONDAY, MONDAY, role=Role.INTERN, holidays=[], now=NOW)
    assert summary.expected_hours == 6.0
    assert summary.balance == pytest.approx(0.0)


def test_missing_day_is_a_deficit():
    repo = InMemoryPunchRepository(full_day("u1", MONDAY))
    summary = BalanceAggregator(repo).compute("u1", MONDAY, date(2026, 3, 3), role=Role.STANDARD, holidays=[], now=NOW)
    assert summary.balance == pytest.approx(-8.75)
    assert summary.days_worked == 1


def test_all_time_without_punches_is_zero():
    summary = BalanceAggregator(InMemoryPunchRepository()).compute_all_time("u1", role=Role.STANDARD, holidays=[], now=NOW)
    assert summary.balance == 0
    assert summary.business_days == 0
    assert summary.last_record_date is None


def test_all_time_stops_at_last_exit():
    summary = BalanceAggregator(_week_repo()).compute_all_time("u1", role=Role.STANDARD, holidays=[], now=NOW)
    # Monday the 9th has no punches and is not charged.
    assert summary.start == MONDAY
    assert summary.end == FRIDAY
    assert summary.business_days == 5
    assert summary.balance == pytest.approx(0.0)
    assert summary.last_record_date == datetime(2026, 3, 6, 17, 45)


def test_all_time_without_exit_runs_until_today():
    repo = InMemoryPunchRepository([make_punch("u1", datetime(2026, 3, 6, 8), PunchKind.ENTRY, 1)])
    summary = BalanceAggregator(repo).compute_all_time("u1", role=Role.STANDARD, holidays=[], now=NOW)
    assert summary.end == NOW.date()
    assert summary.last_record_date is None
