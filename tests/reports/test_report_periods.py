from __future__ import annotations

from datetime import date

import pytest

from src.timeclock.timeclock.core.enums import ReportPeriod
from src.timeclock.timeclock.reports.periods import period_range

THURSDAY = date(2026, 2, 12)


def test_week_starts_on_monday_and_stops_today():
    assert period_range(ReportPeriod.WEEK, THURSDAY, today=THURSDAY) == (date(2026, 2, 9), THURSDAY)
    assert period_range(ReportPeriod.WEEK, THURSDAY) == (date(2026, 2, 9), date(2026, 2, 15))


def test_month_and_year_ranges():
    assert period_range(ReportPeriod.MONTH, THURSDAY) == (date(2026, 2, 1), date(2026, 2, 28))
    assert period_range(ReportPeriod.MONTH, date(2026, 12, 3)) == (date(2026, 12, 1), date(2026, 12, 31))
    assert period_range(ReportPeriod.YEAR, THURSDAY, today=THURSDAY) == (date(2026, 1, 1), THURSDAY)


def test_day_range():
    assert period_range(ReportPeriod.DAY, THURSDAY) == (THURSDAY, THURSDAY)


def test_all_has_no_fixed_range():
    with pytest.raises(ValueError):
        period_range(ReportPeriod.ALL, THURSDAY)
