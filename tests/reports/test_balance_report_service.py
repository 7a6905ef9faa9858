from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

import pytest

from src.timeclock.timeclock.core.enums import ReportPeriod, Role
from src.timeclock.timeclock.reports.aggregator import BalanceAggregator
from src.timeclock.timeclock.reports.service import ReportService
from tests.fakes import InMemoryHolidayRepository, InMemoryPunchRepository, full_day

MONDAY = date(2026, 3, 2)
NOW = datetime(2026, 3, 6, 18, 0)


class FakeSnapshots:
    def __init__(self, balance):
        self.balance = balance

    def get_balance(self, user_id):
        return self.balance


def _service(*, snapshots=None, holidays=None):
    records = []
    for i in range(5):
        records += full_day("u1", MONDAY + timedelta(days=i))
    return ReportService(
        BalanceAggregator(InMemoryPunchRepository(records)),
        InMemoryHolidayRepository(holidays),
        snapshots=snapshots,
    )


def test_week_report():
    summary = _service().report("u1", ReportPeriod.WEEK, now=NOW)
    assert summary.start == MONDAY
    assert summary.end == NOW.date()
    assert summary.balance == pytest.approx(0.0)


def test_day_report_uses_reference_date():
    summary = _service().report("u1", ReportPeriod.DAY, reference=date(2026, 3, 3), now=NOW)
    assert summary.total_worked_hours == pytest.approx(8.75)
    assert summary.business_days == 1


def test_bank_uses_local_recomputation_and_warns_on_divergence(caplog):
    service = _service(snapshots=FakeSnapshots(12.5))
    with caplog.at_level(logging.WARNING):
        summary = service.bank_of_hours("u1", role=Role.STANDARD, now=NOW)
    assert summary.balance == pytest.approx(0.0)
    assert "divergence" in caplog.text


def test_bank_matching_snapshot_is_quiet(caplog):
    service = _service(snapshots=FakeSnapshots(0.0))
    with caplog.at_level(logging.WARNING):
        service.report("u1", ReportPeriod.ALL, now=NOW)
    assert "divergence" not in caplog.text


def test_to_ui_labels():
    ui = ReportService.to_ui(_service().report("u1", ReportPeriod.DAY, reference=MONDAY, now=NOW))
    assert ui["total_hours_label"] == "8h 45m"
    assert ui["balance_label"] == "0h 00m"
    assert ui["last_record_date"] == "2026-03-02 17:45"
