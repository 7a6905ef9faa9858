from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_decimal_hours, now_local
from ..core.enums import ReportPeriod, Role
from ..holidays.repository import HolidayRepository
from .aggregator import BalanceAggregator, BalanceSummary
from .periods import period_range
from .repository import BalanceSnapshotRepository

logger = logging.getLogger(__name__)

# Hours; below this the snapshot and the recomputation are considered equal.
BALANCE_TOLERANCE = 0.01


class ReportService:
    def __init__(
        self,
        aggregator: BalanceAggregator,
        holidays: HolidayRepository,
        *,
        snapshots: Optional[BalanceSnapshotRepository] = None,
    ):
        self._aggregator = aggregator
        self._holidays = holidays
        self._snapshots = snapshots

    def report(
        self,
        user_id: str,
        period: ReportPeriod,
        *,
        role: Role = Role.STANDARD,
        reference: date | None = None,
        now: datetime | None = None,
    ) -> BalanceSummary:
        now = now or now_local()
        if period is ReportPeriod.ALL:
            return self.bank_of_hours(user_id, role=role, now=now)

        start, end = period_range(period, reference or now.date(), today=now.date())
        return self._aggregator.compute(user_id, start, end, role=role, holidays=self._holidays.list_all(), now=now)

    def bank_of_hours(self, user_id: str, *, role: Role = Role.STANDARD, now: datetime | None = None) -> BalanceSummary:
        """All-time balance. The local recomputation is authoritative."""
        now = now or now_local()
        summary = self._aggregator.compute_all_time(user_id, role=role, holidays=self._holidays.list_all(), now=now)
        self._check_snapshot(user_id, summary)
        return summary

    def _check_snapshot(self, user_id: str, summary: BalanceSummary) -> None:
        if self._snapshots is None:
            return
        try:
            stored = self._snapshots.get_balance(user_id)
        except Exception:
            logger.exception("Could not read balance snapshot for %s", user_id)
            return
        if stored is not None and abs(stored - summary.balance) > BALANCE_TOLERANCE:
            logger.warning(
                "Balance divergence for %s: snapshot=%.2f recomputed=%.2f",
                user_id,
                stored,
                summary.balance,
            )

    @staticmethod
    def to_ui(summary: BalanceSummary) -> dict:
        return {
            "start": summary.start.strftime("%Y-%m-%d") if summary.start else None,
            "end": summary.end.strftime("%Y-%m-%d") if summary.end else None,
            "total_hours": round(summary.total_worked_hours, 2),
            "total_hours_label": format_decimal_hours(summary.total_worked_hours),
            "expected_hours": round(summary.expected_hours, 2),
            "balance": round(summary.balance, 2),
            "balance_label": ("+" if summary.balance > 0 else "") + format_decimal_hours(summary.balance),
            "business_days": summary.business_days,
            "days_worked": summary.days_worked,
            "last_record_date": summary.last_record_date.strftime("%Y-%m-%d %H:%M") if summary.last_record_date else None,
        }
