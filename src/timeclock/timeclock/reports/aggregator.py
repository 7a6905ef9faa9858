from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import day_bounds, is_weekend, iter_days, to_hours
from ..core.enums import PunchKind, Role
from ..holidays.model import Holiday
from ..holidays.service import weekday_holiday_dates
from ..punches import accountant
from ..punches.model import PunchRecord
from ..punches.repository import PunchRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceSummary:
    start: Optional[date]
    end: Optional[date]
    total_worked_hours: float
    business_days: int
    expected_hours: float
    balance: float
    days_worked: int
    last_record_date: Optional[datetime]

    @classmethod
    def empty(cls) -> "BalanceSummary":
        return cls(
            start=None,
            end=None,
            total_worked_hours=0.0,
            business_days=0,
            expected_hours=0.0,
            balance=0.0,
            days_worked=0,
            last_record_date=None,
        )


def _group_by_day(punches: Sequence[PunchRecord]) -> dict[date, list[PunchRecord]]:
    groups: dict[date, list[PunchRecord]] = defaultdict(list)
    for p in punches:
        groups[p.work_date].append(p)
    return groups


class BalanceAggregator:
    """Worked hours vs. expected hours over a date range (bank of hours)."""

    def __init__(self, punches: PunchRepository):
        self._punches = punches

    def compute(
        self,
        user_id: str,
        start: date,
        end: date,
        *,
        role: Role,
        holidays: Sequence[Holiday],
        now: datetime,
        last_record_date: Optional[datetime] = None,
    ) -> BalanceSummary:
        range_start, _ = day_bounds(start)
        _, range_end = day_bounds(end)
        punches = self._punches.list_punches(user_id, range_start, range_end)
        by_day = _group_by_day(punches)

        worked = timedelta(0)
        candidates = 0
        days_worked = 0
        for day in iter_days(start, end):
            if is_weekend(day):
                continue
            candidates += 1
            # A weekday with punches but no worked time still counts as expected.
            day_punches = by_day.get(day)
            if day_punches:
                day_worked = accountant.worked_duration(day_punches, now)
                worked += day_worked
                if day_worked > timedelta(0):
                    days_worked += 1

        business_days = candidates - len(weekday_holiday_dates(holidays, start, end))
        total_hours = to_hours(worked)
        expected = business_days * role.daily_target_hours

        if last_record_date is None:
            exits = [p.punched_at for p in punches if p.kind is PunchKind.EXIT]
            last_record_date = max(exits) if exits else None

        return BalanceSummary(
            start=start,
            end=end,
            total_worked_hours=total_hours,
            business_days=business_days,
            expected_hours=expected,
            balance=total_hours - expected,
            days_worked=days_worked,
            last_record_date=last_record_date,
        )

    def compute_all_time(
        self,
        user_id: str,
        *,
        role: Role,
        holidays: Sequence[Holiday],
        now: datetime,
    ) -> BalanceSummary:
        """Bank of hours since the first punch.

        The end is clamped to the day of the latest EXIT so days after the
        subject stopped punching are not charged. Without any EXIT the range
        runs until today.
        """
        first = self._punches.get_first_punch(user_id)
        if first is None:
            return BalanceSummary.empty()

        last_exit = self._punches.get_last_punch(user_id, kind=PunchKind.EXIT)
        end = last_exit.work_date if last_exit else now.date()
        start = min(first.work_date, end)
        return self.compute(
            user_id,
            start,
            end,
            role=role,
            holidays=holidays,
            now=now,
            last_record_date=last_exit.punched_at if last_exit else None,
        )
