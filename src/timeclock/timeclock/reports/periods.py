from __future__ import annotations

from datetime import date, timedelta

from ..core.enums import ReportPeriod


def period_range(period: ReportPeriod, reference: date, *, today: date | None = None) -> tuple[date, date]:
    """Inclusive date range of a report/history period.

    ``reference`` picks the day/week/month shown; ranges never run past
    ``today`` when it is given (nothing to count in the future).
    ALL has no fixed range and is handled by the aggregator.
    """
    if period in (ReportPeriod.TODAY, ReportPeriod.DAY):
        start = end = reference
    elif period is ReportPeriod.WEEK:
        start = reference - timedelta(days=reference.weekday())
        end = start + timedelta(days=6)
    elif period is ReportPeriod.MONTH:
        start = reference.replace(day=1)
        next_month = (start.replace(day=28) + timedelta(days=4)).replace(day=1)
        end = next_month - timedelta(days=1)
    elif period is ReportPeriod.YEAR:
        start = reference.replace(month=1, day=1)
        end = reference.replace(month=12, day=31)
    else:
        raise ValueError(f"Period {period.value!r} has no fixed range")

    if today is not None and end > today:
        end = max(today, start)
    return start, end
