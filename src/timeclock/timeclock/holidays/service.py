from __future__ import annotations

from datetime import date
from typing import Sequence

from ..common.datetime_utils import is_weekend
from .model import Holiday
from .repository import HolidayRepository


def holidays_between(holidays: Sequence[Holiday], start: date, end: date) -> list[Holiday]:
    return [h for h in holidays if start <= h.holiday_date <= end]


def weekday_holiday_dates(holidays: Sequence[Holiday], start: date, end: date) -> set[date]:
    """Distinct holiday dates in range that fall on a weekday."""
    return {h.holiday_date for h in holidays_between(holidays, start, end) if not is_weekend(h.holiday_date)}


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def list_all(self) -> Sequence[Holiday]:
        return self._holidays.list_all()

    def upcoming(self, today: date) -> list[Holiday]:
        """Holidays from today on; shown to the subject as automatically credited days."""
        return [h for h in self._holidays.list_all() if h.holiday_date >= today]

    def to_ui(self, holiday: Holiday) -> dict:
        return {
            "id": holiday.holiday_id,
            "date": holiday.holiday_date.strftime("%Y-%m-%d"),
            "title": holiday.title,
        }
