from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import day_bounds
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import PunchKind
from ..holidays.model import Holiday
from ..holidays.repository import HolidayRepository
from ..holidays.service import holidays_between
from .model import PunchRecord
from .repository import PunchRepository


def holiday_record(user_id: str, holiday: Holiday) -> PunchRecord:
    """Synthetic row for a holiday; never persisted."""
    return PunchRecord(
        punch_id=None,
        user_id=user_id,
        punched_at=datetime.combine(holiday.holiday_date, time.min),
        kind=PunchKind.HOLIDAY,
        ordinal=0,
        justification=holiday.title,
    )


class HistoryService:
    def __init__(self, punches: PunchRepository, holidays: HolidayRepository):
        self._punches = punches
        self._holidays = holidays

    def list_history(
        self,
        user_id: str,
        start: date,
        end: date,
        *,
        kind: Optional[PunchKind] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[PunchRecord]:
        """Punches newest first, with a Holiday row for holidays that have no real punch."""
        range_start, _ = day_bounds(start)
        _, range_end = day_bounds(end)

        records: list[PunchRecord] = []
        if kind is not PunchKind.HOLIDAY:
            records = list(self._punches.list_history(user_id, range_start, range_end, kind=kind, limit=limit))

        if kind is None or kind is PunchKind.HOLIDAY:
            # Judge by every punch in range, not just the page that was kept.
            punched = self._punches.list_punches(user_id, range_start, range_end)
            punched_days = {r.work_date for r in punched}
            for h in holidays_between(self._holidays.list_all(), start, end):
                if h.holiday_date not in punched_days:
                    records.append(holiday_record(user_id, h))
                    punched_days.add(h.holiday_date)

        records.sort(key=lambda r: (r.punched_at, r.ordinal), reverse=True)
        return records

    @staticmethod
    def to_ui(r: PunchRecord) -> dict:
        return {
            "id": r.punch_id,
            "date": r.punched_at.strftime("%Y-%m-%d"),
            "time": "-" if r.is_virtual else r.punched_at.strftime("%H:%M"),
            "kind": r.kind.value,
            "label": r.kind.label,
            "ordinal": r.ordinal,
            "accumulated_hours": float(r.accumulated_hours) if r.accumulated_hours is not None else None,
            "lunch_hours": float(r.lunch_hours) if r.lunch_hours is not None else None,
            "justification": r.justification,
            "out_of_geofence": r.out_of_geofence,
        }
