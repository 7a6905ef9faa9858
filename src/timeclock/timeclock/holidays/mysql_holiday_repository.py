from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT holiday_id, holiday_date, title FROM holidays ORDER BY holiday_date")
            return [
                Holiday(holiday_id=int(r["holiday_id"]), holiday_date=r["holiday_date"], title=r["title"])
                for r in fetchall(cur)
            ]
