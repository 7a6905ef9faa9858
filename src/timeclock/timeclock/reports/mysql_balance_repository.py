from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import BalanceSnapshotRepository


class MySQLBalanceSnapshotRepository(BalanceSnapshotRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_balance(self, user_id: str) -> Optional[float]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT balance_hours FROM bank_balances WHERE user_id=%s", (user_id,))
            r = fetchone(cur)
            return float(r["balance_hours"]) if r else None
