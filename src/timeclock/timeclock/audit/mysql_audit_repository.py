from __future__ import annotations

from typing import Optional

from ..core.enums import AuditAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_app_name(self, app_id: int) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT app_name FROM apps WHERE app_id=%s", (int(app_id),))
            r = fetchone(cur)
            return r["app_name"] if r else None

    def get_username(self, user_id: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT username FROM users WHERE user_id=%s", (user_id,))
            r = fetchone(cur)
            return r["username"] if r else None

    def insert_entry(
        self,
        *,
        user_id: str,
        username: str,
        app_id: int,
        app_name: str,
        action: AuditAction,
        message: str,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(user_id, username, app_id, app_name, action, message)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (user_id, username, int(app_id), app_name, action.value, message),
            )
