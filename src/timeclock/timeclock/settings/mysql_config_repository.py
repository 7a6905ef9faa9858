from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import ConfigRepository


class MySQLConfigRepository(ConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT config_value FROM system_config WHERE config_key=%s", (key,))
            r = fetchone(cur)
            return str(r["config_value"]) if r else None

    def set(self, key: str, value: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO system_config(config_key, config_value)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE config_value=VALUES(config_value)
                """,
                (key, str(value)),
            )
