from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.exceptions import PersistenceConflict
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except IntegrityError as exc:
        conn.rollback()
        if exc.errno == errorcode.ER_DUP_ENTRY:
            raise PersistenceConflict("Registro concorrente detectado. Atualize e tente novamente.") from exc
        raise
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_decimal(value: Any) -> Optional[Decimal]:
    """Normalize DECIMAL/FLOAT columns to a 2-place Decimal.

    mysql-connector can return DECIMAL as Decimal, FLOAT as float and, with
    some drivers, numbers as strings.
    """

    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def normalize_bool(value: Any) -> Optional[bool]:
    """TINYINT(1) columns come back as 0/1 (or None)."""

    if value is None:
        return None
    return bool(int(value))
