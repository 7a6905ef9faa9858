from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import ApprovalStatus, PunchKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_bool, normalize_decimal
from .model import NewPunch, PunchRecord
from .repository import PunchRepository

_COLUMNS = """
    punch_id, user_id, punched_at, kind, ordinal, accumulated_hours, lunch_hours,
    justification, justification_approved, out_of_geofence
"""


def _to_model(r: dict) -> PunchRecord:
    approved = normalize_bool(r.get("justification_approved"))
    return PunchRecord(
        punch_id=int(r["punch_id"]),
        user_id=str(r["user_id"]),
        punched_at=r["punched_at"],
        kind=PunchKind.from_label(r["kind"]),
        ordinal=int(r["ordinal"]),
        accumulated_hours=normalize_decimal(r.get("accumulated_hours")),
        lunch_hours=normalize_decimal(r.get("lunch_hours")),
        justification=r.get("justification"),
        # NULL means "no justification" unless there is text waiting for approval.
        justification_status=ApprovalStatus.from_flag(approved) if (approved is not None or r.get("justification")) else None,
        out_of_geofence=bool(normalize_bool(r.get("out_of_geofence"))),
    )


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_punches(self, user_id: str, start: datetime, end: datetime) -> Sequence[PunchRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM punch_records
                WHERE user_id=%s AND punched_at BETWEEN %s AND %s
                ORDER BY punched_at ASC, ordinal ASC
                """,
                (user_id, start, end),
            )
            return [_to_model(r) for r in fetchall(cur)]

    def list_history(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
        *,
        kind: Optional[PunchKind] = None,
        limit: int = 200,
    ) -> Sequence[PunchRecord]:
        where = ["user_id=%s", "punched_at BETWEEN %s AND %s"]
        params: list = [user_id, start, end]
        if kind is not None:
            where.append("kind=%s")
            params.append(kind.label)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM punch_records
                WHERE {" AND ".join(where)}
                ORDER BY punched_at DESC, ordinal DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_model(r) for r in fetchall(cur)]

    def insert_punch(self, punch: NewPunch) -> PunchRecord:
        status = punch.justification_status.to_flag() if punch.justification_status else None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO punch_records(
                    user_id, punched_at, work_date, kind, ordinal, accumulated_hours, lunch_hours,
                    justification, justification_approved, out_of_geofence
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    punch.user_id,
                    punch.punched_at,
                    punch.punched_at.date(),
                    punch.kind.label,
                    int(punch.ordinal),
                    punch.accumulated_hours,
                    punch.lunch_hours,
                    punch.justification,
                    status,
                    int(punch.out_of_geofence),
                ),
            )
            punch_id = int(cur.lastrowid)

        return PunchRecord(
            punch_id=punch_id,
            user_id=punch.user_id,
            punched_at=punch.punched_at,
            kind=punch.kind,
            ordinal=punch.ordinal,
            accumulated_hours=punch.accumulated_hours,
            lunch_hours=punch.lunch_hours,
            justification=punch.justification,
            justification_status=punch.justification_status,
            out_of_geofence=punch.out_of_geofence,
        )

    def get_first_punch(self, user_id: str) -> Optional[PunchRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM punch_records WHERE user_id=%s ORDER BY punched_at ASC LIMIT 1",
                (user_id,),
            )
            r = fetchone(cur)
            return _to_model(r) if r else None

    def get_last_punch(self, user_id: str, *, kind: Optional[PunchKind] = None) -> Optional[PunchRecord]:
        sql = f"SELECT {_COLUMNS} FROM punch_records WHERE user_id=%s"
        params: list = [user_id]
        if kind is not None:
            sql += " AND kind=%s"
            params.append(kind.label)
        sql += " ORDER BY punched_at DESC LIMIT 1"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            r = fetchone(cur)
            return _to_model(r) if r else None
