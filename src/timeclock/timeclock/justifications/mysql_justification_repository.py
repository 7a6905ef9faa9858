from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import ApprovalStatus, JustificationKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_bool
from .model import JustificationRequest
from .repository import JustificationRepository

_COLUMNS = "request_id, user_id, created_at, kind, reason, evidence_url, approved, decided_by, decided_at"


def _to_model(r: dict) -> JustificationRequest:
    return JustificationRequest(
        request_id=int(r["request_id"]),
        user_id=str(r["user_id"]),
        created_at=r["created_at"],
        kind=JustificationKind(r["kind"]),
        reason=r.get("reason"),
        evidence_url=r.get("evidence_url"),
        status=ApprovalStatus.from_flag(normalize_bool(r.get("approved"))),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
    )


class MySQLJustificationRepository(JustificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(
        self,
        *,
        user_id: str,
        created_at: datetime,
        kind: JustificationKind,
        reason: Optional[str],
        evidence_url: Optional[str],
    ) -> JustificationRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO justification_requests(user_id, created_at, kind, reason, evidence_url, approved)
                VALUES(%s,%s,%s,%s,%s,NULL)
                """,
                (user_id, created_at, kind.value, reason, evidence_url),
            )
            request_id = int(cur.lastrowid)
        return JustificationRequest(
            request_id=request_id,
            user_id=user_id,
            created_at=created_at,
            kind=kind,
            reason=reason,
            evidence_url=evidence_url,
            status=ApprovalStatus.PENDING,
        )

    def get(self, request_id: int) -> Optional[JustificationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM justification_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_model(r) if r else None

    def list_for_user(self, user_id: str, *, limit: int = 50) -> Sequence[JustificationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM justification_requests
                WHERE user_id=%s
                ORDER BY created_at DESC, request_id DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            return [_to_model(r) for r in fetchall(cur)]

    def list_pending(self, *, limit: int = 200) -> Sequence[JustificationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM justification_requests
                WHERE approved IS NULL
                ORDER BY created_at ASC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_model(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: ApprovalStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE justification_requests
                SET approved=%s, decided_by=%s, decided_at=%s
                WHERE request_id=%s AND approved IS NULL
                """,
                (status.to_flag(), decided_by, decided_at, int(request_id)),
            )
            return cur.rowcount > 0
