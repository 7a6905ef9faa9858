from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalStatus, JustificationKind
from .model import JustificationRequest


class JustificationRepository(Protocol):
    def insert(
        self,
        *,
        user_id: str,
        created_at: datetime,
        kind: JustificationKind,
        reason: Optional[str],
        evidence_url: Optional[str],
    ) -> JustificationRequest:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[JustificationRequest]:
        raise NotImplementedError

    def list_for_user(self, user_id: str, *, limit: int = 50) -> Sequence[JustificationRequest]:
        """Newest first."""

        raise NotImplementedError

    def list_pending(self, *, limit: int = 200) -> Sequence[JustificationRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: ApprovalStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        """Only transitions a PENDING row; returns False otherwise."""

        raise NotImplementedError
