from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ApprovalStatus, JustificationKind


@dataclass(frozen=True)
class JustificationRequest:
    request_id: int
    user_id: str
    created_at: datetime
    kind: JustificationKind
    reason: Optional[str]
    evidence_url: Optional[str]
    status: ApprovalStatus
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status is ApprovalStatus.PENDING


@dataclass(frozen=True)
class Evidence:
    data: bytes
    filename: str = ""
