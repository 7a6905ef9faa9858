from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..audit.service import AuditLog
from ..common.datetime_utils import now_local
from ..common.session_state import SessionRegistry
from ..common.validators import optional_text
from ..core.enums import ApprovalStatus, AuditAction, JustificationKind
from ..core.exceptions import EvidenceUploadError, ValidationError
from ..evidence.storage import EvidenceStorage
from .model import Evidence, JustificationRequest
from .repository import JustificationRepository

logger = logging.getLogger(__name__)

ACK_KEY = "justification:acknowledged_id"


class JustificationWorkflow:
    """Pending substitutes for punches taken outside the geofence.

    Approval happens elsewhere (an approver decides the effective punch);
    this service only creates requests and guards their one-way transitions.
    """

    def __init__(
        self,
        requests: JustificationRepository,
        evidence: EvidenceStorage,
        sessions: SessionRegistry,
        *,
        audit: Optional[AuditLog] = None,
    ):
        self._requests = requests
        self._evidence = evidence
        self._sessions = sessions
        self._audit = audit

    def submit(
        self,
        user_id: str,
        kind: JustificationKind,
        reason: str | None,
        evidence: Optional[Evidence] = None,
        *,
        now: datetime | None = None,
    ) -> JustificationRequest:
        now = now or now_local()
        text = optional_text(reason)
        has_evidence = evidence is not None and bool(evidence.data)
        if not text and not has_evidence:
            raise ValidationError("Por favor, forneça um texto ou uma foto.")

        evidence_url = None
        if has_evidence:
            try:
                evidence_url = self._evidence.upload(evidence.data, user_id, evidence.filename)
            except EvidenceUploadError:
                if not text:
                    raise
                logger.warning("Evidence upload failed for %s, keeping text-only justification", user_id)

        request = self._requests.insert(
            user_id=user_id,
            created_at=now,
            kind=JustificationKind(kind),
            reason=text,
            evidence_url=evidence_url,
        )
        if self._audit:
            self._audit.record(user_id, AuditAction.CREATE, f"Justificativa ({request.kind.value}) enviada")
        return request

    def latest(self, user_id: str) -> Optional[JustificationRequest]:
        rows = self._requests.list_for_user(user_id, limit=1)
        return rows[0] if rows else None

    def pending(self, *, limit: int = 200) -> list[JustificationRequest]:
        """Requests awaiting a decision, for approvers."""
        return list(self._requests.list_pending(limit=limit))

    def has_pending(self, user_id: str) -> bool:
        latest = self.latest(user_id)
        return latest is not None and latest.is_pending

    def _decide(self, request_id: int, status: ApprovalStatus, decided_by: str, now: datetime | None) -> JustificationRequest:
        req = self._requests.get(int(request_id))
        if not req:
            raise ValidationError("Solicitação não encontrada")
        if not req.is_pending:
            raise ValidationError("Solicitação já foi processada")

        decided = self._requests.decide(
            request_id=req.request_id,
            status=status,
            decided_by=decided_by,
            decided_at=now or now_local(),
        )
        if not decided:
            raise ValidationError("Solicitação já foi processada")

        if self._audit:
            self._audit.record(decided_by, AuditAction.UPDATE, f"Justificativa #{req.request_id} {status.value}")
        return self._requests.get(req.request_id) or req

    def approve(self, request_id: int, *, decided_by: str, now: datetime | None = None) -> JustificationRequest:
        return self._decide(request_id, ApprovalStatus.APPROVED, decided_by, now)

    def reject(self, request_id: int, *, decided_by: str, now: datetime | None = None) -> JustificationRequest:
        return self._decide(request_id, ApprovalStatus.REJECTED, decided_by, now)

    def needs_acknowledgement(self, user_id: str, request: Optional[JustificationRequest]) -> bool:
        if request is None or request.status is not ApprovalStatus.APPROVED:
            return False
        return self._sessions.open(user_id).get(ACK_KEY) != request.request_id

    def acknowledge(self, user_id: str, request: JustificationRequest) -> bool:
        """Mark an approval as seen. Returns False when it already was (no-op)."""
        if not self.needs_acknowledgement(user_id, request):
            return False
        self._sessions.open(user_id).set(ACK_KEY, request.request_id)
        return True

    def to_ui(self, request: JustificationRequest) -> dict:
        return {
            "id": request.request_id,
            "created_at": request.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            "kind": request.kind.value,
            "reason": request.reason or "",
            "evidence_url": request.evidence_url,
            "status": request.status.value,
        }
