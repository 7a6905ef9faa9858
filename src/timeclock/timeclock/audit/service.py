from __future__ import annotations

import logging

from ..common.session_state import SessionRegistry
from ..core.enums import AuditAction
from .repository import AuditRepository

logger = logging.getLogger(__name__)

UNKNOWN_APP = "Unknown App"
UNKNOWN_USER = "Unknown User"


class AuditLog:
    """Fire-and-forget audit trail.

    Display names are resolved once per open session and kept in that session's
    state. Failures are logged here and never reach the caller.
    """

    def __init__(self, audit: AuditRepository, sessions: SessionRegistry, *, app_id: int):
        self._audit = audit
        self._sessions = sessions
        self._app_id = int(app_id)

    def _lookup(self, fetch, fallback: str) -> str:
        try:
            return fetch() or fallback
        except Exception:
            logger.exception("Audit name lookup failed")
            return fallback

    def _resolve(self, user_id: str, key: str, fetch, fallback: str) -> str:
        state = self._sessions.get(user_id)
        if state is None:
            # No open session: look up without leaving state behind.
            return self._lookup(fetch, fallback)
        return state.get_or_set(key, lambda: self._lookup(fetch, fallback))

    def record(self, user_id: str, action: AuditAction, message: str) -> None:
        try:
            app_name = self._resolve(
                user_id, "audit:app_name", lambda: self._audit.get_app_name(self._app_id), UNKNOWN_APP
            )
            username = self._resolve(
                user_id, "audit:username", lambda: self._audit.get_username(user_id), UNKNOWN_USER
            )
            self._audit.insert_entry(
                user_id=user_id,
                username=username,
                app_id=self._app_id,
                app_name=app_name,
                action=action,
                message=message,
            )
            logger.info("[LOG] %s: %s", action.value, message)
        except Exception:
            logger.exception("Failed to write audit entry for %s", user_id)
