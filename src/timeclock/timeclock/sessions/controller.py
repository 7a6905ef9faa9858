from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import current_user_id, login_required
from ..core.enums import AuditAction
from ..container import Container
from ..justifications.controller import watch_latest


def register(app: Flask, container: Container) -> None:
    @app.route("/api/session/open", methods=["POST"], endpoint="api_session_open")
    @login_required
    def open_session():
        """Start the per-session timers: token rotation and approval polling."""
        user_id = current_user_id()
        container.sessions.open(user_id)
        container.token_registry.start_rotation(user_id)
        watching = watch_latest(container, user_id)
        container.audit_log.record(user_id, AuditAction.LOGIN, "Sessão iniciada")
        return jsonify({"success": True, "watching_justification": watching})

    @app.route("/api/session/close", methods=["POST"], endpoint="api_session_close")
    @login_required
    def close_session():
        user_id = current_user_id()
        container.audit_log.record(user_id, AuditAction.LOGOUT, "Sessão encerrada")
        container.sessions.close(user_id)
        session.clear()
        return jsonify({"success": True})
