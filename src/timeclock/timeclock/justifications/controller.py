from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.web import admin_required, current_user_id, error_response, login_required, request_payload
from ..core.enums import JustificationKind
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from .model import Evidence, JustificationRequest

logger = logging.getLogger(__name__)

NOTICE_KEY = "justification:notice"


def parse_kind(value: str | None) -> JustificationKind:
    try:
        return JustificationKind((value or JustificationKind.DELAY.value).strip().lower())
    except ValueError:
        raise ValidationError("Tipo de justificativa inválido") from None


def read_evidence() -> Evidence | None:
    file = request.files.get("evidence")
    if file is None or not file.filename:
        return None
    return Evidence(data=file.read(), filename=file.filename)


def watch_latest(container: Container, user_id: str) -> bool:
    """Poll the subject's pending request; the outcome is left as a session notice."""
    state = container.sessions.open(user_id)

    def on_approved(req: JustificationRequest) -> None:
        state.set(NOTICE_KEY, {"id": req.request_id, "status": req.status.value})

    def on_rejected(req: JustificationRequest) -> None:
        state.set(NOTICE_KEY, {"id": req.request_id, "status": req.status.value})

    return container.approval_watcher.watch(user_id, on_approved=on_approved, on_rejected=on_rejected)


def register(app: Flask, container: Container) -> None:
    workflow = container.justification_workflow

    @app.route("/api/justifications", methods=["POST"], endpoint="api_justification_submit")
    @login_required
    def submit():
        user_id = current_user_id()
        form = request_payload()
        try:
            req = workflow.submit(
                user_id,
                parse_kind(form.get("kind")),
                form.get("reason"),
                read_evidence(),
            )
        except DomainError as e:
            return error_response(e)
        watch_latest(container, user_id)
        return jsonify({"success": True, "justification": workflow.to_ui(req)}), 201

    @app.route("/api/justifications/latest", methods=["GET"], endpoint="api_justification_latest")
    @login_required
    def latest():
        user_id = current_user_id()
        req = workflow.latest(user_id)
        if req is not None and req.is_pending and not container.approval_watcher.is_watching(user_id):
            watch_latest(container, user_id)
        return jsonify(
            {
                "success": True,
                "justification": workflow.to_ui(req) if req else None,
                "needs_ack": workflow.needs_acknowledgement(user_id, req),
                "notice": container.sessions.open(user_id).get(NOTICE_KEY),
            }
        )

    @app.route("/api/justifications/<int:request_id>/ack", methods=["POST"], endpoint="api_justification_ack")
    @login_required
    def acknowledge(request_id: int):
        user_id = current_user_id()
        req = workflow.latest(user_id)
        if req is None or req.request_id != request_id:
            return error_response(ValidationError("Solicitação não encontrada"))
        changed = workflow.acknowledge(user_id, req)
        container.sessions.open(user_id).delete(NOTICE_KEY)
        return jsonify({"success": True, "acknowledged": changed})

    @app.route(
        "/api/admin/justifications/<int:request_id>/<action>",
        methods=["POST"],
        endpoint="api_justification_decide",
    )
    @admin_required
    def decide(request_id: int, action: str):
        try:
            if action == "approve":
                req = workflow.approve(request_id, decided_by=current_user_id())
            elif action == "reject":
                req = workflow.reject(request_id, decided_by=current_user_id())
            else:
                raise ValidationError("Ação inválida")
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "justification": workflow.to_ui(req)})

    @app.route("/api/admin/justifications/pending", methods=["GET"], endpoint="api_justification_pending")
    @admin_required
    def pending():
        return jsonify({"success": True, "justifications": [workflow.to_ui(r) for r in workflow.pending()]})
