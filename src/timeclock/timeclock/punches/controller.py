from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_timer, now_local, parse_iso_date
from ..common.geo import Coordinates
from ..common.web import current_role, current_user_id, error_response, login_required, request_payload
from ..core.enums import LocationErrorReason, PunchKind
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from ..justifications.controller import parse_kind, read_evidence, watch_latest
from ..location.provider import StaticLocationProvider, acquire_location
from .registrar import JustificationInput, PendingJustification


def _reported_coordinates(form) -> Coordinates:
    """Position sent by the client, or its reported failure as LocationUnavailable."""
    error = form.get("location_error")
    coordinates = None
    if not error:
        coordinates = Coordinates.parse(form.get("latitude"), form.get("longitude"), form.get("accuracy"))
    try:
        reason = LocationErrorReason((error or LocationErrorReason.UNKNOWN.value).upper())
    except ValueError:
        reason = LocationErrorReason.UNKNOWN
    # The client already retried on its side.
    return acquire_location(StaticLocationProvider(coordinates, reason=reason), retry_delay=0)


def _justification_input(form) -> JustificationInput | None:
    evidence = read_evidence()
    reason = form.get("reason")
    if not reason and evidence is None and not form.get("justify"):
        return None
    return JustificationInput(kind=parse_kind(form.get("kind")), reason=reason, evidence=evidence)


def register(app: Flask, container: Container) -> None:
    registrar = container.punch_registrar
    history = container.history_service

    @app.route("/api/punches", methods=["POST"], endpoint="api_punch")
    @login_required
    def punch():
        user_id = current_user_id()
        container.sessions.open(user_id)
        form = request_payload()
        try:
            coordinates = _reported_coordinates(form)
            outcome = registrar.attempt_punch(
                user_id,
                coordinates,
                role=current_role(),
                challenge_code=form.get("token"),
                justification=_justification_input(form),
            )
        except DomainError as e:
            return error_response(e)

        if isinstance(outcome, PendingJustification):
            watch_latest(container, user_id)
            return jsonify(
                {
                    "success": True,
                    "pending": True,
                    "message": "Justificativa enviada. Aguarde aprovação.",
                    "distance_km": round(outcome.distance_km, 3),
                    "proposed": {"kind": outcome.proposed.kind.value, "label": outcome.proposed.kind.label},
                    "justification": container.justification_workflow.to_ui(outcome.request),
                }
            ), 202

        body = {
            "success": True,
            "pending": False,
            "message": f"{outcome.kind.label} registrado com sucesso!",
            "punch": history.to_ui(outcome),
        }
        summary = registrar.daily_summary(user_id, role=current_role(), now=outcome.punched_at)
        if summary:
            body["daily_summary"] = summary
        return jsonify(body), 201

    @app.route("/api/punches/today", methods=["GET"], endpoint="api_punches_today")
    @login_required
    def today():
        snap = registrar.today(current_user_id(), role=current_role())
        return jsonify(
            {
                "success": True,
                "records": [history.to_ui(r) for r in snap.records],
                "next": {"kind": snap.next_punch.kind.value, "label": snap.next_punch.kind.label, "ordinal": snap.next_punch.ordinal},
                "day_complete": snap.day_complete,
                "worked": format_timer(snap.worked),
                "worked_seconds": int(snap.worked / timedelta(seconds=1)),
                "pending_justification": snap.pending_justification,
            }
        )

    @app.route("/api/punches/history", methods=["GET"], endpoint="api_punches_history")
    @login_required
    def list_history():
        today = now_local().date()
        try:
            start = parse_iso_date(request.args["start"]) if request.args.get("start") else today.replace(day=1)
            end = parse_iso_date(request.args["end"]) if request.args.get("end") else today
            kind = request.args.get("kind")
            kind = PunchKind(kind) if kind else None
        except ValueError:
            return error_response(ValidationError("Filtro inválido"))
        if start > end:
            return error_response(ValidationError("Data inicial maior que a final"))

        rows = history.list_history(current_user_id(), start, end, kind=kind)
        return jsonify({"success": True, "records": [history.to_ui(r) for r in rows]})
