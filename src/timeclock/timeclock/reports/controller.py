from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_role, current_user_id, error_response, login_required
from ..core.enums import ReportPeriod
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/api/reports/bank", methods=["GET"], endpoint="api_report_bank")
    @login_required
    def bank():
        summary = reports.bank_of_hours(current_user_id(), role=current_role())
        return jsonify({"success": True, "report": reports.to_ui(summary)})

    @app.route("/api/reports/<period>", methods=["GET"], endpoint="api_report_period")
    @login_required
    def period_report(period: str):
        try:
            selected = ReportPeriod(period.lower())
            reference = parse_iso_date(request.args["date"]) if request.args.get("date") else None
        except ValueError:
            return error_response(ValidationError("Período inválido"))

        summary = reports.report(current_user_id(), selected, role=current_role(), reference=reference)
        return jsonify({"success": True, "period": selected.value, "report": reports.to_ui(summary)})
