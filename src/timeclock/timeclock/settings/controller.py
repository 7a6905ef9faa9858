from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, current_user_id, error_response, login_required
from ..core.enums import AuditAction
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    settings = container.settings_service

    @app.route("/api/settings/radius", methods=["GET"], endpoint="api_radius_get")
    @login_required
    def get_radius():
        target = settings.target
        return jsonify(
            {
                "success": True,
                "max_radius_km": settings.max_radius_km(),
                "target": {"latitude": target.latitude, "longitude": target.longitude},
            }
        )

    @app.route("/api/settings/radius", methods=["PUT"], endpoint="api_radius_set")
    @admin_required
    def set_radius():
        data = request.get_json(silent=True) or {}
        try:
            radius = settings.set_max_radius_km(data.get("max_radius_km"))
        except DomainError as e:
            return error_response(e)
        container.audit_log.record(current_user_id(), AuditAction.UPDATE, f"Raio máximo alterado para {radius:g}km")
        return jsonify({"success": True, "max_radius_km": radius})
