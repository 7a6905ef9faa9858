from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_local
from ..common.web import login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    holidays = container.holiday_service

    @app.route("/api/holidays/upcoming", methods=["GET"], endpoint="api_holidays_upcoming")
    @login_required
    def upcoming():
        rows = holidays.upcoming(now_local().date())
        return jsonify({"success": True, "holidays": [holidays.to_ui(h) for h in rows]})
