from __future__ import annotations

import io

import qrcode
from flask import Flask, jsonify, send_file

from ..common.web import current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    tokens = container.token_registry

    def _state(manager) -> dict:
        challenge = manager.snapshot()
        return {
            "expires_at": challenge.expires_at.isoformat(timespec="seconds"),
            "seconds_left": manager.seconds_left(),
            "locked": manager.is_locked,
            "failed_attempts": challenge.failed_attempts,
        }

    @app.route("/api/token", methods=["GET"], endpoint="api_token")
    @login_required
    def current_token():
        """Code displayed by the token screen (the subject types or picks it back)."""
        manager = tokens.for_user(current_user_id())
        return jsonify({"success": True, "code": manager.current_code(), **_state(manager)})

    @app.route("/api/token/challenge", methods=["GET"], endpoint="api_token_challenge")
    @login_required
    def challenge():
        manager = tokens.for_user(current_user_id())
        return jsonify({"success": True, "options": manager.challenge_with_decoys(), **_state(manager)})

    @app.route("/api/token/qr", methods=["GET"], endpoint="api_token_qr")
    @login_required
    def token_qr():
        manager = tokens.for_user(current_user_id())

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(manager.current_code())
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png")
