from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, send_from_directory

from config import get_settings_module

from .container import build_container
from .database.bootstrap import apply_schema, ensure_default_config, list_tables
from .holidays.controller import register as register_holidays
from .justifications.controller import register as register_justifications
from .punches.controller import register as register_punches
from .reports.controller import register as register_reports
from .sessions.controller import register as register_sessions
from .settings.controller import register as register_settings
from .tokens.controller import register as register_tokens

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    max_radius_km = float(getattr(settings, "MAX_RADIUS_KM"))
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        ensure_default_config(db_config, max_radius_km=max_radius_km)
        logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

    evidence_dir = str(getattr(settings, "EVIDENCE_DIR"))
    evidence_base_url = str(getattr(settings, "EVIDENCE_BASE_URL", "/evidence"))
    container = build_container(
        db_config=db_config,
        target_location=getattr(settings, "TARGET_LOCATION"),
        max_radius_km=max_radius_km,
        token_duration_seconds=int(getattr(settings, "TOKEN_DURATION_SECONDS")),
        justification_poll_seconds=float(getattr(settings, "JUSTIFICATION_POLL_SECONDS")),
        evidence_dir=evidence_dir,
        evidence_base_url=evidence_base_url,
        app_id=int(getattr(settings, "APP_ID", 1)),
    )
    app.extensions["timeclock"] = container
    atexit.register(container.scheduler.shutdown)

    @app.route(f"{evidence_base_url.rstrip('/')}/<path:filename>", endpoint="evidence_file")
    def evidence_file(filename: str):
        return send_from_directory(Path(evidence_dir).resolve(), filename)

    register_sessions(app, container)
    register_punches(app, container)
    register_tokens(app, container)
    register_reports(app, container)
    register_justifications(app, container)
    register_settings(app, container)
    register_holidays(app, container)

    return app
