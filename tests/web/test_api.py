from __future__ import annotations

import pytest
from flask import Flask

from src.timeclock.timeclock.audit.service import AuditLog
from src.timeclock.timeclock.common.datetime_utils import now_local
from src.timeclock.timeclock.common.geo import Coordinates
from src.timeclock.timeclock.common.scheduler import PeriodicScheduler
from src.timeclock.timeclock.common.session_state import SessionRegistry
from src.timeclock.timeclock.container import Container
from src.timeclock.timeclock.core.enums import PunchKind
from src.timeclock.timeclock.holidays.controller import register as register_holidays
from src.timeclock.timeclock.holidays.service import HolidayService
from src.timeclock.timeclock.justifications.controller import register as register_justifications
from src.timeclock.timeclock.justifications.service import JustificationWorkflow
from src.timeclock.timeclock.justifications.watcher import ApprovalWatcher
from src.timeclock.timeclock.punches.controller import register as register_punches
from src.timeclock.timeclock.punches.history import HistoryService
from src.timeclock.timeclock.punches.registrar import PunchRegistrar
from src.timeclock.timeclock.reports.aggregator import BalanceAggregator
from src.timeclock.timeclock.reports.controller import register as register_reports
from src.timeclock.timeclock.reports.service import ReportService
from src.timeclock.timeclock.sessions.controller import register as register_sessions
from src.timeclock.timeclock.settings.controller import register as register_settings
from src.timeclock.timeclock.settings.service import SettingsService
from src.timeclock.timeclock.tokens.challenge import ChallengeTokenRegistry
from src.timeclock.timeclock.tokens.controller import register as register_tokens
from tests.fakes import (
    FakeBackgroundScheduler,
    FakeEvidenceStorage,
    InMemoryAuditRepository,
    InMemoryConfigRepository,
    InMemoryHolidayRepository,
    InMemoryJustificationRepository,
    InMemoryPunchRepository,
    make_punch,
)

TARGET = Coordinates(-20.6648342, -43.8033635)
NEAR = {"latitude": TARGET.latitude + 0.01, "longitude": TARGET.longitude}
FAR = {"latitude": TARGET.latitude + 0.0315, "longitude": TARGET.longitude}


def build_test_container() -> Container:
    punches_repo = InMemoryPunchRepository()
    justifications_repo = InMemoryJustificationRepository()
    holidays_repo = InMemoryHolidayRepository()
    config_repo = InMemoryConfigRepository()
    audit_repo = InMemoryAuditRepository()

    scheduler = PeriodicScheduler(FakeBackgroundScheduler())
    sessions = SessionRegistry()
    audit_log = AuditLog(audit_repo, sessions, app_id=1)
    settings_service = SettingsService(config_repo, target=TARGET)
    token_registry = ChallengeTokenRegistry(scheduler)
    workflow = JustificationWorkflow(justifications_repo, FakeEvidenceStorage(), sessions, audit=audit_log)
    watcher = ApprovalWatcher(workflow, scheduler)
    sessions.on_close(token_registry.discard)
    sessions.on_close(watcher.unwatch)

    return Container(
        conn=None,
        punches_repo=punches_repo,
        justifications_repo=justifications_repo,
        holidays_repo=holidays_repo,
        config_repo=config_repo,
        audit_repo=audit_repo,
        scheduler=scheduler,
        sessions=sessions,
        audit_log=audit_log,
        settings_service=settings_service,
        holiday_service=HolidayService(holidays_repo),
        token_registry=token_registry,
        justification_workflow=workflow,
        approval_watcher=watcher,
        punch_registrar=PunchRegistrar(punches_repo, settings_service, token_registry, workflow, audit=audit_log),
        history_service=HistoryService(punches_repo, holidays_repo),
        report_service=ReportService(BalanceAggregator(punches_repo), holidays_repo),
    )


@pytest.fixture
def container():
    return build_test_container()


@pytest.fixture
def client(container):
    app = Flask(__name__)
    app.secret_key = "test-secret"
    app.config["TESTING"] = True
    for register in (
        register_sessions,
        register_punches,
        register_tokens,
        register_reports,
        register_justifications,
        register_settings,
        register_holidays,
    ):
        register(app, container)
    return app.test_client()


def login(client, *, user_id="u1", role=1, is_admin=False):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role
        sess["is_admin"] = is_admin


def test_requires_login(client):
    assert client.get("/api/punches/today").status_code == 401


def test_punch_with_token(client, container):
    login(client)
    code = client.get("/api/token").get_json()["code"]

    resp = client.post("/api/punches", json={**NEAR, "token": code})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["punch"]["label"] == "Entrada"
    assert body["punch"]["ordinal"] == 1

    today = client.get("/api/punches/today").get_json()
    assert today["next"]["kind"] == "almoco_inicio"
    assert len(container.punches_repo.records) == 1


def test_wrong_token_reports_attempts_left(client):
    login(client)
    client.get("/api/token")
    resp = client.post("/api/punches", json={**NEAR, "token": "???"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "challenge_mismatch"
    assert resp.get_json()["attempts_left"] == 1

    resp = client.post("/api/punches", json={**NEAR, "token": "???"})
    assert resp.status_code == 423


def test_far_punch_needs_justification(client, container):
    login(client)
    resp = client.post("/api/punches", json=FAR)
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "geofence_violation"

    resp = client.post("/api/punches", json={**FAR, "kind": "atraso", "reason": "Visita a cliente"})
    assert resp.status_code == 202
    assert resp.get_json()["pending"] is True
    assert container.punches_repo.records == []
    assert container.approval_watcher.is_watching("u1")


def test_form_encoded_punch(client, container):
    login(client)
    code = client.get("/api/token").get_json()["code"]

    resp = client.post(
        "/api/punches",
        data={"latitude": str(NEAR["latitude"]), "longitude": str(NEAR["longitude"]), "token": code},
    )
    assert resp.status_code == 201
    assert resp.get_json()["punch"]["label"] == "Entrada"
    assert len(container.punches_repo.records) == 1


def test_form_encoded_far_punch_with_reason(client, container):
    login(client)
    resp = client.post(
        "/api/punches",
        data={
            "latitude": str(FAR["latitude"]),
            "longitude": str(FAR["longitude"]),
            "kind": "atraso",
            "reason": "Visita a cliente",
        },
    )
    assert resp.status_code == 202
    assert container.justifications_repo.list_for_user("u1")[0].reason == "Visita a cliente"


def test_concurrent_punch_returns_conflict(client, container):
    login(client)
    code = client.get("/api/token").get_json()["code"]
    container.punches_repo.concurrent.append(make_punch("u1", now_local(), PunchKind.ENTRY, 1))

    resp = client.post("/api/punches", json={**NEAR, "token": code})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "persistence_conflict"
    assert len(container.punches_repo.records) == 1
    assert container.audit_repo.entries == []


def test_location_failure(client):
    login(client)
    resp = client.post("/api/punches", json={"location_error": "permission_denied"})
    assert resp.status_code == 503
    assert resp.get_json()["reason"] == "PERMISSION_DENIED"


def test_approval_notice_and_ack(client, container):
    login(client)
    client.post("/api/justifications", json={"kind": "falta", "reason": "Consulta"})
    req_id = client.get("/api/justifications/latest").get_json()["justification"]["id"]

    login(client, user_id="boss", is_admin=True)
    pending = client.get("/api/admin/justifications/pending").get_json()["justifications"]
    assert [p["id"] for p in pending] == [req_id]
    assert client.post(f"/api/admin/justifications/{req_id}/approve").status_code == 200

    container.approval_watcher.check_once("u1", on_approved=lambda r: None)
    login(client)
    latest = client.get("/api/justifications/latest").get_json()
    assert latest["justification"]["status"] == "APPROVED"
    assert latest["needs_ack"] is True

    assert client.post(f"/api/justifications/{req_id}/ack").get_json()["acknowledged"] is True
    assert client.post(f"/api/justifications/{req_id}/ack").get_json()["acknowledged"] is False


def test_form_encoded_justification(client, container):
    login(client)
    resp = client.post("/api/justifications", data={"kind": "falta", "reason": "Consulta"})
    assert resp.status_code == 201
    latest = client.get("/api/justifications/latest").get_json()["justification"]
    assert latest["status"] == "PENDING"
    assert container.approval_watcher.is_watching("u1")


def test_radius_update_is_admin_only(client, container):
    login(client)
    assert client.put("/api/settings/radius", json={"max_radius_km": 5}).status_code == 403

    login(client, user_id="boss", is_admin=True)
    assert client.put("/api/settings/radius", json={"max_radius_km": -2}).status_code == 400
    assert client.put("/api/settings/radius", json={"max_radius_km": 5}).status_code == 200
    assert client.get("/api/settings/radius").get_json()["max_radius_km"] == 5.0


def test_reports_and_holidays(client):
    login(client)
    resp = client.get("/api/reports/week")
    assert resp.status_code == 200
    assert resp.get_json()["report"]["total_hours"] == 0
    assert client.get("/api/reports/fortnight").status_code == 400
    assert client.get("/api/reports/bank").get_json()["report"]["balance"] == 0
    assert client.get("/api/holidays/upcoming").get_json()["holidays"] == []


def test_token_qr_is_png(client):
    login(client)
    resp = client.get("/api/token/qr")
    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert resp.data[:8] == b"\x89PNG\r\n\x1a\n"


def test_session_close_stops_timers(client, container):
    login(client)
    client.post("/api/session/open")
    assert container.scheduler.keys() == ["token:u1"]

    assert client.post("/api/session/close").status_code == 200
    assert container.scheduler.keys() == []
    assert client.get("/api/punches/today").status_code == 401
