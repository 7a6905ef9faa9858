from __future__ import annotations

from src.timeclock.timeclock.audit.service import UNKNOWN_USER, AuditLog
from src.timeclock.timeclock.common.session_state import SessionRegistry
from src.timeclock.timeclock.core.enums import AuditAction
from tests.fakes import InMemoryAuditRepository


def test_names_are_resolved_once_per_session():
    repo = InMemoryAuditRepository(usernames={"u1": "ana"})
    sessions = SessionRegistry()
    audit = AuditLog(repo, sessions, app_id=3)
    sessions.open("u1")

    audit.record("u1", AuditAction.CREATE, "Ponto registrado")
    audit.record("u1", AuditAction.CREATE, "Ponto registrado")

    assert repo.lookups == 2
    assert repo.entries[0]["username"] == "ana"
    assert repo.entries[0]["app_name"] == "Ponto"
    assert repo.entries[0]["app_id"] == 3

    sessions.close("u1")
    audit.record("u1", AuditAction.LOGOUT, "Sessão encerrada")
    assert repo.lookups == 4
    assert repo.entries[-1]["username"] == "ana"


def test_unknown_user_fallback():
    repo = InMemoryAuditRepository()
    AuditLog(repo, SessionRegistry(), app_id=1).record("ghost", AuditAction.LOGIN, "x")
    assert repo.entries[0]["username"] == UNKNOWN_USER


def test_failures_never_reach_the_caller():
    repo = InMemoryAuditRepository(fail=True)
    AuditLog(repo, SessionRegistry(), app_id=1).record("u1", AuditAction.CREATE, "x")
    assert repo.entries == []


def test_recording_outside_a_session_leaves_no_state():
    repo = InMemoryAuditRepository(usernames={"u1": "ana"})
    sessions = SessionRegistry()
    audit = AuditLog(repo, sessions, app_id=1)

    audit.record("u1", AuditAction.CREATE, "Ponto registrado")
    audit.record("u1", AuditAction.CREATE, "Ponto registrado")

    assert sessions.get("u1") is None
    assert repo.lookups == 4
    assert [e["username"] for e in repo.entries] == ["ana", "ana"]
