from __future__ import annotations

from src.timeclock.timeclock.common.scheduler import PeriodicScheduler
from src.timeclock.timeclock.common.session_state import SessionRegistry
from src.timeclock.timeclock.tokens.challenge import ChallengeTokenRegistry
from tests.fakes import FakeBackgroundScheduler


def test_state_is_per_user():
    sessions = SessionRegistry()
    sessions.open("u1").set("k", 1)
    assert sessions.open("u2").get("k") is None
    assert sessions.open("u1").get_or_set("k", lambda: 2) == 1


def test_close_runs_hooks_and_clears_state():
    sessions = SessionRegistry()
    backend = FakeBackgroundScheduler()
    scheduler = PeriodicScheduler(backend)
    tokens = ChallengeTokenRegistry(scheduler)
    sessions.on_close(tokens.discard)

    state = sessions.open("u1")
    state.set("audit:username", "ana")
    tokens.start_rotation("u1")
    job = scheduler.start("justification:u1", 30, lambda: None)
    sessions.on_close(lambda user_id: scheduler.stop(f"justification:{user_id}"))

    sessions.close("u1")

    assert len(state) == 0
    assert sessions.get("u1") is None
    assert scheduler.keys() == []
    assert job.removed
