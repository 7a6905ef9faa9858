from __future__ import annotations

import logging
import math
import random
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from ..common.datetime_utils import now_local
from ..common.scheduler import PeriodicScheduler
from ..core.constants import (
    TOKEN_ALPHABET,
    TOKEN_DECOY_COUNT,
    TOKEN_DURATION_SECONDS,
    TOKEN_LENGTH,
    TOKEN_MAX_ATTEMPTS,
    TOKEN_TICK_SECONDS,
)
from ..core.exceptions import ChallengeLocked, ChallengeMismatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenChallenge:
    code: str
    issued_at: datetime
    expires_at: datetime
    failed_attempts: int = 0
    locked: bool = False

    def expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class ChallengeTokenManager:
    """Short-lived confirmation code a subject must pick before punching.

    A code lives for ``duration`` seconds. ``max_attempts`` wrong answers lock
    verification until the next rotation; every rotation (expiry or forced)
    clears the lock and the failure counter.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = now_local,
        rng: Optional[random.Random] = None,
        duration_seconds: int = TOKEN_DURATION_SECONDS,
        max_attempts: int = TOKEN_MAX_ATTEMPTS,
    ):
        self._clock = clock
        self._rng = rng or random.SystemRandom()
        self._duration = timedelta(seconds=int(duration_seconds))
        self._max_attempts = int(max_attempts)
        self._state: Optional[TokenChallenge] = None
        self._lock = threading.RLock()

    def _generate(self) -> str:
        return "".join(self._rng.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))

    def rotate(self) -> TokenChallenge:
        with self._lock:
            now = self._clock()
            previous = self._state.code if self._state else None
            code = self._generate()
            while code == previous:
                code = self._generate()
            self._state = TokenChallenge(code=code, issued_at=now, expires_at=now + self._duration)
            logger.debug("Challenge token rotated, expires at %s", self._state.expires_at)
            return self._state

    def _active(self) -> TokenChallenge:
        with self._lock:
            if self._state is None or self._state.expired(self._clock()):
                return self.rotate()
            return self._state

    def tick(self) -> bool:
        """Rotate if the current code expired. Returns True when it rotated."""
        with self._lock:
            if self._state is not None and not self._state.expired(self._clock()):
                return False
            self.rotate()
            return True

    def current_code(self) -> str:
        return self._active().code

    def snapshot(self) -> TokenChallenge:
        return self._active()

    @property
    def is_locked(self) -> bool:
        with self._lock:
            return self._state is not None and self._state.locked and not self._state.expired(self._clock())

    @property
    def failed_attempts(self) -> int:
        with self._lock:
            return self._state.failed_attempts if self._state else 0

    def seconds_left(self) -> int:
        state = self._active()
        remaining = (state.expires_at - self._clock()).total_seconds()
        return max(0, math.ceil(remaining))

    def verify(self, candidate: str | None) -> bool:
        """Check a typed or selected code. Fails closed when locked or idle.

        Success does not reset the failure counter; only a rotation does.
        """
        with self._lock:
            state = self._state
            if state is None or state.expired(self._clock()) or state.locked:
                return False
            if (candidate or "").strip().upper() == state.code:
                return True

            attempts = state.failed_attempts + 1
            locked = attempts >= self._max_attempts
            self._state = TokenChallenge(
                code=state.code,
                issued_at=state.issued_at,
                expires_at=state.expires_at,
                failed_attempts=attempts,
                locked=locked,
            )
            if locked:
                logger.info("Challenge locked after %s failed attempts", attempts)
            return False

    def require(self, candidate: str | None) -> None:
        """``verify`` that raises the typed challenge errors instead of returning False."""
        with self._lock:
            if self.is_locked:
                raise ChallengeLocked(seconds_left=self.seconds_left())
            if self._state is None or self._state.expired(self._clock()):
                # An expired code can never match; surface it as a mismatch.
                self.rotate()
                raise ChallengeMismatch(attempts_left=self._max_attempts)
            if self.verify(candidate):
                return
            if self._state.locked:
                raise ChallengeLocked(seconds_left=self.seconds_left())
            raise ChallengeMismatch(attempts_left=self._max_attempts - self._state.failed_attempts)

    def challenge_with_decoys(self, decoys: int = TOKEN_DECOY_COUNT) -> list[str]:
        """The real code shuffled among fresh decoys for a multiple-choice prompt."""
        code = self.current_code()
        options = {code}
        while len(options) < decoys + 1:
            options.add(self._generate())
        shuffled = sorted(options)
        self._rng.shuffle(shuffled)
        return shuffled

    def select(self, option: str) -> bool:
        """Picking a decoy counts exactly like a failed ``verify``."""
        return self.verify(option)


class ChallengeTokenRegistry:
    """One ChallengeTokenManager per subject session plus its rotation timer."""

    def __init__(
        self,
        scheduler: PeriodicScheduler,
        *,
        factory: Callable[[], ChallengeTokenManager] = ChallengeTokenManager,
        tick_seconds: float = TOKEN_TICK_SECONDS,
    ):
        self._scheduler = scheduler
        self._factory = factory
        self._tick_seconds = float(tick_seconds)
        self._managers: Dict[str, ChallengeTokenManager] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _task_key(user_id: str) -> str:
        return f"token:{user_id}"

    def for_user(self, user_id: str) -> ChallengeTokenManager:
        with self._lock:
            manager = self._managers.get(user_id)
            if manager is None:
                manager = self._factory()
                self._managers[user_id] = manager
            return manager

    def start_rotation(self, user_id: str) -> None:
        manager = self.for_user(user_id)
        manager.tick()
        self._scheduler.start(self._task_key(user_id), self._tick_seconds, manager.tick)

    def stop_rotation(self, user_id: str) -> None:
        self._scheduler.stop(self._task_key(user_id))

    def discard(self, user_id: str) -> None:
        self.stop_rotation(user_id)
        with self._lock:
            self._managers.pop(user_id, None)
