from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable, Optional

from ..common.scheduler import PeriodicScheduler
from ..core.constants import JUSTIFICATION_POLL_SECONDS
from ..core.enums import ApprovalStatus
from .model import JustificationRequest
from .service import JustificationWorkflow

logger = logging.getLogger(__name__)

Callback = Callable[[JustificationRequest], None]


class ApprovalWatcher:
    """Polls the latest justification of a subject while it is pending.

    One task per subject, started and stopped by the observing context.
    Each ``watch`` call opens a new generation; a tick from a replaced task
    is ignored so it can never cancel its successor.
    """

    def __init__(
        self,
        workflow: JustificationWorkflow,
        scheduler: PeriodicScheduler,
        *,
        interval: float = JUSTIFICATION_POLL_SECONDS,
    ):
        self._workflow = workflow
        self._scheduler = scheduler
        self._interval = float(interval)
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._generations: dict[str, int] = {}

    @staticmethod
    def _task_key(user_id: str) -> str:
        return f"justification:{user_id}"

    def watch(
        self,
        user_id: str,
        *,
        on_approved: Optional[Callback] = None,
        on_rejected: Optional[Callback] = None,
    ) -> bool:
        """Start polling if the latest request is pending. Returns True when a poll was scheduled."""
        if not self._workflow.has_pending(user_id):
            return False
        with self._lock:
            generation = next(self._counter)
            self._generations[user_id] = generation
            self._scheduler.start(
                self._task_key(user_id),
                self._interval,
                lambda: self._tick(user_id, generation, on_approved, on_rejected),
            )
        return True

    def unwatch(self, user_id: str) -> None:
        with self._lock:
            self._generations.pop(user_id, None)
            self._scheduler.stop(self._task_key(user_id))

    def is_watching(self, user_id: str) -> bool:
        return self._scheduler.is_scheduled(self._task_key(user_id))

    def _is_current(self, user_id: str, generation: int) -> bool:
        with self._lock:
            return self._generations.get(user_id) == generation

    def _release(self, user_id: str, generation: Optional[int]) -> None:
        with self._lock:
            if generation is not None and self._generations.get(user_id) != generation:
                return
            self._generations.pop(user_id, None)
            self._scheduler.stop(self._task_key(user_id))

    def _tick(
        self,
        user_id: str,
        generation: int,
        on_approved: Optional[Callback],
        on_rejected: Optional[Callback],
    ) -> Optional[ApprovalStatus]:
        if not self._is_current(user_id, generation):
            logger.debug("Ignoring replaced justification poll for %s", user_id)
            return None
        return self.check_once(
            user_id, on_approved=on_approved, on_rejected=on_rejected, generation=generation
        )

    def check_once(
        self,
        user_id: str,
        *,
        on_approved: Optional[Callback] = None,
        on_rejected: Optional[Callback] = None,
        generation: Optional[int] = None,
    ) -> Optional[ApprovalStatus]:
        latest = self._workflow.latest(user_id)
        if latest is None or latest.is_pending:
            return latest.status if latest else None

        # Terminal state observed: stop polling before notifying.
        self._release(user_id, generation)
        if latest.status is ApprovalStatus.APPROVED:
            logger.info("Justification %s approved for %s", latest.request_id, user_id)
            # The observer acknowledges once it has shown the approval.
            if on_approved and self._workflow.needs_acknowledgement(user_id, latest):
                on_approved(latest)
        elif on_rejected:
            on_rejected(latest)
        return latest.status
