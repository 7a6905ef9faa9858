from __future__ import annotations

import logging
from typing import Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)


def default_backend() -> BackgroundScheduler:
    # A missed tick is never worth catching up on: the next one re-checks.
    return BackgroundScheduler(
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            "misfire_grace_time": 30,
        }
    )


class PeriodicScheduler:
    """Keyed interval jobs on an APScheduler background scheduler.

    Starting a key that is already scheduled replaces the old job, so a view
    that is opened repeatedly never ends up with two timers.
    """

    def __init__(self, backend: Optional[BackgroundScheduler] = None):
        self._backend = backend if backend is not None else default_backend()

    def _ensure_running(self) -> None:
        if not self._backend.running:
            self._backend.start()

    def start(self, key: str, interval: float, action: Callable[[], None]):
        self._ensure_running()
        job = self._backend.add_job(
            action,
            "interval",
            seconds=float(interval),
            id=key,
            name=key,
            replace_existing=True,
        )
        logger.debug("Scheduled %s every %ss", key, interval)
        return job

    def stop(self, key: str) -> bool:
        try:
            self._backend.remove_job(key)
        except JobLookupError:
            return False
        return True

    def stop_prefix(self, prefix: str) -> int:
        stopped = 0
        for job in self._backend.get_jobs():
            if job.id.startswith(prefix) and self.stop(job.id):
                stopped += 1
        return stopped

    def stop_all(self) -> None:
        self._backend.remove_all_jobs()

    def shutdown(self) -> None:
        if self._backend.running:
            self._backend.shutdown(wait=False)

    def is_scheduled(self, key: str) -> bool:
        return self._backend.get_job(key) is not None

    def keys(self) -> list[str]:
        return sorted(job.id for job in self._backend.get_jobs())
