from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PunchKind
from .model import NewPunch, PunchRecord


class PunchRepository(Protocol):
    """Persistence interface for punches.

    Lists are always ordered by ``punched_at`` ascending unless stated otherwise.
    """

    def list_punches(self, user_id: str, start: datetime, end: datetime) -> Sequence[PunchRecord]:
        raise NotImplementedError

    def list_history(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
        *,
        kind: Optional[PunchKind] = None,
        limit: int = 200,
    ) -> Sequence[PunchRecord]:
        """Newest first, optionally filtered by kind (for the history screen)."""

        raise NotImplementedError

    def insert_punch(self, punch: NewPunch) -> PunchRecord:
        """Persist and return the stored record.

        Raises PersistenceConflict when (user, day, ordinal) is already taken.
        """

        raise NotImplementedError

    def get_first_punch(self, user_id: str) -> Optional[PunchRecord]:
        raise NotImplementedError

    def get_last_punch(self, user_id: str, *, kind: Optional[PunchKind] = None) -> Optional[PunchRecord]:
        raise NotImplementedError
