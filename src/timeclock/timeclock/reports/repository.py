from __future__ import annotations

from typing import Optional, Protocol


class BalanceSnapshotRepository(Protocol):
    """Precomputed bank-of-hours balance maintained outside this service."""

    def get_balance(self, user_id: str) -> Optional[float]:
        raise NotImplementedError
