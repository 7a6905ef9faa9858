from __future__ import annotations

from typing import Optional, Protocol


class ConfigRepository(Protocol):
    """Key-value system configuration (``system_config`` table)."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError
