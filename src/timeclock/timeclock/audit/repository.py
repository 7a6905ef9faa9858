from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import AuditAction


class AuditRepository(Protocol):
    def get_app_name(self, app_id: int) -> Optional[str]:
        raise NotImplementedError

    def get_username(self, user_id: str) -> Optional[str]:
        raise NotImplementedError

    def insert_entry(
        self,
        *,
        user_id: str,
        username: str,
        app_id: int,
        app_name: str,
        action: AuditAction,
        message: str,
    ) -> None:
        raise NotImplementedError
