from __future__ import annotations

import logging
from enum import Enum

from .constants import (
    RESTRICTED_DAILY_TARGET_HOURS,
    RESTRICTED_MAX_DAILY_PUNCHES,
    STANDARD_DAILY_TARGET_HOURS,
    STANDARD_MAX_DAILY_PUNCHES,
)

logger = logging.getLogger(__name__)


class Role(int, Enum):
    """Role code stored on the user profile."""

    STANDARD = 1
    INTERN = 2

    @classmethod
    def from_code(cls, code) -> "Role":
        try:
            return cls(int(code))
        except (TypeError, ValueError):
            return cls.STANDARD

    @property
    def is_restricted(self) -> bool:
        return self is Role.INTERN

    @property
    def max_daily_punches(self) -> int:
        return RESTRICTED_MAX_DAILY_PUNCHES if self.is_restricted else STANDARD_MAX_DAILY_PUNCHES

    @property
    def daily_target_hours(self) -> float:
        return RESTRICTED_DAILY_TARGET_HOURS if self.is_restricted else STANDARD_DAILY_TARGET_HOURS


class PunchKind(str, Enum):
    """Punch kinds and their persisted labels.

    ``label`` is the only serialization used when writing to the database and
    ``from_label`` the only way back.
    """

    ENTRY = "entrada"
    LUNCH_OUT = "almoco_inicio"
    LUNCH_IN = "almoco_fim"
    EXIT = "saida"
    ABSENCE = "ausencia"
    HOLIDAY = "feriado"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]

    @classmethod
    def from_label(cls, value: str | None) -> "PunchKind":
        for kind, label in _KIND_LABELS.items():
            if label == value:
                return kind
        # Legacy rows may carry labels that no longer exist.
        logger.warning("Unknown punch label %r, treating as %s", value, cls.ENTRY.label)
        return cls.ENTRY


_KIND_LABELS = {
    PunchKind.ENTRY: "Entrada",
    PunchKind.LUNCH_OUT: "Saída para almoço",
    PunchKind.LUNCH_IN: "Volta do almoço",
    PunchKind.EXIT: "Fim de expediente",
    PunchKind.ABSENCE: "Ausência",
    PunchKind.HOLIDAY: "Feriado",
}


class ApprovalStatus(str, Enum):
    """Approval state of a justification (one-way from PENDING)."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @classmethod
    def from_flag(cls, value) -> "ApprovalStatus":
        """Map the nullable ``aprovada`` column (None/True/False)."""
        if value is None:
            return cls.PENDING
        return cls.APPROVED if bool(value) else cls.REJECTED

    def to_flag(self) -> bool | None:
        if self is ApprovalStatus.PENDING:
            return None
        return self is ApprovalStatus.APPROVED


class JustificationKind(str, Enum):
    DELAY = "atraso"
    ABSENCE = "falta"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"


class LocationErrorReason(str, Enum):
    PERMISSION_DENIED = "PERMISSION_DENIED"
    SIGNAL_UNAVAILABLE = "SIGNAL_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"
    UNKNOWN = "UNKNOWN"


class ReportPeriod(str, Enum):
    TODAY = "today"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"
