from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import ApprovalStatus, PunchKind


@dataclass(frozen=True)
class PunchRecord:
    """Domain entity: one attendance event (real, or a virtual Holiday row)."""

    punch_id: Optional[int]
    user_id: str
    punched_at: datetime
    kind: PunchKind
    ordinal: int
    accumulated_hours: Optional[Decimal] = None
    lunch_hours: Optional[Decimal] = None
    justification: Optional[str] = None
    justification_status: Optional[ApprovalStatus] = None
    out_of_geofence: bool = False

    @property
    def work_date(self) -> date:
        return self.punched_at.date()

    @property
    def is_virtual(self) -> bool:
        return self.kind is PunchKind.HOLIDAY

    def counts_toward_sequence(self) -> bool:
        return self.kind is not PunchKind.ABSENCE


@dataclass(frozen=True)
class NewPunch:
    """Write-model handed to the repository; the database assigns the id."""

    user_id: str
    punched_at: datetime
    kind: PunchKind
    ordinal: int
    accumulated_hours: Optional[Decimal] = None
    lunch_hours: Optional[Decimal] = None
    justification: Optional[str] = None
    justification_status: Optional[ApprovalStatus] = None
    out_of_geofence: bool = False


@dataclass(frozen=True)
class NextPunch:
    kind: PunchKind
    ordinal: int
