from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence, Union

from ..audit.service import AuditLog
from ..common.datetime_utils import day_bounds, format_decimal_hours, now_local, to_hours
from ..common.geo import Coordinates, haversine_km
from ..core.enums import AuditAction, JustificationKind, Role
from ..core.exceptions import DailyLimitReached, GeofenceViolation
from ..justifications.model import Evidence, JustificationRequest
from ..justifications.service import JustificationWorkflow
from ..settings.service import SettingsService
from ..tokens.challenge import ChallengeTokenRegistry
from . import accountant, sequencer
from .model import NewPunch, NextPunch, PunchRecord
from .repository import PunchRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JustificationInput:
    kind: JustificationKind
    reason: Optional[str] = None
    evidence: Optional[Evidence] = None


@dataclass(frozen=True)
class PendingJustification:
    """Returned instead of a punch when the attempt was outside the geofence.

    ``proposed`` is what the punch would have been; it is only for display.
    """

    request: JustificationRequest
    proposed: NextPunch
    distance_km: float


PunchOutcome = Union[PunchRecord, PendingJustification]


@dataclass(frozen=True)
class TodaySnapshot:
    records: Sequence[PunchRecord]
    next_punch: NextPunch
    day_complete: bool
    worked: timedelta
    pending_justification: bool


class PunchRegistrar:
    def __init__(
        self,
        punches: PunchRepository,
        settings: SettingsService,
        tokens: ChallengeTokenRegistry,
        justifications: JustificationWorkflow,
        *,
        audit: Optional[AuditLog] = None,
    ):
        self._punches = punches
        self._settings = settings
        self._tokens = tokens
        self._justifications = justifications
        self._audit = audit

    def today_punches(self, user_id: str, day: date) -> Sequence[PunchRecord]:
        start, end = day_bounds(day)
        return self._punches.list_punches(user_id, start, end)

    def distance_km(self, coordinates: Coordinates) -> float:
        return haversine_km(coordinates, self._settings.target)

    def attempt_punch(
        self,
        user_id: str,
        coordinates: Coordinates,
        *,
        role: Role = Role.STANDARD,
        challenge_code: str | None = None,
        justification: Optional[JustificationInput] = None,
        now: datetime | None = None,
    ) -> PunchOutcome:
        now = now or now_local()
        today = self.today_punches(user_id, now.date())

        limit = sequencer.max_punches(role)
        if sequencer.count_sequence_punches(today) >= limit:
            raise DailyLimitReached(limit)

        distance = self.distance_km(coordinates)
        radius = self._settings.max_radius_km()
        proposed = sequencer.next_punch(today, role)

        if distance > radius:
            if justification is None:
                raise GeofenceViolation(distance_km=distance, radius_km=radius)
            request = self._justifications.submit(
                user_id,
                justification.kind,
                justification.reason,
                justification.evidence,
                now=now,
            )
            logger.info("Punch by %s outside geofence (%.2f km), justification %s pending", user_id, distance, request.request_id)
            return PendingJustification(request=request, proposed=proposed, distance_km=distance)

        self._tokens.for_user(user_id).require(challenge_code)

        fields = accountant.punch_fields(today, proposed.kind, now)
        record = self._punches.insert_punch(
            NewPunch(
                user_id=user_id,
                punched_at=now,
                kind=proposed.kind,
                ordinal=proposed.ordinal,
                accumulated_hours=fields.accumulated_hours,
                lunch_hours=fields.lunch_hours,
                out_of_geofence=False,
            )
        )
        if self._audit:
            self._audit.record(user_id, AuditAction.CREATE, f"Ponto registrado: {record.kind.label} (#{record.ordinal})")
        return record

    def today(self, user_id: str, *, role: Role = Role.STANDARD, now: datetime | None = None) -> TodaySnapshot:
        now = now or now_local()
        records = self.today_punches(user_id, now.date())
        return TodaySnapshot(
            records=records,
            next_punch=sequencer.next_punch(records, role),
            day_complete=sequencer.is_day_complete(records, role),
            worked=accountant.worked_duration(records, now),
            pending_justification=self._justifications.has_pending(user_id),
        )

    def daily_summary(self, user_id: str, *, role: Role = Role.STANDARD, now: datetime | None = None) -> Optional[str]:
        """Worked hours for the day once its quota is met, else None."""
        now = now or now_local()
        records = self.today_punches(user_id, now.date())
        if not sequencer.is_day_complete(records, role):
            return None
        return format_decimal_hours(to_hours(accountant.worked_duration(records, now)))
