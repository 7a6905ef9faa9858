from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "forbidden"


class GeofenceViolation(DomainError):
    """Punch attempted outside the allowed radius without a justification."""

    code = "geofence_violation"

    def __init__(self, distance_km: float, radius_km: float):
        super().__init__(f"Localização fora do raio permitido de {radius_km:g}km.")
        self.distance_km = distance_km
        self.radius_km = radius_km


class DailyLimitReached(DomainError):
    code = "daily_limit_reached"

    def __init__(self, limit: int):
        super().__init__(f"Você já registrou os {limit} pontos de hoje.")
        self.limit = limit


class ChallengeLocked(DomainError):
    code = "challenge_locked"

    def __init__(self, seconds_left: int = 0):
        super().__init__("Sistema bloqueado temporariamente. Aguarde novo token.")
        self.seconds_left = seconds_left


class ChallengeMismatch(DomainError):
    code = "challenge_mismatch"

    def __init__(self, attempts_left: int):
        super().__init__("Token incorreto!")
        self.attempts_left = attempts_left


class LocationUnavailable(DomainError):
    """Location provider failed even after the automatic retry."""

    code = "location_unavailable"

    def __init__(self, reason, message: str):
        super().__init__(message)
        self.reason = reason


class PersistenceConflict(DomainError):
    """A concurrent insert won the (user, day, ordinal) slot. Safe to retry."""

    code = "persistence_conflict"


class EvidenceUploadError(DomainError):
    code = "evidence_upload_failed"
