from __future__ import annotations

import logging
import time
from typing import Callable, Protocol

from ..common.geo import Coordinates
from ..core.constants import LOCATION_RETRY_DELAY_SECONDS
from ..core.enums import LocationErrorReason
from ..core.exceptions import LocationUnavailable

logger = logging.getLogger(__name__)

_MESSAGES = {
    LocationErrorReason.PERMISSION_DENIED: "Permissão negada. Ative a localização para o aplicativo nas configurações.",
    LocationErrorReason.SIGNAL_UNAVAILABLE: "Sinal de GPS fraco. Tente novamente em local aberto.",
    LocationErrorReason.TIMEOUT: "Tempo esgotado ao buscar GPS. Tente novamente.",
    LocationErrorReason.UNKNOWN: "Erro ao obter localização. Verifique se o GPS está ativado.",
}


class LocationError(Exception):
    """Raised by providers; carries the typed reason."""

    def __init__(self, reason: LocationErrorReason, detail: str = ""):
        super().__init__(detail or reason.value)
        self.reason = reason


class LocationProvider(Protocol):
    def current_position(self) -> Coordinates:
        raise NotImplementedError


def acquire_location(
    provider: LocationProvider,
    *,
    retry_delay: float = LOCATION_RETRY_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> Coordinates:
    """One automatic retry after ``retry_delay``, then an actionable error."""
    try:
        return provider.current_position()
    except LocationError as first:
        logger.warning("Location request failed (%s), retrying", first.reason.value)

    sleep(retry_delay)
    try:
        return provider.current_position()
    except LocationError as exc:
        raise LocationUnavailable(exc.reason, _MESSAGES.get(exc.reason, _MESSAGES[LocationErrorReason.UNKNOWN])) from exc


class StaticLocationProvider(LocationProvider):
    """Provider for a position reported by the client with the request."""

    def __init__(self, coordinates: Coordinates | None, *, reason: LocationErrorReason = LocationErrorReason.UNKNOWN):
        self._coordinates = coordinates
        self._reason = reason

    def current_position(self) -> Coordinates:
        if self._coordinates is None:
            raise LocationError(self._reason)
        return self._coordinates
