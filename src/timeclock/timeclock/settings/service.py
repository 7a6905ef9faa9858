from __future__ import annotations

import logging

from ..common.geo import Coordinates
from ..common.validators import require_non_negative_number
from ..core.constants import DEFAULT_MAX_RADIUS_KM, MAX_RADIUS_CONFIG_KEY
from ..core.exceptions import ValidationError
from .repository import ConfigRepository

logger = logging.getLogger(__name__)


class SettingsService:
    """Geofence settings: fixed target from app config, radius editable at runtime."""

    def __init__(
        self,
        config: ConfigRepository,
        *,
        target: Coordinates,
        default_radius_km: float = DEFAULT_MAX_RADIUS_KM,
    ):
        self._config = config
        self._target = target
        self._default_radius_km = float(default_radius_km)

    @property
    def target(self) -> Coordinates:
        return self._target

    def max_radius_km(self) -> float:
        raw = self._config.get(MAX_RADIUS_CONFIG_KEY)
        if raw is None:
            return self._default_radius_km
        try:
            return require_non_negative_number(raw, "Raio")
        except ValidationError:
            logger.warning("Invalid %s=%r in system_config, using %s", MAX_RADIUS_CONFIG_KEY, raw, self._default_radius_km)
            return self._default_radius_km

    def set_max_radius_km(self, value) -> float:
        radius = require_non_negative_number(value, "Raio")
        self._config.set(MAX_RADIUS_CONFIG_KEY, str(radius))
        logger.info("Geofence radius set to %s km", radius)
        return radius
