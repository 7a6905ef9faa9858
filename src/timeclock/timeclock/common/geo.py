from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import EARTH_RADIUS_KM
from .validators import require_coordinate


@dataclass(frozen=True)
class Coordinates:
    """A location sample. Freshness is whatever the provider gave us."""

    latitude: float
    longitude: float
    accuracy_m: Optional[float] = None
    captured_at: Optional[datetime] = None

    @classmethod
    def parse(cls, latitude, longitude, accuracy_m=None) -> "Coordinates":
        return cls(
            latitude=require_coordinate(latitude, "Latitude", limit=90),
            longitude=require_coordinate(longitude, "Longitude", limit=180),
            accuracy_m=float(accuracy_m) if accuracy_m is not None else None,
        )


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points, in kilometres."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
