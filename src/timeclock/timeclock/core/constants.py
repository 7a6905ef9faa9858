"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Office the geofence is centered on (latitude, longitude).
DEFAULT_TARGET_LOCATION = (-20.6648342, -43.8033635)
DEFAULT_MAX_RADIUS_KM = 3.0
MAX_RADIUS_CONFIG_KEY = "max_radius_km"

EARTH_RADIUS_KM = 6371.0

TOKEN_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
TOKEN_LENGTH = 3
TOKEN_DURATION_SECONDS = 60
TOKEN_MAX_ATTEMPTS = 2
TOKEN_DECOY_COUNT = 2
TOKEN_TICK_SECONDS = 1.0

JUSTIFICATION_POLL_SECONDS = 30.0

LOCATION_RETRY_DELAY_SECONDS = 1.5

STANDARD_DAILY_TARGET_HOURS = 8.75
RESTRICTED_DAILY_TARGET_HOURS = 6.0
STANDARD_MAX_DAILY_PUNCHES = 4
RESTRICTED_MAX_DAILY_PUNCHES = 2

DEFAULT_HISTORY_LIMIT = 200
