import os

from config import parse_location

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_test"),
}

# Office the geofence is centered on, "lat,lon"
TARGET_LOCATION = parse_location(os.getenv("TARGET_LOCATION", ""), (-20.6648342, -43.8033635))
# Default radius; the value stored in system_config overrides it at runtime
MAX_RADIUS_KM = float(os.getenv("MAX_RADIUS_KM", "3.0"))

TOKEN_DURATION_SECONDS = int(os.getenv("TOKEN_DURATION_SECONDS", "60"))
JUSTIFICATION_POLL_SECONDS = float(os.getenv("JUSTIFICATION_POLL_SECONDS", "30"))

EVIDENCE_DIR = os.getenv("EVIDENCE_DIR", "uploads/evidence")
EVIDENCE_BASE_URL = os.getenv("EVIDENCE_BASE_URL", "/evidence")

# Row in the apps table audit entries are attributed to
APP_ID = int(os.getenv("APP_ID", "1"))

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
