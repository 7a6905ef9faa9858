import os


def parse_location(value: str, default: tuple[float, float]) -> tuple[float, float]:
    if not value:
        return default
    lat, lon = (part.strip() for part in value.split(","))
    return float(lat), float(lon)


def get_settings_module() -> str:
    # APP_ENV picks the settings module, default 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"
