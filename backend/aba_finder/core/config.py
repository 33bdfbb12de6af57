import os
from dataclasses import dataclass, field


DEFAULT_PLACES_BASE_URL = "https://maps.googleapis.com/maps/api/place/"
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def _to_int(value: str | None, default: int) -> int:
    raw = (value or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _to_float(value: str | None, default: float) -> float:
    raw = (value or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _split_origins(value: str | None) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in (value or "").split(",") if origin.strip())


def _places_api_key() -> str | None:
    # The browser build used the REACT_APP_ name; accept it so one .env serves both.
    raw = os.getenv("GOOGLE_PLACES_API_KEY") or os.getenv("REACT_APP_GOOGLE_PLACES_API_KEY") or ""
    return raw.strip() or None


@dataclass(frozen=True, slots=True)
class Settings:
    app_name: str = os.getenv("APP_NAME", "ABA Finder API")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    port: int = _to_int(os.getenv("PORT"), 3001)

    google_places_api_key: str | None = field(default=_places_api_key(), repr=False)
    places_base_url: str = os.getenv("PLACES_BASE_URL", DEFAULT_PLACES_BASE_URL)
    places_credential_param: str = "key"
    upstream_timeout_seconds: float = _to_float(os.getenv("UPSTREAM_TIMEOUT_SECONDS"), 10.0)

    cors_allow_origins: tuple[str, ...] = _split_origins(os.getenv("CORS_ALLOW_ORIGINS", DEFAULT_CORS_ORIGINS))


settings = Settings()
