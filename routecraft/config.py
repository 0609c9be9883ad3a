"""Runtime settings read from the environment (and a ``.env`` file)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_CORS_ORIGINS = "http://localhost:3000"


@dataclass(frozen=True)
class Settings:
    mapbox_token: str = ""
    api_url: str = DEFAULT_API_URL
    http_timeout: float = 30.0
    elevation_max_samples: int = 50
    place_search_radius_m: int = 50000
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = (DEFAULT_CORS_ORIGINS,)

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        origins = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
        return cls(
            mapbox_token=os.environ.get("MAPBOX_TOKEN", ""),
            api_url=os.environ.get("ROUTECRAFT_API_URL", DEFAULT_API_URL).rstrip("/"),
            http_timeout=float(os.environ.get("ROUTECRAFT_HTTP_TIMEOUT", "30")),
            elevation_max_samples=int(os.environ.get("ROUTECRAFT_ELEVATION_MAX_SAMPLES", "50")),
            place_search_radius_m=int(os.environ.get("ROUTECRAFT_PLACE_SEARCH_RADIUS_M", "50000")),
            log_level=os.environ.get("ROUTECRAFT_LOG_LEVEL", "INFO").upper(),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def _reset_settings() -> None:
    """Forget the cached settings (tests change the environment)."""
    global _settings
    _settings = None


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
