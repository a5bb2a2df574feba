"""Settings loaded from environment / .env file, and logging setup."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from venue_proximity.models.inputs import DistanceMethod


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class ProximitySettings(BaseSettings):
    # Buffers
    default_radius_km: float = Field(0.5, gt=0)
    buffer_segments: int = Field(64, ge=3)  # vertices per buffer ring

    # Distances
    distance_method: DistanceMethod = DistanceMethod.HAVERSINE
    travel_speed_kmh: float = Field(30.0, gt=0)  # used for travel estimates

    # Catalog file (JSON or CSV); bundled sample catalog when unset
    catalog_path: Optional[Path] = None

    log_level: str = "INFO"

    model_config = {
        "env_prefix": "VENUE_PROXIMITY_",
        "env_file": ".env",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> ProximitySettings:
    return ProximitySettings()


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a stream handler to the package logger."""
    level = (level or get_settings().log_level).upper()
    package_logger = logging.getLogger("venue_proximity")
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    package_logger.setLevel(level)
