"""
Input models for the venue proximity core.
Points and venues are validated, immutable Pydantic models.
"""

from enum import Enum
from typing import Optional, Sequence

from pydantic import BaseModel, Field, field_validator
from shapely.geometry import Point


# Tolerance used when comparing coordinates by value
COORDINATE_EPSILON = 1e-9


class DistanceUnit(str, Enum):
    """Supported linear units for distances."""
    KILOMETERS = "km"
    MILES = "mi"
    NAUTICAL_MILES = "nm"
    METERS = "m"
    FEET = "ft"
    YARDS = "yd"


class DistanceMethod(str, Enum):
    """Earth model used for distances and buffer projection."""
    HAVERSINE = "haversine"  # Sphere of mean Earth radius
    WGS84 = "wgs84"  # Ellipsoid, via geographiclib


class GeoPoint(BaseModel):
    """A longitude/latitude pair in decimal degrees (GeoJSON order)."""
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")

    model_config = {"frozen": True}

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v: float) -> float:
        if not -180 <= v <= 180:
            raise ValueError("Longitude must be between -180 and 180 degrees")
        return v

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v: float) -> float:
        if not -90 <= v <= 90:
            raise ValueError("Latitude must be between -90 and 90 degrees")
        return v

    @classmethod
    def from_lonlat(cls, coords: Sequence[float]) -> "GeoPoint":
        """Build a point from a ``[lon, lat]`` pair."""
        if len(coords) != 2:
            raise ValueError(f"Expected a [lon, lat] pair, got {list(coords)!r}")
        return cls(longitude=float(coords[0]), latitude=float(coords[1]))

    def as_tuple(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)

    def to_shapely(self) -> Point:
        return Point(self.longitude, self.latitude)

    def almost_equals(self, other: "GeoPoint", eps: float = COORDINATE_EPSILON) -> bool:
        """Compare coordinates by value within ``eps`` degrees."""
        return (
            abs(self.longitude - other.longitude) <= eps
            and abs(self.latitude - other.latitude) <= eps
        )


class Venue(BaseModel):
    """A fixed point of interest with descriptive attributes."""
    position: GeoPoint = Field(..., description="Venue location")
    name: str = Field(..., min_length=1, description="Display name")
    category: str = Field("restaurant", description="Venue category")
    address: str = Field("", description="Street address")
    phone: str = Field("", description="Contact phone number")

    model_config = {"frozen": True}


# Unit conversion utilities
UNIT_TO_KM: dict[DistanceUnit, float] = {
    DistanceUnit.KILOMETERS: 1.0,
    DistanceUnit.MILES: 1.609344,
    DistanceUnit.NAUTICAL_MILES: 1.852,
    DistanceUnit.METERS: 0.001,
    DistanceUnit.FEET: 0.0003048,
    DistanceUnit.YARDS: 0.0009144,
}


def convert_to_km(value: float, unit: DistanceUnit) -> float:
    """Convert a distance value to kilometers."""
    return value * UNIT_TO_KM[unit]


def convert_from_km(value_km: float, unit: DistanceUnit) -> float:
    """Convert a distance from kilometers to the specified unit."""
    return value_km / UNIT_TO_KM[unit]


def normalize_longitude(lon: float) -> float:
    """Wrap a longitude into [-180, 180]."""
    if -180.0 <= lon <= 180.0:
        return lon
    lon = (lon + 180.0) % 360.0 - 180.0
    return 180.0 if lon == -180.0 else lon


def as_geopoint(value) -> Optional[GeoPoint]:
    """Coerce a GeoPoint, shapely Point or ``(lon, lat)`` pair; ``None`` passes through."""
    if value is None or isinstance(value, GeoPoint):
        return value
    if isinstance(value, Point):
        return GeoPoint(longitude=value.x, latitude=value.y)
    return GeoPoint.from_lonlat(value)
