"""
Models package for the venue proximity core.
Contains Pydantic models for inputs and outputs.
"""

from venue_proximity.models.inputs import (
    DistanceUnit,
    DistanceMethod,
    GeoPoint,
    Venue,
    convert_to_km,
    convert_from_km,
)

from venue_proximity.models.outputs import (
    SessionState,
    RouteEmphasis,
    Buffer,
    BoundingEnvelope,
    RouteSegment,
    ProximitySnapshot,
)

__all__ = [
    "DistanceUnit",
    "DistanceMethod",
    "GeoPoint",
    "Venue",
    "convert_to_km",
    "convert_from_km",
    "SessionState",
    "RouteEmphasis",
    "Buffer",
    "BoundingEnvelope",
    "RouteSegment",
    "ProximitySnapshot",
]
