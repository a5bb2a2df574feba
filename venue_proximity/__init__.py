"""
Venue Proximity
Great-circle proximity between a movable query point and a fixed catalog of
venues: buffers, bounding envelope, ranked candidates and route segments.
"""

from venue_proximity.errors import (
    ProximityError,
    InvalidRadius,
    InvalidSegmentCount,
    EmptyInput,
    CatalogError,
)
from venue_proximity.models import (
    DistanceUnit,
    DistanceMethod,
    GeoPoint,
    Venue,
    SessionState,
    RouteEmphasis,
    Buffer,
    BoundingEnvelope,
    RouteSegment,
    ProximitySnapshot,
)
from venue_proximity.geometry import (
    distance,
    buffer,
    envelope,
    contains,
    rank,
    build_routes,
)
from venue_proximity.session import ProximitySession

__version__ = "0.1.0"

__all__ = [
    "ProximityError",
    "InvalidRadius",
    "InvalidSegmentCount",
    "EmptyInput",
    "CatalogError",
    "DistanceUnit",
    "DistanceMethod",
    "GeoPoint",
    "Venue",
    "SessionState",
    "RouteEmphasis",
    "Buffer",
    "BoundingEnvelope",
    "RouteSegment",
    "ProximitySnapshot",
    "distance",
    "buffer",
    "envelope",
    "contains",
    "rank",
    "build_routes",
    "ProximitySession",
]
