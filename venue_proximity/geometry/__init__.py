"""
Geometry package for the venue proximity core.
Provides great-circle geometry operations using shapely and geographiclib.
"""

from venue_proximity.geometry.utils import (
    EARTH_RADIUS_KM,
    distance,
    destination_point,
    create_buffer,
    create_envelope,
    ring_contains,
)

from venue_proximity.geometry.services import (
    buffer,
    envelope,
    contains,
    rank,
    build_routes,
    generate_buffers,
    estimate_travel_time,
)

__all__ = [
    # Utils
    "EARTH_RADIUS_KM",
    "distance",
    "destination_point",
    "create_buffer",
    "create_envelope",
    "ring_contains",
    # Services
    "buffer",
    "envelope",
    "contains",
    "rank",
    "build_routes",
    "generate_buffers",
    "estimate_travel_time",
]
