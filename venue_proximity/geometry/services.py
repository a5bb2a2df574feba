"""
Geometry services for the venue proximity core.
Pure pipeline stages: buffers, envelope, containment, ranking and routes.

None of these functions hold state; the session composes them and is the
only place results are published.
"""

import logging
from datetime import timedelta
from typing import Iterable, Optional, Sequence

from shapely.geometry import Polygon

from venue_proximity.geometry.utils import (
    DEFAULT_SEGMENTS,
    PointLike,
    create_buffer,
    create_envelope,
    distance,
    ring_contains,
)
from venue_proximity.models.inputs import (
    DistanceMethod,
    GeoPoint,
    Venue,
    as_geopoint,
)
from venue_proximity.models.outputs import (
    BoundingEnvelope,
    Buffer,
    RouteEmphasis,
    RouteSegment,
)


logger = logging.getLogger(__name__)

# Average urban travel speed used for the travel estimate
DEFAULT_TRAVEL_SPEED_KMH = 30.0


def buffer(
    center: PointLike,
    radius_km: float,
    segments: int = DEFAULT_SEGMENTS,
    method: DistanceMethod = DistanceMethod.HAVERSINE,
) -> Polygon:
    """Closed ring of ``segments`` vertices approximating a disc around ``center``."""
    return create_buffer(center, radius_km, segments, method)


def envelope(
    points: Iterable,
    method: DistanceMethod = DistanceMethod.HAVERSINE,
) -> BoundingEnvelope:
    """
    Bounding rectangle and perimeter of a set of points or buffers.

    Raises:
        EmptyInput: ``points`` is empty
    """
    polygon, perimeter_km = create_envelope(points, method)
    return BoundingEnvelope(polygon=polygon, perimeter_km=perimeter_km)


def contains(point: PointLike, polygon) -> bool:
    """Inclusive point-in-polygon test; see ``ring_contains``."""
    return ring_contains(point, polygon)


def estimate_travel_time(
    distance_km: float,
    speed_kmh: float = DEFAULT_TRAVEL_SPEED_KMH,
) -> timedelta:
    """Travel time at a constant average speed."""
    if speed_kmh <= 0:
        raise ValueError(f"Travel speed must be > 0 km/h, got {speed_kmh!r}")
    return timedelta(hours=distance_km / speed_kmh)


def annotate_buffer(
    buf: Buffer,
    query: GeoPoint,
    speed_kmh: float = DEFAULT_TRAVEL_SPEED_KMH,
    method: DistanceMethod = DistanceMethod.HAVERSINE,
) -> Buffer:
    """Return a copy of ``buf`` carrying distance and travel time from ``query``."""
    distance_km = distance(buf.venue.position, query, method=method)
    return buf.model_copy(update={
        "distance_km": distance_km,
        "travel_time": estimate_travel_time(distance_km, speed_kmh),
    })


def generate_buffers(
    catalog: Sequence[Venue],
    radius_km: float,
    segments: int = DEFAULT_SEGMENTS,
    query: Optional[PointLike] = None,
    speed_kmh: float = DEFAULT_TRAVEL_SPEED_KMH,
    method: DistanceMethod = DistanceMethod.HAVERSINE,
) -> list[Buffer]:
    """
    Build one buffer per venue, in catalog order.

    When ``query`` is given every buffer is annotated with its distance and
    travel estimate, whether or not it contains the query.

    Raises:
        InvalidRadius: ``radius_km`` is not positive
    """
    query = as_geopoint(query)
    buffers = []
    for venue in catalog:
        buf = Buffer(
            venue=venue,
            polygon=create_buffer(venue.position, radius_km, segments, method),
            radius_km=radius_km,
        )
        if query is not None:
            buf = annotate_buffer(buf, query, speed_kmh, method)
        buffers.append(buf)
    return buffers


def rank(
    candidates: Sequence[Buffer],
    query: PointLike,
    speed_kmh: float = DEFAULT_TRAVEL_SPEED_KMH,
    method: DistanceMethod = DistanceMethod.HAVERSINE,
) -> list[Buffer]:
    """
    Buffers containing ``query``, nearest venue first.

    The sort is stable: venues at equal distance keep their input order.
    An empty list means no buffer contains the query.

    Every kept buffer is annotated again for ``query``. Distances already on
    the input (from ``generate_buffers`` or an earlier query point) are
    recomputed rather than reused, so a stale annotation never reaches the
    ranking. Under a session this repeats the per-candidate distance once.
    """
    query = as_geopoint(query)
    inside = [
        annotate_buffer(buf, query, speed_kmh, method)
        for buf in candidates
        if ring_contains(query, buf.polygon)
    ]
    ranked = sorted(inside, key=lambda b: b.distance_km)
    logger.debug(
        "Ranked %d of %d buffers around (%.6f, %.6f)",
        len(ranked), len(candidates), query.longitude, query.latitude,
    )
    return ranked


def build_routes(
    query: PointLike,
    ranked: Sequence[Buffer],
) -> tuple[list[RouteSegment], Optional[RouteSegment]]:
    """
    Route segments from ``query`` to every ranked venue.

    Returns:
        Tuple of (one NORMAL segment per entry in ranked order, a NEAREST
        segment duplicating the first entry or None when ``ranked`` is empty)
    """
    query = as_geopoint(query)
    segments = [
        RouteSegment(
            source=query,
            target=buf.venue.position,
            emphasis=RouteEmphasis.NORMAL,
            venue_name=buf.venue.name,
        )
        for buf in ranked
    ]
    if not segments:
        return [], None

    nearest = segments[0].model_copy(update={"emphasis": RouteEmphasis.NEAREST})
    return segments, nearest
