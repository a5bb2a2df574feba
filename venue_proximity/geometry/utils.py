"""
Geometry utilities for the venue proximity core.
Great-circle distances, buffer rings, envelopes and containment.

Distances default to a spherical Earth (haversine); geographiclib provides
the WGS84 ellipsoid alternative. Coordinates are (lon, lat) everywhere.

Buffer rings keep their longitudes continuous around the centre, so a disc
straddling ±180° may carry longitudes slightly beyond that range. Rings that
enclose a pole are closed along the pole's parallel.
"""

import math
from typing import Iterable, Sequence, Union

from geographiclib.geodesic import Geodesic
from shapely.geometry import Point, Polygon
from shapely.geometry.base import BaseGeometry

from venue_proximity.errors import EmptyInput, InvalidRadius, InvalidSegmentCount
from venue_proximity.models.inputs import (
    DistanceMethod,
    DistanceUnit,
    GeoPoint,
    as_geopoint,
    convert_from_km,
    normalize_longitude,
)


# WGS84 ellipsoid
WGS84 = Geodesic.WGS84

# Mean Earth radius in kilometers (IUGG)
EARTH_RADIUS_KM = 6371.0088

DEFAULT_SEGMENTS = 64

# Whole-globe polygon for discs that reach both poles
WORLD_POLYGON = Polygon([(-180, -90), (180, -90), (180, 90), (-180, 90), (-180, -90)])

# Longest parallel step used when measuring envelope edges
MAX_EDGE_STEP_DEG = 90.0

PointLike = Union[GeoPoint, Point, Sequence[float]]


def unwrap_longitude(lon: float, reference: float) -> float:
    """Shift ``lon`` by whole turns to lie within 180° of ``reference``."""
    rel_lon = lon - reference
    while rel_lon > 180:
        rel_lon -= 360
    while rel_lon < -180:
        rel_lon += 360
    return reference + rel_lon


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers on a sphere of mean Earth radius."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)

    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    )
    # Rounding can push a a hair above 1 for near-antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


def geodesic_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the geodesic distance between two points on WGS84 ellipsoid.

    Args:
        lat1: Latitude of first point in decimal degrees
        lon1: Longitude of first point in decimal degrees
        lat2: Latitude of second point in decimal degrees
        lon2: Longitude of second point in decimal degrees

    Returns:
        Distance in kilometers
    """
    result = WGS84.Inverse(lat1, lon1, lat2, lon2)
    return result["s12"] / 1000.0  # Convert meters to kilometers


def distance(
    a: PointLike,
    b: PointLike,
    units: DistanceUnit = DistanceUnit.KILOMETERS,
    method: DistanceMethod = DistanceMethod.HAVERSINE,
) -> float:
    """
    Distance between two points.

    The operands are evaluated in a canonical order so that
    ``distance(a, b) == distance(b, a)`` holds exactly.

    Args:
        a: First point
        b: Second point
        units: Unit of the returned value
        method: Earth model (sphere or WGS84 ellipsoid)

    Returns:
        Non-negative distance in ``units``
    """
    a, b = as_geopoint(a), as_geopoint(b)
    if b.as_tuple() < a.as_tuple():
        a, b = b, a

    if a.as_tuple() == b.as_tuple():
        km = 0.0
    elif method == DistanceMethod.WGS84:
        km = geodesic_distance(a.latitude, a.longitude, b.latitude, b.longitude)
    else:
        km = haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)

    return convert_from_km(km, units)


def destination_point(
    lat: float,
    lon: float,
    azimuth: float,
    distance_km: float,
    method: DistanceMethod = DistanceMethod.HAVERSINE,
) -> tuple[float, float]:
    """
    Calculate a point at a given distance and azimuth from a starting point.

    Args:
        lat: Starting latitude in decimal degrees
        lon: Starting longitude in decimal degrees
        azimuth: Azimuth (bearing) in degrees clockwise from north
        distance_km: Distance in kilometers
        method: Earth model

    Returns:
        Tuple of (latitude, longitude) of the destination point
    """
    if method == DistanceMethod.WGS84:
        result = WGS84.Direct(lat, lon, azimuth, distance_km * 1000.0)
        return result["lat2"], normalize_longitude(result["lon2"])

    delta = distance_km / EARTH_RADIUS_KM
    if abs(lat) == 90.0:
        # At a pole the azimuth is measured from the meridian ``lon``
        if lat > 0:
            return 90.0 - math.degrees(delta), normalize_longitude(lon + 180.0 - azimuth)
        return math.degrees(delta) - 90.0, normalize_longitude(lon + azimuth)

    theta = math.radians(azimuth)
    phi1 = math.radians(lat)
    lmb1 = math.radians(lon)

    sin_phi2 = (
        math.sin(phi1) * math.cos(delta)
        + math.cos(phi1) * math.sin(delta) * math.cos(theta)
    )
    sin_phi2 = max(-1.0, min(1.0, sin_phi2))
    phi2 = math.asin(sin_phi2)
    lmb2 = lmb1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * sin_phi2,
    )
    return math.degrees(phi2), normalize_longitude(math.degrees(lmb2))


def create_buffer(
    center: PointLike,
    radius_km: float,
    segments: int = DEFAULT_SEGMENTS,
    method: DistanceMethod = DistanceMethod.HAVERSINE,
) -> Polygon:
    """
    Create a polygonal disc (buffer) around a point.

    ``segments`` bearings, equally spaced clockwise from north, are projected
    ``radius_km`` outwards and joined in order; the first vertex is repeated
    to close the ring. Vertex longitudes are unwrapped relative to their
    neighbours, so rings crossing the antimeridian stay continuous.

    A disc that encloses one pole winds once around it; its ring is closed
    along that pole's parallel (two extra vertices at latitude ±90). A disc
    that reaches both poles is returned as the whole globe.

    Args:
        center: Centre of the disc
        radius_km: Radius in kilometers, must be > 0
        segments: Number of distinct vertices, at least 3
        method: Earth model used for projection

    Returns:
        Shapely Polygon in (lon, lat) order

    Raises:
        InvalidRadius: radius is not a positive finite number
        InvalidSegmentCount: fewer than three segments requested
    """
    if radius_km is None or not math.isfinite(radius_km) or radius_km <= 0:
        raise InvalidRadius(radius_km)
    if isinstance(segments, bool) or int(segments) != segments or segments < 3:
        raise InvalidSegmentCount(segments)

    center = as_geopoint(center)
    segments = int(segments)

    north_pole = distance(center, (center.longitude, 90.0), method=method) <= radius_km
    south_pole = distance(center, (center.longitude, -90.0), method=method) <= radius_km
    if north_pole and south_pole:
        return WORLD_POLYGON

    points = []
    reference = center.longitude
    for i in range(segments):
        azimuth = (360.0 / segments) * i
        lat, lon = destination_point(
            center.latitude, center.longitude, azimuth, radius_km, method
        )
        lon = unwrap_longitude(lon, reference)
        points.append((lon, lat))  # Shapely uses (lon, lat) order
        reference = lon

    first_lon, first_lat = points[0]
    closing_lon = unwrap_longitude(first_lon, reference)
    if abs(closing_lon - first_lon) > 180.0:
        # The ring winds around a pole: run it a full turn, then back along the pole
        if north_pole or (not south_pole and center.latitude >= 0):
            pole_lat = 90.0
        else:
            pole_lat = -90.0
        points.append((closing_lon, first_lat))
        points.append((closing_lon, pole_lat))
        points.append((first_lon, pole_lat))

    # Close the ring
    points.append(points[0])

    return Polygon(points)


def _extract_all_coordinates(geometry: BaseGeometry) -> list[tuple[float, float]]:
    """Extract all coordinates from any geometry type."""
    coords = []

    if geometry.geom_type == "Point":
        coords.append((geometry.x, geometry.y))
    elif geometry.geom_type == "LineString":
        coords.extend(list(geometry.coords))
    elif geometry.geom_type == "Polygon":
        coords.extend(list(geometry.exterior.coords))
        for interior in geometry.interiors:
            coords.extend(list(interior.coords))
    elif geometry.geom_type in ("MultiPoint", "MultiLineString", "MultiPolygon", "GeometryCollection"):
        for geom in geometry.geoms:
            coords.extend(_extract_all_coordinates(geom))

    return coords


def _coordinates_of(item) -> list[tuple[float, float]]:
    # Buffers are duck-typed to keep this module free of output-model imports
    polygon = getattr(item, "polygon", None)
    if isinstance(polygon, BaseGeometry):
        return _extract_all_coordinates(polygon)
    if isinstance(item, BaseGeometry):
        return _extract_all_coordinates(item)
    return [as_geopoint(item).as_tuple()]


def _longitude_span(lons: Sequence[float]) -> tuple[float, float]:
    """
    Narrowest (west, east) interval covering every longitude.

    ``east`` may exceed 180 when the interval crosses the antimeridian.
    """
    west, east = min(lons), max(lons)
    if east - west >= 360.0:
        # A ring that winds around a pole spans every longitude
        return west, west + 360.0

    wrapped = sorted((lon + 180.0) % 360.0 - 180.0 for lon in lons)

    # The span is the complement of the widest empty arc
    widest = wrapped[0] + 360.0 - wrapped[-1]
    span = (wrapped[0], wrapped[-1])
    if east - west <= span[1] - span[0] + 1e-9:
        # Input frame is already the narrowest; keep its exact values
        span = (west, east)
    for prev, lon in zip(wrapped, wrapped[1:]):
        if lon - prev > widest:
            widest = lon - prev
            span = (lon, prev + 360.0)
    return span


def _edge_length(start: tuple[float, float], end: tuple[float, float], method: DistanceMethod) -> float:
    # Long parallels are measured in steps; one great circle would cut across
    steps = max(1, math.ceil(abs(end[0] - start[0]) / MAX_EDGE_STEP_DEG))
    total = 0.0
    prev = (normalize_longitude(start[0]), start[1])
    for i in range(1, steps + 1):
        if i == steps:
            lon, lat = end
        else:
            t = i / steps
            lon = start[0] + (end[0] - start[0]) * t
            lat = start[1] + (end[1] - start[1]) * t
        point = (normalize_longitude(lon), lat)
        total += distance(prev, point, method=method)
        prev = point
    return total


def create_envelope(
    items: Iterable,
    method: DistanceMethod = DistanceMethod.HAVERSINE,
) -> tuple[Polygon, float]:
    """
    Compute the axis-aligned bounding rectangle of a set of points.

    Buffers and shapely geometries contribute every vertex, not just
    their centre. Longitudes are treated as circular: points on both
    sides of ±180° give a narrow rectangle whose east edge lies beyond
    180, not one spanning the globe.

    Args:
        items: GeoPoints, (lon, lat) pairs, shapely geometries or Buffers
        method: Earth model used for the perimeter

    Returns:
        Tuple of (rectangle polygon SW, SE, NE, NW, SW; perimeter in km)

    Raises:
        EmptyInput: no coordinates were supplied
    """
    coords = []
    for item in items:
        coords.extend(_coordinates_of(item))

    if not coords:
        raise EmptyInput("Cannot compute an envelope of an empty point set")

    west, east = _longitude_span([c[0] for c in coords])
    lats = [c[1] for c in coords]
    south, north = min(lats), max(lats)

    corners = [
        (west, south),
        (east, south),
        (east, north),
        (west, north),
        (west, south),
    ]
    perimeter_km = sum(
        _edge_length(corners[i], corners[i + 1], method)
        for i in range(len(corners) - 1)
    )
    return Polygon(corners), perimeter_km


def ring_contains(point: PointLike, polygon) -> bool:
    """
    Point-in-polygon test with an inclusive boundary.

    Points lying exactly on an edge or vertex count as contained, so a
    query point sitting on a buffer edge always selects that venue. The
    point is also tried one turn east and west, which matches it against
    rings whose longitudes run past ±180°.

    Args:
        point: Point to test
        polygon: Shapely Polygon, anything with a ``polygon`` attribute,
            or a sequence of (lon, lat) vertices

    Returns:
        True if the polygon covers the point
    """
    if isinstance(getattr(polygon, "polygon", None), BaseGeometry):
        polygon = polygon.polygon
    elif not isinstance(polygon, BaseGeometry):
        polygon = Polygon([_vertex(v) for v in polygon])
    lon, lat = _vertex(point)
    lon = normalize_longitude(lon)
    return any(
        polygon.covers(Point(lon + shift, lat))
        for shift in (0.0, -360.0, 360.0)
    )


def _vertex(value) -> tuple[float, float]:
    # Ring vertices may lie beyond ±180, so they are not validated as GeoPoints
    if isinstance(value, GeoPoint):
        return value.as_tuple()
    if isinstance(value, Point):
        return (value.x, value.y)
    lon, lat = value
    return (float(lon), float(lat))
