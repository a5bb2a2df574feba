"""
Output models for the venue proximity core.
Derived geometry published by the session to a rendering layer.
"""

from datetime import timedelta
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field
from shapely.geometry import LineString, Polygon, mapping

from venue_proximity.models.inputs import GeoPoint, Venue, normalize_longitude


class SessionState(str, Enum):
    """Lifecycle state of a proximity session."""
    IDLE = "idle"  # No query point; buffers and envelope only
    ACTIVE = "active"  # Query point set; full pipeline populated


class RouteEmphasis(str, Enum):
    """Rendering emphasis of a route segment."""
    NORMAL = "normal"
    NEAREST = "nearest"


class Buffer(BaseModel):
    """A polygonal disc around one venue, optionally annotated for a query point."""
    venue: Venue = Field(..., description="Venue the buffer surrounds")
    polygon: Polygon = Field(..., description="Closed ring approximating the disc")
    radius_km: float = Field(..., gt=0, description="Buffer radius in kilometers")
    distance_km: Optional[float] = Field(
        None, ge=0, description="Distance from the current query point to the venue"
    )
    travel_time: Optional[timedelta] = Field(
        None, description="Estimated travel time from the query point"
    )

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def ring(self) -> tuple[GeoPoint, ...]:
        """
        Ring vertices in order, first vertex repeated as last.

        Polygon longitudes stay continuous across ±180°; the GeoPoints are
        wrapped back into [-180, 180].
        """
        return tuple(
            GeoPoint(longitude=normalize_longitude(lon), latitude=lat)
            for lon, lat in self.polygon.exterior.coords
        )

    @property
    def travel_minutes(self) -> Optional[float]:
        if self.travel_time is None:
            return None
        return self.travel_time.total_seconds() / 60.0


class BoundingEnvelope(BaseModel):
    """Axis-aligned rectangle around a set of geometries, with its perimeter."""
    polygon: Polygon = Field(..., description="Closed ring SW, SE, NE, NW, SW")
    perimeter_km: float = Field(..., ge=0, description="Perimeter length in kilometers")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """(min_lon, min_lat, max_lon, max_lat)"""
        return self.polygon.bounds

    @property
    def corners(self) -> tuple[GeoPoint, ...]:
        return tuple(
            GeoPoint(longitude=normalize_longitude(lon), latitude=lat)
            for lon, lat in self.polygon.exterior.coords
        )


class RouteSegment(BaseModel):
    """Straight connection from the query point to a candidate venue."""
    source: GeoPoint = Field(..., description="Query point")
    target: GeoPoint = Field(..., description="Venue position")
    emphasis: RouteEmphasis = Field(RouteEmphasis.NORMAL, description="Rendering emphasis")
    venue_name: Optional[str] = Field(None, description="Name of the target venue")

    model_config = {"frozen": True}

    def to_linestring(self) -> LineString:
        return LineString([self.source.as_tuple(), self.target.as_tuple()])

    def length_km(self) -> float:
        from venue_proximity.geometry.utils import distance

        return distance(self.source, self.target)


class ProximitySnapshot(BaseModel):
    """
    Immutable view of everything a session has derived.
    A new snapshot replaces the previous one on every recompute.
    """
    generation: int = Field(0, ge=0, description="Recompute counter")
    state: SessionState = Field(SessionState.IDLE, description="Session state")
    radius_km: float = Field(..., gt=0, description="Buffer radius in kilometers")
    query_point: Optional[GeoPoint] = Field(None, description="Current query point")
    buffers: tuple[Buffer, ...] = Field(default_factory=tuple)
    envelope: BoundingEnvelope = Field(..., description="Envelope over all buffers")
    candidates: tuple[Buffer, ...] = Field(default_factory=tuple)
    routes: tuple[RouteSegment, ...] = Field(default_factory=tuple)
    nearest_route: Optional[RouteSegment] = Field(None)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def nearest(self) -> Optional[Buffer]:
        """Closest candidate buffer, if any."""
        return self.candidates[0] if self.candidates else None

    def to_geojson_feature_collection(self) -> dict[str, Any]:
        """Convert the snapshot to a GeoJSON FeatureCollection."""
        features = [
            {
                "type": "Feature",
                "id": "bbox",
                "properties": {
                    "layer": "bbox",
                    "perimeter_km": self.envelope.perimeter_km,
                },
                "geometry": mapping(self.envelope.polygon),
            }
        ]

        candidate_venues = {c.venue for c in self.candidates}
        for buf in self.buffers:
            features.append({
                "type": "Feature",
                "properties": {
                    "layer": "buffers",
                    "name": buf.venue.name,
                    "category": buf.venue.category,
                    "address": buf.venue.address,
                    "phone": buf.venue.phone,
                    "position": list(buf.venue.position.as_tuple()),
                    "distance_km": buf.distance_km,
                    "travel_minutes": buf.travel_minutes,
                    "available": buf.venue in candidate_venues,
                },
                "geometry": mapping(buf.polygon),
            })

        route_features = list(self.routes)
        if self.nearest_route is not None:
            route_features.append(self.nearest_route)
        for route in route_features:
            features.append({
                "type": "Feature",
                "properties": {
                    "layer": "routes",
                    "emphasis": route.emphasis.value,
                    "venue_name": route.venue_name,
                },
                "geometry": mapping(route.to_linestring()),
            })

        if self.query_point is not None:
            features.append({
                "type": "Feature",
                "properties": {"layer": "query-point"},
                "geometry": mapping(self.query_point.to_shapely()),
            })

        return {
            "type": "FeatureCollection",
            "features": features,
            "properties": {
                "generation": self.generation,
                "state": self.state.value,
                "radius_km": self.radius_km,
                "perimeter_km": self.envelope.perimeter_km,
                "crs": "EPSG:4326",
            },
        }
