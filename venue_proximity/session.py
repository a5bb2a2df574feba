"""
Recompute orchestration for the venue proximity core.

A ``ProximitySession`` owns the two settable inputs (query point and buffer
radius) plus the fixed venue catalog. Every input change runs the whole
pipeline synchronously and publishes one new ``ProximitySnapshot``; derived
state is never updated piecemeal.
"""

import logging
from typing import Callable, Optional, Sequence

from venue_proximity.config import ProximitySettings, get_settings
from venue_proximity.data.loaders import load_catalog
from venue_proximity.errors import EmptyInput, InvalidRadius
from venue_proximity.geometry.services import (
    build_routes,
    envelope,
    generate_buffers,
    rank,
)
from venue_proximity.geometry.utils import PointLike
from venue_proximity.models.inputs import GeoPoint, Venue, as_geopoint
from venue_proximity.models.outputs import (
    BoundingEnvelope,
    Buffer,
    ProximitySnapshot,
    RouteSegment,
    SessionState,
)


logger = logging.getLogger(__name__)

Listener = Callable[[ProximitySnapshot], None]


class ProximitySession:
    """
    State machine over a query point and a buffer radius.

    IDLE: no query point; buffers and envelope exist, candidates and routes
    are empty. ACTIVE: query point set; the full pipeline is populated.
    """

    def __init__(
        self,
        catalog: Sequence[Venue],
        radius_km: Optional[float] = None,
        settings: Optional[ProximitySettings] = None,
    ):
        """
        Args:
            catalog: Venues for the lifetime of the session, in display order
            radius_km: Initial buffer radius; settings default when None
            settings: Session settings; process-wide settings when None

        Raises:
            EmptyInput: the catalog has no venues
            InvalidRadius: the initial radius is not positive
        """
        self._settings = settings or get_settings()
        self._catalog: tuple[Venue, ...] = tuple(catalog)
        if not self._catalog:
            raise EmptyInput("Venue catalog is empty; no envelope can be computed")

        self._listeners: list[Listener] = []
        self._generation = 0
        self._snapshot = self._recompute(
            None,
            self._settings.default_radius_km if radius_km is None else radius_km,
        )
        logger.info(
            "Session started with %d venues, radius %.3f km",
            len(self._catalog), self._snapshot.radius_km,
        )

    @classmethod
    def from_settings(cls, settings: Optional[ProximitySettings] = None) -> "ProximitySession":
        """Session over the catalog named by ``settings.catalog_path`` (or the sample)."""
        settings = settings or get_settings()
        return cls(load_catalog(settings.catalog_path), settings=settings)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    @property
    def catalog(self) -> tuple[Venue, ...]:
        return self._catalog

    def set_query_point(self, point: Optional[PointLike]) -> ProximitySnapshot:
        """Set (or clear, with None) the query point and recompute."""
        query = as_geopoint(point)
        snapshot = self._recompute(query, self._snapshot.radius_km)
        return self._publish(snapshot)

    def clear_query_point(self) -> ProximitySnapshot:
        return self.set_query_point(None)

    def set_buffer_radius(self, km: float) -> ProximitySnapshot:
        """
        Change the buffer radius and recompute.

        Raises:
            InvalidRadius: ``km`` is not positive; the previous state is kept
        """
        try:
            snapshot = self._recompute(self._snapshot.query_point, km)
        except InvalidRadius:
            logger.warning(
                "Rejected buffer radius %r; keeping %.3f km",
                km, self._snapshot.radius_km,
            )
            raise
        return self._publish(snapshot)

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._snapshot.state

    @property
    def query_point(self) -> Optional[GeoPoint]:
        return self._snapshot.query_point

    @property
    def radius_km(self) -> float:
        return self._snapshot.radius_km

    @property
    def current_buffers(self) -> tuple[Buffer, ...]:
        return self._snapshot.buffers

    @property
    def bounding_envelope(self) -> BoundingEnvelope:
        return self._snapshot.envelope

    @property
    def candidate_set(self) -> tuple[Buffer, ...]:
        return self._snapshot.candidates

    @property
    def route_segments(self) -> tuple[RouteSegment, ...]:
        return self._snapshot.routes

    @property
    def nearest_route(self) -> Optional[RouteSegment]:
        return self._snapshot.nearest_route

    def snapshot(self) -> ProximitySnapshot:
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call ``listener`` with every newly published snapshot.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _recompute(self, query: Optional[GeoPoint], radius_km: float) -> ProximitySnapshot:
        settings = self._settings
        buffers = generate_buffers(
            self._catalog,
            radius_km,
            segments=settings.buffer_segments,
            query=query,
            speed_kmh=settings.travel_speed_kmh,
            method=settings.distance_method,
        )
        bbox = envelope(buffers, method=settings.distance_method)

        if query is None:
            candidates, routes, nearest = [], [], None
            state = SessionState.IDLE
        else:
            candidates = rank(
                buffers,
                query,
                speed_kmh=settings.travel_speed_kmh,
                method=settings.distance_method,
            )
            routes, nearest = build_routes(query, candidates)
            state = SessionState.ACTIVE

        logger.debug(
            "Recomputed %s: radius=%.3f km, %d buffers, %d candidates, perimeter=%.2f km",
            state.value, radius_km, len(buffers), len(candidates), bbox.perimeter_km,
        )
        return ProximitySnapshot(
            generation=self._generation,
            state=state,
            radius_km=radius_km,
            query_point=query,
            buffers=tuple(buffers),
            envelope=bbox,
            candidates=tuple(candidates),
            routes=tuple(routes),
            nearest_route=nearest,
        )

    def _publish(self, snapshot: ProximitySnapshot) -> ProximitySnapshot:
        self._generation += 1
        self._snapshot = snapshot.model_copy(update={"generation": self._generation})

        errors = []
        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception as e:
                logger.exception("Snapshot listener %r failed", listener)
                errors.append(e)
        if errors:
            raise errors[0]
        return self._snapshot
