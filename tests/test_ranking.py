"""Unit tests for ranking, route building and travel estimates."""

from datetime import timedelta

import pytest

from venue_proximity.geometry.services import (
    build_routes,
    estimate_travel_time,
    generate_buffers,
    rank,
)
from venue_proximity.geometry.utils import distance
from venue_proximity.models.inputs import GeoPoint, Venue
from venue_proximity.models.outputs import RouteEmphasis


def _venue(name: str, lon: float, lat: float) -> Venue:
    return Venue(position=GeoPoint(longitude=lon, latitude=lat), name=name)


class TestGenerateBuffers:
    def test_one_buffer_per_venue_in_catalog_order(self, sample_catalog):
        buffers = generate_buffers(sample_catalog, 0.5)
        assert [b.venue for b in buffers] == list(sample_catalog)
        assert all(b.distance_km is None for b in buffers)

    def test_query_annotates_every_buffer(self, sample_catalog):
        query = GeoPoint(longitude=-75.5165, latitude=5.0690)
        buffers = generate_buffers(sample_catalog, 0.2, query=query)
        assert all(b.distance_km is not None for b in buffers)
        assert all(b.travel_time is not None for b in buffers)


class TestRank:
    def test_sorted_by_distance(self, sample_catalog):
        query = GeoPoint(longitude=-75.5165, latitude=5.0690)
        ranked = rank(generate_buffers(sample_catalog, 0.5), query)
        assert len(ranked) > 1
        distances = [b.distance_km for b in ranked]
        assert distances == sorted(distances)

    def test_only_containing_buffers(self, sample_catalog):
        query = GeoPoint(longitude=-75.5165, latitude=5.0690)
        ranked = rank(generate_buffers(sample_catalog, 0.5), query)
        names = {b.venue.name for b in ranked}
        # Villamaría venues sit ~2 km south
        assert "Restaurante Villa María" not in names
        assert "Parrilla El Fogón" in names

    def test_no_containment_is_empty(self, two_venue_catalog):
        query = GeoPoint(longitude=1.0, latitude=1.0)
        assert rank(generate_buffers(two_venue_catalog, 0.5), query) == []

    def test_ties_keep_input_order(self):
        east = _venue("East", 0.001, 0.0)
        west = _venue("West", -0.001, 0.0)
        query = GeoPoint(longitude=0.0, latitude=0.0)

        ranked = rank(generate_buffers([east, west], 0.5), query)
        assert [b.venue.name for b in ranked] == ["East", "West"]
        assert ranked[0].distance_km == ranked[1].distance_km

        ranked = rank(generate_buffers([west, east], 0.5), query)
        assert [b.venue.name for b in ranked] == ["West", "East"]

    def test_candidates_annotated(self, two_venue_catalog):
        query = GeoPoint(longitude=0.001, latitude=0.0)
        ranked = rank(generate_buffers(two_venue_catalog, 2.0), query)
        assert ranked[0].distance_km == pytest.approx(0.1112, abs=1e-3)
        assert ranked[0].travel_time == estimate_travel_time(ranked[0].distance_km)

    def test_previous_annotation_is_replaced(self, two_venue_catalog):
        old_query = GeoPoint(longitude=0.009, latitude=0.0)
        new_query = GeoPoint(longitude=0.001, latitude=0.0)
        buffers = generate_buffers(two_venue_catalog, 2.0, query=old_query)

        ranked = rank(buffers, new_query)
        assert [b.venue.name for b in ranked] == ["Venue A", "Venue B"]
        for buf in ranked:
            assert buf.distance_km == distance(buf.venue.position, new_query)


class TestBuildRoutes:
    def test_empty_ranking(self):
        segments, nearest = build_routes(GeoPoint(longitude=0.0, latitude=0.0), [])
        assert segments == []
        assert nearest is None

    def test_one_segment_per_candidate_plus_nearest(self, two_venue_catalog):
        query = GeoPoint(longitude=0.001, latitude=0.0)
        ranked = rank(generate_buffers(two_venue_catalog, 2.0), query)
        segments, nearest = build_routes(query, ranked)

        assert len(segments) == len(ranked) == 2
        assert all(s.emphasis == RouteEmphasis.NORMAL for s in segments)
        assert [s.target for s in segments] == [b.venue.position for b in ranked]
        assert all(s.source == query for s in segments)

        assert nearest.emphasis == RouteEmphasis.NEAREST
        assert nearest.source == segments[0].source
        assert nearest.target == segments[0].target

    def test_segment_length(self, two_venue_catalog):
        query = GeoPoint(longitude=0.001, latitude=0.0)
        ranked = rank(generate_buffers(two_venue_catalog, 2.0), query)
        segments, _ = build_routes(query, ranked)
        assert segments[0].length_km() == pytest.approx(ranked[0].distance_km)
        assert list(segments[0].to_linestring().coords) == [(0.001, 0.0), (0.0, 0.0)]


class TestTravelEstimate:
    def test_thirty_kmh_default(self):
        assert estimate_travel_time(15.0) == timedelta(minutes=30)

    def test_custom_speed(self):
        assert estimate_travel_time(10.0, speed_kmh=60.0) == timedelta(minutes=10)

    def test_rejects_non_positive_speed(self):
        with pytest.raises(ValueError):
            estimate_travel_time(1.0, speed_kmh=0)
