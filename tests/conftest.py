"""Shared test fixtures."""

import pytest

from venue_proximity.config import ProximitySettings
from venue_proximity.data.loaders import load_catalog
from venue_proximity.models.inputs import GeoPoint, Venue


@pytest.fixture
def settings() -> ProximitySettings:
    # Ignore any .env / environment overrides on the test machine
    return ProximitySettings(_env_file=None)


@pytest.fixture
def venue_a() -> Venue:
    return Venue(position=GeoPoint(longitude=0.0, latitude=0.0), name="Venue A")


@pytest.fixture
def venue_b() -> Venue:
    return Venue(position=GeoPoint(longitude=0.01, latitude=0.0), name="Venue B")


@pytest.fixture
def two_venue_catalog(venue_a, venue_b) -> tuple[Venue, ...]:
    return (venue_a, venue_b)


@pytest.fixture
def sample_catalog() -> tuple[Venue, ...]:
    return load_catalog()
