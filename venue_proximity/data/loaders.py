"""
Venue catalog loaders.
Reads a venue catalog from JSON or CSV, with a bundled sample catalog.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd
from pydantic import ValidationError

from venue_proximity.errors import CatalogError
from venue_proximity.models.inputs import GeoPoint, Venue


logger = logging.getLogger(__name__)


class VenueCatalogService:
    """
    Loads a venue catalog once and serves it as an immutable tuple.

    JSON files hold ``{"venues": [...]}`` (or a bare list) where each venue
    has ``position: [lon, lat]`` or ``longitude``/``latitude`` keys. CSV
    files need ``name``, ``longitude`` and ``latitude`` columns.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._path = Path(path) if path is not None else None
        self._venues: Optional[tuple[Venue, ...]] = None

    def load_venues(self) -> tuple[Venue, ...]:
        """Load (and cache) the catalog."""
        if self._venues is not None:
            return self._venues

        if self._path is None:
            records = _create_sample_venues()
            source = "bundled sample"
        elif not self._path.exists():
            raise CatalogError(f"Venue catalog not found: {self._path}")
        elif self._path.suffix.lower() == ".csv":
            records = _load_records_from_csv(self._path)
            source = str(self._path)
        else:
            records = _load_records_from_json(self._path)
            source = str(self._path)

        venues = []
        for index, record in enumerate(records):
            venues.append(_venue_from_record(record, index))

        self._venues = tuple(venues)
        logger.info("Loaded %d venues from %s", len(self._venues), source)
        return self._venues

    def get_venue_names(self) -> list[str]:
        return [v.name for v in self.load_venues()]

    def get_venues_by_category(self, category: str) -> tuple[Venue, ...]:
        category_lower = category.lower()
        return tuple(v for v in self.load_venues() if v.category.lower() == category_lower)

    def search_venues(self, query: str) -> list[Venue]:
        """Search for venues by partial name match."""
        query_lower = query.lower()
        return [v for v in self.load_venues() if query_lower in v.name.lower()]


def load_catalog(path: Optional[Union[str, Path]] = None) -> tuple[Venue, ...]:
    """Load a venue catalog; the bundled sample when ``path`` is None."""
    return VenueCatalogService(path).load_venues()


def _load_records_from_json(json_file: Path) -> list[dict[str, Any]]:
    try:
        with open(json_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogError(f"Invalid JSON in {json_file}: {e}") from e

    if isinstance(data, dict):
        data = data.get("venues")
    if not isinstance(data, list):
        raise CatalogError(f"{json_file} must hold a list of venues or {{\"venues\": [...]}}")
    return data


def _load_records_from_csv(csv_file: Path) -> list[dict[str, Any]]:
    try:
        df = pd.read_csv(csv_file, dtype={"phone": str, "address": str})
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise CatalogError(f"Invalid CSV in {csv_file}: {e}") from e

    missing = {"name", "longitude", "latitude"} - set(df.columns)
    if missing:
        raise CatalogError(f"{csv_file} is missing columns: {', '.join(sorted(missing))}")
    df = df.fillna({"address": "", "phone": "", "category": "restaurant"})
    return df.to_dict(orient="records")


def _venue_from_record(record: Any, index: int) -> Venue:
    if not isinstance(record, dict):
        raise CatalogError(f"Venue #{index} is not an object: {record!r}")

    try:
        if "position" in record:
            position = GeoPoint.from_lonlat(record["position"])
        else:
            position = GeoPoint(
                longitude=record["longitude"], latitude=record["latitude"]
            )
        return Venue(
            position=position,
            name=record["name"],
            category=record.get("category") or record.get("type") or "restaurant",
            address=record.get("address") or "",
            phone=record.get("phone") or "",
        )
    except (KeyError, TypeError, ValueError, ValidationError) as e:
        raise CatalogError(f"Invalid venue #{index}: {e}") from e


def _create_sample_venues() -> list[dict[str, Any]]:
    """Restaurants around Manizales and Villamaría, Colombia."""
    return [
        {"position": [-75.5175, 5.0689], "name": "La Terraza Gourmet", "type": "restaurant", "address": "Calle 23 #25-41, Manizales", "phone": "(6) 887 4521"},
        {"position": [-75.5142, 5.0702], "name": "El Buen Sabor", "type": "restaurant", "address": "Carrera 23 #30-15, Manizales", "phone": "(6) 883 2190"},
        {"position": [-75.5201, 5.0665], "name": "Restaurante Los Nevados", "type": "restaurant", "address": "Avenida Santander #45-20, Manizales", "phone": "(6) 885 6734"},
        {"position": [-75.5189, 5.0712], "name": "Café de la Montaña", "type": "restaurant", "address": "Calle 31 #22-10, Manizales", "phone": "(6) 889 1023"},
        {"position": [-75.5163, 5.0681], "name": "Parrilla El Fogón", "type": "restaurant", "address": "Carrera 25 #27-33, Manizales", "phone": "(6) 884 5678"},
        {"position": [-75.5088, 5.0492], "name": "Restaurante Villa María", "type": "restaurant", "address": "Calle 10 #5-22, Villamaría", "phone": "(6) 859 3412"},
        {"position": [-75.5102, 5.0478], "name": "El Rincón Caldense", "type": "restaurant", "address": "Carrera 8 #12-45, Villamaría", "phone": "(6) 859 7821"},
        {"position": [-75.5121, 5.0505], "name": "Sabores del Eje", "type": "restaurant", "address": "Calle 15 #10-30, Villamaría", "phone": "(6) 859 4567"},
        {"position": [-75.5195, 5.0698], "name": "Pizza y Pasta", "type": "restaurant", "address": "Calle 28 #20-18, Manizales", "phone": "(6) 886 2345"},
        {"position": [-75.5156, 5.0673], "name": "Asados Don Pepe", "type": "restaurant", "address": "Carrera 24 #26-50, Manizales", "phone": "(6) 888 9012"},
    ]
