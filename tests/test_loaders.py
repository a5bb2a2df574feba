"""Tests for venue catalog loading."""

import json

import pytest

from venue_proximity.data.loaders import VenueCatalogService, load_catalog
from venue_proximity.errors import CatalogError
from venue_proximity.models.inputs import GeoPoint


class TestSampleCatalog:
    def test_bundled_restaurants(self, sample_catalog):
        assert len(sample_catalog) == 10
        first = sample_catalog[0]
        assert first.name == "La Terraza Gourmet"
        assert first.position == GeoPoint(longitude=-75.5175, latitude=5.0689)
        assert first.category == "restaurant"
        assert first.phone == "(6) 887 4521"

    def test_is_cached(self):
        service = VenueCatalogService()
        assert service.load_venues() is service.load_venues()

    def test_search_and_category(self):
        service = VenueCatalogService()
        assert [v.name for v in service.search_venues("pizza")] == ["Pizza y Pasta"]
        assert len(service.get_venues_by_category("Restaurant")) == 10
        assert service.get_venue_names()[-1] == "Asados Don Pepe"


class TestFileCatalogs:
    def test_json_catalog(self, tmp_path):
        path = tmp_path / "venues.json"
        path.write_text(json.dumps({
            "venues": [
                {"position": [1.0, 2.0], "name": "One", "category": "cafe"},
                {"longitude": 3.0, "latitude": 4.0, "name": "Two", "phone": "123"},
            ]
        }), encoding="utf-8")

        venues = load_catalog(path)
        assert [v.name for v in venues] == ["One", "Two"]
        assert venues[0].category == "cafe"
        assert venues[1].position == GeoPoint(longitude=3.0, latitude=4.0)
        assert venues[1].phone == "123"

    def test_json_bare_list(self, tmp_path):
        path = tmp_path / "venues.json"
        path.write_text(json.dumps([{"position": [1.0, 2.0], "name": "One"}]), encoding="utf-8")
        assert load_catalog(path)[0].name == "One"

    def test_csv_catalog(self, tmp_path):
        path = tmp_path / "venues.csv"
        path.write_text(
            "name,longitude,latitude,address,phone\n"
            "One,1.5,2.5,Main St,555\n"
            "Two,-1.0,-2.0,,\n",
            encoding="utf-8",
        )
        venues = load_catalog(path)
        assert venues[0].position == GeoPoint(longitude=1.5, latitude=2.5)
        assert venues[0].address == "Main St"
        assert venues[0].phone == "555"
        assert venues[1].address == ""

    def test_csv_missing_columns(self, tmp_path):
        path = tmp_path / "venues.csv"
        path.write_text("name,lon,lat\nOne,1,2\n", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError):
            load_catalog(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "venues.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_json_not_utf8(self, tmp_path):
        path = tmp_path / "venues.json"
        path.write_bytes(b"\xff\xfe[")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_empty_csv(self, tmp_path):
        path = tmp_path / "venues.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_unterminated_csv_quote(self, tmp_path):
        path = tmp_path / "venues.csv"
        path.write_text('name,longitude,latitude\n"One,1,2\n', encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_csv_not_utf8(self, tmp_path):
        path = tmp_path / "venues.csv"
        path.write_bytes(b"name,longitude,latitude\n\xff\xfe,1,2\n")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_out_of_range_coordinates(self, tmp_path):
        path = tmp_path / "venues.json"
        path.write_text(json.dumps([{"position": [200.0, 2.0], "name": "Bad"}]), encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_missing_name(self, tmp_path):
        path = tmp_path / "venues.json"
        path.write_text(json.dumps([{"position": [1.0, 2.0]}]), encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)
