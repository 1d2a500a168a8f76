import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient

from offleash_zones.main import app, load_initial_zones
from offleash_zones.store import ZoneStore


@pytest.fixture
def client(zone_store):
    """FastAPI test client backed by the sample zone store."""
    previous = app.state.zone_store
    app.state.zone_store = zone_store
    yield TestClient(app)
    app.state.zone_store = previous


@pytest.fixture
def positioned_client(client):
    response = client.post("/api/v1/position", json={"latitude": 52.1561, "longitude": 5.3878})
    assert response.status_code == 200
    return client


class TestZoneEndpoints:
    """Tests for zone listing endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["zones"] == 3

    def test_list_zones(self, client):
        response = client.get("/api/v1/zones")
        assert response.status_code == 200

        data = response.json()
        assert data["total"] == 3
        assert data["version"] == 1
        merged = data["zones"][0]
        assert merged["id"] == "merged_GROEN_0"
        assert merged["category"] == "GREEN"
        assert merged["code"] == "GROEN"
        assert merged["kind"] == "area"
        assert merged["is_merged"] is True
        assert merged["area"] == pytest.approx(3500.75)

    def test_list_zones_by_category(self, client):
        response = client.get("/api/v1/zones", params={"category": "ORANJE"})
        assert response.status_code == 200
        assert [z["id"] for z in response.json()["zones"]] == ["zone_3"]

    def test_list_zones_unknown_category(self, client):
        response = client.get("/api/v1/zones", params={"category": "ROOD"})
        assert response.status_code == 400

    def test_get_zone(self, client):
        response = client.get("/api/v1/zones/zone_3")
        assert response.status_code == 200
        assert response.json()["kind"] == "point"
        assert response.json()["geometry"] is None

    def test_get_zone_not_found(self, client):
        assert client.get("/api/v1/zones/zone_999").status_code == 404

    def test_zones_geojson(self, client):
        response = client.get("/api/v1/zones/geojson")
        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "FeatureCollection"
        assert len(data["features"]) == 3

    def test_styles(self, client):
        response = client.get("/api/v1/styles")
        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"GREEN", "ORANGE", "DEFAULT"}
        assert data["GREEN"]["fill_color"] == "rgba(0, 255, 0, 0.3)"


class TestNearestEndpoints:
    """Tests for position updates and nearest-zone ranking."""

    def test_nearest_without_position(self, client):
        assert client.get("/api/v1/zones/nearest").status_code == 409

    def test_post_position_returns_ranking(self, client):
        response = client.post(
            "/api/v1/position",
            json={"latitude": 52.1561, "longitude": 5.3878, "accuracyMeters": 15},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["position"]["accuracy_meters"] == 15
        distances = [z["distance"] for z in data["zones"]]
        assert len(distances) == 3
        assert distances == sorted(distances)

    def test_invalid_position(self, client):
        response = client.post("/api/v1/position", json={"latitude": 123, "longitude": 5.3})
        assert response.status_code == 422

    def test_nearest_with_limit(self, positioned_client):
        response = positioned_client.get("/api/v1/zones/nearest", params={"limit": 1})
        assert response.status_code == 200
        assert len(response.json()["zones"]) == 1

    def test_nearest_negative_limit(self, positioned_client):
        response = positioned_client.get("/api/v1/zones/nearest", params={"limit": -1})
        assert response.status_code == 400


class TestSelectionEndpoints:
    def test_select_zone_annotates_distance(self, positioned_client):
        response = positioned_client.post("/api/v1/zones/zone_5/select")
        assert response.status_code == 200
        assert response.json()["selected"]["distance"] is not None

        response = positioned_client.get("/api/v1/selection")
        assert response.json()["selected"]["id"] == "zone_5"

    def test_select_without_position(self, client):
        response = client.post("/api/v1/zones/zone_5/select")
        assert response.status_code == 200
        assert response.json()["selected"]["distance"] is None

    def test_select_unknown_zone(self, client):
        assert client.post("/api/v1/zones/nope/select").status_code == 404

    def test_clear_selection(self, client):
        client.post("/api/v1/zones/zone_5/select")
        response = client.delete("/api/v1/selection")
        assert response.status_code == 200
        assert client.get("/api/v1/selection").json()["selected"] is None


class TestReloadEndpoint:
    def test_reload(self, client, sample_geojson_file):
        with patch("offleash_zones.routers.api.get_zone_data_source", return_value=sample_geojson_file):
            response = client.post("/api/v1/reload")

        assert response.status_code == 200
        assert response.json()["total_zones"] == 3
        assert response.json()["version"] == 2

    def test_reload_without_source(self, client):
        with patch("offleash_zones.routers.api.get_zone_data_source", return_value=None):
            assert client.post("/api/v1/reload").status_code == 404

    def test_reload_with_undecodable_file(self, client, tmp_path):
        path = tmp_path / "zones.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with patch("offleash_zones.routers.api.get_zone_data_source", return_value=str(path)):
            response = client.post("/api/v1/reload")

        assert response.status_code == 400
        assert client.get("/api/v1/zones").json()["total"] == 3

    def test_reload_with_bad_source(self, client):
        with patch("offleash_zones.routers.api.get_zone_data_source", return_value="missing-file.json"):
            response = client.post("/api/v1/reload")

        assert response.status_code == 400
        # previous zones are kept
        assert client.get("/api/v1/zones").json()["total"] == 3


class TestStartupLoad:
    def test_load_initial_zones(self, sample_geojson_file):
        store = ZoneStore()
        with patch("offleash_zones.main.get_zone_data_source", return_value=sample_geojson_file):
            assert load_initial_zones(store) is True
        assert len(store.zones()) == 3

    def test_load_initial_zones_failure_is_not_fatal(self):
        store = ZoneStore()
        with patch("offleash_zones.main.get_zone_data_source", return_value="missing-file.json"):
            assert load_initial_zones(store) is False
        assert store.zones() == []
