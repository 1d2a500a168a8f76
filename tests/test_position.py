import pytest

from offleash_zones.position import (
    StaticPositionSupplier, UserPosition, fetch_position, position_from_mapping
)
from offleash_zones.settings import PositionSettings


class TestPositionFromMapping:
    def test_flat_payload(self):
        position = position_from_mapping({"latitude": 52.1, "longitude": 5.3, "accuracyMeters": 12})
        assert position == UserPosition(52.1, 5.3, 12.0)

    def test_nested_coords_payload(self):
        position = position_from_mapping({"coords": {"latitude": "52.1", "longitude": "5.3", "accuracy": 8}})
        assert position == UserPosition(52.1, 5.3, 8.0)

    def test_accuracy_is_optional(self):
        assert position_from_mapping({"latitude": 52.1, "longitude": 5.3}).accuracy_meters is None

    @pytest.mark.parametrize("data", [
        None,
        {},
        {"latitude": 52.1},
        {"latitude": "north", "longitude": 5.3},
        {"latitude": 91, "longitude": 5.3},
        {"latitude": 52.1, "longitude": float("nan")},
    ])
    def test_unavailable(self, data):
        assert position_from_mapping(data) is None


class TestStaticPositionSupplier:
    def test_configured(self):
        settings = PositionSettings(static_latitude=52.15, static_longitude=5.38, static_accuracy_meters=5)
        assert StaticPositionSupplier(settings)() == UserPosition(52.15, 5.38, 5.0)

    def test_not_configured(self):
        assert StaticPositionSupplier(PositionSettings(static_latitude=None, static_longitude=None))() is None

    def test_env_configuration(self, monkeypatch):
        monkeypatch.setenv("OFFLEASH_POSITION_STATIC_LATITUDE", "52.2")
        monkeypatch.setenv("OFFLEASH_POSITION_STATIC_LONGITUDE", "5.4")
        assert StaticPositionSupplier(PositionSettings())() == UserPosition(52.2, 5.4)


def test_fetch_position_absorbs_supplier_errors():
    def broken():
        raise TimeoutError("no fix")

    assert fetch_position(broken) is None
    assert fetch_position(lambda: UserPosition(1.0, 2.0)) == UserPosition(1.0, 2.0)
