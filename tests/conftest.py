import pytest
import json
import os
import tempfile

from offleash_zones.store import create_zone_store


def square(lng, lat, size=0.0005):
    """Closed square ring as a GeoJSON Polygon, lower-left corner first."""
    return {
        "type": "Polygon",
        "coordinates": [[
            [lng, lat],
            [lng + size, lat],
            [lng + size, lat + size],
            [lng, lat + size],
            [lng, lat],
        ]]
    }


def feature(feature_id, code, geometry, area=None, **properties):
    props = {"CODE": code, "OPPERVLAKTE": area}
    props.update(properties)
    return {
        "type": "Feature",
        "id": feature_id,
        "geometry": geometry,
        "properties": props,
    }


@pytest.fixture
def adjacent_green_features():
    """Three GREEN areas near Amersfoort, pairwise well within 100 m of each other."""
    return [
        feature("hondenkaart.1", "GROEN", square(5.3800, 52.1500), "1000.5"),
        feature("hondenkaart.2", "GROEN", square(5.3808, 52.1500), "2000"),
        feature("hondenkaart.3", "GROEN", square(5.3800, 52.1508), "500.25"),
    ]


@pytest.fixture
def orange_point_feature():
    """ORANJE zone without a usable area."""
    return feature("hondenkaart.4", "ORANJE", square(5.3900, 52.1600), None)


@pytest.fixture
def sample_geojson(adjacent_green_features, orange_point_feature):
    """Sample zone dataset for testing."""
    return {
        "type": "FeatureCollection",
        "features": adjacent_green_features + [
            orange_point_feature,
            feature("hondenkaart.5", "ROOD", square(5.3850, 52.1550), "750"),
            feature("hondenkaart.6", "GROEN", square(5.4200, 52.1700), "300"),
        ]
    }


@pytest.fixture
def sample_geojson_file(sample_geojson):
    """Temporary file holding the sample dataset."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
        json.dump(sample_geojson, f)
    yield f.name
    os.unlink(f.name)


@pytest.fixture
def zone_store(sample_geojson):
    """Zone store loaded with the sample dataset."""
    return create_zone_store(sample_geojson)
