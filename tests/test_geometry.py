import pytest
from shapely.geometry import Polygon

from offleash_zones.geometry import (
    LatLng, buffer_meters, centroid_of, intersects, to_shape, union_geometries
)

from conftest import square


class TestCentroidOf:
    """Tests for first-vertex centroid extraction."""

    def test_polygon_uses_first_vertex_of_outer_ring(self):
        result = centroid_of(square(5.38, 52.15))
        assert result == LatLng(lat=52.15, lng=5.38)

    def test_multipolygon_uses_first_polygon(self):
        geometry = {
            "type": "MultiPolygon",
            "coordinates": [
                square(5.40, 52.16)["coordinates"],
                square(5.50, 52.20)["coordinates"],
            ]
        }
        assert centroid_of(geometry) == LatLng(lat=52.16, lng=5.40)

    @pytest.mark.parametrize("geometry", [
        None,
        {},
        {"type": "Polygon"},
        {"type": "Polygon", "coordinates": []},
        {"type": "Polygon", "coordinates": [[]]},
        {"type": "Polygon", "coordinates": [[[5.38]]]},
        {"type": "Polygon", "coordinates": [[5.38, 52.15]]},
        {"type": "MultiPolygon", "coordinates": [[]]},
        {"type": "Point", "coordinates": [5.38, 52.15]},
        {"type": "Polygon", "coordinates": [[["a", "b"]]]},
        "not a geometry",
    ])
    def test_malformed_geometry_returns_none(self, geometry):
        assert centroid_of(geometry) is None

    def test_is_not_the_geometric_center(self):
        result = centroid_of(square(0.0, 0.0, size=1.0))
        assert result == LatLng(lat=0.0, lng=0.0)


class TestBufferMeters:
    """Tests for metric buffering."""

    def test_buffer_returns_lon_lat_polygon_containing_input(self):
        geometry = square(5.38, 52.15)
        buffered = buffer_meters(geometry, 50)

        original = to_shape(geometry)
        assert buffered.contains(original)
        # 50 m is well under 0.001 degrees at this latitude
        minx, miny, maxx, maxy = buffered.bounds
        assert minx == pytest.approx(5.38 - 50 / 68_300, abs=2e-5)
        assert miny == pytest.approx(52.15 - 50 / 111_250, abs=2e-5)

    def test_buffer_accepts_shapely_geometry(self):
        polygon = Polygon([(5.38, 52.15), (5.381, 52.15), (5.381, 52.151)])
        buffered = buffer_meters(polygon, 10)
        assert buffered.area > polygon.area

    def test_invalid_ring_raises(self):
        with pytest.raises(Exception):
            buffer_meters({"type": "Polygon", "coordinates": [[[5.38, 52.15]]]}, 50)


class TestIntersects:
    """Tests for buffered overlap checks."""

    def test_buffers_of_close_squares_intersect(self):
        # ~20 m apart: two 50 m buffers overlap
        a = buffer_meters(square(5.3800, 52.15), 50)
        b = buffer_meters(square(5.3808, 52.15), 50)
        assert intersects(a, b) is True

    def test_buffers_of_distant_squares_do_not_intersect(self):
        # ~1.3 km apart
        a = buffer_meters(square(5.38, 52.15), 50)
        b = buffer_meters(square(5.40, 52.15), 50)
        assert intersects(a, b) is False


class TestUnionGeometries:
    def test_union_of_overlapping_squares_is_single_polygon(self):
        result = union_geometries([square(5.38, 52.15), square(5.3803, 52.15)])
        assert result["type"] == "Polygon"
        assert to_shape(result).area == pytest.approx(0.0008 * 0.0005, rel=1e-6)

    def test_union_of_separate_squares_is_multipolygon(self):
        result = union_geometries([square(5.38, 52.15), square(5.39, 52.15)])
        assert result["type"] == "MultiPolygon"
        assert centroid_of(result) is not None
