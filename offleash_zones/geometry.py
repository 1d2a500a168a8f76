"""Geometry helpers for zone centroids, metric buffering and overlap tests."""

from __future__ import annotations

import logging
import math
from functools import lru_cache
from typing import Any, Iterable, Mapping, NamedTuple, Optional, Tuple, Union

from pyproj import Transformer
from shapely.geometry import mapping, shape
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform, unary_union

from offleash_zones.settings import zone_settings

logger = logging.getLogger(__name__)

CRS_WGS84 = "EPSG:4326"  # GeoJSON coordinates (lon, lat)

GeometryLike = Union[Mapping[str, Any], BaseGeometry]


class LatLng(NamedTuple):
    """Representative coordinate of a zone."""
    lat: float
    lng: float


def centroid_of(geometry: Optional[Mapping[str, Any]]) -> Optional[LatLng]:
    """
    Return the representative coordinate of a Polygon or MultiPolygon.

    This is the first vertex of the (first) outer ring, not the geometric
    centroid. Returns None for unsupported types and malformed coordinates.
    """
    if not isinstance(geometry, Mapping):
        return None

    coords = geometry.get("coordinates")
    geom_type = geometry.get("type")

    try:
        if geom_type == "Polygon":
            vertex = coords[0][0]
        elif geom_type == "MultiPolygon":
            vertex = coords[0][0][0]
        else:
            return None
        lng, lat = float(vertex[0]), float(vertex[1])
    except (TypeError, IndexError, KeyError, ValueError):
        return None

    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return LatLng(lat=lat, lng=lng)


@lru_cache(maxsize=8)
def _transformers(metric_crs: str) -> Tuple[Transformer, Transformer]:
    """WGS84 <-> metric CRS transformer pair, cached per CRS."""
    to_metric = Transformer.from_crs(CRS_WGS84, metric_crs, always_xy=True)
    to_wgs84 = Transformer.from_crs(metric_crs, CRS_WGS84, always_xy=True)
    return to_metric, to_wgs84


def to_shape(geometry: GeometryLike) -> BaseGeometry:
    """Build a shapely geometry from a GeoJSON mapping (shapely input passes through)."""
    if isinstance(geometry, BaseGeometry):
        return geometry
    return shape(geometry)


def buffer_meters(
    geometry: GeometryLike,
    meters: float,
    metric_crs: Optional[str] = None,
    resolution: Optional[int] = None,
) -> BaseGeometry:
    """
    Expand a lon/lat geometry outward by a distance in meters.

    The geometry is projected into a metric CRS, buffered there and projected
    back, so the returned polygon is in WGS84 lon/lat like the input.
    """
    metric_crs = metric_crs or zone_settings.metric_crs
    resolution = resolution or zone_settings.buffer_resolution

    to_metric, to_wgs84 = _transformers(metric_crs)
    projected = transform(to_metric.transform, to_shape(geometry))
    buffered = projected.buffer(meters, quad_segs=resolution)
    return transform(to_wgs84.transform, buffered)


def intersects(buffer_a: BaseGeometry, buffer_b: BaseGeometry) -> bool:
    """True if the two regions share at least one point."""
    return bool(buffer_a.intersects(buffer_b))


def union_geometries(geometries: Iterable[GeometryLike]) -> dict:
    """Union polygonal geometries and return the result as a GeoJSON mapping."""
    shapes = [to_shape(geometry) for geometry in geometries]
    merged = unary_union(shapes)
    if not merged.is_valid:
        merged = merged.buffer(0)
    return dict(mapping(merged))
