"""Export processed zones as a GeoDataFrame / GeoJSON for rendering layers."""

import json
from typing import Any, Dict, Iterable

import geopandas as gpd
import pandas as pd
from shapely.geometry import Point

from offleash_zones.classifier import Zone
from offleash_zones.geometry import CRS_WGS84, to_shape

COLUMNS = ["id", "category", "code", "kind", "area", "centroid_lat", "centroid_lng",
           "merged_count", "source_id", "distance"]


def zones_to_geodataframe(zones: Iterable[Zone]) -> gpd.GeoDataFrame:
    """
    One row per zone. AREA zones keep their polygon, POINT zones are
    represented by their centroid.
    """
    rows = []
    geometries = []
    for zone in zones:
        rows.append({
            "id": zone.id,
            "category": zone.category.name,
            "code": zone.category.value,
            "kind": zone.kind.value,
            "area": zone.area,
            "centroid_lat": zone.centroid.lat,
            "centroid_lng": zone.centroid.lng,
            "merged_count": len(zone.merged_from),
            "source_id": zone.source_id,
            "distance": zone.distance,
        })
        if zone.geometry:
            geometries.append(to_shape(zone.geometry))
        else:
            geometries.append(Point(zone.centroid.lng, zone.centroid.lat))

    df = pd.DataFrame(rows, columns=COLUMNS)
    gdf = gpd.GeoDataFrame(df, geometry=geometries, crs=CRS_WGS84)
    gdf.index = list(df["id"])
    return gdf


def zones_to_feature_collection(zones: Iterable[Zone]) -> Dict[str, Any]:
    """Processed zones as a GeoJSON FeatureCollection dict."""
    return json.loads(zones_to_geodataframe(zones).to_json())
