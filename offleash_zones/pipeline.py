"""Classification + merge pass over a FeatureCollection."""

from typing import Any, Iterable, List, Mapping, Optional

from offleash_zones.classifier import Zone, classify_features
from offleash_zones.merge import MergeStrategy, merge_zones
from offleash_zones.settings import ZoneSettings, zone_settings


def process_features(
    features: Iterable[Mapping[str, Any]],
    settings: Optional[ZoneSettings] = None,
    merge_distance_meters: Optional[float] = None,
    strategy: Optional[MergeStrategy] = None,
) -> List[Zone]:
    """Classify raw features and merge nearby AREA zones. Deterministic for identical input."""
    settings = settings or zone_settings
    classified = classify_features(features)
    return merge_zones(
        classified.areas,
        classified.points,
        merge_distance_meters=(
            merge_distance_meters if merge_distance_meters is not None else settings.merge_distance_meters
        ),
        strategy=strategy or settings.merge_strategy,
        union_geometry=settings.union_merged_geometry,
        metric_crs=settings.metric_crs,
    )


def process_feature_collection(document: Mapping[str, Any], **kwargs) -> List[Zone]:
    return process_features(document.get("features") or [], **kwargs)
