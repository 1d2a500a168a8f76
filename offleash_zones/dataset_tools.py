"""
Utilities for preparing and inspecting the raw zone dataset.
Used by the scripts in scripts/.
"""

import json
import math
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from offleash_zones.classifier import ZoneCategory
from offleash_zones.geometry import LatLng, centroid_of

logger = logging.getLogger(__name__)

DEFAULT_CODES = (ZoneCategory.GREEN.value, ZoneCategory.ORANGE.value)


@dataclass
class FilterStats:
    original_features: int
    filtered_features: int
    original_bytes: int
    filtered_bytes: int
    counts_by_code: Dict[str, int] = field(default_factory=dict)

    @property
    def reduction_percent(self) -> float:
        if self.original_bytes == 0:
            return 0.0
        return round((self.original_bytes - self.filtered_bytes) / self.original_bytes * 100, 2)


@dataclass(frozen=True)
class LargeZone:
    id: str
    area: float
    coordinate: LatLng


def _code_of(feature: Any) -> Optional[str]:
    if not isinstance(feature, Mapping):
        return None
    properties = feature.get("properties") or {}
    if not isinstance(properties, Mapping):
        return None
    return properties.get("CODE")


def _json_size(document: Mapping[str, Any]) -> int:
    return len(json.dumps(document, separators=(",", ":")).encode("utf-8"))


def filter_feature_collection(
    document: Mapping[str, Any],
    codes: Iterable[str] = DEFAULT_CODES,
) -> Tuple[Dict[str, Any], FilterStats]:
    """
    Keep only the features whose CODE is in ``codes``.

    All other top-level members of the document are preserved.
    """
    wanted = set(codes)
    features = document.get("features") or []
    kept = [feature for feature in features if _code_of(feature) in wanted]

    filtered = {**document, "features": kept}

    counts: Dict[str, int] = {code: 0 for code in sorted(wanted)}
    for feature in kept:
        counts[_code_of(feature)] += 1

    stats = FilterStats(
        original_features=len(features),
        filtered_features=len(kept),
        original_bytes=_json_size(document),
        filtered_bytes=_json_size(filtered),
        counts_by_code=counts,
    )
    logger.info(f"Filtered data: {stats.filtered_features} of {stats.original_features} features")
    return filtered, stats


def largest_zones(
    document: Mapping[str, Any],
    code: str = ZoneCategory.ORANGE.value,
    limit: int = 5,
) -> List[LargeZone]:
    """
    Features of one CODE with a numeric OPPERVLAKTE and a usable coordinate,
    largest area first.
    """
    zones = []
    for feature in document.get("features") or []:
        if _code_of(feature) != code:
            continue

        raw_area = feature["properties"].get("OPPERVLAKTE")
        if raw_area is None:
            continue
        try:
            area = float(raw_area)
        except (TypeError, ValueError):
            logger.debug(f"Could not convert OPPERVLAKTE {raw_area!r} to number for feature {feature.get('id')}")
            continue
        if math.isnan(area):
            continue

        coordinate = centroid_of(feature.get("geometry"))
        if coordinate is None:
            continue

        zones.append(LargeZone(id=str(feature.get("id") or "N/A"), area=area, coordinate=coordinate))

    zones.sort(key=lambda zone: zone.area, reverse=True)
    return zones[:max(limit, 0)]
