"""
Zone classification.
Turns raw GeoJSON features into typed AREA / POINT zones.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from offleash_zones.geometry import LatLng, centroid_of

logger = logging.getLogger(__name__)

DEFAULT_ZONE_ID_PREFIX = "zone_"


class ZoneCategory(str, Enum):
    """Processed zone categories. Values are the CODE values used in the dataset."""
    GREEN = "GROEN"
    ORANGE = "ORANJE"


class ZoneKind(str, Enum):
    AREA = "area"
    POINT = "point"


_CATEGORY_ALIASES = {
    "GROEN": ZoneCategory.GREEN,
    "GREEN": ZoneCategory.GREEN,
    "ORANJE": ZoneCategory.ORANGE,
    "ORANGE": ZoneCategory.ORANGE,
}


def parse_category(code: Any) -> Optional[ZoneCategory]:
    """Map a CODE property (Dutch data code or English alias) to a category."""
    if isinstance(code, ZoneCategory):
        return code
    if not isinstance(code, str):
        return None
    return _CATEGORY_ALIASES.get(code.strip().upper())


def parse_area(value: Any) -> Optional[float]:
    """Parse an OPPERVLAKTE value; only positive finite numbers count as an area."""
    if value is None or isinstance(value, bool):
        return None
    try:
        area = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(area) or area <= 0:
        return None
    return area


@dataclass
class Zone:
    """
    A processed zone.

    Every field except ``distance`` is fixed once the zone is created; the
    distance is (re)computed whenever the user position changes.
    """
    id: str
    category: ZoneCategory
    kind: ZoneKind
    centroid: LatLng
    geometry: Optional[Dict[str, Any]] = None
    area: Optional[float] = None
    properties: Dict[str, Any] = field(default_factory=dict)
    source_id: Optional[str] = None
    merged_from: Tuple[str, ...] = ()
    distance: Optional[float] = None

    @property
    def is_merged(self) -> bool:
        return len(self.merged_from) > 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.name,
            "code": self.category.value,
            "kind": self.kind.value,
            "centroid": {"lat": self.centroid.lat, "lng": self.centroid.lng},
            "geometry": self.geometry,
            "area": self.area,
            "source_id": self.source_id,
            "merged_from": list(self.merged_from),
            "is_merged": self.is_merged,
            "distance": self.distance,
        }


@dataclass
class ClassificationResult:
    """AREA and POINT zones in input order, plus the number of skipped features."""
    areas: List[Zone] = field(default_factory=list)
    points: List[Zone] = field(default_factory=list)
    skipped: int = 0

    @property
    def total(self) -> int:
        return len(self.areas) + len(self.points)


def classify_feature(feature: Mapping[str, Any], index: int) -> Optional[Zone]:
    """
    Classify a single raw feature.

    Returns None (never raises) for features that are not processed: unknown
    category, missing geometry or no extractable centroid.
    """
    if not isinstance(feature, Mapping):
        logger.debug(f"Skipping feature {index}: not an object")
        return None

    properties = feature.get("properties") or {}
    if not isinstance(properties, Mapping):
        properties = {}
    geometry = feature.get("geometry")

    category = parse_category(properties.get("CODE"))
    if category is None or not geometry:
        logger.debug(f"Skipping feature {index}: code={properties.get('CODE')!r}, geometry={'yes' if geometry else 'no'}")
        return None

    centroid = centroid_of(geometry)
    if centroid is None:
        logger.debug(f"Skipping feature {index}: no centroid could be extracted")
        return None

    area = parse_area(properties.get("OPPERVLAKTE"))
    zone_id = f"{DEFAULT_ZONE_ID_PREFIX}{index}"
    source_id = feature.get("id")

    if area is not None:
        return Zone(
            id=zone_id,
            category=category,
            kind=ZoneKind.AREA,
            centroid=centroid,
            geometry=dict(geometry),
            area=area,
            properties=dict(properties),
            source_id=None if source_id is None else str(source_id),
            merged_from=(zone_id,),
        )

    return Zone(
        id=zone_id,
        category=category,
        kind=ZoneKind.POINT,
        centroid=centroid,
        properties=dict(properties),
        source_id=None if source_id is None else str(source_id),
        merged_from=(zone_id,),
    )


def classify_features(features: Iterable[Mapping[str, Any]]) -> ClassificationResult:
    """Split raw features into AREA and POINT zones, preserving input order."""
    result = ClassificationResult()

    for index, feature in enumerate(features):
        zone = classify_feature(feature, index)
        if zone is None:
            result.skipped += 1
        elif zone.kind is ZoneKind.AREA:
            result.areas.append(zone)
        else:
            result.points.append(zone)

    logger.info(
        f"Initial processing: {len(result.areas)} area zones, "
        f"{len(result.points)} point zones, {result.skipped} skipped"
    )
    return result
