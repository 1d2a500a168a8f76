"""Haversine distances and nearest-zone ranking."""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from offleash_zones.classifier import Zone
from offleash_zones.position import UserPosition

EARTH_RADIUS_KM = 6371


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers between two lat/lng points (haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        0.5 - math.cos(d_lat) / 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * (1 - math.cos(d_lon)) / 2
    )
    return EARTH_RADIUS_KM * 2 * math.asin(math.sqrt(min(1.0, max(0.0, a))))


def distance_to_zone(position: UserPosition, zone: Zone) -> float:
    return distance_km(position.latitude, position.longitude, zone.centroid.lat, zone.centroid.lng)


@dataclass(frozen=True)
class RankedZone:
    zone: Zone
    distance: float

    def to_dict(self) -> dict:
        data = self.zone.to_dict()
        data["distance"] = self.distance
        return data


def rank_nearest(zones: Iterable[Zone], position: UserPosition, k: int) -> List[RankedZone]:
    """
    Rank zones by distance from ``position`` and return the ``k`` nearest.

    The sort is stable, so zones at equal distance keep their relative order.
    """
    if k <= 0:
        return []
    ranked = [RankedZone(zone=zone, distance=distance_to_zone(position, zone)) for zone in zones]
    ranked.sort(key=lambda item: item.distance)
    return ranked[:k]


def annotate_distance(zone: Optional[Zone], position: Optional[UserPosition]) -> Optional[float]:
    """Overwrite a single zone's distance. No-op when zone or position is missing."""
    if zone is None or position is None:
        return None
    zone.distance = distance_to_zone(position, zone)
    return zone.distance
