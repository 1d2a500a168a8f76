"""
Proximity merge of AREA zones.

Nearby AREA zones of the same category are collapsed into a single merged
zone. Two zones are "nearby" when their buffers, each grown by half the merge
distance, intersect, i.e. when they lie within the full merge distance of
each other.

Two grouping strategies are available:

- ``greedy``: single pass in input order. An unclaimed zone starts a group and
  claims every later unclaimed zone near its own geometry. Zones claimed by an
  earlier group are never reconsidered, so the result depends on input order.
- ``connected``: groups are the connected components of the "nearby" relation
  over all pairs, which makes the result independent of input order.

Merged zones carry the summed area and the first member's geometry and
centroid. With ``union_geometry`` the geometry is the union of all members.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from shapely.geometry.base import BaseGeometry

from offleash_zones.classifier import Zone, ZoneCategory, ZoneKind
from offleash_zones.geometry import buffer_meters, centroid_of, intersects, union_geometries
from offleash_zones.settings import zone_settings

logger = logging.getLogger(__name__)

MERGED_ZONE_ID_PREFIX = "merged_"


class MergeStrategy(str, Enum):
    GREEDY = "greedy"
    CONNECTED = "connected"


def parse_merge_strategy(value: Optional[str]) -> MergeStrategy:
    """Resolve a strategy name, falling back to the configured default."""
    if isinstance(value, MergeStrategy):
        return value
    name = (value or zone_settings.merge_strategy or MergeStrategy.GREEDY.value).strip().lower()
    try:
        return MergeStrategy(name)
    except ValueError:
        logger.warning(f"Unknown merge strategy {name!r}, using greedy")
        return MergeStrategy.GREEDY


class _BufferCache:
    """Buffers computed once per zone per pass. A failed buffer is cached as None."""

    def __init__(self, zones: Sequence[Zone], meters: float, metric_crs: Optional[str]):
        self._zones = zones
        self._meters = meters
        self._metric_crs = metric_crs
        self._buffers: Dict[int, Optional[BaseGeometry]] = {}

    def get(self, index: int) -> Optional[BaseGeometry]:
        if index not in self._buffers:
            zone = self._zones[index]
            try:
                self._buffers[index] = buffer_meters(zone.geometry, self._meters, metric_crs=self._metric_crs)
            except Exception as e:
                logger.warning(f"Could not buffer zone {zone.id}: {e}")
                self._buffers[index] = None
        return self._buffers[index]

    def nearby(self, i: int, j: int) -> bool:
        """Pairwise proximity test; any geometry failure means 'not nearby'."""
        buffer_i = self.get(i)
        buffer_j = self.get(j)
        if buffer_i is None or buffer_j is None:
            return False
        try:
            return intersects(buffer_i, buffer_j)
        except Exception as e:
            logger.warning(f"Error comparing zones {self._zones[i].id} and {self._zones[j].id}: {e}")
            return False


def _greedy_groups(count: int, cache: _BufferCache) -> List[List[int]]:
    claimed = set()
    groups = []

    for i in range(count):
        if i in claimed:
            continue

        group = [i]
        claimed.add(i)

        # The running geometry stays the anchor's own geometry
        for j in range(i + 1, count):
            if j in claimed:
                continue
            if cache.nearby(i, j):
                group.append(j)
                claimed.add(j)

        groups.append(group)

    return groups


def _connected_groups(count: int, cache: _BufferCache) -> List[List[int]]:
    parent = list(range(count))

    def find(x: int) -> int:
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    for i in range(count):
        for j in range(i + 1, count):
            root_i, root_j = find(i), find(j)
            if root_i == root_j:
                continue
            if cache.nearby(i, j):
                # Keep the smallest index as root so it anchors the group
                parent[max(root_i, root_j)] = min(root_i, root_j)

    components: Dict[int, List[int]] = {}
    for i in range(count):
        components.setdefault(find(i), []).append(i)
    return [components[root] for root in sorted(components)]


def _merged_zone(
    members: Sequence[Zone],
    category: ZoneCategory,
    anchor_index: int,
    union_geometry: bool,
) -> Zone:
    anchor = members[0]
    geometry = anchor.geometry
    centroid = anchor.centroid

    if union_geometry:
        try:
            geometry = union_geometries(member.geometry for member in members)
            centroid = centroid_of(geometry) or anchor.centroid
        except Exception as e:
            logger.warning(f"Could not union geometries for group anchored at {anchor.id}: {e}")
            geometry = anchor.geometry

    return Zone(
        id=f"{MERGED_ZONE_ID_PREFIX}{category.value}_{anchor_index}",
        category=category,
        kind=ZoneKind.AREA,
        centroid=centroid,
        geometry=geometry,
        area=sum(member.area or 0.0 for member in members),
        properties=dict(anchor.properties),
        source_id=anchor.source_id,
        merged_from=tuple(member.id for member in members),
    )


def merge_area_zones(
    zones: Iterable[Zone],
    category: ZoneCategory,
    merge_distance_meters: Optional[float] = None,
    strategy: Optional[MergeStrategy] = None,
    union_geometry: Optional[bool] = None,
    metric_crs: Optional[str] = None,
) -> List[Zone]:
    """
    Merge nearby AREA zones of one category.

    Zones of other categories and POINT zones in ``zones`` are ignored.
    Zones that end up alone in their group are returned unchanged.

    Cost is O(n^2) pairwise comparisons; meant for tens to low hundreds of zones.
    """
    if merge_distance_meters is None:
        merge_distance_meters = zone_settings.merge_distance_meters
    if union_geometry is None:
        union_geometry = zone_settings.union_merged_geometry
    strategy = parse_merge_strategy(strategy)

    candidates = [z for z in zones if z.category is category and z.kind is ZoneKind.AREA]
    logger.info(f"Starting merge for {category.value} areas. Count: {len(candidates)}")

    if len(candidates) < 2:
        return candidates

    cache = _BufferCache(candidates, merge_distance_meters / 2, metric_crs)
    if strategy is MergeStrategy.CONNECTED:
        groups = _connected_groups(len(candidates), cache)
    else:
        groups = _greedy_groups(len(candidates), cache)

    result = []
    for group in groups:
        if len(group) == 1:
            result.append(candidates[group[0]])
            continue
        logger.info(f"Merged {len(group)} areas of type {category.value}")
        members = [candidates[k] for k in group]
        result.append(_merged_zone(members, category, group[0], union_geometry))

    return result


def merge_zones(
    areas: Sequence[Zone],
    points: Sequence[Zone],
    merge_distance_meters: Optional[float] = None,
    strategy: Optional[MergeStrategy] = None,
    union_geometry: Optional[bool] = None,
    metric_crs: Optional[str] = None,
) -> List[Zone]:
    """Merge AREA zones per category (GREEN first, then ORANGE) and append POINT zones."""
    zones: List[Zone] = []
    for category in ZoneCategory:
        zones.extend(
            merge_area_zones(
                areas,
                category,
                merge_distance_meters=merge_distance_meters,
                strategy=strategy,
                union_geometry=union_geometry,
                metric_crs=metric_crs,
            )
        )
    zones.extend(points)
    logger.info(f"Final zones count: {len(zones)}")
    return zones
