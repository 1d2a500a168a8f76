# Thread-safe zone store using param (reactive) + a lock
import param
import threading
import logging
from typing import Any, List, Mapping, Optional, Tuple

from offleash_zones.classifier import Zone
from offleash_zones.loader import parse_feature_collection
from offleash_zones.pipeline import process_feature_collection
from offleash_zones.position import PositionSupplier, UserPosition, fetch_position
from offleash_zones.ranking import RankedZone, annotate_distance, rank_nearest
from offleash_zones.settings import ZoneSettings, zone_settings

logger = logging.getLogger(__name__)


class ZoneStore(param.Parameterized):
    """
    Holds the processed zone list and everything derived from the user position.

    The zone list and the nearest list are replaced as a whole (copy-on-write),
    so readers always see either the previous or the new complete list. The
    only in-place change is the distance of the selected zone.
    """

    # Internal "version" bumped on every replace to trigger re-computation downstream
    version = param.Integer(default=0)

    # Currently selected zone (tracked on behalf of the rendering layer)
    selected_zone_id = param.String(default=None, allow_None=True)

    def __init__(self, settings: Optional[ZoneSettings] = None, **kwargs):
        super().__init__(**kwargs)
        self._lock = threading.Lock()
        self.settings = settings or zone_settings
        self._zones: Tuple[Zone, ...] = ()
        self._nearest: Tuple[RankedZone, ...] = ()
        self._position: Optional[UserPosition] = None

    # ---- Data load ----
    def load_document(self, document: Any) -> List[Zone]:
        """
        Run classification + merge over a FeatureCollection and swap in the result.

        Raises ZoneDataError when the document is not a FeatureCollection.
        """
        document = parse_feature_collection(document)
        zones = process_feature_collection(document, settings=self.settings)
        self.replace(zones)
        return zones

    def replace(self, zones: List[Zone]):
        """Replace the zone list and recompute position-derived state."""
        new_zones = tuple(zones)
        with self._lock:
            self._zones = new_zones
            if self.selected_zone_id is not None and self._find(self.selected_zone_id) is None:
                self.selected_zone_id = None
            self._recompute_locked()
            logger.info(f"ZoneStore updated: {len(new_zones)} zones")
            self.version += 1

    # ---- Readers ----
    def zones(self) -> List[Zone]:
        return list(self._zones)

    def get_zone(self, zone_id: str) -> Optional[Zone]:
        return self._find(zone_id)

    def nearest(self) -> List[RankedZone]:
        return list(self._nearest)

    @property
    def position(self) -> Optional[UserPosition]:
        return self._position

    # ---- Position ----
    def update_position(self, position: Optional[UserPosition]) -> List[RankedZone]:
        """
        Set the user position and recompute the nearest list and the selected
        zone's distance. A None position means 'unavailable': the last ranking
        is kept and nothing is recomputed.
        """
        if position is None:
            logger.info("Position unavailable, skipping ranking")
            return self.nearest()

        with self._lock:
            self._position = position
            self._recompute_locked()
            return list(self._nearest)

    def refresh_position(self, supplier: PositionSupplier) -> Optional[UserPosition]:
        """Ask a supplier for the current position and apply it when available."""
        position = fetch_position(supplier)
        self.update_position(position)
        return position

    # ---- Selection ----
    def select(self, zone_id: str) -> Optional[Zone]:
        """Select a zone by id; its distance is annotated when a position is known."""
        with self._lock:
            zone = self._find(zone_id)
            if zone is None:
                return None
            self.selected_zone_id = zone.id
            annotate_distance(zone, self._position)
            logger.info(f"Zone selected. ID: {zone.id}")
            return zone

    def clear_selection(self):
        with self._lock:
            self.selected_zone_id = None

    def selected_zone(self) -> Optional[Zone]:
        if self.selected_zone_id is None:
            return None
        return self._find(self.selected_zone_id)

    # ---- Internals ----
    def _find(self, zone_id: str) -> Optional[Zone]:
        for zone in self._zones:
            if zone.id == zone_id:
                return zone
        return None

    def _recompute_locked(self):
        if self._position is None:
            self._nearest = ()
            return
        logger.debug("Calculating distances...")
        self._nearest = tuple(rank_nearest(self._zones, self._position, self.settings.max_nearest))
        if self.selected_zone_id is not None:
            annotate_distance(self._find(self.selected_zone_id), self._position)


def create_zone_store(document: Optional[Mapping[str, Any]] = None, settings: Optional[ZoneSettings] = None) -> ZoneStore:
    store = ZoneStore(settings=settings)
    if document is not None:
        store.load_document(document)
    return store
