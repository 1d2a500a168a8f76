"""User position model and position suppliers."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from offleash_zones.settings import PositionSettings, position_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserPosition:
    latitude: float
    longitude: float
    accuracy_meters: Optional[float] = None


# Anything that can be called to obtain the current position, None when unavailable
PositionSupplier = Callable[[], Optional[UserPosition]]


def position_from_mapping(data: Optional[Mapping[str, Any]]) -> Optional[UserPosition]:
    """
    Build a UserPosition from a location payload.

    Accepts ``{latitude, longitude, accuracyMeters}`` (snake_case and
    ``accuracy`` also accepted) or the same keys nested under ``coords``.
    Returns None when the payload has no usable coordinates.
    """
    if not isinstance(data, Mapping):
        return None
    if isinstance(data.get("coords"), Mapping):
        data = data["coords"]

    try:
        latitude = float(data["latitude"])
        longitude = float(data["longitude"])
    except (KeyError, TypeError, ValueError):
        return None

    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        return None
    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        return None

    accuracy = data.get("accuracyMeters", data.get("accuracy_meters", data.get("accuracy")))
    try:
        accuracy = float(accuracy) if accuracy is not None else None
    except (TypeError, ValueError):
        accuracy = None

    return UserPosition(latitude=latitude, longitude=longitude, accuracy_meters=accuracy)


class StaticPositionSupplier:
    """Supplies a fixed position from settings (e.g. for kiosks or local testing)."""

    def __init__(self, settings: Optional[PositionSettings] = None):
        self.settings = settings or position_settings

    def __call__(self) -> Optional[UserPosition]:
        if self.settings.static_latitude is None or self.settings.static_longitude is None:
            return None
        return UserPosition(
            latitude=self.settings.static_latitude,
            longitude=self.settings.static_longitude,
            accuracy_meters=self.settings.static_accuracy_meters,
        )


def fetch_position(supplier: PositionSupplier) -> Optional[UserPosition]:
    """Call a supplier; a failing supplier counts as 'position unavailable'."""
    try:
        return supplier()
    except Exception as e:
        logger.error(f"Error getting location: {e}")
        return None
