"""
Zone dataset loading.
Reads a GeoJSON FeatureCollection from a local file or a URL.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

import requests
from pydantic import BaseModel, ValidationError

from offleash_zones.settings import zone_settings

logger = logging.getLogger(__name__)


class ZoneDataError(Exception):
    """The zone dataset could not be loaded or is not a FeatureCollection."""


class FeatureCollectionDocument(BaseModel):
    """Top-level shape of the dataset. Individual features are validated later, leniently."""
    type: Literal["FeatureCollection"]
    features: List[Any]

    model_config = {"extra": "allow"}


def parse_feature_collection(data: Any) -> Dict[str, Any]:
    """Validate a decoded document and return it as a dict."""
    if not isinstance(data, dict):
        raise ZoneDataError("JSON data does not seem to be a valid GeoJSON FeatureCollection")
    try:
        FeatureCollectionDocument.model_validate(data)
    except ValidationError as e:
        raise ZoneDataError(f"JSON data does not seem to be a valid GeoJSON FeatureCollection: {e}") from e
    return data


def _is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


def _read_url(url: str, timeout: float) -> Any:
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except requests.RequestException as e:
        raise ZoneDataError(f"Could not fetch zone data from {url}: {e}") from e
    except ValueError as e:
        raise ZoneDataError(f"Could not decode JSON from {url}: {e}") from e


def _read_file(path: Path) -> Any:
    if not path.exists():
        raise ZoneDataError(f"Zone data file not found at {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ZoneDataError(f"Could not decode JSON from {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ZoneDataError(f"Zone data file {path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise ZoneDataError(f"Error reading file {path}: {e}") from e


def load_feature_collection(source: Union[str, Path], timeout: Optional[float] = None) -> Dict[str, Any]:
    """
    Load and validate a FeatureCollection.

    Args:
        source: Local file path or http(s) URL
        timeout: Request timeout in seconds for URLs (defaults to settings)

    Raises:
        ZoneDataError: when the source is unreadable, not JSON, or not a FeatureCollection
    """
    source_str = str(source)
    logger.info(f"Loading zone data from {source_str}")

    if _is_url(source_str):
        data = _read_url(source_str, timeout or zone_settings.request_timeout)
    else:
        data = _read_file(Path(source_str))

    document = parse_feature_collection(data)
    logger.info(f"Zone data loaded: {len(document['features'])} features")
    return document
