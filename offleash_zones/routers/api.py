"""
API Router for the Off-Leash Zones service
Exposes the processed zones, nearest-zone ranking and selection
"""

from fastapi import APIRouter, HTTPException, Request, Depends
import logging
from typing import Dict, Optional

from offleash_zones.classifier import parse_category
from offleash_zones.export import zones_to_feature_collection
from offleash_zones.loader import ZoneDataError, load_feature_collection
from offleash_zones.models import (
    NearestZonesResponse, PositionRequest, ReloadResponse,
    SelectionResponse, ZoneListResponse, ZoneResponse
)
from offleash_zones.position import UserPosition
from offleash_zones.ranking import rank_nearest
from offleash_zones.settings import get_zone_data_source
from offleash_zones.store import ZoneStore
from offleash_zones.styles import ZONE_STYLES, ZoneStyle

# Configure logger
logger = logging.getLogger(__name__)

api_router = APIRouter(prefix="/api/v1")


def get_zone_store(request: Request) -> ZoneStore:
    """The store is owned by the application and shared by all requests"""
    return request.app.state.zone_store


def _position_dict(position: UserPosition) -> dict:
    return {
        "latitude": position.latitude,
        "longitude": position.longitude,
        "accuracy_meters": position.accuracy_meters,
    }


@api_router.get("/zones", response_model=ZoneListResponse)
async def list_zones(category: Optional[str] = None, store: ZoneStore = Depends(get_zone_store)):
    """Get the processed zone list, optionally for a single category"""
    zones = store.zones()

    if category is not None:
        parsed = parse_category(category)
        if parsed is None:
            raise HTTPException(status_code=400, detail=f"Unknown category: {category}")
        zones = [zone for zone in zones if zone.category is parsed]

    return ZoneListResponse(
        zones=[ZoneResponse(**zone.to_dict()) for zone in zones],
        total=len(zones),
        version=store.version,
    )


@api_router.get("/zones/geojson")
async def zones_geojson(store: ZoneStore = Depends(get_zone_store)):
    """Get the processed zones as a GeoJSON FeatureCollection"""
    return zones_to_feature_collection(store.zones())


@api_router.get("/zones/nearest", response_model=NearestZonesResponse)
async def nearest_zones(limit: Optional[int] = None, store: ZoneStore = Depends(get_zone_store)):
    """Get the zones nearest to the last known user position"""
    position = store.position
    if position is None:
        raise HTTPException(status_code=409, detail="User position unknown. POST /api/v1/position first.")

    if limit is None:
        ranked = store.nearest()
    else:
        if limit < 0:
            raise HTTPException(status_code=400, detail="limit must be >= 0")
        ranked = rank_nearest(store.zones(), position, limit)

    return NearestZonesResponse(
        zones=[ZoneResponse(**item.to_dict()) for item in ranked],
        position=_position_dict(position),
    )


@api_router.get("/zones/{zone_id}", response_model=ZoneResponse)
async def get_zone(zone_id: str, store: ZoneStore = Depends(get_zone_store)):
    zone = store.get_zone(zone_id)
    if zone is None:
        raise HTTPException(status_code=404, detail=f"Zone not found: {zone_id}")
    return ZoneResponse(**zone.to_dict())


@api_router.post("/position", response_model=NearestZonesResponse)
async def update_position(request: PositionRequest, store: ZoneStore = Depends(get_zone_store)):
    """Update the user position and return the recomputed nearest zones"""
    position = UserPosition(
        latitude=request.latitude,
        longitude=request.longitude,
        accuracy_meters=request.accuracy_meters,
    )
    logger.info(f"Position updated: {position.latitude}, {position.longitude}")
    ranked = store.update_position(position)

    return NearestZonesResponse(
        zones=[ZoneResponse(**item.to_dict()) for item in ranked],
        position=_position_dict(position),
    )


@api_router.post("/zones/{zone_id}/select", response_model=SelectionResponse)
async def select_zone(zone_id: str, store: ZoneStore = Depends(get_zone_store)):
    """Select a zone; its distance is filled in when the user position is known"""
    zone = store.select(zone_id)
    if zone is None:
        raise HTTPException(status_code=404, detail=f"Zone not found: {zone_id}")
    return SelectionResponse(selected=ZoneResponse(**zone.to_dict()))


@api_router.get("/selection", response_model=SelectionResponse)
async def get_selection(store: ZoneStore = Depends(get_zone_store)):
    zone = store.selected_zone()
    return SelectionResponse(selected=ZoneResponse(**zone.to_dict()) if zone else None)


@api_router.delete("/selection", response_model=SelectionResponse)
async def clear_selection(store: ZoneStore = Depends(get_zone_store)):
    store.clear_selection()
    return SelectionResponse(selected=None)


@api_router.get("/styles", response_model=Dict[str, ZoneStyle])
async def get_styles():
    """Get the display style per zone category"""
    return ZONE_STYLES


@api_router.post("/reload", response_model=ReloadResponse)
async def reload_zones(store: ZoneStore = Depends(get_zone_store)):
    """Reload the zone dataset from the configured source"""
    source = get_zone_data_source()
    if source is None:
        raise HTTPException(status_code=404, detail="Zone data source not configured")

    try:
        document = load_feature_collection(source)
        zones = store.load_document(document)
    except ZoneDataError as e:
        logger.error(f"Failed to load zone data: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return ReloadResponse(total_zones=len(zones), version=store.version, source=str(source))
