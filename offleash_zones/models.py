"""
Pydantic models for API requests and responses.
Ensures consistent response structure and auto-generates OpenAPI documentation.
"""

from typing import List, Any, Optional, Dict
from pydantic import BaseModel, Field


class CentroidResponse(BaseModel):
    lat: float
    lng: float


class ZoneResponse(BaseModel):
    """A processed zone"""
    id: str = Field(..., description="Zone id, unique within a processing run")
    category: str = Field(..., description="GREEN or ORANGE")
    code: str = Field(..., description="Dataset CODE value (GROEN or ORANJE)")
    kind: str = Field(..., description="'area' or 'point'")
    centroid: CentroidResponse = Field(..., description="Representative coordinate")
    geometry: Optional[Dict[str, Any]] = Field(None, description="GeoJSON geometry (area zones only)")
    area: Optional[float] = Field(None, description="Area in square meters (area zones only)")
    source_id: Optional[str] = Field(None, description="Feature id in the source dataset")
    merged_from: List[str] = Field(default_factory=list, description="Ids of the zones combined into this one")
    is_merged: bool = Field(False, description="Whether this zone combines several zones")
    distance: Optional[float] = Field(None, description="Distance from the user in km, when known")


class ZoneListResponse(BaseModel):
    zones: List[ZoneResponse]
    total: int = Field(..., description="Number of zones returned")
    version: int = Field(..., description="Store version the list was read from")


class NearestZonesResponse(BaseModel):
    zones: List[ZoneResponse] = Field(..., description="Nearest zones, closest first")
    position: Dict[str, Any] = Field(..., description="Position the ranking was computed for")


class PositionRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy_meters: Optional[float] = Field(None, alias="accuracyMeters")

    model_config = {"populate_by_name": True}


class SelectionResponse(BaseModel):
    selected: Optional[ZoneResponse] = None


class ReloadResponse(BaseModel):
    total_zones: int
    version: int
    source: str
