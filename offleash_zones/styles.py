"""Display styles per zone category, consumed by the map/list rendering layers."""

from typing import Any, Dict

from pydantic import BaseModel, Field

from offleash_zones.classifier import ZoneCategory, parse_category


class ZoneStyle(BaseModel):
    """Polygon fill/stroke for AREA zones and a marker color for POINT zones"""
    fill_color: str = Field(..., description="Polygon fill color")
    stroke_color: str = Field(..., description="Polygon outline color")
    stroke_width: float = Field(..., description="Polygon outline width in pixels")
    point_color: str = Field(..., description="Marker color for point zones")
    name: str = Field("", description="Legend label")


ZONE_STYLES: Dict[str, ZoneStyle] = {
    ZoneCategory.GREEN.name: ZoneStyle(
        fill_color="rgba(0, 255, 0, 0.3)",
        stroke_color="rgba(0, 255, 0, 0.8)",
        stroke_width=1,
        point_color="rgba(0, 255, 0, 0.8)",
        name="Off-leash Zone (Green)",
    ),
    ZoneCategory.ORANGE.name: ZoneStyle(
        fill_color="rgba(255, 165, 0, 0.3)",
        stroke_color="rgba(255, 165, 0, 0.8)",
        stroke_width=1,
        point_color="rgba(255, 165, 0, 0.8)",
        name="Off-leash Zone (Orange)",
    ),
    "DEFAULT": ZoneStyle(
        fill_color="transparent",
        stroke_color="transparent",
        stroke_width=0,
        point_color="transparent",
        name="",
    ),
}


def style_for(category: Any) -> ZoneStyle:
    """Style for a category, data code (GROEN/ORANJE) or alias; DEFAULT otherwise."""
    parsed = parse_category(category)
    if parsed is None:
        return ZONE_STYLES["DEFAULT"]
    return ZONE_STYLES[parsed.name]
