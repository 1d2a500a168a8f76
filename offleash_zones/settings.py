"""
Settings and Configuration for the Off-Leash Zones service
Centralized configuration management using Pydantic BaseSettings
"""

from pydantic_settings import BaseSettings
from typing import Optional
import os


class AppSettings(BaseSettings):
    """Main application settings"""

    # Application settings
    app_name: str = "Off-Leash Zones"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    class Config:
        env_prefix = "OFFLEASH_APP_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


class ZoneSettings(BaseSettings):
    """Zone dataset and processing settings"""

    # Dataset location: a local file, or a URL that takes precedence when set
    data_dir: str = "data"
    data_file: str = "amersfoort-hondenkaart-filtered.json"
    data_url: Optional[str] = None
    request_timeout: float = 30.0

    # Merge settings
    merge_distance_meters: float = 100.0
    merge_strategy: str = "greedy"  # greedy | connected
    union_merged_geometry: bool = False

    # Ranking settings
    max_nearest: int = 5

    # Projection used for meter-based buffering (RD New covers the Netherlands)
    metric_crs: str = "EPSG:28992"
    buffer_resolution: int = 16

    class Config:
        env_prefix = "OFFLEASH_ZONES_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


class PositionSettings(BaseSettings):
    """Static user position (used when no live location source is wired in)"""

    static_latitude: Optional[float] = None
    static_longitude: Optional[float] = None
    static_accuracy_meters: Optional[float] = None

    class Config:
        env_prefix = "OFFLEASH_POSITION_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global settings instances
app_settings = AppSettings()
zone_settings = ZoneSettings()
position_settings = PositionSettings()


def get_data_directory() -> str:
    """Get the data directory path"""

    root_folder = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(root_folder, "..", zone_settings.data_dir)


def get_zone_data_source() -> Optional[str]:
    """
    Get the configured zone dataset source.
    Returns the URL when one is configured, otherwise the first existing local file.
    """
    if zone_settings.data_url:
        return zone_settings.data_url

    possible_paths = [
        os.path.join(get_data_directory(), zone_settings.data_file),  # Local development
        os.path.join(os.getcwd(), zone_settings.data_dir, zone_settings.data_file),  # Alternative
    ]

    for path in possible_paths:
        if os.path.exists(path):
            return os.path.abspath(path)

    return None


# Environment-specific overrides
if os.getenv("ENVIRONMENT") == "production":
    app_settings.debug = False
    app_settings.reload = False
elif os.getenv("ENVIRONMENT") == "development":
    app_settings.debug = True
    app_settings.reload = True
