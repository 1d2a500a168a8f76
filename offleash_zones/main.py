from contextlib import asynccontextmanager
from fastapi import FastAPI
import logging

from offleash_zones.loader import ZoneDataError, load_feature_collection
from offleash_zones.position import StaticPositionSupplier
from offleash_zones.routers.api import api_router
from offleash_zones.settings import app_settings, get_zone_data_source
from offleash_zones.store import ZoneStore

# Configure logging
logging.basicConfig(
    level=logging.INFO if not app_settings.debug else logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def load_initial_zones(store: ZoneStore) -> bool:
    """Load the configured dataset into the store. Returns False when nothing was loaded."""
    source = get_zone_data_source()
    if source is None:
        logger.warning("No zone data source found; starting with an empty zone list")
        return False

    try:
        store.load_document(load_feature_collection(source))
    except ZoneDataError as e:
        logger.error(f"Failed to initialize zones: {e}")
        return False
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI app.
    Loads the zone dataset and applies the static position when one is configured.
    """
    logger.info(f"Starting {app_settings.app_name} v{app_settings.app_version}")

    store = app.state.zone_store
    load_initial_zones(store)
    store.refresh_position(StaticPositionSupplier())

    yield

    logger.info("Shutting down")


app = FastAPI(
    title=app_settings.app_name,
    version=app_settings.app_version,
    lifespan=lifespan,
)
app.state.zone_store = ZoneStore()
app.include_router(api_router)


@app.get("/health")
async def health():
    store = app.state.zone_store
    return {
        "status": "ok",
        "zones": len(store.zones()),
        "version": store.version,
        "has_position": store.position is not None,
    }
