"""
Settings API endpoints: third-party API keys.
"""

from fastapi import APIRouter, Depends

from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.guards import require_route
from fleet_backend.app.core.redis_client import get_redis
from fleet_backend.app.schemas.settings import ApiKeysStatus, ApiKeysUpdate
from fleet_backend.app.services.config_store import ConfigStore

router = APIRouter(prefix="/settings", tags=["Settings"])


async def get_config_store(redis=Depends(get_redis)) -> ConfigStore:
    store = ConfigStore.from_settings(redis)
    await store.load()
    return store


def _status(store: ConfigStore) -> ApiKeysStatus:
    return ApiKeysStatus(**store.status(), mapbox_token=store.get_mapbox_token())


@router.get("/api-keys", response_model=ApiKeysStatus)
async def get_api_keys(
    session: CurrentSession = Depends(require_route("settings")),
    store: ConfigStore = Depends(get_config_store)
):
    """Which keys are configured. Only the public map token is returned."""
    return _status(store)


@router.put("/api-keys", response_model=ApiKeysStatus)
async def update_api_keys(
    payload: ApiKeysUpdate,
    session: CurrentSession = Depends(require_route("settings")),
    store: ConfigStore = Depends(get_config_store)
):
    await store.update(mapbox=payload.mapbox, weather=payload.weather, fuel=payload.fuel)
    return _status(store)
