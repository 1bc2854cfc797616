"""
API key configuration store.

Holds the mapping token and the optional weather/fuel-price keys. The
environment wins over stored values for the mapping token; stored values
are kept as one JSON document in Redis. Consumers subscribe and are told
about every change instead of polling.
"""

import json
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Union

from pydantic import BaseModel

from fleet_backend.app.core.config import settings
from fleet_backend.app.core.exceptions import ValidationFailedError

logger = logging.getLogger(__name__)

MAPBOX_TOKEN_PREFIX = "pk."
API_KEYS_REDIS_KEY = "config:api_keys"

Listener = Callable[["ApiKeys"], Union[None, Awaitable[None]]]


class ApiKeys(BaseModel):
    mapbox: Optional[str] = None
    weather: Optional[str] = None
    fuel: Optional[str] = None


def is_valid_mapbox_token(token: Optional[str]) -> bool:
    return bool(token) and token.startswith(MAPBOX_TOKEN_PREFIX)


class ConfigStore:
    def __init__(
        self,
        redis,
        env_mapbox_token: Optional[str] = None,
        env_weather_api_key: Optional[str] = None,
        env_fuel_api_key: Optional[str] = None,
    ):
        self._redis = redis
        self._env = ApiKeys(mapbox=env_mapbox_token, weather=env_weather_api_key, fuel=env_fuel_api_key)
        self._stored = ApiKeys()
        self._listeners: List[Listener] = []

    @classmethod
    def from_settings(cls, redis) -> "ConfigStore":
        return cls(
            redis,
            env_mapbox_token=settings.mapbox_access_token,
            env_weather_api_key=settings.weather_api_key,
            env_fuel_api_key=settings.fuel_api_key,
        )

    async def load(self) -> ApiKeys:
        """Read stored keys from Redis. A corrupt document is treated as empty."""
        raw = await self._redis.get(API_KEYS_REDIS_KEY)
        if raw:
            try:
                self._stored = ApiKeys(**json.loads(raw))
            except (ValueError, TypeError) as e:
                logger.error("Error loading API keys: %s", e)
                self._stored = ApiKeys()
        return self.keys

    @property
    def keys(self) -> ApiKeys:
        mapbox = None
        if is_valid_mapbox_token(self._env.mapbox):
            mapbox = self._env.mapbox
        elif is_valid_mapbox_token(self._stored.mapbox):
            mapbox = self._stored.mapbox
        return ApiKeys(
            mapbox=mapbox,
            weather=self._env.weather or self._stored.weather,
            fuel=self._env.fuel or self._stored.fuel,
        )

    def get_mapbox_token(self) -> Optional[str]:
        return self.keys.mapbox

    def get_weather_api_key(self) -> Optional[str]:
        return self.keys.weather

    def get_fuel_api_key(self) -> Optional[str]:
        return self.keys.fuel

    def status(self) -> Dict[str, bool]:
        keys = self.keys
        return {
            "mapbox_configured": bool(keys.mapbox),
            "weather_configured": bool(keys.weather),
            "fuel_configured": bool(keys.fuel),
            "mapbox_from_environment": is_valid_mapbox_token(self._env.mapbox),
        }

    async def update(
        self,
        mapbox: Optional[str] = None,
        weather: Optional[str] = None,
        fuel: Optional[str] = None,
    ) -> ApiKeys:
        """
        Store new key values. ``None`` leaves a key unchanged, an empty
        string clears it.

        Raises:
            ValidationFailedError: if the mapping token lacks the public prefix
        """
        data = self._stored.model_dump()
        if mapbox is not None:
            mapbox = mapbox.strip()
            if mapbox and not is_valid_mapbox_token(mapbox):
                raise ValidationFailedError(
                    f"Invalid Mapbox token. Public tokens start with '{MAPBOX_TOKEN_PREFIX}'",
                    field="mapbox",
                )
            data["mapbox"] = mapbox or None
        if weather is not None:
            data["weather"] = weather.strip() or None
        if fuel is not None:
            data["fuel"] = fuel.strip() or None

        self._stored = ApiKeys(**data)
        await self._redis.set(API_KEYS_REDIS_KEY, self._stored.model_dump_json())
        logger.info("API keys updated: %s", self.status())

        await self._notify()
        return self.keys

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _notify(self) -> None:
        keys = self.keys
        for listener in list(self._listeners):
            result = listener(keys)
            if result is not None and hasattr(result, "__await__"):
                await result
