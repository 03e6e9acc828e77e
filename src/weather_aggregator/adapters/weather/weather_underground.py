from __future__ import annotations

import logging

from ...domain.units import celsius_to_kelvin
from .base import ProviderConfigError
from .transport import JsonFetcher, coerce_float, fetch_json

LOGGER = logging.getLogger(__name__)

WEATHER_UNDERGROUND_URL = "http://api.wunderground.com/api"


class WeatherUndergroundProvider:
    """Current observations from Weather Underground, reported in Celsius."""

    name = "Weather Underground"

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = WEATHER_UNDERGROUND_URL,
        fetch: JsonFetcher = fetch_json,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._fetch = fetch

    def temperature(self, city: str) -> float:
        if not self._api_key:
            raise ProviderConfigError("Weather Underground API key must be set")

        payload = self._fetch(f"{self._base_url}/{self._api_key}/conditions/q/{city}.json")
        observation = payload.get("current_observation")
        if not isinstance(observation, dict):
            observation = {}
        celsius = coerce_float(observation.get("temp_c"), field_name="current_observation.temp_c")

        kelvin = celsius_to_kelvin(celsius)
        LOGGER.info("%s responded with %.2fK for %s", self.name, kelvin, city)
        return kelvin
