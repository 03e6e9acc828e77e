from __future__ import annotations

import logging

from .transport import JsonFetcher, coerce_float, fetch_json

LOGGER = logging.getLogger(__name__)

OPEN_WEATHER_MAP_URL = "http://api.openweathermap.org/data/2.5/weather"


class OpenWeatherMapProvider:
    """Current conditions from OpenWeatherMap, which already reports Kelvin."""

    name = "OpenWeatherMap"

    def __init__(
        self,
        *,
        base_url: str = OPEN_WEATHER_MAP_URL,
        api_key: str | None = None,
        fetch: JsonFetcher = fetch_json,
    ) -> None:
        self._base_url = base_url
        self._api_key = api_key
        self._fetch = fetch

    def temperature(self, city: str) -> float:
        # City names go into the query string as-is.
        url = f"{self._base_url}?q={city}"
        if self._api_key:
            url = f"{url}&appid={self._api_key}"

        payload = self._fetch(url)
        main = payload.get("main")
        if not isinstance(main, dict):
            main = {}
        kelvin = coerce_float(main.get("temp"), field_name="main.temp")

        LOGGER.info("%s responded with %.2fK for %s", self.name, kelvin, city)
        return kelvin
