from __future__ import annotations

import logging

from .adapters.weather import (
    OpenWeatherMapProvider,
    TemperatureProvider,
    WeatherUndergroundProvider,
)
from .services.aggregator import MultiProviderAggregator
from .settings import AppSettings

LOGGER = logging.getLogger(__name__)


def _build_open_weather_map(settings: AppSettings) -> OpenWeatherMapProvider:
    return OpenWeatherMapProvider(
        base_url=settings.yaml.providers.open_weather_map.base_url,
        api_key=settings.openweathermap_key,
    )


def _build_weather_underground(settings: AppSettings) -> WeatherUndergroundProvider:
    if not settings.weather_underground_key:
        LOGGER.warning("Weather Underground API key is not set; its requests will fail")
    return WeatherUndergroundProvider(
        api_key=settings.weather_underground_key,
        base_url=settings.yaml.providers.weather_underground.base_url,
    )


def build_providers(settings: AppSettings) -> list[TemperatureProvider]:
    providers_settings = settings.yaml.providers
    providers: list[TemperatureProvider] = []
    for provider_name in providers_settings.order:
        if provider_name == "open_weather_map" and providers_settings.open_weather_map.enabled:
            providers.append(_build_open_weather_map(settings))
        elif provider_name == "weather_underground" and providers_settings.weather_underground.enabled:
            providers.append(_build_weather_underground(settings))
    return providers


def build_aggregator(settings: AppSettings) -> MultiProviderAggregator:
    providers = build_providers(settings)
    LOGGER.info("Aggregating weather from: %s", ", ".join(p.name for p in providers) or "none")
    return MultiProviderAggregator(providers)
