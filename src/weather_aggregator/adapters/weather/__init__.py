from .base import (
    ProviderConfigError,
    ProviderDecodeError,
    ProviderError,
    ProviderTransportError,
    TemperatureProvider,
)
from .open_weather_map import OpenWeatherMapProvider
from .weather_underground import WeatherUndergroundProvider

__all__ = [
    "OpenWeatherMapProvider",
    "ProviderConfigError",
    "ProviderDecodeError",
    "ProviderError",
    "ProviderTransportError",
    "TemperatureProvider",
    "WeatherUndergroundProvider",
]
