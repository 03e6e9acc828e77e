from __future__ import annotations

from typing import Protocol


class ProviderError(RuntimeError):
    """Raised when a weather provider cannot report a temperature."""


class ProviderTransportError(ProviderError):
    """Raised when the upstream request fails."""


class ProviderDecodeError(ProviderError):
    """Raised when the upstream response cannot be decoded."""


class ProviderConfigError(ProviderError):
    """Raised when a provider is missing required configuration."""


class TemperatureProvider(Protocol):
    name: str

    def temperature(self, city: str) -> float:
        """Return the current temperature for the city in Kelvin."""
