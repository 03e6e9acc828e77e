"""Concurrent fan-out/fan-in over a fixed set of temperature providers."""
from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor, as_completed
from typing import Callable, Iterable

from ..adapters.weather import ProviderConfigError, TemperatureProvider
from ..domain.units import kelvin_to_fahrenheit

LOGGER = logging.getLogger(__name__)

ExecutorFactory = Callable[[int], Executor]


def _thread_pool(size: int) -> Executor:
    return ThreadPoolExecutor(max_workers=size, thread_name_prefix="weather-provider")


class MultiProviderAggregator:
    """Average the temperature reported by every provider.

    Each call gets its own pool with one worker per provider, so a provider
    still running from an earlier call never delays a later one. The first
    provider error ends the call: the error is re-raised and any provider call
    that has not started yet is cancelled. Calls already in flight cannot be
    interrupted; they finish in the background and their result is dropped.
    """

    def __init__(
        self,
        providers: Iterable[TemperatureProvider],
        *,
        executor_factory: ExecutorFactory = _thread_pool,
    ) -> None:
        self._providers: tuple[TemperatureProvider, ...] = tuple(providers)
        if not self._providers:
            raise ProviderConfigError("At least one weather provider must be configured")
        self._executor_factory = executor_factory

    @property
    def providers(self) -> tuple[TemperatureProvider, ...]:
        return self._providers

    def temperature(self, city: str) -> float:
        """Return the average temperature for the city in Fahrenheit."""
        executor = self._executor_factory(len(self._providers))
        futures: list[Future[float]] = [
            executor.submit(provider.temperature, city) for provider in self._providers
        ]

        total = 0.0
        try:
            for future in as_completed(futures):
                kelvin = future.result()
                fahrenheit = kelvin_to_fahrenheit(kelvin)
                LOGGER.info("%.2fK converts to %.2fF", kelvin, fahrenheit)
                total += fahrenheit
        except Exception:
            for pending in futures:
                pending.cancel()
            raise
        finally:
            executor.shutdown(wait=False)

        return total / len(self._providers)
