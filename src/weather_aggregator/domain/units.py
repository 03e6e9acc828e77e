from __future__ import annotations

KELVIN_OFFSET = 273.15


def celsius_to_kelvin(celsius: float) -> float:
    return celsius + KELVIN_OFFSET


def kelvin_to_fahrenheit(kelvin: float) -> float:
    return (kelvin * 1.8) - 459.67
