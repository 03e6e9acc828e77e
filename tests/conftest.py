from __future__ import annotations

import pytest

from weather_aggregator.settings import load_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()
