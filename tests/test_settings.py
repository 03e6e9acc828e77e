from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from weather_aggregator.settings import load_api_key, load_settings

_ENV_VARS = (
    "AGGREGATOR_ENV",
    "AGGREGATOR_CONFIG_PATH",
    "AGGREGATOR_LOG_LEVEL",
    "WEATHER_UNDERGROUND_API_KEY",
    "OPENWEATHERMAP_API_KEY",
)


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch) -> Path:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "aggregator.yaml"
    monkeypatch.setenv("AGGREGATOR_CONFIG_PATH", str(path))
    return path


def test_loads_yaml_and_key_file(config_file: Path, tmp_path: Path) -> None:
    key_file = tmp_path / "wu.key"
    key_file.write_text("abc123\n", encoding="utf-8")
    config_file.write_text(
        "server:\n"
        "  port: 9000\n"
        "providers:\n"
        "  weather_underground:\n"
        f"    key_file: {key_file}\n",
        encoding="utf-8",
    )

    settings = load_settings()

    assert settings.config_path == config_file
    assert settings.yaml.server.port == 9000
    assert settings.yaml.providers.order == ["open_weather_map", "weather_underground"]
    assert settings.weather_underground_key == "abc123"
    assert settings.openweathermap_key is None


def test_missing_key_file_is_tolerated(config_file: Path, tmp_path: Path, caplog) -> None:
    config_file.write_text(
        f"providers:\n  weather_underground:\n    key_file: {tmp_path / 'absent.key'}\n",
        encoding="utf-8",
    )

    with caplog.at_level("WARNING", logger="weather_aggregator.settings"):
        settings = load_settings()

    assert settings.weather_underground_key == ""
    assert "Unable to read API key file" in caplog.text


def test_environment_key_overrides_key_file(config_file: Path, monkeypatch) -> None:
    config_file.write_text("", encoding="utf-8")
    monkeypatch.setenv("WEATHER_UNDERGROUND_API_KEY", "  from-env ")
    monkeypatch.setenv("OPENWEATHERMAP_API_KEY", "owm")
    monkeypatch.setenv("AGGREGATOR_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.weather_underground_key == "from-env"
    assert settings.openweathermap_key == "owm"
    assert settings.env.aggregator_log_level == "DEBUG"


def test_missing_config_file_raises(config_file: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings()


def test_non_mapping_config_is_rejected(config_file: Path) -> None:
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="YAML mapping"):
        load_settings()


def test_invalid_provider_url_is_rejected(config_file: Path) -> None:
    config_file.write_text(
        "providers:\n  open_weather_map:\n    base_url: ftp://example.com\n",
        encoding="utf-8",
    )

    with pytest.raises(ValidationError):
        load_settings()


def test_load_api_key_treats_blank_file_as_missing(tmp_path: Path) -> None:
    key_file = tmp_path / "blank.key"
    key_file.write_text("   \n", encoding="utf-8")

    assert load_api_key(key_file) == ""
