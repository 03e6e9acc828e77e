from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .adapters.weather.open_weather_map import OPEN_WEATHER_MAP_URL
from .adapters.weather.weather_underground import WEATHER_UNDERGROUND_URL

PROJECT_ROOT = Path(__file__).resolve().parents[2]

LOGGER = logging.getLogger(__name__)


def _validate_http_url(value: str, *, field_name: str) -> str:
    text = value.strip()
    parsed = urlparse(text)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"{field_name} must be an absolute http(s) URL")
    return text.rstrip("/")


class ServerSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)


class OpenWeatherMapSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    base_url: str = OPEN_WEATHER_MAP_URL

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        return _validate_http_url(value, field_name="providers.open_weather_map.base_url")


class WeatherUndergroundSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    base_url: str = WEATHER_UNDERGROUND_URL
    key_file: Path = Path("weatherunderground.key")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        return _validate_http_url(value, field_name="providers.weather_underground.base_url")

    @field_validator("key_file")
    @classmethod
    def validate_key_file(cls, value: Path) -> Path:
        text = str(value).strip()
        if not text:
            raise ValueError("providers.weather_underground.key_file must not be empty")
        return Path(text)


class ProvidersSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    order: list[Literal["open_weather_map", "weather_underground"]] = Field(
        default_factory=lambda: ["open_weather_map", "weather_underground"]
    )
    open_weather_map: OpenWeatherMapSettings = Field(default_factory=OpenWeatherMapSettings)
    weather_underground: WeatherUndergroundSettings = Field(
        default_factory=WeatherUndergroundSettings
    )

    @field_validator("order")
    @classmethod
    def validate_order(cls, values: list[str]) -> list[str]:
        deduplicated = list(dict.fromkeys(values))
        if not deduplicated:
            raise ValueError("providers.order must list at least one provider")
        return deduplicated


class AggregatorYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    server: ServerSettings = Field(default_factory=ServerSettings)
    providers: ProvidersSettings = Field(default_factory=ProvidersSettings)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    aggregator_env: Literal["dev", "test", "prod"] = "dev"
    aggregator_config_path: Path = Path("config/aggregator.yaml")
    aggregator_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    weather_underground_api_key: str | None = None
    openweathermap_api_key: str | None = None

    @field_validator("aggregator_log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class AppSettings(BaseModel):
    env: EnvSettings
    yaml: AggregatorYamlSettings
    project_root: Path
    config_path: Path
    weather_underground_key: str = ""
    openweathermap_key: str | None = None


def _resolve_project_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


def _load_yaml_settings(path: Path) -> AggregatorYamlSettings:
    if not path.exists():
        raise FileNotFoundError(f"Aggregator config file not found: {path}")

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("Aggregator config must be a YAML mapping/object at the top level")
    return AggregatorYamlSettings.model_validate(raw_config)


def load_api_key(path: Path) -> str:
    """Read an API key file, returning an empty string when it is unavailable."""
    try:
        key = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        LOGGER.warning("Unable to read API key file %s: %s", path, exc)
        return ""

    if not key:
        LOGGER.warning("API key file %s is empty", path)
        return ""
    LOGGER.info("API key loaded from %s", path)
    return key


def _resolve_weather_underground_key(env: EnvSettings, yaml_settings: AggregatorYamlSettings) -> str:
    if env.weather_underground_api_key and env.weather_underground_api_key.strip():
        LOGGER.info("Weather Underground API key loaded from environment")
        return env.weather_underground_api_key.strip()
    if not yaml_settings.providers.weather_underground.enabled:
        return ""
    key_path = _resolve_project_path(yaml_settings.providers.weather_underground.key_file)
    return load_api_key(key_path)


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    env = EnvSettings()
    config_path = _resolve_project_path(env.aggregator_config_path)
    yaml_settings = _load_yaml_settings(config_path)
    openweathermap_key = (env.openweathermap_api_key or "").strip() or None
    return AppSettings(
        env=env,
        yaml=yaml_settings,
        project_root=PROJECT_ROOT,
        config_path=config_path,
        weather_underground_key=_resolve_weather_underground_key(env, yaml_settings),
        openweathermap_key=openweathermap_key,
    )
