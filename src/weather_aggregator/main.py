from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from .adapters.weather import ProviderError
from .domain.models import WeatherReport
from .registry import build_aggregator
from .services.aggregator import MultiProviderAggregator
from .settings import AppSettings, EnvSettings, load_settings

LOGGER = logging.getLogger(__name__)

_DURATION_UNITS = (
    (1.0, "s"),
    (1e-3, "ms"),
    (1e-6, "µs"),
)


def format_duration(seconds: float) -> str:
    """Render an elapsed time as s, ms, µs or ns, rounded to three decimals.

    Durations of a minute or more stay in seconds, e.g. '62.5s'.
    """
    if seconds <= 0:
        return "0s"
    for scale, unit in _DURATION_UNITS:
        if seconds >= scale:
            value = f"{seconds / scale:.3f}".rstrip("0").rstrip(".")
            return f"{value}{unit}"
    return f"{round(seconds * 1e9)}ns"


def _get_aggregator(request: Request) -> MultiProviderAggregator:
    return request.app.state.aggregator


def create_app(
    settings: AppSettings | None = None,
    aggregator: MultiProviderAggregator | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(application: FastAPI):
        app_settings = settings
        app_aggregator = aggregator
        if app_aggregator is None:
            app_settings = app_settings or load_settings()
            app_aggregator = build_aggregator(app_settings)

        application.state.settings = app_settings
        application.state.aggregator = app_aggregator
        application.state.started_at_utc = datetime.now(timezone.utc)

        yield

    application = FastAPI(title="Weather Aggregator", version="0.1.0", lifespan=lifespan)

    @application.exception_handler(ProviderError)
    async def provider_error_handler(request: Request, exc: ProviderError) -> PlainTextResponse:
        LOGGER.warning("Weather request for %s failed: %s", request.url.path, exc)
        return PlainTextResponse(str(exc), status_code=500)

    @application.get("/", response_class=PlainTextResponse)
    async def hello() -> PlainTextResponse:
        return PlainTextResponse("Hello!")

    @application.get("/health", response_class=JSONResponse)
    async def health(request: Request) -> JSONResponse:
        app_settings: AppSettings | None = request.app.state.settings
        return JSONResponse(
            {
                "status": "ok",
                "service": "weather-aggregator",
                "environment": app_settings.env.aggregator_env if app_settings else None,
                "providers": [provider.name for provider in _get_aggregator(request).providers],
                "started_at_utc": request.app.state.started_at_utc.isoformat(),
                "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            }
        )

    # Plain def: the aggregator blocks, so FastAPI runs this in its threadpool.
    @application.get("/weather/{city:path}", response_model=WeatherReport)
    def weather(request: Request, city: str) -> WeatherReport:
        begin = time.perf_counter()
        temp = _get_aggregator(request).temperature(city)
        return WeatherReport(
            city=city,
            temp=temp,
            took=format_duration(time.perf_counter() - begin),
        )

    return application


app = create_app()


def run() -> None:
    env = EnvSettings()
    logging.basicConfig(
        level=env.aggregator_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()
    LOGGER.info("Listening on %s:%s", settings.yaml.server.host, settings.yaml.server.port)
    uvicorn.run(
        create_app(settings=settings),
        host=settings.yaml.server.host,
        port=settings.yaml.server.port,
        log_level=settings.env.aggregator_log_level.lower(),
    )


if __name__ == "__main__":
    run()
