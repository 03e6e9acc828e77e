from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class WeatherReport(BaseModel):
    model_config = ConfigDict(extra="ignore")

    city: str
    temp: float
    took: str
