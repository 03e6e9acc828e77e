from __future__ import annotations

import json
from http.client import HTTPException
from typing import Any, Callable
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .base import ProviderDecodeError, ProviderTransportError

USER_AGENT = "weather-aggregator/0.1"

JsonFetcher = Callable[[str], dict[str, Any]]


def fetch_json(url: str) -> dict[str, Any]:
    request = Request(url, headers={"User-Agent": USER_AGENT})
    try:
        with urlopen(request) as response:
            body = response.read()
    except (HTTPError, URLError, HTTPException, OSError, ValueError) as exc:
        raise ProviderTransportError(f"Request to {url} failed: {exc}") from exc

    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProviderDecodeError(f"Response from {url} was not valid JSON") from exc

    if not isinstance(payload, dict):
        raise ProviderDecodeError(f"Unexpected response shape from {url}")
    return payload


def coerce_float(value: Any, *, field_name: str) -> float:
    if isinstance(value, bool):
        raise ProviderDecodeError(f"Invalid numeric value for {field_name}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ProviderDecodeError(f"Invalid numeric value for {field_name}") from exc
