from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_POINT_COUNT = 1_000_000
DEFAULT_DECIMAL_PLACES = 5
DEFAULT_TIMEOUT = 120.0

_BASE_URL_ENV = "API_BASE_URL"
_POINT_COUNT_ENV = "BENCH_POINT_COUNT"
_DECIMAL_PLACES_ENV = "BENCH_DECIMAL_PLACES"
_TIMEOUT_ENV = "BENCH_REQUEST_TIMEOUT"


@dataclass(frozen=True)
class CLIConfig:
    base_url: Optional[str] = None
    point_count: int = DEFAULT_POINT_COUNT
    decimal_places: int = DEFAULT_DECIMAL_PLACES
    request_timeout: float = DEFAULT_TIMEOUT


def _read_float(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def load_config(
    base_url: Optional[str] = None,
    point_count: Optional[int] = None,
    decimal_places: Optional[int] = None,
    request_timeout: Optional[float] = None,
) -> CLIConfig:
    url = base_url or os.getenv(_BASE_URL_ENV) or None
    if point_count is None:
        point_count = _read_int(os.getenv(_POINT_COUNT_ENV), DEFAULT_POINT_COUNT)
    if decimal_places is None:
        decimal_places = _read_int(os.getenv(_DECIMAL_PLACES_ENV), DEFAULT_DECIMAL_PLACES)
    if request_timeout is None:
        request_timeout = _read_float(os.getenv(_TIMEOUT_ENV), DEFAULT_TIMEOUT)
    return CLIConfig(
        base_url=url.rstrip("/") if url else None,
        point_count=point_count,
        decimal_places=decimal_places,
        request_timeout=request_timeout,
    )
