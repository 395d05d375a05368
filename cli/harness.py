"""Battery of size measurements run against a live server."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from pydantic import BaseModel, Field

from cli.client import ApiClient

logger = logging.getLogger(__name__)

NO_COMPRESSION: Dict[str, str] = {"Accept-Encoding": "identity"}
GZIP: Dict[str, str] = {"Accept-Encoding": "gzip"}
MSGPACK: Dict[str, str] = {"Accept": "application/msgpack"}


@dataclass(frozen=True)
class MeasurementCase:
    label: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)


class Measurement(BaseModel):
    """Bytes observed on the wire for one case."""

    label: str
    path: str
    status_code: int
    bytes_received: int = Field(..., ge=0)


def build_battery(point_count: int, decimal_places: int) -> List[MeasurementCase]:
    """Every encoding with and without gzip, in a fixed order."""
    points = f"/{point_count}/{decimal_places}"
    return [
        MeasurementCase("json, no compression", points, NO_COMPRESSION),
        MeasurementCase("json, gzip", points, GZIP),
        MeasurementCase("csv, no compression", f"/csv{points}", NO_COMPRESSION),
        MeasurementCase("csv, gzip", f"/csv{points}", GZIP),
        MeasurementCase("msgpack, no compression", points, {**MSGPACK, **NO_COMPRESSION}),
        MeasurementCase("msgpack, gzip", points, {**MSGPACK, **GZIP}),
        MeasurementCase("protobuf, no compression", f"{points}/protobuf", NO_COMPRESSION),
        MeasurementCase("protobuf, gzip", f"{points}/protobuf", GZIP),
        MeasurementCase("binary pairs, no compression", f"/binary/pairs/raw/{point_count}", NO_COMPRESSION),
        MeasurementCase("binary pairs, gzip", f"/binary/pairs/raw/{point_count}", GZIP),
        MeasurementCase("binary sets, gzip", f"/binary/sets/raw/{point_count}", GZIP),
        MeasurementCase("base64 pairs, no compression", f"/binary/pairs/base64/{point_count}", NO_COMPRESSION),
        MeasurementCase("base64 pairs, gzip", f"/binary/pairs/base64/{point_count}", GZIP),
        MeasurementCase("base64 sets, gzip", f"/binary/sets/base64/{point_count}", GZIP),
    ]


def run_battery(client: ApiClient, cases: Iterable[MeasurementCase]) -> List[Measurement]:
    """Issue each case in turn, waiting for the full response before the next.

    The first failure propagates as ``HarnessError`` and ends the run.
    """
    logger.info("running measurements...")
    results: List[Measurement] = []
    for case in cases:
        status_code, bytes_received = client.measure(case.path, headers=case.headers)
        measurement = Measurement(
            label=case.label,
            path=case.path,
            status_code=status_code,
            bytes_received=bytes_received,
        )
        logger.info(
            "%s: %d",
            case.label,
            bytes_received,
            extra={"path": case.path, "status_code": status_code},
        )
        results.append(measurement)
    return results
