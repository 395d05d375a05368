"""Text and structured encodings of point sequences."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Sequence

import msgpack

from models.points import Point

CSV_HEADER = "time,value"


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as UTC ISO-8601 with milliseconds, e.g. ``2024-01-01T00:00:00.000Z``."""
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def format_number(value: float) -> str:
    """Shortest round-trip text for ``value`` in fixed-point notation: ``3``, ``0.00001``."""
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text:
        return format(Decimal(text), "f")
    return text


def to_documents(points: Sequence[Point]) -> List[Dict[str, Any]]:
    return [{"time": format_timestamp(point.time), "value": point.value} for point in points]


def encode_json(points: Sequence[Point]) -> bytes:
    return json.dumps(to_documents(points), separators=(",", ":")).encode("utf-8")


def encode_csv(points: Sequence[Point]) -> str:
    lines = [CSV_HEADER]
    lines.extend(f"{format_timestamp(point.time)},{format_number(point.value)}" for point in points)
    return "\n".join(lines)


def encode_msgpack(points: Sequence[Point]) -> bytes:
    """Pack points as maps whose ``time`` uses the MessagePack timestamp extension."""
    documents = [{"time": point.time, "value": point.value} for point in points]
    return msgpack.packb(documents, datetime=True)


def decode_msgpack(data: bytes) -> List[Dict[str, Any]]:
    return msgpack.unpackb(data, timestamp=3)
