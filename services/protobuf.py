"""Protocol Buffers encoding backed by the ``timeseries.PointArray`` contract.

``point_array.proto`` next to this module is the schema shared with
non-Python clients; ``point_array_pb2`` is generated from it with::

    protoc -I services --python_out=services services/point_array.proto
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from importlib import import_module
from typing import Any, List, Sequence, Tuple

from models.points import Point

logger = logging.getLogger(__name__)

GENERATED_MODULE = "services.point_array_pb2"
POINT_ARRAY_TYPE = "timeseries.PointArray"


class SchemaLoadError(RuntimeError):
    """Raised when the protobuf schema cannot be loaded."""


@dataclass(frozen=True)
class PointArraySchema:
    """Immutable handle on the generated ``timeseries.PointArray`` message class."""

    message_class: Any

    def encode(self, points: Sequence[Point]) -> bytes:
        message = self.message_class()
        for point in points:
            message.points.add(time=point.epoch_millis, value=point.value)
        return message.SerializeToString()

    def decode(self, data: bytes) -> List[Tuple[int, float]]:
        message = self.message_class.FromString(data)
        return [(entry.time, entry.value) for entry in message.points]


def load_point_array_schema() -> PointArraySchema:
    """Import the generated module and check it carries the expected message."""
    try:
        generated = import_module(GENERATED_MODULE)
        message_class = generated.PointArray
        full_name = message_class.DESCRIPTOR.full_name
    except Exception as exc:
        raise SchemaLoadError(f"Unable to load protobuf schema {POINT_ARRAY_TYPE!r}: {exc}") from exc
    if full_name != POINT_ARRAY_TYPE:
        raise SchemaLoadError(f"Expected {POINT_ARRAY_TYPE!r}, generated module defines {full_name!r}.")
    logger.info("Loaded protobuf schema %s", POINT_ARRAY_TYPE)
    return PointArraySchema(message_class=message_class)


@lru_cache
def build_default_schema() -> PointArraySchema:
    """Factory that loads the schema on first use and reuses it afterwards."""
    return load_point_array_schema()
