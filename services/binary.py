"""Fixed-width binary layouts for point sequences.

Every timestamp and every value is written as an 8-byte big-endian IEEE-754
double. Timestamps hold their epoch-millisecond value, so any platform with a
double reader can decode the payload without extra framing.
"""

from __future__ import annotations

import base64
import struct
import sys
from array import array
from typing import Iterable, List, Sequence, Tuple

from app.schemas import BinaryEncoding, BinaryLayout
from models.points import Point

DOUBLE_SIZE = 8
POINT_SIZE = 2 * DOUBLE_SIZE

_BIG_ENDIAN_DOUBLE = struct.Struct(">d")


def _to_big_endian(values: Iterable[float]) -> bytes:
    doubles = array("d", values)
    if sys.byteorder == "little":
        doubles.byteswap()
    return doubles.tobytes()


def encode_binary_pairs(points: Sequence[Point]) -> bytes:
    """Interleave time and value per point: ``t0 v0 t1 v1 ...``."""
    interleaved: List[float] = []
    for point in points:
        interleaved.append(float(point.epoch_millis))
        interleaved.append(point.value)
    return _to_big_endian(interleaved)


def encode_binary_sets(points: Sequence[Point]) -> bytes:
    """Write every time first, then every value: ``t0 t1 ... v0 v1 ...``."""
    times = _to_big_endian(float(point.epoch_millis) for point in points)
    values = _to_big_endian(point.value for point in points)
    return times + values


def encode_binary(
    points: Sequence[Point],
    layout: BinaryLayout,
    encoding: BinaryEncoding,
) -> bytes:
    if layout is BinaryLayout.pairs:
        data = encode_binary_pairs(points)
    else:
        data = encode_binary_sets(points)
    if encoding is BinaryEncoding.base64:
        return base64.b64encode(data)
    return data


def _unpack_doubles(data: bytes) -> List[float]:
    if len(data) % POINT_SIZE:
        raise ValueError(
            f"Binary payload length {len(data)} is not a multiple of {POINT_SIZE}."
        )
    return [value for (value,) in _BIG_ENDIAN_DOUBLE.iter_unpack(data)]


def decode_binary_pairs(data: bytes) -> List[Tuple[int, float]]:
    doubles = _unpack_doubles(data)
    return [(int(doubles[i]), doubles[i + 1]) for i in range(0, len(doubles), 2)]


def decode_binary_sets(data: bytes) -> List[Tuple[int, float]]:
    doubles = _unpack_doubles(data)
    count = len(doubles) // 2
    return [(int(doubles[i]), doubles[count + i]) for i in range(count)]
