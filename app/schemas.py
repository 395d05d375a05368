"""Enumerations shared by the HTTP layer and the encoders."""

from __future__ import annotations

from enum import Enum


class BinaryLayout(str, Enum):
    """Arrangement of the time and value doubles in a binary payload."""

    pairs = "pairs"
    sets = "sets"


class BinaryEncoding(str, Enum):
    """Post-processing applied to a binary payload before it is sent."""

    raw = "raw"
    base64 = "base64"


class MediaType(str, Enum):
    json = "application/json"
    msgpack = "application/msgpack"
    csv = "text/csv"
    text = "text/plain"
    octet_stream = "application/octet-stream"
