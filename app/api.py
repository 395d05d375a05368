"""HTTP route definitions for the service."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response
from starlette.convertors import Convertor, register_url_convertor

from app.schemas import BinaryEncoding, BinaryLayout, MediaType
from services.binary import encode_binary
from services.encoders import encode_csv, encode_json, encode_msgpack
from services.generator import generate_points
from services.protobuf import PointArraySchema, SchemaLoadError, build_default_schema

logger = logging.getLogger(__name__)

BINARY_DECIMAL_PLACES = 5

_MSGPACK_MEDIA_TYPES = ("application/msgpack", "application/x-msgpack")


class _ChoiceConvertor(Convertor):
    def __init__(self, enum_cls) -> None:
        self.regex = "|".join(member.value for member in enum_cls)

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value) -> str:
        return str(getattr(value, "value", value))


register_url_convertor("layout", _ChoiceConvertor(BinaryLayout))
register_url_convertor("transfer", _ChoiceConvertor(BinaryEncoding))

router = APIRouter()


def get_schema() -> PointArraySchema:
    try:
        return build_default_schema()
    except SchemaLoadError as exc:
        logger.error("Protobuf schema unavailable", extra={"reason": str(exc)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Protocol Buffers schema could not be loaded.",
        ) from exc


def _wants_msgpack(request: Request) -> bool:
    accept = request.headers.get("accept", "").lower()
    return any(media_type in accept for media_type in _MSGPACK_MEDIA_TYPES)


def _log_payload(route: str, point_count: int, decimal_places: int, body: bytes | str) -> None:
    logger.debug(
        "Encoded %s payload",
        route,
        extra={
            "point_count": point_count,
            "decimal_places": decimal_places,
            "payload_bytes": len(body),
        },
    )


@router.get(
    "/{point_count:int}/{decimal_places:int}",
    summary="Points as JSON, or MessagePack when the Accept header asks for it.",
)
async def get_points(request: Request, point_count: int, decimal_places: int) -> Response:
    points = generate_points(point_count, decimal_places)
    if _wants_msgpack(request):
        body = encode_msgpack(points)
        media_type = MediaType.msgpack
    else:
        body = encode_json(points)
        media_type = MediaType.json
    _log_payload(media_type.name, point_count, decimal_places, body)
    return Response(content=body, media_type=media_type.value)


@router.get(
    "/binary/{structure:layout}/{encoding:transfer}/{point_count:int}",
    summary="Points as fixed-width big-endian doubles.",
)
@router.get(
    "/{point_count:int}/binary/{structure:layout}/{encoding:transfer}",
    include_in_schema=False,
)
async def get_binary_points(
    point_count: int,
    structure: BinaryLayout,
    encoding: BinaryEncoding,
) -> Response:
    points = generate_points(point_count, BINARY_DECIMAL_PLACES)
    body = encode_binary(points, structure, encoding)
    _log_payload(f"binary {structure.value}/{encoding.value}", point_count, BINARY_DECIMAL_PLACES, body)
    if encoding is BinaryEncoding.base64:
        return Response(content=body, media_type=MediaType.text.value)
    return Response(content=body, media_type=MediaType.octet_stream.value)


@router.get(
    "/csv/{point_count:int}/{decimal_places:int}",
    summary="Points as CSV with a time,value header.",
)
async def get_csv_points(point_count: int, decimal_places: int) -> Response:
    body = encode_csv(generate_points(point_count, decimal_places))
    _log_payload("csv", point_count, decimal_places, body)
    return Response(content=body, media_type=MediaType.csv.value)


@router.get(
    "/{point_count:int}/{decimal_places:int}/protobuf",
    summary="Points as a timeseries.PointArray protobuf message.",
)
async def get_protobuf_points(
    point_count: int,
    decimal_places: int,
    schema: PointArraySchema = Depends(get_schema),
) -> Response:
    body = schema.encode(generate_points(point_count, decimal_places))
    _log_payload("protobuf", point_count, decimal_places, body)
    return Response(content=body, media_type=MediaType.octet_stream.value)
