from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Iterator, List, Mapping, Optional, Tuple

import pytest
from fastapi import FastAPI

from app.main import create_app
from app.server import ServerHandle
from cli.client import ApiClient, HarnessError
from cli.harness import GZIP, MSGPACK, NO_COMPRESSION, build_battery, run_battery


class RecordingClient:
    def __init__(self, fail_on: Optional[str] = None) -> None:
        self.calls: List[Tuple[str, Dict[str, str]]] = []
        self.fail_on = fail_on

    def measure(self, path: str, headers: Optional[Mapping[str, str]] = None) -> Tuple[int, int]:
        self.calls.append((path, dict(headers or {})))
        if path == self.fail_on:
            raise HarnessError(f"GET {path} failed with status 500.")
        return 200, len(path)


def test_battery_covers_every_encoding_and_compression() -> None:
    cases = build_battery(1000, 5)

    assert [case.label for case in cases] == [
        "json, no compression",
        "json, gzip",
        "csv, no compression",
        "csv, gzip",
        "msgpack, no compression",
        "msgpack, gzip",
        "protobuf, no compression",
        "protobuf, gzip",
        "binary pairs, no compression",
        "binary pairs, gzip",
        "binary sets, gzip",
        "base64 pairs, no compression",
        "base64 pairs, gzip",
        "base64 sets, gzip",
    ]
    by_label = {case.label: case for case in cases}
    assert by_label["json, gzip"].path == "/1000/5"
    assert by_label["csv, no compression"].path == "/csv/1000/5"
    assert by_label["protobuf, gzip"].path == "/1000/5/protobuf"
    assert by_label["base64 sets, gzip"].path == "/binary/sets/base64/1000"
    assert by_label["msgpack, gzip"].headers == {**MSGPACK, **GZIP}
    assert by_label["binary pairs, no compression"].headers == NO_COMPRESSION


def test_run_battery_is_sequential_and_ordered() -> None:
    client = RecordingClient()
    cases = build_battery(10, 2)

    results = run_battery(client, cases)  # type: ignore[arg-type]

    assert [path for path, _ in client.calls] == [case.path for case in cases]
    assert [result.label for result in results] == [case.label for case in cases]
    assert all(result.status_code == 200 for result in results)
    assert results[0].bytes_received == len("/10/2")


def test_run_battery_aborts_on_first_failure() -> None:
    client = RecordingClient(fail_on="/csv/10/2")

    with pytest.raises(HarnessError):
        run_battery(client, build_battery(10, 2))  # type: ignore[arg-type]

    assert [path for path, _ in client.calls] == ["/10/2", "/10/2", "/csv/10/2"]


def test_run_battery_logs_label_and_bytes(caplog) -> None:
    caplog.set_level("INFO", logger="cli.harness")

    run_battery(RecordingClient(), build_battery(10, 2)[:1])  # type: ignore[arg-type]

    assert "json, no compression: 5" in caplog.messages


@pytest.fixture
def live_server() -> Iterator[ServerHandle]:
    handle = ServerHandle(create_app())
    handle.start()
    yield handle
    handle.stop()


def test_battery_against_live_server(live_server: ServerHandle) -> None:
    assert live_server.base_url.startswith("http://127.0.0.1:")
    assert live_server.port > 0

    client = ApiClient(live_server.base_url, timeout=30.0)
    try:
        results = run_battery(client, build_battery(500, 3))
    finally:
        client.close()

    assert len(results) == 14
    assert all(200 <= result.status_code < 300 for result in results)
    sizes = {result.label: result.bytes_received for result in results}
    assert sizes["binary pairs, no compression"] == 500 * 16
    assert sizes["json, gzip"] < sizes["json, no compression"]
    assert sizes["csv, gzip"] < sizes["csv, no compression"]
    assert sizes["base64 pairs, gzip"] < sizes["base64 pairs, no compression"]


def test_client_raises_harness_error_on_not_found(live_server: ServerHandle) -> None:
    client = ApiClient(live_server.base_url, timeout=10.0)
    try:
        with pytest.raises(HarnessError):
            client.measure("/binary/columns/raw/1")
    finally:
        client.close()


def test_client_raises_harness_error_when_server_is_gone() -> None:
    handle = ServerHandle(create_app())
    base_url = handle.base_url
    handle.stop()

    client = ApiClient(base_url, timeout=2.0)
    try:
        with pytest.raises(HarnessError):
            client.measure("/1/1")
    finally:
        client.close()


def _app_with_lifespan(lifespan) -> FastAPI:
    return FastAPI(lifespan=lifespan)


def test_start_raises_and_closes_socket_when_startup_fails() -> None:
    @asynccontextmanager
    async def failing_lifespan(_app: FastAPI) -> AsyncIterator[None]:
        raise RuntimeError("startup failed")
        yield

    handle = ServerHandle(_app_with_lifespan(failing_lifespan))

    with pytest.raises(RuntimeError, match="exited during startup"):
        handle.start(timeout=5.0)

    assert handle._socket.fileno() == -1


def test_start_raises_and_closes_socket_on_timeout() -> None:
    @asynccontextmanager
    async def slow_lifespan(_app: FastAPI) -> AsyncIterator[None]:
        await asyncio.sleep(1.0)
        yield

    handle = ServerHandle(_app_with_lifespan(slow_lifespan))

    with pytest.raises(RuntimeError, match="did not start within"):
        handle.start(timeout=0.1)

    assert handle._socket.fileno() == -1
