"""uvicorn server bound to a pre-opened loopback socket."""

from __future__ import annotations

import logging
import socket
import threading
import time
from types import TracebackType
from typing import Optional, Type

import uvicorn
from fastapi import FastAPI

logger = logging.getLogger(__name__)


class ServerHandle:
    """Owns one uvicorn server and the socket it listens on.

    Binding the socket up front resolves port ``0`` to a concrete ephemeral
    port before the server starts, so ``base_url`` is known immediately.
    """

    def __init__(
        self,
        app: FastAPI,
        host: str = "127.0.0.1",
        port: int = 0,
        log_level: str = "warning",
    ) -> None:
        self.host = host
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._socket.bind((host, port))
        self.port: int = self._socket.getsockname()[1]
        config = uvicorn.Config(app, lifespan="on", log_config=None, log_level=log_level.lower())
        self._server = uvicorn.Server(config)
        self._thread: Optional[threading.Thread] = None

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def start(self, timeout: float = 10.0) -> None:
        """Serve from a background thread and wait until requests are accepted."""
        if self._thread is not None:
            raise RuntimeError("Server has already been started.")
        self._thread = threading.Thread(
            target=self._server.run,
            kwargs={"sockets": [self._socket]},
            name="bench-server",
            daemon=True,
        )
        self._thread.start()

        deadline = time.monotonic() + timeout
        while not self._server.started:
            if not self._thread.is_alive():
                self._thread = None
                self._socket.close()
                raise RuntimeError(f"Server on {self.base_url} exited during startup.")
            if time.monotonic() > deadline:
                self.stop()
                raise RuntimeError(f"Server on {self.base_url} did not start within {timeout}s.")
            time.sleep(0.01)
        logger.info("Server is running", extra={"base_url": self.base_url})

    def serve_forever(self) -> None:
        """Serve from the calling thread until interrupted."""
        logger.info("Server is running", extra={"base_url": self.base_url})
        try:
            self._server.run(sockets=[self._socket])
        finally:
            self._socket.close()

    def wait(self) -> None:
        """Block until the background server exits."""
        while self._thread is not None and self._thread.is_alive():
            self._thread.join(0.5)

    def stop(self, timeout: float = 10.0) -> None:
        self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        self._socket.close()
        logger.info("Server stopped", extra={"base_url": self.base_url})

    def __enter__(self) -> "ServerHandle":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.stop()
