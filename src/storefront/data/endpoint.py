"""Temporary data endpoint: a short-lived uvicorn server for one run.

The export run (and a one-off CLI render) starts it on a well-known port
so render calls that fetch product data succeed without the production
deployment. The socket is bound before uvicorn starts, so a busy port
fails cleanly with ``DataSourceError`` instead of exiting the process.

Usage::

    async with TemporaryEndpoint(DataAPI(catalog), port=9999) as endpoint:
        ...  # endpoint.base_url answers /api/*
"""

import asyncio
import logging
import socket
from typing import Any

import uvicorn

from storefront.errors import DataSourceError

logger = logging.getLogger("storefront.data")

_STARTUP_POLL = 0.01


class TemporaryEndpoint:
    """An ASGI app served on ``host:port`` between ``start()`` and ``close()``.

    ``close()`` is idempotent; ``close_count`` records how many times the
    server was actually shut down (0 or 1).
    """

    __slots__ = ("_app", "_host", "_port", "_server", "_socket", "_task", "close_count")

    def __init__(self, app: Any, *, host: str = "127.0.0.1", port: int = 9999) -> None:
        self._app = app
        self._host = host
        self._port = port
        self._server: uvicorn.Server | None = None
        self._socket: socket.socket | None = None
        self._task: asyncio.Task[None] | None = None
        self.close_count = 0

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        """Bound port (resolved from the socket when started on port 0)."""
        if self._socket is not None:
            return self._socket.getsockname()[1]
        return self._port

    @property
    def base_url(self) -> str:
        return f"http://{self._host}:{self.port}"

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self._task is not None:
            msg = "Temporary endpoint already started"
            raise RuntimeError(msg)

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self._host, self._port))
        except OSError as exc:
            sock.close()
            msg = f"Cannot bind data endpoint to {self._host}:{self._port}: {exc}"
            raise DataSourceError(msg) from exc
        self._socket = sock

        config = uvicorn.Config(
            self._app,
            lifespan="off",
            log_level="warning",
            access_log=False,
        )
        server = uvicorn.Server(config)
        self._server = server
        self._task = asyncio.create_task(server.serve(sockets=[sock]))

        while not server.started:
            if self._task.done():
                exc = self._task.exception()
                self._task = None
                self._release_socket()
                msg = f"Data endpoint on port {self._port} failed to start"
                raise DataSourceError(msg) from exc
            await asyncio.sleep(_STARTUP_POLL)

        logger.info("Data endpoint started on %s", self.base_url)

    async def close(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        try:
            if self._server is not None:
                self._server.should_exit = True
            await task
        finally:
            self._release_socket()
            self.close_count += 1
            logger.info("Data endpoint closed")

    def _release_socket(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    async def __aenter__(self) -> "TemporaryEndpoint":
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
