"""A single bound uvicorn server instance.

The listener binds its own socket before handing it to uvicorn, so a
bind failure surfaces as an ``OSError`` from ``start()`` instead of
uvicorn's log-and-exit path. uvicorn's signal capture is disabled: the
ShutdownToken is the only thing allowed to stop the daemon.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import socket
from typing import Iterator, Protocol

import uvicorn
from fastapi import FastAPI

logger = logging.getLogger(__name__)

DEFAULT_STARTUP_TIMEOUT = 10.0
DEFAULT_DRAIN_TIMEOUT = 5.0
_POLL_INTERVAL = 0.01


class ListenerError(Exception):
    """Raised when a listener fails to start or stops unexpectedly."""


class Listener(Protocol):
    """What the supervisor needs from a bound server."""

    @property
    def is_serving(self) -> bool: ...

    async def start(self) -> None: ...

    async def stop(self) -> None: ...


class _QuietServer(uvicorn.Server):
    """uvicorn.Server that leaves process signals alone."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


class UvicornListener:
    """Serves a FastAPI app on one host/port until stopped.

    Usage::

        listener = UvicornListener(app, "192.168.1.20", 8765)
        await listener.start()
        ...
        await listener.stop()
    """

    def __init__(
        self,
        app: FastAPI,
        host: str,
        port: int,
        startup_timeout: float = DEFAULT_STARTUP_TIMEOUT,
        drain_timeout: float = DEFAULT_DRAIN_TIMEOUT,
    ) -> None:
        self._app = app
        self._host = host
        self._port = port
        self._startup_timeout = startup_timeout
        self._drain_timeout = drain_timeout
        self._sock: socket.socket | None = None
        self._server: _QuietServer | None = None
        self._task: asyncio.Task | None = None

    @property
    def is_serving(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def bound_port(self) -> int | None:
        """Actual port once bound (differs from the request when port is 0)."""
        if self._sock is None:
            return None
        return self._sock.getsockname()[1]

    async def start(self) -> None:
        """Bind the socket and wait until uvicorn is accepting connections.

        Raises:
            OSError: If the address cannot be bound.
            ListenerError: If uvicorn exits or stalls before finishing startup.
        """
        if self._task is not None:
            raise ListenerError("Listener already started")

        self._sock = self._bind()
        config = uvicorn.Config(
            self._app,
            log_config=None,
            lifespan="off",
        )
        self._server = _QuietServer(config)
        self._task = asyncio.create_task(self._server.serve(sockets=[self._sock]))

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._startup_timeout
        while not self._server.started:
            if self._task.done():
                error = self._task.exception() if not self._task.cancelled() else None
                await self.stop()
                raise ListenerError(f"Listener exited during startup: {error}")
            if loop.time() >= deadline:
                self._task.cancel()
                await self.stop()
                raise ListenerError(
                    f"Listener did not start within {self._startup_timeout:g}s"
                )
            await asyncio.sleep(_POLL_INTERVAL)
        logger.debug("Listener bound to %s:%s", self._host, self.bound_port)

    async def stop(self) -> None:
        """Stop serving and release the socket. Safe to call multiple times.

        Messages already being handled get up to ``drain_timeout`` seconds to
        send their response before uvicorn closes the open connections.
        """
        if self._server is not None:
            if self.is_serving:
                await self._drain()
            self._server.should_exit = True
        if self._task is not None:
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.debug("Listener task ended with error: %s", e)
            self._task = None
        self._server = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    async def _drain(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._drain_timeout
        while getattr(self._app.state, "in_flight", 0) > 0:
            if loop.time() >= deadline:
                logger.warning(
                    "Closing with %d response(s) still pending", self._app.state.in_flight
                )
                return
            await asyncio.sleep(_POLL_INTERVAL)

    def _bind(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self._host, self._port))
            sock.set_inheritable(True)
        except OSError:
            sock.close()
            raise
        return sock
