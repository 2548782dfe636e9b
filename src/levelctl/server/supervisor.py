"""Listener supervisor: keeps exactly one listener bound while running.

Coordinates: resolve address -> bind -> heartbeat -> (failure -> backoff
-> rebind)* -> stop. Retries are unconditional with a fixed backoff; a
sustained bind failure retries forever until shutdown. Any exception from
the listener is retried; only AddressResolutionError from the resolver is
fatal.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from fastapi import FastAPI

from levelctl.server.listener import Listener, ListenerError, UvicornListener
from levelctl.server.shutdown import ShutdownToken

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8765
DEFAULT_HEARTBEAT_INTERVAL = 1.0
DEFAULT_RESTART_BACKOFF = 5.0

ListenerFactory = Callable[[FastAPI, str, int], Listener]


class ListenerSupervisor:
    """Owns the listener lifecycle and its restart policy.

    Args:
        app: Application each new listener serves.
        shutdown: Token whose trip ends the supervisor.
        resolve_address: Returns the host to bind on every (re)start.
            AddressResolutionError from it is fatal and propagates.
        port: TCP port to bind.
        path: WebSocket path, used only for the startup log line.
        listener_factory: Builds a Listener; defaults to UvicornListener.
        heartbeat_interval: Seconds between liveness checks.
        restart_backoff: Seconds to wait after a failure before rebinding.
    """

    def __init__(
        self,
        app: FastAPI,
        shutdown: ShutdownToken,
        resolve_address: Callable[[], str],
        port: int = DEFAULT_PORT,
        path: str = "/",
        listener_factory: ListenerFactory = UvicornListener,
        heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL,
        restart_backoff: float = DEFAULT_RESTART_BACKOFF,
    ) -> None:
        self._app = app
        self._shutdown = shutdown
        self._resolve_address = resolve_address
        self._port = port
        self._path = path
        self._listener_factory = listener_factory
        self._heartbeat_interval = heartbeat_interval
        self._restart_backoff = restart_backoff
        self._listener: Listener | None = None
        self._restart_count = 0

    @property
    def listener(self) -> Listener | None:
        """The currently registered listener, if any."""
        return self._listener

    @property
    def restart_count(self) -> int:
        return self._restart_count

    async def run(self) -> None:
        """Serve until the shutdown token is tripped."""
        while self._shutdown.is_running:
            host = self._resolve_address()
            try:
                await self._start_listener(host)
                await self._heartbeat()
            except Exception as e:
                logger.error("Server error: %s", e)
            else:
                break
            finally:
                await self._stop_listener()
            if not self._shutdown.is_running:
                break
            self._restart_count += 1
            logger.info(
                "Attempting to restart server in %g seconds...", self._restart_backoff
            )
            await self._pause(self._restart_backoff)
        logger.info("Supervisor stopped after %d restart(s)", self._restart_count)

    async def _start_listener(self, host: str) -> None:
        if self._listener is not None:
            raise ListenerError("A listener is already registered")
        logger.info("Starting WebSocket server...")
        logger.info("Server listening on ws://%s:%d%s", host, self._port, self._path)
        self._listener = self._listener_factory(self._app, host, self._port)
        await self._listener.start()

    async def _heartbeat(self) -> None:
        while self._shutdown.is_running:
            if self._listener is None or not self._listener.is_serving:
                raise ListenerError("Listener stopped unexpectedly")
            await asyncio.sleep(self._heartbeat_interval)

    async def _stop_listener(self) -> None:
        listener, self._listener = self._listener, None
        if listener is not None:
            await listener.stop()

    async def _pause(self, seconds: float) -> None:
        """Sleep ``seconds``, waking early (within a heartbeat) on shutdown."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + seconds
        while self._shutdown.is_running:
            remaining = deadline - loop.time()
            if remaining <= 0:
                return
            await asyncio.sleep(min(self._heartbeat_interval, remaining))
