"""One-way shutdown flag shared by the bootstrap and the supervisor."""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class ShutdownToken:
    """Cooperative cancellation token.

    Starts in the running state and can be tripped exactly once. The
    flag is backed by threading.Event so a signal handler, another
    thread, or the event loop itself can trip it safely.
    """

    def __init__(self) -> None:
        self._stopped = threading.Event()

    @property
    def is_running(self) -> bool:
        return not self._stopped.is_set()

    def trip(self) -> None:
        """Request shutdown. Later calls are no-ops."""
        if self._stopped.is_set():
            return
        self._stopped.set()
        logger.info("Received shutdown signal. Closing server gracefully...")
