"""Per-connection session handling.

The SessionHandler holds the behaviour for one WebSocket client: it logs
lifecycle events and turns each inbound text frame into exactly one
response string. It is transport-agnostic; the FastAPI route in
``levelctl.server.app`` drives it.
"""

from __future__ import annotations

import logging

from levelctl.device.base import DeviceController, DeviceControlError
from levelctl.domain.models import (
    DeviceKind,
    Invalid,
    Session,
    SessionState,
    SetBrightness,
    SetVolume,
)
from levelctl.protocol.parser import parse_command

logger = logging.getLogger(__name__)


class SessionHandler:
    """Handles open/message/close/error events for client sessions.

    One handler instance serves every connection. It keeps no state of its
    own beyond the device controller; per-connection state lives on the
    Session passed into each callback.
    """

    def __init__(self, controller: DeviceController) -> None:
        self._controller = controller

    def on_open(self, session: Session) -> None:
        session.state = SessionState.OPENED
        logger.info("Device connected: %s", session.peer)

    async def on_message(self, session: Session, raw: str) -> str:
        """Parse ``raw``, apply it, and return the response for the client."""
        if session.state != SessionState.ERRORED:
            session.state = SessionState.MESSAGING
        logger.info("Received message: %s", raw)

        command = parse_command(raw)
        if isinstance(command, Invalid):
            response = command.reason
        else:
            response = await self._apply(command)

        session.messages_handled += 1
        logger.info("Action: %s", response)
        return response

    def on_close(self, session: Session, code: int | None = None) -> None:
        session.state = SessionState.CLOSED
        logger.info("Connection lost: %s", session.peer)
        logger.debug(
            "Close code %s after %d messages in %.1fs",
            code,
            session.messages_handled,
            session.duration.total_seconds(),
        )

    def on_error(self, session: Session, error: BaseException) -> None:
        session.state = SessionState.ERRORED
        logger.error("Error handling message: %s", error)

    async def _apply(self, command: SetVolume | SetBrightness) -> str:
        percentage = command.percentage
        device = command.device
        try:
            if device == DeviceKind.VOLUME:
                await self._controller.set_volume_level(percentage)
            else:
                await self._controller.set_brightness_level(percentage)
        except DeviceControlError as e:
            logger.error("Error setting %s: %s", device.value, e)
            return f"Error setting {device.value}: {e}"
        except Exception as e:
            logger.exception("Unexpected %s controller failure", device.value)
            return f"Error setting {device.value}: {e}"
        return f"{device.value.capitalize()} set to {percentage}%"
