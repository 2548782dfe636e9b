"""FastAPI application exposing the control WebSocket.

Endpoints:

    WS   /          <- "a_5"  -> "Volume set to 50%"
                    <- "b_7"  -> "Brightness set to 70%"
    GET  /health    -> {"status": "ok", "active_sessions": 0}

Each WebSocket connection runs in its own task; frames on one connection
are handled strictly in order, one response per frame. ``app.state.in_flight``
counts frames whose response has not been sent yet; the listener waits for
it to reach zero before closing connections.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from pydantic import BaseModel
from starlette.websockets import WebSocketState

from levelctl import __version__
from levelctl.domain.models import Session
from levelctl.server.session import SessionHandler

logger = logging.getLogger(__name__)

INTERNAL_ERROR_CLOSE_CODE = 1011


class HealthResponse(BaseModel):
    status: str = "ok"
    active_sessions: int = 0


def create_app(handler: SessionHandler, path: str = "/") -> FastAPI:
    """Create the control endpoint application.

    Args:
        handler: Session behaviour shared by every connection.
        path: Route the WebSocket endpoint is mounted on.
    """
    app = FastAPI(
        title="levelctl",
        description="Remote volume and brightness control over WebSocket",
        version=__version__,
    )
    app.state.handler = handler
    app.state.active_sessions = 0
    app.state.in_flight = 0

    @app.get("/health")
    async def health_check() -> HealthResponse:
        return HealthResponse(status="ok", active_sessions=app.state.active_sessions)

    @app.websocket(path)
    async def control_socket(websocket: WebSocket) -> None:
        await websocket.accept()
        peer = websocket.client.host if websocket.client else None
        session = Session(peer_address=peer)
        h: SessionHandler = app.state.handler
        h.on_open(session)
        app.state.active_sessions += 1
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    h.on_close(session, message.get("code"))
                    break
                raw = _frame_text(message)
                if raw is None:
                    continue
                app.state.in_flight += 1
                try:
                    response = await h.on_message(session, raw)
                    await websocket.send_text(response)
                finally:
                    app.state.in_flight -= 1
        except WebSocketDisconnect as e:
            h.on_close(session, e.code)
        except Exception as e:
            h.on_error(session, e)
            if websocket.client_state == WebSocketState.CONNECTED:
                try:
                    await websocket.close(code=INTERNAL_ERROR_CLOSE_CODE)
                except RuntimeError as close_error:
                    logger.debug("Close after error failed: %s", close_error)
            h.on_close(session, INTERNAL_ERROR_CLOSE_CODE)
        finally:
            app.state.active_sessions -= 1

    return app


def _frame_text(message: dict) -> str | None:
    """Extract the payload of a receive() message as text."""
    text = message.get("text")
    if text is not None:
        return text
    data = message.get("bytes")
    if data is not None:
        return data.decode("utf-8", errors="replace")
    return None
