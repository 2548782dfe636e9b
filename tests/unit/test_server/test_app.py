"""Tests for the FastAPI control endpoint (WebSocket + health)."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from levelctl.device.memory import MemoryDeviceController
from levelctl.domain.models import DeviceKind, Session, SessionState
from levelctl.protocol.parser import INVALID_BRIGHTNESS_LEVEL, INVALID_FORMAT
from levelctl.server.app import INTERNAL_ERROR_CLOSE_CODE, create_app
from levelctl.server.session import SessionHandler


class RecordingHandler(SessionHandler):
    """SessionHandler that remembers the sessions and close codes it saw."""

    def __init__(self, controller: MemoryDeviceController) -> None:
        super().__init__(controller)
        self.sessions: list[Session] = []
        self.close_codes: list[int | None] = []
        self.errors: list[BaseException] = []

    def on_open(self, session: Session) -> None:
        super().on_open(session)
        self.sessions.append(session)

    def on_close(self, session: Session, code: int | None = None) -> None:
        super().on_close(session, code)
        self.close_codes.append(code)

    def on_error(self, session: Session, error: BaseException) -> None:
        super().on_error(session, error)
        self.errors.append(error)


class ExplodingHandler(RecordingHandler):
    async def on_message(self, session: Session, raw: str) -> str:
        raise RuntimeError("handler exploded")


@pytest.fixture
def recording_handler(memory_controller: MemoryDeviceController) -> RecordingHandler:
    return RecordingHandler(memory_controller)


@pytest.fixture
def client(recording_handler: RecordingHandler) -> TestClient:
    return TestClient(create_app(recording_handler))


class TestHealthEndpoint:
    def test_health_returns_ok(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "active_sessions": 0}

    def test_health_counts_open_sessions(self, client: TestClient) -> None:
        with client.websocket_connect("/") as ws:
            ws.send_text("a_1")
            ws.receive_text()
            assert client.get("/health").json()["active_sessions"] == 1
        assert client.get("/health").json()["active_sessions"] == 0


class TestControlSocket:
    def test_end_to_end_scenario(
        self, client: TestClient, memory_controller: MemoryDeviceController
    ) -> None:
        with client.websocket_connect("/") as ws:
            ws.send_text("a_5")
            assert ws.receive_text() == "Volume set to 50%"
            ws.send_text("b_12")
            assert ws.receive_text() == INVALID_BRIGHTNESS_LEVEL
            ws.send_text("hello")
            assert ws.receive_text() == INVALID_FORMAT
        assert memory_controller.volume == 50
        assert memory_controller.brightness is None

    def test_responses_follow_message_order(self, client: TestClient) -> None:
        with client.websocket_connect("/") as ws:
            for step in range(1, 11):
                ws.send_text(f"b_{step}")
            responses = [ws.receive_text() for _ in range(10)]
        assert responses == [f"Brightness set to {step * 10}%" for step in range(1, 11)]
        assert client.app.state.in_flight == 0

    def test_binary_frame_decoded_as_text(self, client: TestClient) -> None:
        with client.websocket_connect("/") as ws:
            ws.send_bytes(b"b_4")
            assert ws.receive_text() == "Brightness set to 40%"

    def test_device_error_keeps_connection_open(
        self, client: TestClient, memory_controller: MemoryDeviceController
    ) -> None:
        memory_controller.fail(DeviceKind.VOLUME, "No audio endpoint")
        with client.websocket_connect("/") as ws:
            ws.send_text("a_7")
            assert ws.receive_text() == "Error setting volume: No audio endpoint"
            ws.send_text("b_7")
            assert ws.receive_text() == "Brightness set to 70%"

    def test_session_lifecycle(
        self, client: TestClient, recording_handler: RecordingHandler
    ) -> None:
        with client.websocket_connect("/") as ws:
            ws.send_text("a_1")
            ws.receive_text()
        session = recording_handler.sessions[0]
        assert session.peer == "testclient"
        assert session.state == SessionState.CLOSED
        assert session.messages_handled == 1
        assert recording_handler.close_codes == [1000]

    def test_sessions_are_isolated(self, client: TestClient) -> None:
        with client.websocket_connect("/") as first, client.websocket_connect("/") as second:
            first.send_text("a_2")
            second.send_text("b_8")
            assert second.receive_text() == "Brightness set to 80%"
            assert first.receive_text() == "Volume set to 20%"

    def test_custom_path(self, recording_handler: RecordingHandler) -> None:
        client = TestClient(create_app(recording_handler, path="/control"))
        with client.websocket_connect("/control") as ws:
            ws.send_text("a_10")
            assert ws.receive_text() == "Volume set to 100%"


class TestUnexpectedErrors:
    def test_handler_failure_closes_only_that_session(
        self, memory_controller: MemoryDeviceController
    ) -> None:
        handler = ExplodingHandler(memory_controller)
        app = create_app(handler)
        client = TestClient(app)
        with client.websocket_connect("/") as ws:
            ws.send_text("a_1")
            with pytest.raises(WebSocketDisconnect) as info:
                ws.receive_text()
        assert info.value.code == INTERNAL_ERROR_CLOSE_CODE
        assert str(handler.errors[0]) == "handler exploded"
        assert handler.close_codes == [INTERNAL_ERROR_CLOSE_CODE]
        assert handler.sessions[0].is_closed
        assert app.state.in_flight == 0
