"""Tests for the command and session models."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from pydantic import TypeAdapter, ValidationError

from levelctl.domain.models import (
    Command,
    DeviceKind,
    Invalid,
    Session,
    SessionState,
    SetBrightness,
    SetVolume,
)


class TestCommands:
    def test_step_range_enforced(self) -> None:
        with pytest.raises(ValidationError):
            SetVolume(step=0)
        with pytest.raises(ValidationError):
            SetBrightness(step=11)

    def test_commands_are_frozen(self) -> None:
        command = SetVolume(step=4)
        with pytest.raises(ValidationError):
            command.step = 5  # type: ignore[misc]

    def test_device_and_percentage(self) -> None:
        assert SetVolume(step=3).device == DeviceKind.VOLUME
        assert SetBrightness(step=3).device == DeviceKind.BRIGHTNESS
        assert SetBrightness(step=10).percentage == 100

    def test_discriminated_union(self) -> None:
        adapter = TypeAdapter(Command)
        assert adapter.validate_python({"command_type": "set_brightness", "step": 2}) == SetBrightness(step=2)
        assert adapter.validate_python({"command_type": "invalid", "reason": "x"}) == Invalid(reason="x")


class TestSession:
    def test_unknown_peer(self) -> None:
        assert Session().peer == "Unknown IP"

    def test_known_peer(self) -> None:
        session = Session(peer_address="10.0.0.2")
        assert session.peer == "10.0.0.2"
        assert session.state == SessionState.OPENED
        assert not session.is_closed

    def test_duration_counts_from_connect(self) -> None:
        opened = datetime.now() - timedelta(seconds=30)
        session = Session(connected_at=opened)
        assert session.duration >= timedelta(seconds=30)
        assert session.duration < timedelta(seconds=60)
