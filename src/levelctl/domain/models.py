"""Core domain models for the levelctl system.

These models represent the data flowing through a control session:
the typed command parsed from each inbound text frame, and the
bookkeeping kept for one client connection.
"""

from __future__ import annotations

import enum
from datetime import datetime, timedelta
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# Protocol exposes ten coarse steps, each worth 10%
MIN_STEP = 1
MAX_STEP = 10
PERCENT_PER_STEP = 10

UNKNOWN_PEER = "Unknown IP"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class DeviceKind(str, enum.Enum):
    """Which local facility a command targets."""

    VOLUME = "volume"
    BRIGHTNESS = "brightness"


class SessionState(str, enum.Enum):
    """Lifecycle state of one client connection."""

    OPENED = "opened"
    MESSAGING = "messaging"
    ERRORED = "errored"  # Not terminal; the socket may still close normally
    CLOSED = "closed"


# ---------------------------------------------------------------------------
# Command Models (discriminated union)
# ---------------------------------------------------------------------------


class SetVolume(BaseModel):
    """Set the default audio output to ``step * 10`` percent."""

    model_config = ConfigDict(frozen=True)

    command_type: Literal["set_volume"] = "set_volume"
    step: int = Field(ge=MIN_STEP, le=MAX_STEP, description="Volume step (1-10)")

    @property
    def device(self) -> DeviceKind:
        return DeviceKind.VOLUME

    @property
    def percentage(self) -> int:
        return self.step * PERCENT_PER_STEP


class SetBrightness(BaseModel):
    """Set the display backlight to ``step * 10`` percent."""

    model_config = ConfigDict(frozen=True)

    command_type: Literal["set_brightness"] = "set_brightness"
    step: int = Field(ge=MIN_STEP, le=MAX_STEP, description="Brightness step (1-10)")

    @property
    def device(self) -> DeviceKind:
        return DeviceKind.BRIGHTNESS

    @property
    def percentage(self) -> int:
        return self.step * PERCENT_PER_STEP


class Invalid(BaseModel):
    """A message that could not be turned into a device action."""

    model_config = ConfigDict(frozen=True)

    command_type: Literal["invalid"] = "invalid"
    reason: str = Field(description="Client-facing explanation, sent back verbatim")


# Discriminated union for parsed commands
Command = Annotated[
    Union[SetVolume, SetBrightness, Invalid],
    Field(discriminator="command_type"),
]


# ---------------------------------------------------------------------------
# Session Model
# ---------------------------------------------------------------------------


class Session(BaseModel):
    """Bookkeeping for one open client connection.

    Owned by the transport for the lifetime of its connection; never
    shared between connections.
    """

    peer_address: str | None = Field(
        default=None, description="Remote IP address, if the transport knows it"
    )
    state: SessionState = Field(default=SessionState.OPENED)
    connected_at: datetime = Field(default_factory=datetime.now)
    messages_handled: int = Field(default=0, ge=0)

    @property
    def peer(self) -> str:
        """Printable peer address, ``Unknown IP`` when absent."""
        return self.peer_address or UNKNOWN_PEER

    @property
    def is_closed(self) -> bool:
        return self.state == SessionState.CLOSED

    @property
    def duration(self) -> timedelta:
        """Time since the connection opened."""
        return datetime.now() - self.connected_at
