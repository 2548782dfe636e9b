"""Domain models for levelctl.

This package contains the command variants produced by the protocol
parser and the per-connection session model. All models use Pydantic v2
for validation.
"""

from levelctl.domain.models import (
    Command,
    DeviceKind,
    Invalid,
    Session,
    SessionState,
    SetBrightness,
    SetVolume,
)

__all__ = [
    "Command",
    "DeviceKind",
    "Invalid",
    "Session",
    "SessionState",
    "SetBrightness",
    "SetVolume",
]
