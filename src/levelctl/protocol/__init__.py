"""Wire protocol for levelctl.

Public API:
    parse_command -- Map one inbound text frame to a typed Command
"""

from levelctl.protocol.parser import (
    INVALID_AUDIO_LEVEL,
    INVALID_BRIGHTNESS_LEVEL,
    INVALID_FORMAT,
    parse_command,
)

__all__ = [
    "INVALID_AUDIO_LEVEL",
    "INVALID_BRIGHTNESS_LEVEL",
    "INVALID_FORMAT",
    "parse_command",
]
