"""Parser for the levelctl text command protocol.

Clients send one short directive per text frame:

    a_<N>   set output volume to N * 10 percent   (N: 1-10)
    b_<N>   set display brightness to N * 10 percent

Directives are searched for anywhere in the frame. When a frame contains
both shapes the volume directive wins, even if its level is out of range.
The parser is total: every string yields a Command, never an exception.
"""

from __future__ import annotations

import re

from levelctl.domain.models import (
    MAX_STEP,
    MIN_STEP,
    Command,
    Invalid,
    SetBrightness,
    SetVolume,
)

VOLUME_PATTERN = re.compile(r"a_([0-9]+)")
BRIGHTNESS_PATTERN = re.compile(r"b_([0-9]+)")

INVALID_AUDIO_LEVEL = "Invalid audio level. Please use 1-10."
INVALID_BRIGHTNESS_LEVEL = "Invalid brightness level. Please use 1-10."
INVALID_FORMAT = (
    "Invalid message format. Use 'a_X' for audio or 'b_X' for brightness (X: 1-10)"
)


def parse_command(raw: str) -> Command:
    """Parse one inbound message into a Command.

    Args:
        raw: The text frame exactly as received.

    Returns:
        SetVolume / SetBrightness for an in-range directive, otherwise an
        Invalid carrying the client-facing error message.
    """
    match = VOLUME_PATTERN.search(raw)
    if match:
        step = _parse_step(match.group(1))
        if step is None:
            return Invalid(reason=INVALID_AUDIO_LEVEL)
        return SetVolume(step=step)

    match = BRIGHTNESS_PATTERN.search(raw)
    if match:
        step = _parse_step(match.group(1))
        if step is None:
            return Invalid(reason=INVALID_BRIGHTNESS_LEVEL)
        return SetBrightness(step=step)

    return Invalid(reason=INVALID_FORMAT)


def _parse_step(digits: str) -> int | None:
    """Return the step for a digit run, or None when outside 1-10."""
    # Long runs are out of range; skip int() so huge inputs stay cheap
    significant = digits.lstrip("0")
    if len(significant) > len(str(MAX_STEP)):
        return None
    value = int(significant or "0")
    if MIN_STEP <= value <= MAX_STEP:
        return value
    return None
