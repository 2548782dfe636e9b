"""Linux system device backend.

Applies brightness through the kernel's sysfs backlight interface and
volume through the PulseAudio / PipeWire ``pactl`` client. This is the
production backend used when ``device.backend`` is ``system``.

Requires:
    - write access to /sys/class/backlight/*/brightness (root, or a udev
      rule granting the video group)
    - ``pactl`` on PATH and a running sound server for the daemon's user
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from levelctl.device.backlight import (
    DEFAULT_SYSFS_ROOT,
    BacklightWriteError,
    BacklightWriter,
    discover_backlights,
)
from levelctl.device.base import DeviceController, DeviceControlError, check_percentage

logger = logging.getLogger(__name__)

DEFAULT_SINK = "@DEFAULT_SINK@"


class SystemDeviceController(DeviceController):
    """Controls the local machine's backlight and default audio sink."""

    def __init__(
        self,
        backlight_device: str | None = None,
        sysfs_root: str | Path = DEFAULT_SYSFS_ROOT,
        pactl_command: str = "pactl",
        sink: str = DEFAULT_SINK,
    ) -> None:
        self._backlight_device = backlight_device
        self._sysfs_root = Path(sysfs_root)
        self._pactl_command = pactl_command
        self._sink = sink
        self._writers: list[BacklightWriter] | None = None

    async def open(self) -> None:
        """Discover backlight devices up front so startup logs show them."""
        writers = self._backlights()
        if writers:
            logger.info("Backlight devices: %s", ", ".join(w.name for w in writers))
        else:
            logger.warning(
                "No backlight devices under %s -- brightness commands will return errors",
                self._sysfs_root,
            )

    async def set_volume_level(self, percentage: int) -> None:
        check_percentage(percentage, "volume")
        args = [self._pactl_command, "set-sink-volume", self._sink, f"{percentage}%"]
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise DeviceControlError(
                f"Cannot run {self._pactl_command}: {e}", device="volume"
            ) from e
        _, stderr = await proc.communicate()
        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip() or f"exit status {proc.returncode}"
            raise DeviceControlError(detail, device="volume")
        logger.debug("Sink %s volume -> %d%%", self._sink, percentage)

    async def set_brightness_level(self, percentage: int) -> None:
        check_percentage(percentage, "brightness")
        writers = self._backlights()
        if not writers:
            raise DeviceControlError(
                f"No backlight device found under {self._sysfs_root}", device="brightness"
            )
        # Every panel gets the same level
        for writer in writers:
            try:
                await writer.write_percentage(percentage)
            except BacklightWriteError as e:
                raise DeviceControlError(str(e), device="brightness") from e

    def _backlights(self) -> list[BacklightWriter]:
        if self._writers is None:
            if self._backlight_device:
                names = [self._backlight_device]
            else:
                names = discover_backlights(self._sysfs_root)
            self._writers = [BacklightWriter(name, self._sysfs_root) for name in names]
        return self._writers
