"""Low-level backlight writer for /sys/class/backlight.

Each backlight device exposes two files the daemon cares about:

    max_brightness   raw ceiling reported by the driver (read-only)
    brightness       current raw level (writable by root or the video group)

A percentage is scaled against max_brightness before being written.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_SYSFS_ROOT = "/sys/class/backlight"


class BacklightWriteError(Exception):
    """Raised when reading or writing a backlight device fails."""


def discover_backlights(sysfs_root: str | Path = DEFAULT_SYSFS_ROOT) -> list[str]:
    """Return the names of all backlight devices, sorted."""
    root = Path(sysfs_root)
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if (p / "brightness").exists())


class BacklightWriter:
    """Writes brightness levels to one sysfs backlight device.

    Usage::

        writer = BacklightWriter("intel_backlight")
        await writer.write_percentage(70)
    """

    def __init__(self, device_name: str, sysfs_root: str | Path = DEFAULT_SYSFS_ROOT) -> None:
        self._device_path = Path(sysfs_root) / device_name
        self._max_brightness: int | None = None

    @property
    def name(self) -> str:
        return self._device_path.name

    @property
    def device_path(self) -> Path:
        return self._device_path

    async def read_max_brightness(self) -> int:
        """Read (and cache) the driver's raw brightness ceiling."""
        if self._max_brightness is None:
            path = self._device_path / "max_brightness"
            try:
                loop = asyncio.get_running_loop()
                raw = await loop.run_in_executor(None, path.read_text)
                self._max_brightness = int(raw.strip())
            except (OSError, ValueError) as e:
                raise BacklightWriteError(
                    f"Cannot read {path}: {e}"
                ) from e
            if self._max_brightness <= 0:
                raise BacklightWriteError(
                    f"Backlight {self.name} reports max_brightness {self._max_brightness}"
                )
        return self._max_brightness

    def scale(self, percentage: int, max_brightness: int) -> int:
        return round(max_brightness * percentage / 100)

    async def write_percentage(self, percentage: int) -> int:
        """Write ``percentage`` of max_brightness. Returns the raw value written."""
        max_brightness = await self.read_max_brightness()
        value = self.scale(percentage, max_brightness)
        path = self._device_path / "brightness"
        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, lambda: path.write_text(f"{value}\n"))
        except OSError as e:
            raise BacklightWriteError(f"Cannot write {path}: {e}") from e
        logger.debug("Backlight %s -> %d/%d (%d%%)", self.name, value, max_brightness, percentage)
        return value
