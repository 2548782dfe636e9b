"""In-memory device backend.

Records every level it is asked to apply instead of touching hardware.
Used for dry runs (``device.backend: memory``) and as a deterministic
controller in tests.
"""

from __future__ import annotations

import logging

from levelctl.device.base import DeviceController, DeviceControlError, check_percentage
from levelctl.domain.models import DeviceKind

logger = logging.getLogger(__name__)


class MemoryDeviceController(DeviceController):
    """Keeps the last applied levels in memory.

    Args:
        failures: Optional mapping of device kind to an error detail. A
            device listed here raises DeviceControlError with that detail
            on every call, which lets callers exercise error paths.
    """

    def __init__(self, failures: dict[DeviceKind, str] | None = None) -> None:
        self._failures = dict(failures or {})
        self.volume: int | None = None
        self.brightness: int | None = None
        self.history: list[tuple[DeviceKind, int]] = []

    def fail(self, device: DeviceKind, detail: str) -> None:
        """Make every later call for ``device`` fail with ``detail``."""
        self._failures[device] = detail

    def recover(self, device: DeviceKind) -> None:
        self._failures.pop(device, None)

    async def set_volume_level(self, percentage: int) -> None:
        self._apply(DeviceKind.VOLUME, percentage)
        self.volume = percentage

    async def set_brightness_level(self, percentage: int) -> None:
        self._apply(DeviceKind.BRIGHTNESS, percentage)
        self.brightness = percentage

    def _apply(self, device: DeviceKind, percentage: int) -> None:
        check_percentage(percentage, device.value)
        detail = self._failures.get(device)
        if detail is not None:
            raise DeviceControlError(detail, device=device.value)
        self.history.append((device, percentage))
        logger.debug("Memory %s level -> %d%%", device.value, percentage)
