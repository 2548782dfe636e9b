"""Abstract base class for local device control.

All device backends must conform to this interface, enabling the
session handler to swap between the real OS-backed controller and the
in-memory controller without changing any other code.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

MIN_PERCENTAGE = 0
MAX_PERCENTAGE = 100


class DeviceController(ABC):
    """Abstract interface for applying volume and brightness levels.

    Implementations translate a percentage (0-100) into whatever the
    platform needs: a sysfs write, a sound-server call, a mock record.
    Failures are reported by raising DeviceControlError, whose message is
    relayed to the remote client verbatim.

    Example usage::

        async with SystemDeviceController() as devices:
            await devices.set_volume_level(50)
            await devices.set_brightness_level(70)
    """

    async def open(self) -> None:
        """Acquire any resources the backend needs. Optional."""

    async def close(self) -> None:
        """Release backend resources. Safe to call multiple times."""

    @abstractmethod
    async def set_volume_level(self, percentage: int) -> None:
        """Set the default audio output volume.

        Args:
            percentage: Target level, 0-100.

        Raises:
            DeviceControlError: If the volume cannot be applied.
        """
        ...

    @abstractmethod
    async def set_brightness_level(self, percentage: int) -> None:
        """Set the display backlight brightness.

        Args:
            percentage: Target level, 0-100.

        Raises:
            DeviceControlError: If the brightness cannot be applied.
        """
        ...

    async def __aenter__(self) -> DeviceController:
        await self.open()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.close()


class DeviceControlError(Exception):
    """Raised when a device level cannot be applied."""

    def __init__(self, message: str, device: str = "") -> None:
        super().__init__(message)
        self.device = device


def check_percentage(percentage: int, device: str) -> None:
    """Reject levels outside 0-100 before touching any hardware."""
    if not MIN_PERCENTAGE <= percentage <= MAX_PERCENTAGE:
        raise DeviceControlError(
            f"{device.capitalize()} percentage must be between "
            f"{MIN_PERCENTAGE} and {MAX_PERCENTAGE}.",
            device=device,
        )
