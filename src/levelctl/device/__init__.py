"""Device control module for levelctl.

Applies volume and brightness levels via pluggable backends. The
abstract interface lets the session handler run against the real Linux
backend or the in-memory backend without any other change.

Public API:
    DeviceController -- Abstract base class
    DeviceControlError -- Failure raised by any backend
    MemoryDeviceController -- Records levels in memory
    SystemDeviceController -- sysfs backlight + pactl volume
"""

from levelctl.device.base import DeviceController, DeviceControlError
from levelctl.device.memory import MemoryDeviceController

__all__ = [
    "DeviceController",
    "DeviceControlError",
    "MemoryDeviceController",
    "SystemDeviceController",
    "create_device_controller",
]


def __getattr__(name: str) -> type:
    """Lazy import for the OS-backed implementation."""
    if name == "SystemDeviceController":
        from levelctl.device.system import SystemDeviceController
        return SystemDeviceController
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def create_device_controller(
    backend: str,
    backlight_device: str | None = None,
    pactl_command: str = "pactl",
    sink: str = "@DEFAULT_SINK@",
) -> DeviceController:
    """Build the controller named by ``device.backend`` in the settings."""
    if backend == "memory":
        return MemoryDeviceController()
    if backend == "system":
        from levelctl.device.system import SystemDeviceController
        return SystemDeviceController(
            backlight_device=backlight_device,
            pactl_command=pactl_command,
            sink=sink,
        )
    raise ValueError(f"Unknown device backend: {backend!r}")
