"""
Device Implementations Package

Concrete enumeration sources (Linux sysfs and mocks).
"""

from devices.implementations.mock_camera_source import MockCameraSource
from devices.implementations.mock_usb_bus import MockUsbBus
from devices.implementations.sysfs_camera_source import SysfsCameraSource
from devices.implementations.sysfs_usb_bus import SysfsUsbBus

__all__ = [
    "MockCameraSource",
    "MockUsbBus",
    "SysfsCameraSource",
    "SysfsUsbBus",
]
