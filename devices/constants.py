"""
Device Constants

Enums and discovery settings for camera enumeration.

Note: Configuration values (sysfs paths, class codes) live in
config/settings.py. This file re-exports them alongside device enums.
"""

from enum import Enum

from config.settings import (
    AUTO_SELECT_FIRST_DEVICE,
    USB_CLASS_IMAGING,
    USB_SYSFS_PATH,
    V4L2_SYSFS_PATH,
)

__all__ = [
    "AUTO_SELECT_FIRST_DEVICE",
    "USB_CLASS_IMAGING",
    "USB_DISPLAY_NAME_FORMAT",
    "USB_SYSFS_PATH",
    "V4L2_SYSFS_PATH",
    "DeviceKind",
]


class DeviceKind(Enum):
    """Where a camera was discovered"""

    BUILT_IN = "built-in"
    USB = "usb"


# Display name for USB cameras, filled with the product name
USB_DISPLAY_NAME_FORMAT = "USB Camera ({product})"
