"""
Device Interfaces Package

Abstract contracts for camera and USB enumeration sources.
"""

from devices.interfaces.camera_source_interface import CameraSourceInterface
from devices.interfaces.usb_bus_interface import UsbBusInterface

__all__ = [
    "CameraSourceInterface",
    "UsbBusInterface",
]
