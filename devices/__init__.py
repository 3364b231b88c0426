"""
Devices Module

Camera discovery for built-in and USB-attached cameras.

Public API:
    - DeviceRegistry: Merged, selectable camera list
    - Device / DeviceKind: Normalized camera model
    - DeviceFactory / create_device_sources: Sysfs or mock sources

Usage:
    from devices import DeviceRegistry, create_device_sources

    camera_source, usb_bus = create_device_sources()
    registry = DeviceRegistry(camera_source, usb_bus)
    registry.scan()
"""

from devices.constants import DeviceKind
from devices.controllers.device_registry import DeviceRegistry
from devices.factory import DeviceFactory, create_device_sources
from devices.models.device import CameraDescriptor, Device, UsbDescriptor

__all__ = [
    "CameraDescriptor",
    "Device",
    "DeviceFactory",
    "DeviceKind",
    "DeviceRegistry",
    "UsbDescriptor",
    "create_device_sources",
]
