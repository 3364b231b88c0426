"""Device data models."""

from devices.models.device import CameraDescriptor, Device, UsbDescriptor

__all__ = ["CameraDescriptor", "Device", "UsbDescriptor"]
