"""
Device Models

Data classes for discovered cameras.

Descriptors are what the sources report; Device is the normalized shape
the rest of the system selects and records from.
"""

from dataclasses import dataclass
from typing import Optional

from devices.constants import USB_DISPLAY_NAME_FORMAT, DeviceKind


@dataclass(frozen=True)
class CameraDescriptor:
    """Built-in camera as reported by the camera driver"""

    device_id: str
    name: str
    node: Optional[str] = None  # e.g. /dev/video0


@dataclass(frozen=True)
class UsbDescriptor:
    """Any USB peripheral as reported by the USB bus"""

    device_id: str
    device_class: int
    product_name: str
    node: Optional[str] = None


@dataclass(frozen=True)
class Device:
    """
    A selectable capture device.

    Identity is `id`, unique within one registry snapshot. Instances are
    immutable and replaced wholesale on every scan.
    """

    id: str
    display_name: str
    kind: DeviceKind
    node: Optional[str] = None  # Capture node, not part of identity

    @classmethod
    def from_camera(cls, descriptor: CameraDescriptor) -> "Device":
        return cls(
            id=descriptor.device_id,
            display_name=descriptor.name,
            kind=DeviceKind.BUILT_IN,
            node=descriptor.node,
        )

    @classmethod
    def from_usb(cls, descriptor: UsbDescriptor) -> "Device":
        return cls(
            id=descriptor.device_id,
            display_name=USB_DISPLAY_NAME_FORMAT.format(
                product=descriptor.product_name,
            ),
            kind=DeviceKind.USB,
            node=descriptor.node,
        )

    @property
    def is_usb(self) -> bool:
        return self.kind == DeviceKind.USB

    def to_dict(self) -> dict:
        """Convert to dictionary for status reporting"""
        return {
            "id": self.id,
            "display_name": self.display_name,
            "kind": self.kind.value,
            "node": self.node,
        }
