"""
Sysfs USB Bus

Lists USB peripherals from /sys/bus/usb/devices.

The reported class code is bDeviceClass. When a device defers its class
to its interfaces (bDeviceClass == 0), the first non-zero
bInterfaceClass is used instead.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from core.errors import DeviceScanError, PermissionDeniedError
from devices.constants import USB_SYSFS_PATH
from devices.interfaces.usb_bus_interface import UsbBusInterface
from devices.models.device import UsbDescriptor

# bDeviceClass value meaning "class defined per interface"
USB_CLASS_PER_INTERFACE = 0x00


class SysfsUsbBus(UsbBusInterface):
    """
    USB enumeration via sysfs.

    Usage:
        bus = SysfsUsbBus()
        for device in bus.list_devices():
            print(device.device_class, device.product_name)
    """

    def __init__(self, sysfs_path: Path = USB_SYSFS_PATH):
        self.logger = logging.getLogger(__name__)
        self.sysfs_path = Path(sysfs_path)

    def list_devices(self) -> List[UsbDescriptor]:
        try:
            entries = sorted(self.sysfs_path.iterdir(), key=lambda p: p.name)
        except FileNotFoundError as e:
            raise DeviceScanError(f"USB bus not found: {self.sysfs_path}") from e
        except PermissionError as e:
            raise PermissionDeniedError(f"Cannot read {self.sysfs_path}: {e}") from e
        except OSError as e:
            raise DeviceScanError(f"Cannot list {self.sysfs_path}: {e}") from e

        devices = []
        for entry in entries:
            # Interface entries ("1-1:1.0") have no bDeviceClass
            raw_class = self._read_attr(entry / "bDeviceClass")
            if raw_class is None:
                continue

            try:
                device_class = int(raw_class, 16)
            except ValueError:
                self.logger.warning(f"Bad bDeviceClass for {entry.name}: {raw_class!r}")
                continue

            if device_class == USB_CLASS_PER_INTERFACE:
                device_class = self._interface_class(entry)

            devices.append(
                UsbDescriptor(
                    device_id=f"usb-{entry.name}",
                    device_class=device_class,
                    product_name=self._read_attr(entry / "product") or "Unknown",
                    node=self._find_video_node(entry),
                ),
            )

        self.logger.debug(f"Found {len(devices)} USB device(s)")
        return devices

    def is_available(self) -> bool:
        return self.sysfs_path.exists() and os.access(self.sysfs_path, os.R_OK)

    def _interface_class(self, entry: Path) -> int:
        for interface in sorted(entry.glob(f"{entry.name}:*")):
            raw = self._read_attr(interface / "bInterfaceClass")
            if raw:
                try:
                    value = int(raw, 16)
                except ValueError:
                    continue
                if value != USB_CLASS_PER_INTERFACE:
                    return value
        return USB_CLASS_PER_INTERFACE

    def _find_video_node(self, entry: Path) -> Optional[str]:
        """Locate the /dev/videoN node exposed by one of the interfaces"""
        for node in sorted(entry.glob(f"{entry.name}:*/video4linux/video*")):
            index = self._read_attr(node / "index")
            if index in (None, "0"):
                return f"/dev/{node.name}"
        return None

    @staticmethod
    def _read_attr(path: Path) -> Optional[str]:
        try:
            return path.read_text().strip()
        except OSError:
            return None
