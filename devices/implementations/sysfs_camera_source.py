"""
Sysfs Camera Source

Lists built-in V4L2 cameras from /sys/class/video4linux.

Cameras attached over USB are skipped here; they are reported by the
USB bus source so each camera appears exactly once.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from core.errors import DeviceScanError, PermissionDeniedError
from devices.constants import V4L2_SYSFS_PATH
from devices.interfaces.camera_source_interface import CameraSourceInterface
from devices.models.device import CameraDescriptor


class SysfsCameraSource(CameraSourceInterface):
    """
    Built-in camera enumeration via sysfs.

    Each V4L2 device may expose several nodes (capture, metadata); only
    the node with index 0 is listed.

    Usage:
        source = SysfsCameraSource()
        cameras = source.list_devices()
    """

    def __init__(self, sysfs_path: Path = V4L2_SYSFS_PATH):
        self.logger = logging.getLogger(__name__)
        self.sysfs_path = Path(sysfs_path)

    def list_devices(self) -> List[CameraDescriptor]:
        if not self.sysfs_path.exists():
            # No V4L2 subsystem loaded means no built-in cameras
            self.logger.debug(f"{self.sysfs_path} not present, no built-in cameras")
            return []

        try:
            entries = sorted(
                self.sysfs_path.iterdir(),
                key=lambda p: self._node_number(p.name),
            )
        except PermissionError as e:
            raise PermissionDeniedError(f"Cannot read {self.sysfs_path}: {e}") from e
        except OSError as e:
            raise DeviceScanError(f"Cannot list {self.sysfs_path}: {e}") from e

        cameras = []
        for entry in entries:
            if not entry.name.startswith("video"):
                continue
            if self._read_attr(entry / "index") not in (None, "0"):
                continue
            if self._is_usb_device(entry):
                continue

            name = self._read_attr(entry / "name") or entry.name
            cameras.append(
                CameraDescriptor(
                    device_id=entry.name,
                    name=name,
                    node=f"/dev/{entry.name}",
                ),
            )

        self.logger.debug(f"Found {len(cameras)} built-in camera(s)")
        return cameras

    def is_available(self) -> bool:
        return self.sysfs_path.exists() and os.access(self.sysfs_path, os.R_OK)

    def _is_usb_device(self, entry: Path) -> bool:
        """True if the V4L2 node hangs off the USB bus"""
        try:
            real = os.path.realpath(entry / "device")
        except OSError:
            return False
        return "/usb" in real

    @staticmethod
    def _node_number(name: str) -> int:
        digits = name[len("video"):]
        return int(digits) if digits.isdigit() else 1 << 30

    @staticmethod
    def _read_attr(path: Path) -> Optional[str]:
        try:
            return path.read_text().strip()
        except OSError:
            return None
