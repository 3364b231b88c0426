"""
Device Registry

Discovers cameras from the built-in driver and the USB bus and merges
them into one selectable list.

SOLID Principles:
- Single Responsibility: Only owns the device list and the selection
- Dependency Inversion: Depends on CameraSourceInterface / UsbBusInterface
- Open/Closed: Callbacks for list changes and selection loss
"""

import logging
import threading
from typing import Callable, List, Optional

from core.errors import DeviceScanError, RecorderError
from devices.constants import AUTO_SELECT_FIRST_DEVICE, USB_CLASS_IMAGING
from devices.interfaces.camera_source_interface import CameraSourceInterface
from devices.interfaces.usb_bus_interface import UsbBusInterface
from devices.models.device import Device


class DeviceRegistry:
    """
    Owns the current device snapshot and the selected device.

    Rules:
    - Built-in cameras first, then USB cameras, each in source order
    - Only USB devices reporting the imaging class are listed
    - Each scan replaces the list wholesale (no merge by id)
    - If the selected device is gone after a scan, the selection is
      cleared and on_selection_lost fires
    - If either source fails, scan() raises and nothing changes

    Usage:
        registry = DeviceRegistry(camera_source, usb_bus)
        registry.on_selection_lost = lambda device: print(f"Lost {device.id}")

        devices = registry.scan()
        registry.select(devices[0].id)
    """

    def __init__(
        self,
        camera_source: CameraSourceInterface,
        usb_bus: UsbBusInterface,
        auto_select: bool = AUTO_SELECT_FIRST_DEVICE,
    ):
        """
        Initialize device registry.

        Args:
            camera_source: Built-in camera driver
            usb_bus: USB bus enumerator
            auto_select: Select the first device when a scan finds devices
                         and nothing is selected yet
        """
        self.logger = logging.getLogger(__name__)
        self.camera_source = camera_source
        self.usb_bus = usb_bus
        self.auto_select = auto_select

        self._lock = threading.Lock()
        self._devices: List[Device] = []
        self._selected: Optional[Device] = None
        self._scan_count = 0

        # Callbacks
        self.on_devices_changed: Optional[Callable[[List[Device]], None]] = None
        self.on_selection_lost: Optional[Callable[[Device], None]] = None

        self.logger.info("Device Registry initialized")

    # =========================================================================
    # DISCOVERY
    # =========================================================================

    def scan(self) -> List[Device]:
        """
        Enumerate both sources and replace the device list.

        Returns:
            The new device list

        Raises:
            DeviceScanError: If either source fails. The previous list and
                             selection are left untouched.
        """
        self.logger.info("Scanning for cameras...")

        try:
            built_in = self.camera_source.list_devices()
            usb = self.usb_bus.list_devices()
        except RecorderError as e:
            self.logger.error(f"Device scan failed, keeping previous list: {e}")
            raise DeviceScanError(f"Device scan failed: {e}", kind=e.kind) from e
        except Exception as e:
            self.logger.error(f"Device scan failed, keeping previous list: {e}")
            raise DeviceScanError(f"Device scan failed: {e}") from e

        devices = [Device.from_camera(d) for d in built_in]
        devices.extend(
            Device.from_usb(d) for d in usb if d.device_class == USB_CLASS_IMAGING
        )

        skipped = len(usb) - (len(devices) - len(built_in))
        if skipped:
            self.logger.debug(f"Ignored {skipped} non-imaging USB device(s)")

        lost: Optional[Device] = None
        with self._lock:
            had_selection = self._selected is not None
            self._devices = devices
            self._scan_count += 1

            current = None
            if self._selected is not None:
                current = next((d for d in devices if d.id == self._selected.id), None)

            if self._selected is not None and current is None:
                lost = self._selected
                self._selected = None
            elif current is not None:
                # Rebind to the fresh snapshot (node may have changed)
                self._selected = current
            elif not had_selection and self.auto_select and devices:
                self._selected = devices[0]
                self.logger.info(f"Auto-selected camera: {devices[0].display_name}")

        self.logger.info(
            f"Scan complete: {len(built_in)} built-in, "
            f"{len(devices) - len(built_in)} USB camera(s)",
        )

        self._trigger_devices_changed(devices)
        if lost is not None:
            self.logger.warning(f"Selected camera disappeared: {lost.display_name}")
            self._trigger_selection_lost(lost)

        return list(devices)

    # =========================================================================
    # SELECTION
    # =========================================================================

    def select(self, device_id: str) -> bool:
        """
        Select a device from the current snapshot.

        Returns:
            True if selected, False if no device has that id
        """
        with self._lock:
            for device in self._devices:
                if device.id == device_id:
                    self._selected = device
                    self.logger.info(f"Selected camera: {device.display_name}")
                    return True

        self.logger.warning(f"Cannot select unknown device: {device_id}")
        return False

    def clear_selection(self) -> None:
        with self._lock:
            self._selected = None

    @property
    def selected(self) -> Optional[Device]:
        return self._selected

    @property
    def devices(self) -> List[Device]:
        with self._lock:
            return list(self._devices)

    def get_device(self, device_id: str) -> Optional[Device]:
        with self._lock:
            return next((d for d in self._devices if d.id == device_id), None)

    # =========================================================================
    # CALLBACK TRIGGERS
    # =========================================================================

    def _trigger_devices_changed(self, devices: List[Device]) -> None:
        """Trigger on_devices_changed callback"""
        if self.on_devices_changed:
            try:
                self.on_devices_changed(list(devices))
            except Exception as e:
                self.logger.error(f"Error in devices changed callback: {e}")

    def _trigger_selection_lost(self, device: Device) -> None:
        """Trigger on_selection_lost callback"""
        if self.on_selection_lost:
            try:
                self.on_selection_lost(device)
            except Exception as e:
                self.logger.error(f"Error in selection lost callback: {e}")

    # =========================================================================
    # STATUS AND INFO
    # =========================================================================

    def get_status(self) -> dict:
        """
        Get registry status.

        Returns:
            Dictionary with device list and selection
        """
        with self._lock:
            return {
                "devices": [d.to_dict() for d in self._devices],
                "selected": self._selected.to_dict() if self._selected else None,
                "scan_count": self._scan_count,
            }
