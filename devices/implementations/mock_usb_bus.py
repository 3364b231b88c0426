"""
Mock USB Bus

Simulated USB bus for tests and development machines.

The default device set mixes imaging and non-imaging peripherals so the
class filter is always exercised.
"""

import logging
from typing import List, Optional

from core.errors import DeviceScanError, RecorderError
from devices.interfaces.usb_bus_interface import UsbBusInterface
from devices.models.device import UsbDescriptor

DEFAULT_MOCK_USB_DEVICES = [
    UsbDescriptor(device_id="usb-kbd", device_class=0x03, product_name="Keyboard"),
    UsbDescriptor(
        device_id="usb-1",
        device_class=0x06,
        product_name="Field Cam",
        node="/dev/video2",
    ),
]


class MockUsbBus(UsbBusInterface):
    """
    Mock USB bus.

    Usage:
        bus = MockUsbBus(devices=[])
        bus.add_device(UsbDescriptor("usb-9", 0x06, "Dash Cam"))
    """

    def __init__(self, devices: Optional[List[UsbDescriptor]] = None):
        self.logger = logging.getLogger(__name__)
        self._devices = list(DEFAULT_MOCK_USB_DEVICES if devices is None else devices)
        self._failure: Optional[RecorderError] = None
        self.list_call_count = 0

    def list_devices(self) -> List[UsbDescriptor]:
        self.list_call_count += 1

        if self._failure is not None:
            failure, self._failure = self._failure, None
            self.logger.error(f"[MOCK] Simulated USB enumeration failure: {failure}")
            raise failure

        self.logger.debug(f"[MOCK] Listing {len(self._devices)} USB device(s)")
        return list(self._devices)

    def is_available(self) -> bool:
        return True

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def set_devices(self, devices: List[UsbDescriptor]) -> None:
        """Replace the devices reported by the next scan"""
        self._devices = list(devices)

    def add_device(self, device: UsbDescriptor) -> None:
        """Simulate a hot-plugged device"""
        self._devices.append(device)

    def remove_device(self, device_id: str) -> None:
        """Simulate an unplugged device"""
        self._devices = [d for d in self._devices if d.device_id != device_id]

    def simulate_failure(self, error: Optional[RecorderError] = None) -> None:
        """Make the next list_devices() call raise"""
        self._failure = error or DeviceScanError("Simulated USB bus failure")
