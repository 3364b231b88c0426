"""
Mock Camera Source

Simulated built-in camera driver for tests and development machines.
"""

import logging
from typing import List, Optional

from core.errors import DeviceScanError, RecorderError
from devices.interfaces.camera_source_interface import CameraSourceInterface
from devices.models.device import CameraDescriptor

DEFAULT_MOCK_CAMERAS = [
    CameraDescriptor(device_id="builtin-back", name="Back Camera", node="/dev/video0"),
]


class MockCameraSource(CameraSourceInterface):
    """
    Mock built-in camera source.

    Usage:
        source = MockCameraSource()
        source.set_devices([CameraDescriptor("cam-1", "Front")])
        source.simulate_failure()  # next list_devices() raises
    """

    def __init__(self, devices: Optional[List[CameraDescriptor]] = None):
        self.logger = logging.getLogger(__name__)
        self._devices = list(DEFAULT_MOCK_CAMERAS if devices is None else devices)
        self._failure: Optional[RecorderError] = None
        self.list_call_count = 0

    def list_devices(self) -> List[CameraDescriptor]:
        self.list_call_count += 1

        if self._failure is not None:
            failure, self._failure = self._failure, None
            self.logger.error(f"[MOCK] Simulated camera enumeration failure: {failure}")
            raise failure

        self.logger.debug(f"[MOCK] Listing {len(self._devices)} built-in camera(s)")
        return list(self._devices)

    def is_available(self) -> bool:
        return True

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def set_devices(self, devices: List[CameraDescriptor]) -> None:
        """Replace the devices reported by the next scan"""
        self._devices = list(devices)

    def simulate_failure(self, error: Optional[RecorderError] = None) -> None:
        """Make the next list_devices() call raise"""
        self._failure = error or DeviceScanError("Simulated camera driver failure")
