"""
Camera Source Interface

Abstract interface for the built-in camera driver.

DeviceRegistry depends on this abstraction, so the sysfs scanner can be
swapped for a mock in tests or for another platform's driver API.
"""

from abc import ABC, abstractmethod
from typing import List

from devices.models.device import CameraDescriptor


class CameraSourceInterface(ABC):
    """
    Abstract base class for built-in camera enumeration.
    """

    @abstractmethod
    def list_devices(self) -> List[CameraDescriptor]:
        """
        List built-in cameras in the driver's native order.

        Returns:
            Camera descriptors (may be empty)

        Raises:
            DeviceScanError: If the driver cannot be queried
            PermissionDeniedError: If camera access is refused

        Example:
            for camera in source.list_devices():
                print(camera.name)
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the camera driver can be queried at all.

        Returns:
            True if list_devices() is expected to work
        """
