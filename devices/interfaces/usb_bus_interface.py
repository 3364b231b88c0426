"""
USB Bus Interface

Abstract interface for USB device enumeration.

The bus reports every attached peripheral; filtering down to imaging
devices is the registry's job, not the bus's.
"""

from abc import ABC, abstractmethod
from typing import List

from devices.models.device import UsbDescriptor


class UsbBusInterface(ABC):
    """
    Abstract base class for USB bus enumeration.
    """

    @abstractmethod
    def list_devices(self) -> List[UsbDescriptor]:
        """
        List all USB peripherals in bus order.

        Returns:
            USB descriptors with class code and product name

        Raises:
            DeviceScanError: If the bus cannot be queried
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the USB bus can be queried.

        Returns:
            True if list_devices() is expected to work
        """
