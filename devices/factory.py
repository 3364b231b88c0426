"""
Device Factory

Factory pattern for creating device enumeration sources.
Automatically selects sysfs or mock sources based on availability.

Same shape as recording/factory.py and upload/factory.py.
"""

import logging
from typing import Literal, Tuple

from devices.implementations.mock_camera_source import MockCameraSource
from devices.implementations.mock_usb_bus import MockUsbBus
from devices.implementations.sysfs_camera_source import SysfsCameraSource
from devices.implementations.sysfs_usb_bus import SysfsUsbBus
from devices.interfaces.camera_source_interface import CameraSourceInterface
from devices.interfaces.usb_bus_interface import UsbBusInterface

# Type alias for better type hints
DeviceMode = Literal["auto", "real", "mock"]


class DeviceFactory:
    """
    Factory for creating device sources.

    Usage:
        # Auto-detect (sysfs if readable, mock otherwise)
        camera_source = DeviceFactory.create_camera_source()
        usb_bus = DeviceFactory.create_usb_bus()

        # Force mock mode (useful for testing)
        usb_bus = DeviceFactory.create_usb_bus(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_camera_source(
        cls,
        mode: DeviceMode = "auto",
    ) -> CameraSourceInterface:
        """
        Create a built-in camera source.

        Raises:
            RuntimeError: If mode="real" but sysfs is not readable
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Camera Source (forced)")
            return MockCameraSource()

        source = SysfsCameraSource()
        if mode == "real":
            if not source.is_available():
                raise RuntimeError(f"Camera sysfs not readable: {source.sysfs_path}")
            cls._logger.info("Creating Sysfs Camera Source (forced)")
            return source

        if source.is_available():
            cls._logger.info("Creating Sysfs Camera Source (auto-detected)")
            return source

        cls._logger.warning("Camera sysfs not available, using Mock Camera Source")
        return MockCameraSource()

    @classmethod
    def create_usb_bus(cls, mode: DeviceMode = "auto") -> UsbBusInterface:
        """
        Create a USB bus source.

        Raises:
            RuntimeError: If mode="real" but sysfs is not readable
        """
        if mode == "mock":
            cls._logger.info("Creating Mock USB Bus (forced)")
            return MockUsbBus()

        bus = SysfsUsbBus()
        if mode == "real":
            if not bus.is_available():
                raise RuntimeError(f"USB sysfs not readable: {bus.sysfs_path}")
            cls._logger.info("Creating Sysfs USB Bus (forced)")
            return bus

        if bus.is_available():
            cls._logger.info("Creating Sysfs USB Bus (auto-detected)")
            return bus

        cls._logger.warning("USB sysfs not available, using Mock USB Bus")
        return MockUsbBus()


# Convenience function for quick creation

def create_device_sources(
    force_mock: bool = False,
) -> Tuple[CameraSourceInterface, UsbBusInterface]:
    """
    Quick creation of both device sources.

    Example:
        camera_source, usb_bus = create_device_sources(force_mock=True)
        registry = DeviceRegistry(camera_source, usb_bus)
    """
    mode: DeviceMode = "mock" if force_mock else "auto"
    return (
        DeviceFactory.create_camera_source(mode=mode),
        DeviceFactory.create_usb_bus(mode=mode),
    )
