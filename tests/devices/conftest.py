"""
Device Test Configuration and Fixtures
"""

import pytest

from devices.controllers.device_registry import DeviceRegistry
from devices.implementations.mock_camera_source import MockCameraSource
from devices.implementations.mock_usb_bus import MockUsbBus


@pytest.fixture
def camera_source():
    """Mock built-in driver reporting one back camera"""
    return MockCameraSource()


@pytest.fixture
def usb_bus():
    """Mock USB bus with a keyboard (class 0x03) and a camera (class 0x06)"""
    return MockUsbBus()


@pytest.fixture
def registry(camera_source, usb_bus):
    """Registry without auto-select, so selection is explicit in tests"""
    return DeviceRegistry(camera_source, usb_bus, auto_select=False)
