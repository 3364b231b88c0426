"""
Device Controllers Package

High-level device discovery and selection.
"""

from devices.controllers.device_registry import DeviceRegistry

# Public API
__all__ = [
    "DeviceRegistry",
]
