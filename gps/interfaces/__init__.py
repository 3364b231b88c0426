"""
GPS Interfaces Package

Abstract contract for position providers.
"""

from gps.interfaces.position_provider_interface import (
    FixCallback,
    ProviderErrorCallback,
    PositionProviderInterface,
)

__all__ = [
    "FixCallback",
    "PositionProviderInterface",
    "ProviderErrorCallback",
]
