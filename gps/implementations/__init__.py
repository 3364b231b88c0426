"""
GPS Implementations Package

Concrete position providers (serial NMEA receiver and mock).
"""

from gps.implementations.mock_position_provider import MockPositionProvider
from gps.implementations.nmea_serial_provider import NmeaSerialProvider

__all__ = [
    "MockPositionProvider",
    "NmeaSerialProvider",
]
