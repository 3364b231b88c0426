"""
GPS Constants

Sampler states and position settings.

Note: Tunable values (serial port, cadence, UERE) live in
config/settings.py and are re-exported here.
"""

from enum import Enum

from config.settings import (
    GPS_BAUDRATE,
    GPS_JOURNAL_DIR,
    GPS_READ_TIMEOUT,
    GPS_SAMPLE_INTERVAL,
    GPS_SERIAL_PORT,
    GPS_UERE_METERS,
)

__all__ = [
    "GPS_BAUDRATE",
    "GPS_JOURNAL_DIR",
    "GPS_JOURNAL_SUFFIX",
    "GPS_READ_TIMEOUT",
    "GPS_SAMPLE_INTERVAL",
    "GPS_SERIAL_PORT",
    "GPS_UERE_METERS",
    "NMEA_GGA_TYPES",
    "GpsState",
]


class GpsState(Enum):
    """
    Sampler lifecycle.

    Lifecycle: STOPPED -> STARTING -> ACTIVE -> STOPPED
    A failed start goes straight back to STOPPED.
    """

    STOPPED = "stopped"
    STARTING = "starting"
    ACTIVE = "active"


# Journal file name: <session_id><suffix>
GPS_JOURNAL_SUFFIX = ".gps.jsonl"

# GGA talker variants (GPS, GLONASS, combined GNSS)
NMEA_GGA_TYPES = ("GPGGA", "GLGGA", "GNGGA")
