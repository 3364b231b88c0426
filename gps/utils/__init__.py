"""
GPS Utilities Package

Log serialization and NMEA parsing helpers.
"""

from gps.utils.log_format import (
    format_entry,
    parse_gps_log,
    read_gps_journal,
    serialize_gps_log,
)
from gps.utils.nmea import parse_gga, validate_checksum

__all__ = [
    "format_entry",
    "parse_gga",
    "parse_gps_log",
    "read_gps_journal",
    "serialize_gps_log",
    "validate_checksum",
]
