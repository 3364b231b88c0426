"""
NMEA Parsing

Minimal NMEA 0183 parsing for GGA sentences (position + HDOP).
"""

from typing import Optional

from gps.constants import NMEA_GGA_TYPES


def validate_checksum(sentence: str) -> bool:
    """Validate NMEA checksum ($...*HH)"""
    if not sentence.startswith("$") or "*" not in sentence:
        return False
    payload, checksum_str = sentence[1:].split("*", 1)
    try:
        expected = int(checksum_str[:2], 16)
    except ValueError:
        return False
    calculated = 0
    for char in payload:
        calculated ^= ord(char)
    return calculated == expected


def _parse_latlon(value: str, direction: str, is_lat: bool) -> Optional[float]:
    """Parse DDMM.MMMM / DDDMM.MMMM into decimal degrees"""
    if not value or not direction:
        return None
    deg_len = 2 if is_lat else 3
    if len(value) <= deg_len:
        return None
    try:
        degrees = int(value[:deg_len])
        minutes = float(value[deg_len:])
    except ValueError:
        return None
    decimal = degrees + minutes / 60.0
    if direction.upper() in ("S", "W"):
        decimal = -decimal
    return decimal


def parse_gga(sentence: str) -> Optional[dict]:
    """
    Parse a GGA sentence.

    Returns:
        {'latitude', 'longitude', 'hdop', 'satellites'} for a valid fix,
        None for other sentence types, bad checksums or no-fix sentences

    Example:
        parse_gga("$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47")
        # {'latitude': 48.1173, 'longitude': 11.5166..., 'hdop': 0.9, 'satellites': 8}
    """
    sentence = sentence.strip()
    if not validate_checksum(sentence):
        return None

    fields = sentence[1:].split("*", 1)[0].split(",")
    if fields[0] not in NMEA_GGA_TYPES or len(fields) < 9:
        return None

    # Fix quality 0 = no fix
    if not fields[6] or fields[6] == "0":
        return None

    latitude = _parse_latlon(fields[2], fields[3], is_lat=True)
    longitude = _parse_latlon(fields[4], fields[5], is_lat=False)
    if latitude is None or longitude is None:
        return None

    try:
        hdop = float(fields[8]) if fields[8] else None
    except ValueError:
        hdop = None
    try:
        satellites = int(fields[7]) if fields[7] else 0
    except ValueError:
        satellites = 0

    return {
        "latitude": latitude,
        "longitude": longitude,
        "hdop": hdop,
        "satellites": satellites,
    }
