"""
NMEA Parsing Tests
"""

import pytest

from gps.utils.nmea import parse_gga, validate_checksum

VALID_GGA = "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47"


def _with_checksum(body: str) -> str:
    checksum = 0
    for char in body:
        checksum ^= ord(char)
    return f"${body}*{checksum:02X}"


@pytest.mark.unit
def test_valid_checksum():
    assert validate_checksum(VALID_GGA) is True


@pytest.mark.unit
def test_corrupted_sentence_fails_checksum():
    assert validate_checksum(VALID_GGA.replace("4807", "4808")) is False


@pytest.mark.unit
def test_parse_gga_position():
    fix = parse_gga(VALID_GGA)

    assert fix["latitude"] == pytest.approx(48.1173, abs=1e-4)
    assert fix["longitude"] == pytest.approx(11.516667, abs=1e-4)
    assert fix["hdop"] == 0.9
    assert fix["satellites"] == 8


@pytest.mark.unit
def test_parse_gga_southern_western_hemisphere():
    sentence = _with_checksum("GNGGA,000000,3351.000,S,07040.000,W,1,05,1.2,10.0,M,0,M,,")

    fix = parse_gga(sentence)

    assert fix["latitude"] == pytest.approx(-33.85)
    assert fix["longitude"] == pytest.approx(-70.666667, abs=1e-5)


@pytest.mark.unit
def test_parse_gga_without_fix_returns_none():
    sentence = _with_checksum("GPGGA,123519,,,,,0,00,,,M,,M,,")

    assert parse_gga(sentence) is None


@pytest.mark.unit
def test_other_sentence_types_are_ignored():
    sentence = _with_checksum("GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W")

    assert parse_gga(sentence) is None


@pytest.mark.unit
def test_missing_hdop_is_none():
    sentence = _with_checksum("GPGGA,123519,4807.038,N,01131.000,E,1,08,,545.4,M,46.9,M,,")

    assert parse_gga(sentence)["hdop"] is None
