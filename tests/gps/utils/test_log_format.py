"""
GPS Log Format Tests

JSON Lines serialization used for uploads and the crash journal.
"""

import json

import pytest

from gps.models.log_entry import GpsLogEntry
from gps.utils.log_format import parse_gps_log, read_gps_journal, serialize_gps_log


@pytest.fixture
def entries():
    return [
        GpsLogEntry(timestamp=1.0, latitude=48.0, longitude=2.0, accuracy_m=5.0),
        GpsLogEntry(timestamp=2.0, latitude=48.001, longitude=2.001, accuracy_m=None),
    ]


@pytest.mark.unit
def test_empty_log_serializes_to_empty_string():
    assert serialize_gps_log([]) == ""


@pytest.mark.unit
def test_one_json_object_per_line(entries):
    lines = serialize_gps_log(entries).splitlines()

    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["timestamp"] == 1.0
    assert first["time"] == "1970-01-01T00:00:01+00:00"
    assert first["accuracy_m"] == 5.0
    assert json.loads(lines[1])["accuracy_m"] is None


@pytest.mark.unit
def test_parse_returns_entries_in_order(entries):
    assert parse_gps_log(serialize_gps_log(entries)) == entries


@pytest.mark.unit
def test_parse_skips_torn_last_line(entries):
    text = serialize_gps_log(entries) + '{"timestamp": 3.0, "lati'

    assert parse_gps_log(text) == entries


@pytest.mark.unit
def test_strict_parse_raises_on_bad_line(entries):
    text = serialize_gps_log(entries) + "not json\n"

    with pytest.raises(ValueError, match="line 3"):
        parse_gps_log(text, strict=True)


@pytest.mark.unit
def test_parse_skips_lines_that_are_not_objects(entries):
    text = "[1]\n" + serialize_gps_log(entries) + '"fix"\n42\n'

    assert parse_gps_log(text) == entries


@pytest.mark.unit
def test_strict_parse_rejects_non_object_line(entries):
    text = serialize_gps_log(entries) + "[48.0, 2.0]\n"

    with pytest.raises(ValueError, match="line 3"):
        parse_gps_log(text, strict=True)


@pytest.mark.unit
def test_read_gps_journal(tmp_path, entries):
    path = tmp_path / "session.gps.jsonl"
    path.write_text(serialize_gps_log(entries), encoding="utf-8")

    assert read_gps_journal(path) == entries
