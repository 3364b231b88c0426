"""
Recording Utility Tests
"""

import re
from pathlib import Path

import pytest

from recording.constants import format_duration, get_ffmpeg_command
from recording.utils.recording_utils import (
    format_file_size,
    generate_filename,
    new_session_id,
)


@pytest.mark.unit
def test_new_session_ids_are_unique_hex():
    ids = {new_session_id() for _ in range(100)}

    assert len(ids) == 100
    assert all(re.fullmatch(r"[0-9a-f]{32}", i) for i in ids)


@pytest.mark.unit
def test_generate_filename_pattern():
    path = generate_filename(Path("/recordings"), "abcdef0123456789")

    assert path.parent == Path("/recordings")
    assert re.fullmatch(r"recording_\d{4}-\d{2}-\d{2}_\d{6}_abcdef01\.mp4", path.name)


@pytest.mark.unit
def test_format_file_size():
    assert format_file_size(512) == "512 B"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(52428800) == "50.0 MB"


@pytest.mark.unit
def test_format_duration():
    assert format_duration(90) == "1:30"
    assert format_duration(3.5) == "0:03"


@pytest.mark.unit
def test_ffmpeg_command_carries_caps():
    command = get_ffmpeg_command(
        "/dev/video2",
        "out.mp4",
        max_duration=300,
        max_size_bytes=1000,
    )

    assert command[command.index("-i") + 1] == "/dev/video2"
    assert command[command.index("-t") + 1] == "300"
    assert command[command.index("-fs") + 1] == "1000"
    assert command[-1] == "out.mp4"


@pytest.mark.unit
def test_ffmpeg_command_without_caps():
    command = get_ffmpeg_command("/dev/video0", "out.mp4")

    assert "-t" not in command
    assert "-fs" not in command
