"""
Upload Test Configuration and Fixtures
"""

import pytest

from gps.models.log_entry import GpsLogEntry
from recording.models.artifact import RecordingArtifact
from upload.controllers.upload_handoff import UploadHandoff
from upload.implementations.mock_uploader import MockUploader
from upload.models.session_metadata import SessionMetadata


@pytest.fixture
def make_artifact(tmp_path):
    """
    Factory for artifacts backed by a real file.

    Usage:
        artifact = make_artifact("session-1")
    """

    def _make(session_id="session-1", filename=None, size=2048):
        path = tmp_path / (filename or f"recording_{session_id}.mp4")
        path.write_bytes(b"\x00" * size)
        return RecordingArtifact(
            session_id=session_id,
            device_id="usb-1",
            path=path,
            duration_seconds=3.5,
            size_bytes=size,
            started_at=1_700_000_000.0,
        )

    return _make


@pytest.fixture
def artifact(make_artifact):
    return make_artifact()


@pytest.fixture
def metadata(artifact):
    return SessionMetadata(
        session_id=artifact.session_id,
        device_id=artifact.device_id,
        device_name="USB Camera (Field Cam)",
        started_at=artifact.started_at,
        duration_seconds=artifact.duration_seconds,
        size_bytes=artifact.size_bytes,
        gps_fix_count=3,
    )


@pytest.fixture
def gps_log():
    return [
        GpsLogEntry(timestamp=1.0, latitude=48.851, longitude=2.35, accuracy_m=5.0),
        GpsLogEntry(timestamp=2.0, latitude=48.852, longitude=2.35, accuracy_m=5.0),
        GpsLogEntry(timestamp=3.0, latitude=48.853, longitude=2.35, accuracy_m=5.0),
    ]


@pytest.fixture
def mock_uploader():
    uploader = MockUploader()
    yield uploader
    uploader.release()


@pytest.fixture
def handoff(mock_uploader, fake_clock):
    return UploadHandoff(mock_uploader, clock=fake_clock)
