"""
Upload Module Integration Tests

Tests cover:
1. Factory creates correct implementations
2. Handoff with a factory-built uploader end to end
3. Metadata flattening for Drive appProperties
4. Serialized GPS log survives the handoff unchanged
"""

from unittest.mock import patch

import pytest

from gps.utils.log_format import parse_gps_log
from upload import UploadHandoff, create_upload_handoff
from upload.factory import UploaderFactory, create_uploader
from upload.implementations.mock_uploader import MockUploader
from upload.models.session_metadata import SessionMetadata

# =============================================================================
# FACTORY TESTS
# =============================================================================


@pytest.mark.integration
class TestUploaderFactory:
    """Test factory mode selection"""

    def test_mock_mode(self):
        assert isinstance(UploaderFactory.create_uploader(mode="mock"), MockUploader)

    def test_force_mock(self):
        assert isinstance(create_uploader(force_mock=True), MockUploader)

    def test_auto_falls_back_to_mock(self):
        with patch.object(
            UploaderFactory,
            "_create_drive_uploader",
            side_effect=FileNotFoundError("client_secret.json"),
        ):
            uploader = UploaderFactory.create_uploader(mode="auto")

        assert isinstance(uploader, MockUploader)

    def test_drive_mode_raises_without_credentials(self):
        with patch.object(
            UploaderFactory,
            "_create_drive_uploader",
            side_effect=FileNotFoundError("client_secret.json"),
        ):
            with pytest.raises(RuntimeError):
                UploaderFactory.create_uploader(mode="drive")

    def test_create_upload_handoff(self):
        handoff = create_upload_handoff(force_mock=True)

        assert isinstance(handoff, UploadHandoff)
        assert isinstance(handoff.uploader, MockUploader)


# =============================================================================
# HANDOFF FLOW
# =============================================================================


@pytest.mark.integration
class TestHandoffFlow:
    """Submission, failure and retry through the public API"""

    def test_log_round_trips_through_handoff(self, handoff, artifact, gps_log, metadata, mock_uploader):
        handoff.submit(artifact, gps_log, metadata)

        sent = mock_uploader.get_last_upload()["serialized_log"]
        assert parse_gps_log(sent) == gps_log

    def test_fail_then_retry_then_clear(self, handoff, artifact, gps_log, metadata, mock_uploader):
        mock_uploader.fail_next()

        assert handoff.submit(artifact, gps_log, metadata).success is False
        assert artifact.path.exists()
        assert handoff.retry(artifact.session_id).success is True
        assert handoff.retained_session_ids == []
        assert mock_uploader.submit_calls == 2


# =============================================================================
# METADATA
# =============================================================================


@pytest.mark.unit
class TestSessionMetadata:
    """Test appProperties flattening"""

    def test_properties_are_strings(self, metadata):
        properties = metadata.to_properties()

        assert all(isinstance(v, str) for v in properties.values())
        assert properties["session_id"] == metadata.session_id
        assert properties["gps_fix_count"] == "3"
        assert properties["duration_seconds"] == "3.5"
        assert "gps_error" not in properties

    def test_gps_error_is_truncated(self):
        metadata = SessionMetadata(
            session_id="s1",
            device_id="builtin-0",
            device_name="Built-in Camera",
            started_at=0.0,
            duration_seconds=1.0,
            size_bytes=10,
            gps_error="x" * 300,
        )

        assert len(metadata.to_properties()["gps_error"]) == 100

    def test_started_iso_is_utc(self, metadata):
        assert metadata.started_iso.endswith("+00:00")
