"""
Upload Handoff Tests

Tests for UploadHandoff showing:
- Submission with serialized GPS logs (empty log included)
- Failed uploads retained until dismissed
- Retry resubmits the identical artifact and log
- Uploader exceptions become failed results

To run:
    pytest tests/upload/controllers/test_upload_handoff.py -v
"""

import threading

import pytest

from upload.constants import UploadStatus
from upload.interfaces.uploader_interface import UploaderError

# =============================================================================
# SUBMIT TESTS
# =============================================================================


@pytest.mark.unit
def test_submit_success(handoff, artifact, gps_log, metadata, mock_uploader):
    result = handoff.submit(artifact, gps_log, metadata)

    assert result.success is True
    assert result.session_id == artifact.session_id
    assert result.file_id.startswith("mock_")
    assert handoff.retained_session_ids == []
    upload = mock_uploader.get_last_upload()
    assert upload["artifact_path"] == str(artifact.path)
    assert len(upload["serialized_log"].splitlines()) == 3


@pytest.mark.unit
def test_empty_log_is_valid(handoff, artifact, metadata, mock_uploader):
    result = handoff.submit(artifact, [], metadata)

    assert result.success is True
    assert mock_uploader.get_last_upload()["serialized_log"] == ""


@pytest.mark.unit
def test_failed_submit_is_retained(handoff, artifact, gps_log, metadata, mock_uploader, fake_clock):
    fake_clock.set(50.0)
    mock_uploader.fail_next(message="timeout talking to Drive")

    result = handoff.submit(artifact, gps_log, metadata)

    assert result.success is False
    assert result.status == UploadStatus.NETWORK_ERROR
    retained = handoff.get_retained(artifact.session_id)
    assert retained.artifact is artifact
    assert retained.gps_log == gps_log
    assert retained.attempts == 1
    assert retained.failed_at == 50.0
    assert retained.last_error == "timeout talking to Drive"


@pytest.mark.unit
def test_missing_file_fails_as_invalid(handoff, artifact, metadata):
    artifact.path.unlink()

    result = handoff.submit(artifact, [], metadata)

    assert result.status == UploadStatus.INVALID_FILE
    assert handoff.get_retained(artifact.session_id) is not None


@pytest.mark.unit
def test_uploader_exception_becomes_failed_result(handoff, artifact, metadata, mock_uploader):
    mock_uploader.simulate_exception(UploaderError("quota", status=UploadStatus.QUOTA_EXCEEDED))

    result = handoff.submit(artifact, [], metadata)

    assert result.success is False
    assert result.status == UploadStatus.QUOTA_EXCEEDED


@pytest.mark.unit
def test_unexpected_exception_becomes_failed_result(handoff, artifact, metadata, mock_uploader):
    mock_uploader.simulate_exception(RuntimeError("boom"))

    result = handoff.submit(artifact, [], metadata)

    assert result.success is False
    assert "boom" in result.error_message
    assert handoff.retained_session_ids == [artifact.session_id]


# =============================================================================
# RETRY TESTS
# =============================================================================


@pytest.mark.unit
def test_retry_resubmits_same_artifact_and_log(
    handoff,
    artifact,
    gps_log,
    metadata,
    mock_uploader,
):
    mock_uploader.fail_next()
    handoff.submit(artifact, gps_log, metadata)
    serialized = handoff.get_retained(artifact.session_id).serialized_log

    result = handoff.retry(artifact.session_id)

    assert result.success is True
    upload = mock_uploader.get_last_upload()
    assert upload["artifact_path"] == str(artifact.path)
    assert upload["serialized_log"] == serialized
    assert upload["metadata"] is metadata
    assert handoff.get_retained(artifact.session_id) is None


@pytest.mark.unit
def test_failed_retry_updates_attempts(handoff, artifact, metadata, mock_uploader):
    mock_uploader.fail_next(count=2)
    handoff.submit(artifact, [], metadata)

    result = handoff.retry(artifact.session_id)

    assert result.success is False
    retained = handoff.get_retained(artifact.session_id)
    assert retained.attempts == 2
    assert len(retained.errors) == 2


@pytest.mark.unit
def test_retry_unknown_session(handoff, mock_uploader):
    result = handoff.retry("nope")

    assert result.success is False
    assert result.status == UploadStatus.REJECTED
    assert mock_uploader.submit_calls == 0


@pytest.mark.unit
def test_concurrent_retry_is_rejected(handoff, artifact, metadata, mock_uploader):
    mock_uploader.fail_next()
    handoff.submit(artifact, [], metadata)

    mock_uploader.hold()
    results = []
    worker = threading.Thread(target=lambda: results.append(handoff.retry(artifact.session_id)))
    worker.start()
    assert mock_uploader.submit_started.wait(5.0)

    second = handoff.retry(artifact.session_id)

    mock_uploader.release()
    worker.join(5.0)
    assert second.success is False
    assert second.status == UploadStatus.REJECTED
    assert "in progress" in second.error_message
    assert results[0].success is True


# =============================================================================
# DISMISS TESTS
# =============================================================================


@pytest.mark.unit
def test_dismiss_forgets_but_keeps_file(handoff, artifact, metadata, mock_uploader):
    mock_uploader.fail_next()
    handoff.submit(artifact, [], metadata)

    assert handoff.dismiss(artifact.session_id) is True

    assert handoff.get_retained(artifact.session_id) is None
    assert artifact.path.exists()
    assert handoff.dismiss(artifact.session_id) is False


@pytest.mark.unit
def test_retained_per_session(handoff, make_artifact, metadata, mock_uploader):
    first = make_artifact("s1")
    second = make_artifact("s2")
    mock_uploader.fail_next(count=2)

    handoff.submit(first, [], metadata)
    handoff.submit(second, [], metadata)

    assert sorted(handoff.retained_session_ids) == ["s1", "s2"]
    assert len(handoff.list_retained()) == 2


@pytest.mark.unit
def test_get_status(handoff, artifact, metadata, mock_uploader):
    mock_uploader.fail_next()
    handoff.submit(artifact, [], metadata)

    status = handoff.get_status()

    assert status["uploader_available"] is True
    assert status["retained"][0]["session_id"] == artifact.session_id
    assert status["in_flight"] == []
