"""
Recorder Service Tests

End-to-end runs of the command line entry point with mock hardware and
the mock uploader.

To run:
    pytest tests/test_recorder_service.py -v
"""

import threading

import pytest

import recorder_service
from recorder_service import RecorderService, build_parser, main
from recording.constants import RecordingState, StopReason


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """Run in a scratch directory without touching the root logger"""
    monkeypatch.setattr(recorder_service, "setup_logging", lambda verbose=False: None)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def service():
    service = RecorderService(force_mock=True)
    service.scan()
    yield service
    service.shutdown()


# =============================================================================
# COMMAND LINE
# =============================================================================


@pytest.mark.unit
def test_parser_options_before_command():
    args = build_parser().parse_args(["--mock", "record", "--device", "usb-1", "--seconds", "2"])

    assert args.mock is True
    assert args.command == "record"
    assert args.device == "usb-1"
    assert args.seconds == 2.0


@pytest.mark.unit
def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


@pytest.mark.integration
def test_scan_lists_cameras(capsys):
    assert main(["--mock", "scan"]) == 0

    output = capsys.readouterr().out
    assert "usb-1" in output
    assert "builtin-back" in output
    assert "usb-kbd" not in output


@pytest.mark.integration
def test_record_and_upload(capsys):
    assert main(["--mock", "record", "--device", "usb-1", "--seconds", "0.2"]) == 0

    output = capsys.readouterr().out
    assert "Recorded recording_" in output
    assert "Uploaded as mock_" in output


@pytest.mark.integration
def test_record_unknown_device(capsys):
    assert main(["--mock", "record", "--device", "usb-404", "--seconds", "0.1"]) == 1

    assert "did not start" in capsys.readouterr().out


# =============================================================================
# SERVICE
# =============================================================================


@pytest.mark.integration
class TestRecorderService:
    """RecorderService wiring with mocks"""

    def test_record_returns_artifact(self, service):
        result = service.record(device_id="usb-1", seconds=0.2)

        assert result.stopped is True
        assert result.artifact.device_id == "usb-1"
        assert result.artifact.path.exists()
        assert service.session.state == RecordingState.IDLE

    def test_failed_upload_is_kept(self, service):
        service.handoff.uploader.fail_next()

        result = service.record(device_id="usb-1", seconds=0.2)

        session_id = result.artifact.session_id
        upload = result.upload or service.upload_results[session_id]
        assert upload.success is False
        retained = service.handoff.get_retained(session_id)
        assert retained.artifact is result.artifact
        assert session_id in service.session.failed_session_ids

        retry = service.session.retry_upload(session_id)
        assert retry.success is True
        assert service.handoff.get_retained(session_id) is None

    def test_request_stop_ends_recording(self, service):
        timer = threading.Timer(0.2, service.request_stop)
        timer.start()

        result = service.record(device_id="usb-1")

        timer.join()
        assert result.stopped is True
        assert result.reason == StopReason.MANUAL

    def test_print_result_reports_retained_path(self, service, capsys):
        service.handoff.uploader.fail_next(message="offline")
        result = service.record(device_id="usb-1", seconds=0.2)

        assert recorder_service._print_result(result, service) == 1

        output = capsys.readouterr().out
        assert "Upload failed: offline" in output
        assert str(result.artifact.path) in output
