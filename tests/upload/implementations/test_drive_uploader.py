"""
Drive Uploader Tests

The Drive API client is replaced with MagicMock; no network access.

To run:
    pytest tests/upload/implementations/test_drive_uploader.py -v
"""

from unittest.mock import MagicMock, patch

import pytest
from googleapiclient.errors import HttpError

from upload.constants import GPS_LOG_MIME_TYPE, UploadStatus
from upload.implementations.drive_uploader import DriveUploader
from upload.interfaces.uploader_interface import UploaderError


def _http_error(status):
    return HttpError(resp=MagicMock(status=status, reason="error"), content=b"{}")


@pytest.fixture
def drive_service():
    service = MagicMock()
    request = service.files.return_value.create.return_value
    request.next_chunk.return_value = (None, {"id": "video-123"})
    request.execute.return_value = {"id": "log-456"}
    return service


@pytest.fixture
def oauth_manager():
    manager = MagicMock()
    manager.get_credentials.return_value = MagicMock()
    manager.is_authenticated.return_value = True
    return manager


@pytest.fixture
def uploader(drive_service, oauth_manager):
    with patch(
        "upload.implementations.drive_uploader.build",
        return_value=drive_service,
    ), patch("upload.implementations.drive_uploader.MediaFileUpload"):
        yield DriveUploader(oauth_manager, folder_id="folder-1")


@pytest.mark.unit
class TestDriveUploader:
    """Test DriveUploader against a mocked Drive service"""

    def test_uploads_video_and_log(self, uploader, drive_service, artifact, metadata):
        result = uploader.submit(artifact, '{"a": 1}\n', metadata)

        assert result.success is True
        assert result.file_id == "video-123"
        assert result.log_file_id == "log-456"
        assert result.session_id == artifact.session_id

        calls = drive_service.files.return_value.create.call_args_list
        assert len(calls) == 2

        video_body = calls[0].kwargs["body"]
        assert video_body["name"] == artifact.filename
        assert video_body["parents"] == ["folder-1"]
        assert video_body["appProperties"]["session_id"] == artifact.session_id

        log_body = calls[1].kwargs["body"]
        assert log_body["name"] == f"{artifact.path.stem}.gps.jsonl"
        assert log_body["appProperties"]["video_file_id"] == "video-123"
        log_media = calls[1].kwargs["media_body"]
        assert log_media.mimetype() == GPS_LOG_MIME_TYPE
        assert log_media.size() == len('{"a": 1}\n')

    def test_empty_log_still_uploaded(self, uploader, drive_service, artifact, metadata):
        result = uploader.submit(artifact, "", metadata)

        assert result.success is True
        calls = drive_service.files.return_value.create.call_args_list
        assert calls[1].kwargs["media_body"].size() == 0

    def test_log_failure_removes_video(self, uploader, drive_service, artifact, metadata):
        request = drive_service.files.return_value.create.return_value
        request.execute.side_effect = _http_error(500)

        result = uploader.submit(artifact, "", metadata)

        assert result.success is False
        assert result.status == UploadStatus.NETWORK_ERROR
        drive_service.files.return_value.delete.assert_called_once_with(fileId="video-123")

    def test_auth_error_on_video(self, uploader, drive_service, artifact, metadata):
        request = drive_service.files.return_value.create.return_value
        request.next_chunk.side_effect = _http_error(403)

        result = uploader.submit(artifact, "", metadata)

        assert result.success is False
        assert result.status == UploadStatus.AUTH_ERROR
        drive_service.files.return_value.delete.assert_not_called()

    def test_missing_file(self, uploader, drive_service, artifact, metadata):
        artifact.path.unlink()

        result = uploader.submit(artifact, "", metadata)

        assert result.status == UploadStatus.INVALID_FILE
        drive_service.files.return_value.create.assert_not_called()

    def test_connection(self, uploader, drive_service):
        about = drive_service.about.return_value.get.return_value
        about.execute.return_value = {"user": {"emailAddress": "me@example.com"}}

        assert uploader.test_connection() is True

        about.execute.side_effect = _http_error(401)
        assert uploader.test_connection() is False

    def test_is_available(self, uploader, oauth_manager):
        assert uploader.is_available() is True

        oauth_manager.is_authenticated.return_value = False
        assert uploader.is_available() is False

    def test_service_build_failure(self, oauth_manager):
        oauth_manager.get_credentials.side_effect = RuntimeError("no token")

        with pytest.raises(UploaderError) as exc_info:
            DriveUploader(oauth_manager)

        assert exc_info.value.status == UploadStatus.AUTH_ERROR
