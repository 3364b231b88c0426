"""
Google Drive Uploader Implementation

Concrete implementation of UploaderInterface for the Drive API v3.
The video goes up with the resumable protocol, the GPS log as a sibling
.gps.jsonl file, and session metadata as appProperties on both.
"""

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaFileUpload, MediaInMemoryUpload

from upload.auth.oauth_manager import OAuthManager
from upload.constants import (
    DRIVE_API_SERVICE_NAME,
    DRIVE_API_VERSION,
    DRIVE_FOLDER_ID,
    GPS_LOG_MIME_TYPE,
    GPS_LOG_SUFFIX,
    SUPPORTED_VIDEO_FORMATS,
    UPLOAD_CHUNK_SIZE,
    UPLOAD_TIMEOUT,
    VIDEO_MIME_TYPE,
    UploadStatus,
)
from upload.interfaces.uploader_interface import (
    UploaderError,
    UploaderInterface,
    UploadResult,
)
from upload.models.session_metadata import SessionMetadata

if TYPE_CHECKING:
    from recording.models.artifact import RecordingArtifact

# Server errors worth another chunk attempt
RETRYABLE_STATUS_CODES = (500, 502, 503, 504)


class DriveUploader(UploaderInterface):
    """
    Google Drive uploader using Drive API v3.

    Features:
    - Resumable, chunked video upload (handles network interruptions)
    - GPS log stored next to the video (empty log = empty file)
    - Session metadata searchable through appProperties
    """

    def __init__(
        self,
        oauth_manager: OAuthManager,
        folder_id: Optional[str] = DRIVE_FOLDER_ID,
    ):
        """
        Initialize Drive uploader.

        Args:
            oauth_manager: OAuth manager for authentication
            folder_id: Target Drive folder (None/"" = My Drive root)

        Example:
            oauth = OAuthManager(client_secret_path, token_path)
            uploader = DriveUploader(oauth, folder_id="1AbC...")
        """
        self.logger = logging.getLogger(__name__)
        self.oauth_manager = oauth_manager
        self.folder_id = folder_id or None
        self.drive_service = None

        self._initialize_service()

        self.logger.info(
            f"Drive Uploader initialized (folder: {self.folder_id or 'root'})",
        )

    def _initialize_service(self) -> None:
        """
        Initialize Drive API service with authenticated credentials.

        Raises:
            UploaderError: If service initialization fails
        """
        try:
            credentials = self.oauth_manager.get_credentials()
            self.drive_service = build(
                DRIVE_API_SERVICE_NAME,
                DRIVE_API_VERSION,
                credentials=credentials,
                cache_discovery=False,
            )
            self.logger.debug("Drive API service initialized")
        except Exception as e:
            raise UploaderError(
                f"Failed to initialize Drive service: {e}",
                status=UploadStatus.AUTH_ERROR,
            ) from e

    def _validate_video_file(self, video_path: Path) -> int:
        """
        Validate video file before upload.

        Returns:
            File size in bytes

        Raises:
            UploaderError: If file is invalid
        """
        if not video_path.exists():
            raise UploaderError(
                f"Video file not found: {video_path}",
                status=UploadStatus.INVALID_FILE,
            )

        if video_path.suffix.lower() not in SUPPORTED_VIDEO_FORMATS:
            raise UploaderError(
                f"Unsupported video format: {video_path.suffix}. "
                f"Supported: {SUPPORTED_VIDEO_FORMATS}",
                status=UploadStatus.INVALID_FILE,
            )

        return video_path.stat().st_size

    def submit(
        self,
        artifact: "RecordingArtifact",
        serialized_log: str,
        metadata: SessionMetadata,
    ) -> UploadResult:
        """
        Upload video, then its GPS log.

        If the log upload fails the video is deleted again so a retry
        does not leave a duplicate behind.
        """
        start_time = time.time()
        file_size = 0
        video_path = Path(artifact.path)

        try:
            file_size = self._validate_video_file(video_path)
            self.logger.info(f"Starting upload: {video_path} ({file_size} bytes)")

            properties = metadata.to_properties()
            video_body = {
                "name": video_path.name,
                "description": (
                    f"Recorded {metadata.started_iso} on {metadata.device_name}"
                ),
                "appProperties": properties,
            }
            if self.folder_id:
                video_body["parents"] = [self.folder_id]

            media = MediaFileUpload(
                str(video_path),
                mimetype=VIDEO_MIME_TYPE,
                chunksize=UPLOAD_CHUNK_SIZE,
                resumable=True,
            )
            request = self.drive_service.files().create(
                body=video_body,
                media_body=media,
                fields="id",
            )
            file_id = self._execute_upload(request)

            try:
                log_file_id = self._upload_log(
                    video_path,
                    serialized_log,
                    properties,
                    file_id,
                )
            except (HttpError, UploaderError):
                self._delete_quietly(file_id)
                raise

            upload_duration = time.time() - start_time
            self.logger.info(
                f"Upload successful: {file_id} + log {log_file_id} "
                f"({upload_duration:.1f}s, {file_size} bytes)",
            )
            return UploadResult(
                success=True,
                session_id=metadata.session_id,
                file_id=file_id,
                log_file_id=log_file_id,
                status=UploadStatus.SUCCESS,
                upload_duration=upload_duration,
                file_size=file_size,
            )

        except UploaderError as e:
            self.logger.error(f"Upload failed: {e}")
            return UploadResult(
                success=False,
                session_id=metadata.session_id,
                status=e.status,
                error_message=str(e),
                upload_duration=time.time() - start_time,
                file_size=file_size,
            )

        except HttpError as e:
            error_msg = f"Drive API error: {e.reason}"
            self.logger.error(error_msg)
            return UploadResult(
                success=False,
                session_id=metadata.session_id,
                status=self._parse_http_error(e),
                error_message=error_msg,
                upload_duration=time.time() - start_time,
                file_size=file_size,
            )

        except OSError as e:
            error_msg = f"Upload I/O error: {e}"
            self.logger.error(error_msg, exc_info=True)
            return UploadResult(
                success=False,
                session_id=metadata.session_id,
                status=UploadStatus.NETWORK_ERROR,
                error_message=error_msg,
                upload_duration=time.time() - start_time,
                file_size=file_size,
            )

    def _upload_log(
        self,
        video_path: Path,
        serialized_log: str,
        properties: dict,
        video_file_id: str,
    ) -> str:
        """Store the GPS log as <video stem>.gps.jsonl"""
        body = {
            "name": f"{video_path.stem}{GPS_LOG_SUFFIX}",
            "appProperties": {
                "session_id": properties["session_id"],
                "video_file_id": video_file_id,
                "gps_fix_count": properties["gps_fix_count"],
            },
        }
        if self.folder_id:
            body["parents"] = [self.folder_id]

        media = MediaInMemoryUpload(
            serialized_log.encode("utf-8"),
            mimetype=GPS_LOG_MIME_TYPE,
            resumable=False,
        )
        response = (
            self.drive_service.files()
            .create(body=body, media_body=media, fields="id")
            .execute(num_retries=3)
        )
        if not response or "id" not in response:
            raise UploaderError("GPS log upload returned no file ID")
        return response["id"]

    def _execute_upload(self, request) -> str:
        """
        Execute resumable upload with progress tracking.

        Returns:
            File ID of uploaded video

        Raises:
            UploaderError: If upload fails or times out
        """
        response = None
        upload_start = time.time()
        last_progress = 0

        while response is None:
            elapsed = time.time() - upload_start
            if elapsed > UPLOAD_TIMEOUT:
                raise UploaderError(
                    f"Upload timeout after {elapsed:.1f}s",
                    status=UploadStatus.TIMEOUT,
                )

            try:
                status, response = request.next_chunk()
                if status:
                    progress = int(status.progress() * 100)
                    if progress >= last_progress + 10:  # Log every 10%
                        self.logger.info(f"Upload progress: {progress}%")
                        last_progress = progress

            except HttpError as e:
                if e.resp.status in RETRYABLE_STATUS_CODES:
                    self.logger.warning(f"Retryable error {e.resp.status}, retrying...")
                    time.sleep(5)
                else:
                    raise UploaderError(
                        f"Upload failed: {e.reason}",
                        status=self._parse_http_error(e),
                    ) from e

        if response and "id" in response:
            return response["id"]
        raise UploaderError("Upload completed but no file ID returned")

    def _delete_quietly(self, file_id: str) -> None:
        """Remove a partially completed upload; failures are only logged"""
        try:
            self.drive_service.files().delete(fileId=file_id).execute()
            self.logger.info(f"Removed orphaned video {file_id}")
        except HttpError as e:
            self.logger.warning(f"Could not remove orphaned video {file_id}: {e.reason}")

    def _parse_http_error(self, error: HttpError) -> UploadStatus:
        if error.resp.status in [401, 403]:
            return UploadStatus.AUTH_ERROR
        if error.resp.status == 429:
            return UploadStatus.QUOTA_EXCEEDED
        if error.resp.status >= 500:
            return UploadStatus.NETWORK_ERROR
        return UploadStatus.FAILED

    def is_available(self) -> bool:
        return self.oauth_manager.is_authenticated() and self.drive_service is not None

    def test_connection(self) -> bool:
        """
        Test connection to the Drive API.

        Returns:
            True if connection successful
        """
        try:
            about = self.drive_service.about().get(fields="user").execute()
            user = about.get("user", {}).get("emailAddress", "unknown")
            self.logger.info(f"Drive API connection test successful ({user})")
            return True
        except HttpError as e:
            self.logger.error(f"Drive API connection test failed: {e.reason}")
            return False
