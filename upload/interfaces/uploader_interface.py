"""
Uploader Interface

Abstract interface for upload pipeline implementations.
High-level code (UploadHandoff) depends on this abstraction, not on the
Google Drive API.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from core.errors import UploadFailedError
from upload.constants import UploadStatus
from upload.models.session_metadata import SessionMetadata

if TYPE_CHECKING:
    from recording.models.artifact import RecordingArtifact


@dataclass
class UploadResult:
    """
    Result of an upload operation.

    Attributes:
        success: True if artifact and log were both stored
        session_id: Session the upload belongs to
        file_id: Remote id of the video (if successful)
        log_file_id: Remote id of the GPS log (if successful)
        status: Upload status code
        error_message: Error description (if failed)
        upload_duration: Time taken to upload in seconds
        file_size: Size of uploaded video in bytes
    """

    success: bool
    session_id: Optional[str] = None
    file_id: Optional[str] = None
    log_file_id: Optional[str] = None
    status: UploadStatus = UploadStatus.SUCCESS
    error_message: Optional[str] = None
    upload_duration: float = 0.0
    file_size: int = 0

    @classmethod
    def failure(
        cls,
        session_id: Optional[str],
        message: str,
        status: UploadStatus = UploadStatus.FAILED,
    ) -> "UploadResult":
        return cls(
            success=False,
            session_id=session_id,
            status=status,
            error_message=message,
        )


class UploaderInterface(ABC):
    """
    Abstract base class for uploaders.

    Implementations own their own transport retry/backoff.
    """

    @abstractmethod
    def submit(
        self,
        artifact: "RecordingArtifact",
        serialized_log: str,
        metadata: SessionMetadata,
    ) -> UploadResult:
        """
        Upload a recording and its GPS log.

        Args:
            artifact: Finished recording (file on disk)
            serialized_log: GPS log as JSON Lines ("" for an empty log,
                            which must still be stored)
            metadata: Session metadata

        Returns:
            UploadResult with success status and details

        Raises:
            UploaderError: Implementations may raise instead of returning
                           a failed result; callers handle both
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if uploader is ready to upload.

        Returns:
            True if authentication is valid and service is accessible
        """

    @abstractmethod
    def test_connection(self) -> bool:
        """
        Test connection to upload service without uploading.

        Returns:
            True if connection successful
        """


class UploaderError(UploadFailedError):
    """
    Exception raised for upload-related errors.

    Examples:
    - Authentication failed
    - Network error
    - Invalid video file
    - API quota exceeded
    """

    def __init__(self, message: str, status: UploadStatus = UploadStatus.FAILED):
        super().__init__(message)
        self.status = status
