"""
Upload Handoff

Takes a finished recording plus its GPS log and submits both to the
upload pipeline. A failed upload is never dropped: the artifact, the
serialized log and the metadata are retained under the session id until
the caller retries successfully or dismisses them.

SOLID Principles:
- Single Responsibility: Only owns submission and retained failures
- Dependency Inversion: Depends on UploaderInterface
"""

import logging
import threading
import time
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence, Set

from core.errors import UploadFailedError
from gps.models.log_entry import GpsLogEntry
from gps.utils.log_format import serialize_gps_log
from upload.constants import UploadStatus
from upload.interfaces.uploader_interface import UploaderInterface, UploadResult
from upload.models.retained_upload import RetainedUpload
from upload.models.session_metadata import SessionMetadata

if TYPE_CHECKING:
    from recording.models.artifact import RecordingArtifact


class UploadHandoff:
    """
    Submits recordings and keeps failed ones for retry.

    Rules:
    - The GPS log is serialized to JSON Lines before submission; an empty
      log is submitted as "" (never omitted)
    - Uploader exceptions become failed UploadResults
    - The artifact file is never deleted here

    Usage:
        handoff = UploadHandoff(uploader)
        result = handoff.submit(artifact, gps_log, metadata)
        if not result.success:
            retained = handoff.get_retained(artifact.session_id)
            print(f"Kept for retry: {retained.artifact_path}")
            handoff.retry(artifact.session_id)
    """

    def __init__(
        self,
        uploader: UploaderInterface,
        clock: Callable[[], float] = time.time,
    ):
        self.logger = logging.getLogger(__name__)
        self.uploader = uploader
        self._clock = clock

        self._lock = threading.Lock()
        self._retained: Dict[str, RetainedUpload] = {}
        self._in_flight: Set[str] = set()

        if not self.uploader.is_available():
            self.logger.warning(
                "Uploader initialized but not available. "
                "Check authentication and network connection.",
            )

        self.logger.info("Upload Handoff initialized")

    # =========================================================================
    # SUBMISSION
    # =========================================================================

    def submit(
        self,
        artifact: "RecordingArtifact",
        gps_log: Sequence[GpsLogEntry],
        metadata: SessionMetadata,
    ) -> UploadResult:
        """
        Serialize the log and submit it with the artifact.

        Returns:
            UploadResult (never raises for upload failures)
        """
        session_id = artifact.session_id
        entries = list(gps_log)
        serialized_log = serialize_gps_log(entries)

        self.logger.info(
            f"Handing off session {session_id}: {artifact.path} "
            f"with {len(entries)} GPS fix(es)",
        )

        with self._lock:
            self._in_flight.add(session_id)
        try:
            result = self._attempt(artifact, serialized_log, metadata)
        finally:
            with self._lock:
                self._in_flight.discard(session_id)

        if result.success:
            with self._lock:
                self._retained.pop(session_id, None)
            return result

        retained = RetainedUpload(
            session_id=session_id,
            artifact=artifact,
            gps_log=entries,
            serialized_log=serialized_log,
            metadata=metadata,
            last_result=result,
            failed_at=self._clock(),
            errors=[result.error_message or result.status.value],
        )
        with self._lock:
            self._retained[session_id] = retained

        self.logger.warning(
            f"Upload failed for session {session_id}, artifact retained: "
            f"{artifact.path}",
        )
        return result

    def retry(self, session_id: str) -> UploadResult:
        """
        Resubmit a retained upload (same artifact, same serialized log).

        Returns:
            UploadResult; a failed result with status REJECTED if
            nothing is retained for the id or an upload for it is already
            running (nothing is submitted in that case)
        """
        with self._lock:
            retained = self._retained.get(session_id)
            if retained is None:
                self.logger.warning(f"No retained upload for session {session_id}")
                return UploadResult.failure(
                    session_id,
                    f"No retained upload for session {session_id}",
                    status=UploadStatus.REJECTED,
                )
            if session_id in self._in_flight:
                self.logger.warning(f"Upload already in progress for {session_id}")
                return UploadResult.failure(
                    session_id,
                    f"Upload already in progress for session {session_id}",
                    status=UploadStatus.REJECTED,
                )
            self._in_flight.add(session_id)

        self.logger.info(
            f"Retrying upload for session {session_id} "
            f"(attempt {retained.attempts + 1})",
        )

        try:
            result = self._attempt(
                retained.artifact,
                retained.serialized_log,
                retained.metadata,
            )
        finally:
            with self._lock:
                self._in_flight.discard(session_id)

        with self._lock:
            if result.success:
                self._retained.pop(session_id, None)
            else:
                retained.attempts += 1
                retained.last_result = result
                retained.failed_at = self._clock()
                retained.errors.append(result.error_message or result.status.value)

        if result.success:
            self.logger.info(f"Retry succeeded for session {session_id}")
        else:
            self.logger.warning(
                f"Retry failed for session {session_id}: {result.error_message}",
            )
        return result

    def dismiss(self, session_id: str) -> bool:
        """
        Forget a retained upload. The artifact file stays on disk.

        Returns:
            True if something was retained for the id
        """
        with self._lock:
            retained = self._retained.pop(session_id, None)

        if retained is None:
            return False

        self.logger.info(
            f"Dismissed retained upload {session_id} "
            f"(file kept: {retained.artifact_path})",
        )
        return True

    def _attempt(
        self,
        artifact: "RecordingArtifact",
        serialized_log: str,
        metadata: SessionMetadata,
    ) -> UploadResult:
        """Call the uploader, converting exceptions into failed results"""
        try:
            result = self.uploader.submit(artifact, serialized_log, metadata)
        except UploadFailedError as e:
            self.logger.error(f"Uploader error: {e}")
            result = UploadResult.failure(
                artifact.session_id,
                str(e),
                status=getattr(e, "status", UploadStatus.FAILED),
            )
        except Exception as e:
            self.logger.error(f"Unexpected uploader error: {e}", exc_info=True)
            result = UploadResult.failure(artifact.session_id, f"Unexpected upload error: {e}")

        if result.session_id is None:
            result.session_id = artifact.session_id

        if result.success:
            self.logger.info(
                f"Upload successful: {result.file_id} "
                f"({result.upload_duration:.1f}s, "
                f"{result.file_size / (1024 * 1024):.1f} MB)",
            )
        else:
            self.logger.error(
                f"Upload failed: {result.error_message} "
                f"(status: {result.status.value})",
            )
        return result

    # =========================================================================
    # RETAINED UPLOADS
    # =========================================================================

    def get_retained(self, session_id: str) -> Optional[RetainedUpload]:
        with self._lock:
            return self._retained.get(session_id)

    def list_retained(self) -> List[RetainedUpload]:
        with self._lock:
            return list(self._retained.values())

    @property
    def retained_session_ids(self) -> List[str]:
        with self._lock:
            return list(self._retained.keys())

    # =========================================================================
    # STATUS AND INFO
    # =========================================================================

    def test_connection(self) -> bool:
        """Test connection to the upload service"""
        self.logger.info("Testing upload service connection...")
        return self.uploader.test_connection()

    def get_status(self) -> dict:
        with self._lock:
            return {
                "uploader_available": self.uploader.is_available(),
                "retained": [r.to_dict() for r in self._retained.values()],
                "in_flight": sorted(self._in_flight),
            }
