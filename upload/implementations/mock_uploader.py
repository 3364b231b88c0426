"""
Mock Uploader Implementation

Simulated uploader for testing without the Drive API.
Records every submission so tests can check exactly what was sent.
"""

import logging
import random
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from upload.constants import SUPPORTED_VIDEO_FORMATS, UploadStatus
from upload.interfaces.uploader_interface import (
    UploaderError,
    UploaderInterface,
    UploadResult,
)
from upload.models.session_metadata import SessionMetadata

if TYPE_CHECKING:
    from recording.models.artifact import RecordingArtifact


class MockUploader(UploaderInterface):
    """
    Mock uploader for testing.

    This simulates upload behavior without actually uploading.
    Useful for:
    - Unit tests
    - Development without Google credentials
    - CI/CD pipelines

    Usage:
        uploader = MockUploader()
        uploader.fail_next()           # Next submit fails
        uploader.hold()                # Next submits block until release()
    """

    def __init__(
        self,
        simulate_timing: bool = False,
        fail_rate: float = 0.0,
        check_files: bool = True,
    ):
        """
        Initialize mock uploader.

        Args:
            simulate_timing: If True, sleep as if uploading at ~5 MB/s
            fail_rate: Probability of upload failure (0.0 to 1.0)
            check_files: If True, the artifact file must exist

        Example:
            # Fast mock for unit tests
            uploader = MockUploader()

            # Test error handling
            uploader = MockUploader(fail_rate=0.5)
        """
        self.logger = logging.getLogger(__name__)
        self.simulate_timing = simulate_timing
        self.fail_rate = fail_rate
        self.check_files = check_files

        # Failure configuration
        self._fail_count = 0
        self._fail_message = "Simulated upload failure"
        self._fail_status = UploadStatus.NETWORK_ERROR
        self._raise_error: Optional[Exception] = None

        # Blocking for background-upload tests
        self._gate = threading.Event()
        self._gate.set()
        self.submit_started = threading.Event()

        # Track upload history for testing
        self.upload_history: list[dict] = []
        self.submit_calls = 0

        self.logger.info(
            f"Mock Uploader initialized "
            f"(timing: {simulate_timing}, fail_rate: {fail_rate})",
        )

    def submit(
        self,
        artifact: "RecordingArtifact",
        serialized_log: str,
        metadata: SessionMetadata,
    ) -> UploadResult:
        """
        Simulate an upload.

        Returns a failed result for configured failures; raises only when
        simulate_exception() was used.
        """
        self.submit_calls += 1
        self.submit_started.set()
        self._gate.wait()

        start_time = time.time()
        video_path = Path(artifact.path)
        file_size = artifact.size_bytes

        if self._raise_error is not None:
            error, self._raise_error = self._raise_error, None
            self.logger.error(f"[MOCK] Raising from submit: {error}")
            raise error

        try:
            self._validate_video_file(video_path)
            self.logger.info(
                f"[MOCK] Starting upload: {video_path} "
                f"({file_size} bytes, log {len(serialized_log)} chars)",
            )

            if self.simulate_timing:
                time.sleep(file_size / (5 * 1024 * 1024) + 0.1)

            if self._fail_count > 0:
                self._fail_count -= 1
                raise UploaderError(self._fail_message, status=self._fail_status)

            if random.random() < self.fail_rate:
                raise UploaderError(
                    "Simulated random upload failure",
                    status=UploadStatus.NETWORK_ERROR,
                )

            file_id = f"mock_{uuid4().hex[:12]}"
            log_file_id = f"mock_{uuid4().hex[:12]}"

            self.upload_history.append(
                {
                    "file_id": file_id,
                    "log_file_id": log_file_id,
                    "session_id": metadata.session_id,
                    "artifact_path": str(video_path),
                    "serialized_log": serialized_log,
                    "metadata": metadata,
                    "file_size": file_size,
                    "timestamp": time.time(),
                },
            )

            upload_duration = time.time() - start_time
            self.logger.info(f"[MOCK] Upload successful: {file_id} ({upload_duration:.2f}s)")

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
            self.logger.error(f"[MOCK] Upload failed: {e}")
            return UploadResult(
                success=False,
                session_id=metadata.session_id,
                status=e.status,
                error_message=str(e),
                upload_duration=time.time() - start_time,
                file_size=file_size,
            )

    def _validate_video_file(self, video_path: Path) -> None:
        """Validate video file (same checks as the real uploader)"""
        if not self.check_files:
            return

        if not video_path.exists():
            raise UploaderError(
                f"Video file not found: {video_path}",
                status=UploadStatus.INVALID_FILE,
            )

        if video_path.suffix.lower() not in SUPPORTED_VIDEO_FORMATS:
            raise UploaderError(
                f"Unsupported format: {video_path.suffix}",
                status=UploadStatus.INVALID_FILE,
            )

    def is_available(self) -> bool:
        """Mock uploader is always available"""
        return True

    def test_connection(self) -> bool:
        if self._fail_count > 0:
            self.logger.warning("[MOCK] Connection test failed (simulated)")
            return False

        self.logger.info("[MOCK] Connection test successful")
        return True

    # =========================================================================
    # TESTING HELPER METHODS
    # =========================================================================

    def fail_next(
        self,
        count: int = 1,
        message: str = "Simulated upload failure",
        status: UploadStatus = UploadStatus.NETWORK_ERROR,
    ) -> None:
        """Make the next `count` submissions return a failed result"""
        self._fail_count = count
        self._fail_message = message
        self._fail_status = status
        self.logger.debug(f"[MOCK] Configured to fail next {count} upload(s)")

    def simulate_exception(self, error: Exception) -> None:
        """Make the next submission raise instead of returning a result"""
        self._raise_error = error

    def hold(self) -> None:
        """Block submissions until release()"""
        self.submit_started.clear()
        self._gate.clear()

    def release(self) -> None:
        self._gate.set()

    def get_upload_history(self) -> list[dict]:
        return self.upload_history.copy()

    def get_last_upload(self) -> Optional[dict]:
        return self.upload_history[-1] if self.upload_history else None

    def was_uploaded(self, artifact_path: str) -> bool:
        return any(
            record["artifact_path"] == str(artifact_path)
            for record in self.upload_history
        )

    def clear_history(self) -> None:
        self.upload_history.clear()
        self.logger.debug("[MOCK] Upload history cleared")
