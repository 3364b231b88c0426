"""
Retained Upload

Everything needed to resubmit a failed upload without re-recording.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from gps.models.log_entry import GpsLogEntry
from upload.models.session_metadata import SessionMetadata

if TYPE_CHECKING:
    from recording.models.artifact import RecordingArtifact
    from upload.interfaces.uploader_interface import UploadResult


@dataclass
class RetainedUpload:
    """
    A failed upload kept for retry until dismissed.

    The artifact file on disk is never deleted while retained.
    """

    session_id: str
    artifact: "RecordingArtifact"
    gps_log: List[GpsLogEntry]
    serialized_log: str
    metadata: SessionMetadata
    attempts: int = 1
    last_result: Optional["UploadResult"] = None
    failed_at: Optional[float] = None
    errors: List[str] = field(default_factory=list)

    @property
    def artifact_path(self) -> str:
        return str(self.artifact.path)

    @property
    def last_error(self) -> Optional[str]:
        return self.errors[-1] if self.errors else None

    def to_dict(self) -> dict:
        """Summary for status output"""
        return {
            "session_id": self.session_id,
            "artifact_path": self.artifact_path,
            "gps_fix_count": len(self.gps_log),
            "attempts": self.attempts,
            "last_error": self.last_error,
            "failed_at": self.failed_at,
        }
