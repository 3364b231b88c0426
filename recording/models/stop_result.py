"""
Stop Result

Outcome of RecordingSession.stop() (manual or cap-triggered).
"""

from dataclasses import dataclass, field
from typing import List, Optional

from gps.models.log_entry import GpsLogEntry
from recording.constants import StopReason
from recording.models.artifact import RecordingArtifact
from upload.interfaces.uploader_interface import UploadResult


@dataclass
class StopResult:
    """
    Result of a stop.

    stopped is False only for NOTHING_TO_STOP. upload is None when the
    upload runs in the background (result arrives via on_upload_complete)
    or when there was no artifact to upload.
    """

    stopped: bool
    reason: StopReason
    session_id: Optional[str] = None
    artifact: Optional[RecordingArtifact] = None
    gps_log: List[GpsLogEntry] = field(default_factory=list)
    upload: Optional[UploadResult] = None
    error_message: Optional[str] = None

    @property
    def uploaded(self) -> bool:
        return self.upload is not None and self.upload.success

    @classmethod
    def nothing_to_stop(cls) -> "StopResult":
        return cls(stopped=False, reason=StopReason.NOTHING_TO_STOP)
