"""
Recording Artifact Models

What the camera is told at start (CaptureLimits), what the backend
reports at stop (CaptureResult), and the session-tagged artifact that
is handed to the uploader (RecordingArtifact).
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CaptureLimits:
    """Caps communicated to the camera at start time"""

    max_duration_seconds: Optional[float] = None
    max_size_bytes: Optional[int] = None


@dataclass(frozen=True)
class CaptureResult:
    """Backend report for one finished capture"""

    path: Path
    duration_seconds: float
    size_bytes: int


@dataclass(frozen=True)
class RecordingArtifact:
    """
    A finished recording, tagged with the session that produced it.

    duration_seconds is the camera-reported duration, not the session's
    elapsed tick counter.
    """

    session_id: str
    device_id: str
    path: Path
    duration_seconds: float
    size_bytes: int
    started_at: float

    @classmethod
    def from_capture(
        cls,
        result: CaptureResult,
        session_id: str,
        device_id: str,
        started_at: float,
    ) -> "RecordingArtifact":
        return cls(
            session_id=session_id,
            device_id=device_id,
            path=result.path,
            duration_seconds=result.duration_seconds,
            size_bytes=result.size_bytes,
            started_at=started_at,
        )

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def size_mb(self) -> float:
        return self.size_bytes / (1024 * 1024)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for status output"""
        return {
            "session_id": self.session_id,
            "device_id": self.device_id,
            "path": str(self.path),
            "duration_seconds": self.duration_seconds,
            "size_bytes": self.size_bytes,
            "started_at": self.started_at,
        }
