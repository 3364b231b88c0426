"""
Session Metadata

Descriptive data sent along with a recording.
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SessionMetadata:
    """
    Metadata for one recording session.

    Attributes:
        session_id: Session that produced the artifact
        device_id: Camera id
        device_name: Camera display name
        started_at: Unix timestamp of session start
        duration_seconds: Camera-reported duration
        size_bytes: Artifact size
        gps_fix_count: Number of entries in the GPS log
        gps_error: GPS error message if position data is missing/partial
    """

    session_id: str
    device_id: str
    device_name: str
    started_at: float
    duration_seconds: float
    size_bytes: int
    gps_fix_count: int = 0
    gps_error: Optional[str] = None

    @property
    def started_iso(self) -> str:
        return datetime.fromtimestamp(self.started_at, tz=timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return asdict(self)

    def to_properties(self) -> Dict[str, str]:
        """
        Flatten to string key/value pairs.

        Drive appProperties only accept strings (key + value <= 124 bytes).
        """
        properties = {
            "session_id": self.session_id,
            "device_id": self.device_id,
            "started_at": self.started_iso,
            "duration_seconds": f"{self.duration_seconds:.1f}",
            "size_bytes": str(self.size_bytes),
            "gps_fix_count": str(self.gps_fix_count),
        }
        if self.gps_error:
            properties["gps_error"] = self.gps_error[:100]
        return properties
