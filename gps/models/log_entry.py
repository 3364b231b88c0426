"""
GPS Log Models

PositionFix is what a provider delivers; GpsLogEntry is what the sampler
keeps. Timestamps are Unix epoch seconds.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class PositionFix:
    """One position sample as delivered by the provider"""

    latitude: float
    longitude: float
    accuracy_m: Optional[float]
    timestamp: float


@dataclass(frozen=True)
class GpsLogEntry:
    """One accepted fix in a session's GPS log"""

    timestamp: float
    latitude: float
    longitude: float
    accuracy_m: Optional[float] = None

    @classmethod
    def from_fix(cls, fix: PositionFix) -> "GpsLogEntry":
        return cls(
            timestamp=fix.timestamp,
            latitude=fix.latitude,
            longitude=fix.longitude,
            accuracy_m=fix.accuracy_m,
        )

    @property
    def time_iso(self) -> str:
        """UTC timestamp in ISO 8601"""
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "timestamp": self.timestamp,
            "time": self.time_iso,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "accuracy_m": self.accuracy_m,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GpsLogEntry":
        """
        Create from dictionary.

        Raises:
            KeyError / TypeError / ValueError: If a required field is missing
                                               or not numeric
        """
        accuracy = data.get("accuracy_m")
        return cls(
            timestamp=float(data["timestamp"]),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            accuracy_m=float(accuracy) if accuracy is not None else None,
        )
