"""GPS data models."""

from gps.models.log_entry import GpsLogEntry, PositionFix

__all__ = ["GpsLogEntry", "PositionFix"]
