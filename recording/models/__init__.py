"""Recording data models"""

from recording.models.artifact import CaptureLimits, CaptureResult, RecordingArtifact
from recording.models.stop_result import StopResult

__all__ = ["CaptureLimits", "CaptureResult", "RecordingArtifact", "StopResult"]
