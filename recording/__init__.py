"""
Recording Module

Video capture and the recording session coordinator.

Provides automatic detection and graceful fallback between real FFmpeg
capture and mock implementations for testing.

Public API:
    - RecordingFactory: Factory for creating capture implementations
    - create_camera_manager: Quick camera manager creation with auto-detection
    - CameraManager: Camera lifecycle for one device
    - RecordingSession: Coordinates camera, GPS and upload for one recording
    - RecordingArtifact / StopResult: What a finished recording produces
    - RecordingState / StopReason: Session state and stop reasons

Usage:
    from recording import RecordingSession, create_camera_manager

    session = RecordingSession(registry, gps, create_camera_manager(), handoff)
    session.on_tick = lambda elapsed: print(elapsed)

    if session.start():
        result = session.stop()
"""

from recording.constants import RecordingState, StopReason
from recording.controllers.camera_manager import CameraManager
from recording.controllers.recording_session import RecordingSession
from recording.factory import RecordingFactory, create_camera_manager
from recording.interfaces.video_capture_interface import VideoCaptureInterface
from recording.models import (
    CaptureLimits,
    CaptureResult,
    RecordingArtifact,
    StopResult,
)

__all__ = [
    "CameraManager",
    "CaptureLimits",
    "CaptureResult",
    "RecordingArtifact",
    "RecordingFactory",
    "RecordingSession",
    "RecordingState",
    "StopReason",
    "StopResult",
    "VideoCaptureInterface",
    "create_camera_manager",
]
