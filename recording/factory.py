"""
Recording Factory

Factory pattern for creating recording implementations.
Automatically selects real or mock capture based on availability.
"""

import logging
from pathlib import Path
from typing import Literal

from recording.constants import RECORDINGS_DIR
from recording.controllers.camera_manager import CameraManager
from recording.implementations.ffmpeg_capture import FFmpegCapture
from recording.implementations.mock_capture import MockCapture
from recording.interfaces.video_capture_interface import VideoCaptureInterface

# Type alias for better type hints
CaptureMode = Literal["auto", "real", "mock"]


class RecordingFactory:
    """
    Factory for creating video capture implementations.

    Usage:
        # Auto-detect (uses FFmpeg if available, mock otherwise)
        capture = RecordingFactory.create_capture()

        # Force mock mode (useful for testing)
        capture = RecordingFactory.create_capture(mode="mock")

        # Force real capture (raises error if not available)
        capture = RecordingFactory.create_capture(mode="real")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_capture(cls, mode: CaptureMode = "auto") -> VideoCaptureInterface:
        """
        Create a video capture instance.

        Args:
            mode: "auto" (detect), "real" (force FFmpeg), "mock" (force mock)

        Raises:
            RuntimeError: If mode="real" but FFmpeg not available
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Capture (forced)")
            return MockCapture()

        capture = FFmpegCapture()
        if mode == "real":
            if not capture.is_available():
                raise RuntimeError("Real capture requested but FFmpeg is not installed")
            cls._logger.info("Creating FFmpeg Capture (forced)")
            return capture

        if capture.is_available():
            cls._logger.info("Creating FFmpeg Capture (auto-detected)")
            return capture

        cls._logger.warning("FFmpeg not available, using Mock Capture")
        return MockCapture()


# Convenience function for quick creation

def create_camera_manager(
    force_mock: bool = False,
    recordings_dir: Path = RECORDINGS_DIR,
) -> CameraManager:
    """
    Quick camera manager creation with auto-detected capture.

    Example:
        camera = create_camera_manager(force_mock=True)
    """
    mode: CaptureMode = "mock" if force_mock else "auto"
    return CameraManager(
        RecordingFactory.create_capture(mode=mode),
        recordings_dir=recordings_dir,
    )
