"""
Video Capture Interface

Abstract interface for video capture implementations.
Defines the contract that any video capture system must follow.

High-level code (CameraManager, RecordingSession) depends on this
abstraction, not on FFmpeg directly.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from core.errors import CaptureStartError, CaptureStopError, DeviceUnavailableError
from recording.models.artifact import CaptureLimits, CaptureResult


class VideoCaptureInterface(ABC):
    """
    Abstract base class for video capture systems.

    Any video capture implementation (FFmpeg, GStreamer, etc.) must
    implement all these methods to work with CameraManager.
    """

    @abstractmethod
    def start_capture(
        self,
        input_device: str,
        output_file: Path,
        limits: CaptureLimits,
    ) -> None:
        """
        Start capturing video to file.

        This should be NON-BLOCKING beyond camera acknowledgment.
        Video capture happens in a background process/thread and ends on
        its own once either cap in `limits` is reached.

        Args:
            input_device: Capture node (e.g., /dev/video2)
            output_file: Path where video file will be saved
            limits: Duration and size caps

        Raises:
            CameraNotFoundError: Device node missing
            PermissionDeniedError: Device exists but access is refused
            CameraBusyError / CaptureProcessError: Capture could not start

        Example:
            capture.start_capture("/dev/video0", Path("video.mp4"), limits)
        """

    @abstractmethod
    def stop_capture(self) -> CaptureResult:
        """
        Stop current video capture and finalize the file.

        Also collects a capture that already ended on its own (cap reached).
        May block briefly while the file is being closed.

        Returns:
            CaptureResult with the camera-reported duration and size

        Raises:
            CaptureStopError: Nothing to collect, or the file could not be
                              finalized. The device is released either way.
        """

    @abstractmethod
    def is_capturing(self) -> bool:
        """
        Check if currently capturing video.

        Returns False once a capture ended on its own, even before
        stop_capture() collects it.
        """

    @abstractmethod
    def get_capture_duration(self) -> float:
        """
        Get duration of current capture in seconds.

        Returns:
            Seconds captured so far, or 0.0 if nothing to report
        """

    @abstractmethod
    def get_capture_size(self) -> int:
        """
        Get current size of the output in bytes.

        Returns:
            Bytes written so far, or 0 if nothing to report
        """

    @abstractmethod
    def get_output_file(self) -> Optional[Path]:
        """Get path to current output file, or None"""

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if video capture system is available.

        Returns:
            True if capture can be used, False otherwise
        """

    @abstractmethod
    def cleanup(self) -> None:
        """
        Clean up resources and stop any active captures.

        This should never raise exceptions.
        """


class CameraNotFoundError(DeviceUnavailableError):
    """Camera device not found or not accessible"""


class CameraBusyError(CaptureStartError):
    """Camera is already in use by another process"""


class CaptureProcessError(CaptureStartError):
    """Error in capture process (FFmpeg missing, crashed at start, etc.)"""


class CaptureFinalizeError(CaptureStopError):
    """Capture could not be stopped or the output file is missing"""
