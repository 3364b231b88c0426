"""
Camera Manager

High-level camera control for one recording at a time.
Wraps the video capture interface with file naming, error normalization
and status reporting.

SOLID Principles:
- Single Responsibility: Only manages camera lifecycle
- Dependency Inversion: Depends on VideoCaptureInterface
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from core.errors import CaptureStartError, CaptureStopError, RecorderError
from devices.models.device import Device
from recording.constants import RECORDINGS_DIR
from recording.interfaces.video_capture_interface import VideoCaptureInterface
from recording.models.artifact import CaptureLimits, CaptureResult
from recording.utils.recording_utils import generate_filename


class CameraManager:
    """
    Manages camera lifecycle.

    Every failure leaves this class as a RecorderError: taxonomy errors
    from the backend pass through, anything else becomes
    CaptureStartError / CaptureStopError.

    Usage:
        camera = CameraManager(capture)
        output = camera.start_recording(device, session_id, limits)
        # ... recording happens ...
        result = camera.stop_recording()
    """

    def __init__(
        self,
        capture: VideoCaptureInterface,
        recordings_dir: Path = RECORDINGS_DIR,
    ):
        """
        Initialize camera manager.

        Args:
            capture: Video capture backend
            recordings_dir: Directory for finished clips

        Example:
            camera = CameraManager(MockCapture(), recordings_dir=tmp_path)
        """
        self.logger = logging.getLogger(__name__)
        self.capture = capture
        self.recordings_dir = Path(recordings_dir)
        self._device: Optional[Device] = None

        self.logger.info(
            f"Camera Manager initialized "
            f"(output: {self.recordings_dir}, "
            f"capture available: {self.capture.is_available()})",
        )

    def start_recording(
        self,
        device: Device,
        session_id: str,
        limits: CaptureLimits,
    ) -> Path:
        """
        Start recording from a device.

        Returns:
            Path the recording is written to

        Raises:
            RecorderError: PermissionDeniedError, DeviceUnavailableError or
                           CaptureStartError
        """
        if self._device is not None:
            raise CaptureStartError(f"Camera already recording from {self._device.id}")

        output_file = generate_filename(self.recordings_dir, session_id)
        input_device = device.node or device.id

        try:
            self.capture.start_capture(input_device, output_file, limits)
        except RecorderError as e:
            self.logger.error(f"Camera error ({e.kind.value}): {e}")
            raise
        except Exception as e:
            self.logger.error(f"Unexpected error starting camera: {e}")
            raise CaptureStartError(f"Camera failed to start: {e}") from e

        self._device = device
        self.logger.info(f"Recording started: {device.display_name} -> {output_file.name}")
        return output_file

    def stop_recording(self) -> CaptureResult:
        """
        Stop the current recording and collect the result.

        Raises:
            CaptureStopError: If nothing was recording or finalizing failed
        """
        device, self._device = self._device, None

        try:
            result = self.capture.stop_capture()
        except CaptureStopError as e:
            self.logger.error(f"Camera stop failed: {e}")
            raise
        except Exception as e:
            self.logger.error(f"Unexpected error stopping camera: {e}")
            raise CaptureStopError(f"Camera failed to stop: {e}") from e

        self.logger.info(
            f"Recording stopped{f' ({device.id})' if device else ''}: "
            f"{result.duration_seconds:.1f}s, {result.size_bytes} bytes",
        )
        return result

    def is_recording(self) -> bool:
        return self.capture.is_capturing()

    def get_recording_duration(self) -> float:
        """Camera-reported duration of the current recording"""
        return self.capture.get_capture_duration()

    def get_recording_size(self) -> int:
        return self.capture.get_capture_size()

    def get_output_file(self) -> Optional[Path]:
        return self.capture.get_output_file()

    def get_status(self) -> Dict[str, Any]:
        """
        Get complete camera status.

        Returns:
            Dictionary with status information
        """
        output_file = self.get_output_file()
        return {
            "is_available": self.capture.is_available(),
            "is_recording": self.is_recording(),
            "device": self._device.id if self._device else None,
            "recording_duration": self.get_recording_duration(),
            "recording_size": self.get_recording_size(),
            "output_file": str(output_file) if output_file else None,
        }

    def cleanup(self) -> None:
        """
        Stop recording and clean up resources.

        Always call this before shutting down!
        """
        self.logger.info("Cleaning up Camera Manager")
        self._device = None
        try:
            self.capture.cleanup()
        except Exception as e:
            self.logger.error(f"Error during capture cleanup: {e}")
