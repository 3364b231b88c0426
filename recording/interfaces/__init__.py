"""Recording interfaces"""

from recording.interfaces.video_capture_interface import (
    CameraBusyError,
    CameraNotFoundError,
    CaptureFinalizeError,
    CaptureProcessError,
    VideoCaptureInterface,
)

__all__ = [
    "CameraBusyError",
    "CameraNotFoundError",
    "CaptureFinalizeError",
    "CaptureProcessError",
    "VideoCaptureInterface",
]
