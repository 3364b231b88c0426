"""
Recorder Errors

Shared error taxonomy for devices, GPS, recording and upload.

Every failure the coordinator reports carries an ErrorKind so the caller
can decide on a retry without parsing messages.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Failure categories surfaced to the caller"""

    PERMISSION_DENIED = "permission_denied"
    DEVICE_UNAVAILABLE = "device_unavailable"
    CAPTURE_START_FAILED = "capture_start_failed"
    CAPTURE_STOP_FAILED = "capture_stop_failed"
    UPLOAD_FAILED = "upload_failed"
    GPS_UNAVAILABLE = "gps_unavailable"  # Non-fatal, reported as a flag only


class RecorderError(Exception):
    """
    Base exception for all recorder errors.

    Subclasses set a default `kind`; callers may override it when a
    lower-level error maps to a different category.
    """

    kind = ErrorKind.CAPTURE_START_FAILED

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class PermissionDeniedError(RecorderError):
    """Camera or GPS access was refused"""

    kind = ErrorKind.PERMISSION_DENIED


class DeviceUnavailableError(RecorderError):
    """No camera selected, or the selected camera vanished"""

    kind = ErrorKind.DEVICE_UNAVAILABLE


class DeviceScanError(DeviceUnavailableError):
    """A device source failed during enumeration"""


class CaptureStartError(RecorderError):
    """Camera could not begin capturing"""

    kind = ErrorKind.CAPTURE_START_FAILED


class CaptureStopError(RecorderError):
    """Camera could not finalize the recording"""

    kind = ErrorKind.CAPTURE_STOP_FAILED


class UploadFailedError(RecorderError):
    """Upload pipeline reported a terminal failure"""

    kind = ErrorKind.UPLOAD_FAILED


class GpsUnavailableError(RecorderError):
    """Position provider could not deliver fixes"""

    kind = ErrorKind.GPS_UNAVAILABLE
