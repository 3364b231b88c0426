"""
Core utilities and modules.

Public API:
    - ErrorKind: Failure categories reported to the caller
    - RecorderError and subclasses: Shared exception hierarchy

Usage:
    from core.errors import CaptureStartError, ErrorKind

    try:
        camera.start_recording(device, output_file, limits)
    except CaptureStartError as e:
        print(f"Start failed ({e.kind.value}): {e}")
"""

from core.errors import (
    CaptureStartError,
    CaptureStopError,
    DeviceScanError,
    DeviceUnavailableError,
    ErrorKind,
    GpsUnavailableError,
    PermissionDeniedError,
    RecorderError,
    UploadFailedError,
)

__all__ = [
    "CaptureStartError",
    "CaptureStopError",
    "DeviceScanError",
    "DeviceUnavailableError",
    "ErrorKind",
    "GpsUnavailableError",
    "PermissionDeniedError",
    "RecorderError",
    "UploadFailedError",
]
