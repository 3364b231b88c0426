"""
Recording Constants

Session states, stop reasons and FFmpeg command construction.

Note: Tunable values (caps, tick interval, video settings) live in
config/settings.py and are re-exported here.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from config.settings import (
    CAMERA_WARMUP_TIME,
    MAX_RECORDING_DURATION,
    MAX_RECORDING_SIZE_BYTES,
    RECORDINGS_DIR,
    TICK_INTERVAL,
    UPLOAD_IN_BACKGROUND,
    VIDEO_CODEC,
    VIDEO_CRF,
    VIDEO_FILENAME_EXTENSION,
    VIDEO_FILENAME_PREFIX,
    VIDEO_FPS,
    VIDEO_HEIGHT,
    VIDEO_PRESET,
    VIDEO_WIDTH,
)

__all__ = [
    "CAMERA_WARMUP_TIME",
    "FFMPEG_LOG_LEVEL",
    "FFMPEG_STOP_TIMEOUT",
    "FILENAME_FORMAT",
    "MAX_RECORDING_DURATION",
    "MAX_RECORDING_SIZE_BYTES",
    "RECORDINGS_DIR",
    "THREAD_QUEUE_SIZE",
    "TICK_INTERVAL",
    "UPLOAD_IN_BACKGROUND",
    "VIDEO_FILENAME_EXTENSION",
    "VIDEO_FILENAME_PREFIX",
    "VIDEO_INPUT_FORMAT",
    "RecordingState",
    "StopReason",
    "format_duration",
    "get_ffmpeg_command",
    "validate_camera_device",
]


# =============================================================================
# CAMERA / FFMPEG CONFIGURATION
# =============================================================================

# Video4Linux2 input
VIDEO_INPUT_FORMAT = "v4l2"

# Only show errors in FFmpeg output
FFMPEG_LOG_LEVEL = "error"

# Input queue for USB camera frame jitter (512 frames ~ 17s at 30fps)
THREAD_QUEUE_SIZE = 512

# Seconds to wait for FFmpeg to finalize the file after SIGTERM
FFMPEG_STOP_TIMEOUT = 5.0

# Filename timestamp: "recording_2025-01-15_143022_<session>.mp4"
FILENAME_FORMAT = "%Y-%m-%d_%H%M%S"


# =============================================================================
# SESSION STATE TRACKING
# =============================================================================


class RecordingState(Enum):
    """
    States a recording session can be in.

    Lifecycle: IDLE -> STARTING -> ACTIVE -> STOPPING -> UPLOADING -> IDLE
    STARTING -> IDLE on camera start failure (rollback).
    FAILED is passed through when the camera could not be stopped cleanly.
    """

    IDLE = "idle"  # Ready for start()
    STARTING = "starting"  # GPS + camera coming up
    ACTIVE = "active"  # Recording
    STOPPING = "stopping"  # Tearing down camera and GPS
    UPLOADING = "uploading"  # Handing artifact + log to the uploader
    FAILED = "failed"  # Stop failed, about to reset


class StopReason(Enum):
    """Why a session left ACTIVE (or why stop() did nothing)"""

    MANUAL = "manual"
    MAX_DURATION = "max_duration"
    MAX_SIZE = "max_size"
    CAPTURE_ENDED = "capture_ended"  # Camera stopped on its own
    NOTHING_TO_STOP = "nothing_to_stop"


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_ffmpeg_command(
    input_device: str,
    output_file: str,
    max_duration: Optional[float] = None,
    max_size_bytes: Optional[int] = None,
    width: int = VIDEO_WIDTH,
    height: int = VIDEO_HEIGHT,
    fps: int = VIDEO_FPS,
) -> list[str]:
    """
    Generate FFmpeg command for video capture.

    The duration (-t) and size (-fs) caps make FFmpeg end the recording on
    its own if the session does not stop it first.

    Args:
        input_device: Camera device path (e.g., /dev/video0)
        output_file: Output filename with path
        max_duration: Stop after this many seconds (None = no cap)
        max_size_bytes: Stop once the file reaches this size (None = no cap)
        width: Video width in pixels
        height: Video height in pixels
        fps: Frame rate

    Returns:
        List of command arguments for subprocess

    Example:
        cmd = get_ffmpeg_command("/dev/video0", "output.mp4", max_duration=300)
        subprocess.Popen(cmd)
    """
    command = [
        "ffmpeg",
        "-f",
        VIDEO_INPUT_FORMAT,
        "-input_format",
        "mjpeg",  # MJPEG from camera (less CPU than raw)
        "-video_size",
        f"{width}x{height}",
        "-framerate",
        str(fps),
        "-thread_queue_size",
        str(THREAD_QUEUE_SIZE),
        "-i",
        input_device,
        "-c:v",
        VIDEO_CODEC,
        "-preset",
        VIDEO_PRESET,
        "-crf",
        str(VIDEO_CRF),
        "-pix_fmt",
        "yuv420p",
        # Fragmented MP4 stays playable when FFmpeg is stopped with SIGTERM
        "-movflags",
        "+frag_keyframe+empty_moov",
    ]

    if max_duration:
        command.extend(["-t", str(max_duration)])
    if max_size_bytes:
        command.extend(["-fs", str(max_size_bytes)])

    command.extend(["-loglevel", FFMPEG_LOG_LEVEL, "-y", output_file])
    return command


def format_duration(seconds: float) -> str:
    """
    Format duration in seconds to human-readable string.

    Example:
        format_duration(630) -> "10:30"
        format_duration(90) -> "1:30"
    """
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


def validate_camera_device(device_path: str) -> bool:
    """
    Check if camera device exists and is a character device.

    Example:
        if validate_camera_device("/dev/video0"):
            print("Camera found!")
    """
    device = Path(device_path)
    return device.exists() and device.is_char_device()
