"""
FFmpeg Video Capture Implementation

Real video capture using FFmpeg subprocess.
Captures video from a V4L2 camera node and encodes to file.

This wraps FFmpeg to match our VideoCaptureInterface.
"""

import logging
import os
import shutil
import subprocess
import time
from pathlib import Path
from typing import Optional

from core.errors import PermissionDeniedError
from recording.constants import (
    CAMERA_WARMUP_TIME,
    FFMPEG_STOP_TIMEOUT,
    VIDEO_FPS,
    VIDEO_HEIGHT,
    VIDEO_WIDTH,
    get_ffmpeg_command,
    validate_camera_device,
)
from recording.interfaces.video_capture_interface import (
    CameraBusyError,
    CameraNotFoundError,
    CaptureFinalizeError,
    CaptureProcessError,
    VideoCaptureInterface,
)
from recording.models.artifact import CaptureLimits, CaptureResult


class FFmpegCapture(VideoCaptureInterface):
    """
    Video capture using FFmpeg.

    Uses subprocess to run FFmpeg, capturing video from the camera node
    to a file. Non-blocking - FFmpeg runs in background process.
    The session's caps are passed as -t / -fs so FFmpeg ends the file
    itself if nobody stops it.

    Usage:
        capture = FFmpegCapture()
        capture.start_capture("/dev/video0", Path("video.mp4"), limits)
        # ... recording happens in background ...
        result = capture.stop_capture()
    """

    def __init__(
        self,
        width: int = VIDEO_WIDTH,
        height: int = VIDEO_HEIGHT,
        fps: int = VIDEO_FPS,
        warmup_time: float = CAMERA_WARMUP_TIME,
    ):
        self.logger = logging.getLogger(__name__)

        # Configuration
        self.width = width
        self.height = height
        self.fps = fps
        self.warmup_time = warmup_time

        # State tracking
        self._process: Optional[subprocess.Popen] = None
        self._input_device: Optional[str] = None
        self._output_file: Optional[Path] = None
        self._start_time: Optional[float] = None
        self._end_time: Optional[float] = None

        self.logger.info(
            f"FFmpeg Capture initialized "
            f"(resolution: {width}x{height}, fps: {fps})",
        )

    def start_capture(
        self,
        input_device: str,
        output_file: Path,
        limits: CaptureLimits,
    ) -> None:
        """
        Start capturing video with FFmpeg.

        Waits warmup_time for FFmpeg to open the device, then returns.
        """
        if self._process is not None:
            raise CameraBusyError("Capture already running")

        if not validate_camera_device(input_device):
            raise CameraNotFoundError(f"Camera device not found: {input_device}")

        if not os.access(input_device, os.R_OK):
            raise PermissionDeniedError(
                f"No read access to {input_device} (add user to the 'video' group)",
            )

        output_file.parent.mkdir(parents=True, exist_ok=True)

        command = get_ffmpeg_command(
            input_device=input_device,
            output_file=str(output_file),
            max_duration=limits.max_duration_seconds,
            max_size_bytes=limits.max_size_bytes,
            width=self.width,
            height=self.height,
            fps=self.fps,
        )

        self.logger.info(f"Starting FFmpeg capture: {input_device} -> {output_file}")
        self.logger.debug(f"FFmpeg command: {' '.join(command)}")

        try:
            # stdin closed so FFmpeg never waits for keyboard input
            self._process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
            )
        except FileNotFoundError as e:
            raise CaptureProcessError(
                "FFmpeg not found. Install with: sudo apt-get install ffmpeg",
            ) from e

        time.sleep(self.warmup_time)

        if self._process.poll() is not None:
            # Process exited already - something went wrong
            _, stderr = self._process.communicate()
            self._process = None
            error_msg = stderr.decode("utf-8", errors="ignore")

            if "Device or resource busy" in error_msg:
                raise CameraBusyError(f"Camera is busy: {input_device}")
            if "Permission denied" in error_msg:
                raise PermissionDeniedError(f"Camera access denied: {input_device}")
            raise CaptureProcessError(f"FFmpeg failed to start: {error_msg}")

        self._input_device = input_device
        self._output_file = output_file
        self._start_time = time.time()
        self._end_time = None

        self.logger.info(f"Capture started successfully (PID: {self._process.pid})")

    def stop_capture(self) -> CaptureResult:
        """
        Stop FFmpeg capture gracefully.

        Sends SIGTERM so FFmpeg flushes and closes the file, force kills
        after FFMPEG_STOP_TIMEOUT.
        """
        if self._process is None or self._output_file is None:
            raise CaptureFinalizeError("Not capturing, nothing to stop")

        process = self._process
        output_file = self._output_file
        start_time = self._start_time or time.time()

        try:
            if process.poll() is None:
                self.logger.info("Stopping capture...")
                # SIGTERM, not SIGKILL: FFmpeg writes the trailer on SIGTERM
                process.terminate()
                try:
                    _, stderr = process.communicate(timeout=FFMPEG_STOP_TIMEOUT)
                except subprocess.TimeoutExpired:
                    self.logger.warning("FFmpeg didn't stop gracefully, force killing")
                    process.kill()
                    process.wait()
                    stderr = b""
                end_time = time.time()
            else:
                # Ended on its own (-t / -fs reached, or crashed)
                _, stderr = process.communicate()
                end_time = self._end_time or time.time()

            # 255 is FFmpeg's exit code for SIGTERM
            if process.returncode not in (0, 255, -15):
                self.logger.warning(
                    f"FFmpeg exited with code {process.returncode}: "
                    f"{(stderr or b'').decode('utf-8', errors='ignore')}",
                )

        finally:
            self._process = None
            self._input_device = None
            self._output_file = None
            self._start_time = None
            self._end_time = None

        if not output_file.exists():
            raise CaptureFinalizeError(f"Output file was not created: {output_file}")

        size = output_file.stat().st_size
        duration = end_time - start_time
        self.logger.info(
            f"Recording saved: {output_file} "
            f"({duration:.1f}s, {size / (1024 * 1024):.1f} MB)",
        )
        return CaptureResult(path=output_file, duration_seconds=duration, size_bytes=size)

    def is_capturing(self) -> bool:
        if self._process is None:
            return False

        if self._process.poll() is None:
            return True

        if self._end_time is None:
            self._end_time = time.time()
            self.logger.info(f"FFmpeg exited on its own (code {self._process.returncode})")
        return False

    def get_capture_duration(self) -> float:
        if self._start_time is None:
            return 0.0
        end = self._end_time or time.time()
        return end - self._start_time

    def get_capture_size(self) -> int:
        if self._output_file is None:
            return 0
        try:
            return self._output_file.stat().st_size
        except OSError:
            return 0

    def get_output_file(self) -> Optional[Path]:
        return self._output_file

    def is_available(self) -> bool:
        """Check if FFmpeg is installed"""
        if not shutil.which("ffmpeg"):
            self.logger.warning("FFmpeg not found in PATH")
            return False
        return True

    def cleanup(self) -> None:
        """Stop capture and clean up resources"""
        if self._process is None:
            return

        self.logger.info("Cleaning up FFmpeg Capture")
        try:
            self.stop_capture()
        except CaptureFinalizeError as e:
            self.logger.warning(f"Capture cleanup: {e}")
