"""
Mock Video Capture Implementation

Simulated video capture for testing without real camera/FFmpeg.

This is a "Fake" (test double) - it has working logic but no real hardware.
Duration and size follow an injectable clock, so tests can move time
forward without sleeping.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Optional

from core.errors import PermissionDeniedError, RecorderError
from recording.interfaces.video_capture_interface import (
    CameraBusyError,
    CameraNotFoundError,
    CaptureFinalizeError,
    CaptureProcessError,
    VideoCaptureInterface,
)
from recording.models.artifact import CaptureLimits, CaptureResult

# Fake MP4 header written to every output file
_FAKE_HEADER = b"\x00\x00\x00\x20ftypmp42"

# Cap on bytes actually written to disk per fake file
_MAX_FAKE_BYTES = 64 * 1024


class MockCapture(VideoCaptureInterface):
    """
    Mock video capture for testing.

    Simulates a camera that grows its output at bytes_per_second and ends
    on its own when a cap is reached, like FFmpeg with -t / -fs.

    Usage:
        clock = FakeClock()
        capture = MockCapture(clock=clock)
        capture.start_capture("/dev/video0", Path("test.mp4"), CaptureLimits(10))
        clock.advance(3.5)
        result = capture.stop_capture()  # duration_seconds == 3.5
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        bytes_per_second: int = 500_000,
        write_files: bool = True,
    ):
        """
        Initialize mock capture.

        Args:
            clock: Time source for simulated duration
            bytes_per_second: Simulated encoder output rate
            write_files: If False, no file is created (pure in-memory tests)
        """
        self.logger = logging.getLogger(__name__)
        self._clock = clock
        self.bytes_per_second = bytes_per_second
        self.write_files = write_files

        # State tracking
        self._is_capturing = False
        self._input_device: Optional[str] = None
        self._output_file: Optional[Path] = None
        self._start_time: Optional[float] = None
        self._limits = CaptureLimits()
        self._ended_at: Optional[float] = None

        # Configuration for test scenarios
        self._start_error: Optional[RecorderError] = None
        self._should_fail_stop = False
        self._end_after_seconds: Optional[float] = None

        # Tracking for tests
        self.start_calls = 0
        self.stop_calls = 0
        self.last_limits: Optional[CaptureLimits] = None
        self.last_input_device: Optional[str] = None

        self.logger.info(
            f"Mock Capture initialized ({bytes_per_second} bytes/s simulated)",
        )

    def start_capture(
        self,
        input_device: str,
        output_file: Path,
        limits: CaptureLimits,
    ) -> None:
        self.start_calls += 1
        self.last_limits = limits
        self.last_input_device = input_device

        if self._start_error is not None:
            error, self._start_error = self._start_error, None
            self.logger.error(f"[MOCK] Simulated start failure: {error}")
            raise error

        if self._output_file is not None:
            raise CameraBusyError(f"[MOCK] Camera busy: {input_device}")

        if self.write_files:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_bytes(_FAKE_HEADER)

        self._is_capturing = True
        self._input_device = input_device
        self._output_file = output_file
        self._start_time = self._clock()
        self._limits = limits
        self._ended_at = None

        self.logger.info(
            f"[MOCK] Capture started: {input_device} -> {output_file} "
            f"(max {limits.max_duration_seconds}s / {limits.max_size_bytes} bytes)",
        )

    def stop_capture(self) -> CaptureResult:
        self.stop_calls += 1

        if self._output_file is None or self._start_time is None:
            raise CaptureFinalizeError("[MOCK] No capture to stop")

        self._update_ended()
        duration = self._elapsed()
        size = self._size_for(duration)
        output_file = self._output_file

        # Device is released even when finalizing fails
        self._reset()

        if self._should_fail_stop:
            self._should_fail_stop = False
            self.logger.error("[MOCK] Simulated stop failure")
            raise CaptureFinalizeError("[MOCK] Simulated finalize failure")

        if self.write_files:
            self._finalize_file(output_file, size)

        self.logger.info(
            f"[MOCK] Capture stopped: {duration:.1f}s, {size} bytes",
        )
        return CaptureResult(
            path=output_file,
            duration_seconds=duration,
            size_bytes=size,
        )

    def is_capturing(self) -> bool:
        self._update_ended()
        return self._is_capturing

    def get_capture_duration(self) -> float:
        if self._start_time is None:
            return 0.0
        self._update_ended()
        return self._elapsed()

    def get_capture_size(self) -> int:
        if self._start_time is None:
            return 0
        return self._size_for(self.get_capture_duration())

    def get_output_file(self) -> Optional[Path]:
        return self._output_file

    def is_available(self) -> bool:
        """Mock capture is always available"""
        return True

    def cleanup(self) -> None:
        self.logger.debug("[MOCK] Cleanup")
        self._reset()

    # =========================================================================
    # SIMULATION
    # =========================================================================

    def _elapsed(self) -> float:
        end = self._ended_at if self._ended_at is not None else self._clock()
        return max(0.0, end - self._start_time)

    def _size_for(self, duration: float) -> int:
        size = int(duration * self.bytes_per_second)
        if self._limits.max_size_bytes:
            size = min(size, self._limits.max_size_bytes)
        return size

    def _update_ended(self) -> None:
        """End the capture on its own once a cap is reached"""
        if not self._is_capturing or self._start_time is None:
            return

        elapsed = self._clock() - self._start_time
        end_after = None

        if self._limits.max_duration_seconds:
            end_after = self._limits.max_duration_seconds
        if self._limits.max_size_bytes and self.bytes_per_second:
            size_time = self._limits.max_size_bytes / self.bytes_per_second
            end_after = size_time if end_after is None else min(end_after, size_time)
        if self._end_after_seconds is not None:
            end_after = (
                self._end_after_seconds
                if end_after is None
                else min(end_after, self._end_after_seconds)
            )

        if end_after is not None and elapsed >= end_after:
            self._is_capturing = False
            self._ended_at = self._start_time + end_after
            self.logger.info(f"[MOCK] Capture ended on its own after {end_after:.1f}s")

    def _finalize_file(self, output_file: Path, size: int) -> None:
        """Write fake data to output file"""
        with open(output_file, "wb") as f:
            f.write(_FAKE_HEADER)
            f.write(b"\x00" * min(size, _MAX_FAKE_BYTES))

    def _reset(self) -> None:
        self._is_capturing = False
        self._input_device = None
        self._output_file = None
        self._start_time = None
        self._limits = CaptureLimits()
        self._ended_at = None
        self._end_after_seconds = None

    # =========================================================================
    # TESTING HELPER METHODS (not part of VideoCaptureInterface)
    # =========================================================================

    def simulate_start_failure(self, error: Optional[RecorderError] = None) -> None:
        """
        Configure mock to fail on next start_capture() call.

        Example:
            mock.simulate_start_failure()
            with pytest.raises(CaptureStartError):
                mock.start_capture("/dev/video0", Path("test.mp4"), limits)
        """
        self._start_error = error or CaptureProcessError("Simulated camera failure")
        self.logger.debug("[MOCK] Configured to fail on start")

    def simulate_permission_denied(self) -> None:
        """Next start_capture() raises PermissionDeniedError"""
        self.simulate_start_failure(PermissionDeniedError("Simulated camera access denied"))

    def simulate_device_missing(self) -> None:
        """Next start_capture() raises CameraNotFoundError"""
        self.simulate_start_failure(CameraNotFoundError("Simulated camera unplugged"))

    def simulate_stop_failure(self) -> None:
        """Next stop_capture() raises after releasing the device"""
        self._should_fail_stop = True
        self.logger.debug("[MOCK] Configured to fail on stop")

    def simulate_capture_end(self, after_seconds: float = 0.0) -> None:
        """
        End the current capture on its own (e.g. camera unplugged).

        Args:
            after_seconds: Capture time at which it ends
        """
        self._end_after_seconds = after_seconds
        self.logger.debug(f"[MOCK] Configured to end after {after_seconds}s")

    def reset_test_config(self) -> None:
        """Reset test configuration to normal operation"""
        self._start_error = None
        self._should_fail_stop = False
        self._end_after_seconds = None
        self.logger.debug("[MOCK] Test configuration reset")
