"""
Recorder Service

Main service coordinator for the GPS-tagged video recorder.
This is the central place that wires all controllers together.

Architecture:
- DeviceRegistry picks the camera
- RecordingSession owns the recording lifecycle (camera + GPS + upload)
- UploadHandoff keeps failed uploads for retry
- Factories pick real or mock implementations

State Flow (RecordingSession):
    IDLE → STARTING → ACTIVE → STOPPING → UPLOADING → IDLE
              ↓                    ↓
            IDLE (rollback)      FAILED → IDLE

Command line:
    recorder_service.py scan [--mock]
    recorder_service.py record [--device ID] [--seconds N] [--mock]
"""

import argparse
import logging
import logging.handlers
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional

from config.settings import (
    LOG_BACKUP_DAYS,
    LOG_DIR,
    LOG_SERVICE_FILE,
    MAX_RECORDING_DURATION,
)
from core.errors import DeviceScanError, ErrorKind
from devices import DeviceRegistry, create_device_sources
from devices.models.device import Device
from gps import create_gps_sampler
from recording import RecordingSession, StopResult, create_camera_manager
from recording.constants import RecordingState, StopReason, format_duration
from upload import UploadResult, create_upload_handoff

# Poll rate while waiting for a recording to end
_WAIT_INTERVAL = 0.1


class RecorderService:
    """
    Wires the registry, GPS sampler, camera, upload handoff and session.

    Usage:
        service = RecorderService(force_mock=True)
        service.scan()
        result = service.record(seconds=10)
        service.shutdown()
    """

    def __init__(self, force_mock: bool = False):
        """Initialize all controllers and setup callbacks."""
        self.logger = logging.getLogger(__name__)
        self.logger.info("Initializing Recorder Service...")

        self._stop_requested = threading.Event()
        self.upload_results: Dict[str, UploadResult] = {}
        self._previous_handlers: Dict[int, object] = {}

        self.logger.info("Initializing device discovery...")
        camera_source, usb_bus = create_device_sources(force_mock=force_mock)
        self.registry = DeviceRegistry(camera_source, usb_bus)

        self.logger.info("Initializing GPS and recording system...")
        self.gps = create_gps_sampler(force_mock=force_mock)
        self.camera = create_camera_manager(force_mock=force_mock)

        self.logger.info("Initializing upload...")
        self.handoff = create_upload_handoff(force_mock=force_mock)

        self.session = RecordingSession(
            self.registry,
            self.gps,
            self.camera,
            self.handoff,
        )

        self._setup_callbacks()
        self.logger.info("Recorder Service initialized successfully")

    def _setup_callbacks(self):
        """Wire up controller callbacks for event coordination."""
        self.registry.on_selection_lost = self._handle_selection_lost
        self.session.on_tick = self._handle_tick
        self.session.on_limit_reached = self._handle_limit_reached
        self.session.on_error = self._handle_error
        self.session.on_upload_complete = self._handle_upload_complete

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def scan(self) -> List[Device]:
        """
        Rescan for cameras.

        Raises:
            DeviceScanError: If enumeration failed (previous list kept)
        """
        devices = self.registry.scan()
        self.logger.info(f"Found {len(devices)} camera(s)")
        return devices

    def record(
        self,
        device_id: Optional[str] = None,
        seconds: Optional[float] = None,
    ) -> Optional[StopResult]:
        """
        Record one clip and hand it off for upload.

        Args:
            device_id: Camera to use (None = current/auto selection)
            seconds: Stop after this long (None = until a cap or stop request)

        Returns:
            StopResult, or None if the recording never started
        """
        if device_id is not None and not self.registry.select(device_id):
            self.logger.error(f"Unknown device: {device_id}")
            return None

        self._stop_requested.clear()
        if not self.session.start():
            error = self.session.last_error
            self.logger.error(f"Recording did not start: {error}")
            return None

        started = time.monotonic()
        while self.session.is_recording() and not self._stop_requested.is_set():
            if seconds is not None and time.monotonic() - started >= seconds:
                break
            self._stop_requested.wait(_WAIT_INTERVAL)

        # Blocks until a cap-triggered stop still in progress has finished
        result = self.session.stop()
        if not result.stopped:
            result = self.session.last_result

        if not self.session.wait_for_upload(timeout=None):
            self.logger.warning("Upload still running")
        return result

    def request_stop(self):
        """Ask a running record() to stop (safe from signal handlers)."""
        self._stop_requested.set()

    # =========================================================================
    # CALLBACKS
    # =========================================================================

    def _handle_selection_lost(self, device: Device):
        self.logger.warning(f"Selected camera disappeared: {device.display_name}")

    def _handle_tick(self, elapsed: int):
        self.logger.debug(f"Recording {format_duration(elapsed)}")

    def _handle_limit_reached(self, reason: StopReason):
        self.logger.info(f"Recording limit reached: {reason.value}")

    def _handle_error(self, kind: ErrorKind, message: str):
        self.logger.error(f"[{kind.value}] {message}")

    def _handle_upload_complete(self, session_id: str, result: UploadResult):
        self.upload_results[session_id] = result
        if result.success:
            self.logger.info(f"Session {session_id} uploaded: {result.file_id}")
        else:
            retained = self.handoff.get_retained(session_id)
            if retained is not None:
                self.logger.warning(
                    f"Session {session_id} kept for retry: {retained.artifact_path}",
                )

    # =========================================================================
    # SHUTDOWN HANDLING
    # =========================================================================

    def _signal_handler(self, signum, _frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            _frame: Current stack frame (unused, required by signal API)
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received signal {signal_name}, stopping...")
        self.request_stop()

    def install_signal_handlers(self):
        for signum in (signal.SIGTERM, signal.SIGINT):
            self._previous_handlers[signum] = signal.signal(signum, self._signal_handler)

    def _restore_signal_handlers(self):
        for signum, handler in self._previous_handlers.items():
            if handler is not None:
                signal.signal(signum, handler)
        self._previous_handlers.clear()

    def shutdown(self):
        """
        Graceful shutdown.

        Stops any recording in progress (kept on disk, not uploaded).
        """
        self.logger.info("Shutting down Recorder Service...")
        if self.session.state == RecordingState.ACTIVE:
            self.logger.info("Stopping active recording session...")
        self.session.cleanup()
        self.camera.cleanup()
        self._restore_signal_handlers()
        self.logger.info("Recorder Service shutdown complete")


def setup_logging(verbose: bool = False):
    """
    Setup logging with rotation.

    Logs to both console and file with rotation:
    - Daily rotation
    - Keep LOG_BACKUP_DAYS days of logs
    """
    level = logging.DEBUG if verbose else logging.INFO

    logger = logging.getLogger()
    logger.setLevel(level)

    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s | %(name)s"))
    logger.addHandler(console_handler)

    file_format = logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s | %(name)s",
    )

    log_file = Path(LOG_DIR) / LOG_SERVICE_FILE
    try:
        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(log_file),
            when="midnight",
            interval=1,
            backupCount=LOG_BACKUP_DAYS,
            encoding="utf-8",
        )
    except (PermissionError, FileNotFoundError):
        # Fallback to local logs directory if LOG_DIR not writable
        logs_dir = Path("logs")
        logs_dir.mkdir(exist_ok=True)

        fallback_log = logs_dir / "recorder-service.log"
        logger.warning(f"Cannot write to {log_file}, using fallback: {fallback_log}")
        logger.info(
            f"To fix: sudo mkdir -p {LOG_DIR} && sudo chown $(whoami) {LOG_DIR}",
        )

        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(fallback_log),
            when="midnight",
            interval=1,
            backupCount=LOG_BACKUP_DAYS,
            encoding="utf-8",
        )

    file_handler.setLevel(level)
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="GPS-tagged video recorder",
    )
    parser.add_argument("--mock", action="store_true", help="use mock hardware and uploader")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("scan", help="list available cameras")

    record = commands.add_parser("record", help="record one clip and upload it")
    record.add_argument("--device", help="camera id (default: first found)")
    record.add_argument(
        "--seconds",
        type=float,
        default=None,
        help=f"stop after N seconds (default: cap of {MAX_RECORDING_DURATION}s)",
    )
    return parser


def _print_devices(devices: List[Device], selected: Optional[Device]):
    if not devices:
        print("No cameras found")
        return
    for device in devices:
        marker = "*" if selected and selected.id == device.id else " "
        print(f"{marker} {device.id:<20} {device.display_name}")


def _print_result(result: StopResult, service: RecorderService) -> int:
    if result.artifact is None:
        print(f"Recording failed: {result.error_message}")
        return 1

    artifact = result.artifact
    print(
        f"Recorded {artifact.filename}: {artifact.duration_seconds:.1f}s, "
        f"{artifact.size_mb:.1f} MB, {len(result.gps_log)} GPS fix(es)",
    )

    upload = result.upload or service.upload_results.get(artifact.session_id)
    if upload is not None and upload.success:
        print(f"Uploaded as {upload.file_id}")
        return 0

    retained = service.handoff.get_retained(artifact.session_id)
    message = upload.error_message if upload else "upload did not complete"
    print(f"Upload failed: {message}")
    if retained is not None:
        print(f"Recording kept at {retained.artifact_path}")
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the service.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("GPS Video Recorder Starting")
    logger.info("=" * 60)

    try:
        service = RecorderService(force_mock=args.mock)
    except Exception as e:
        logger.critical(f"Fatal error during startup: {e}", exc_info=True)
        return 1

    try:
        try:
            devices = service.scan()
        except DeviceScanError as e:
            print(f"Device scan failed: {e}")
            return 1

        if args.command == "scan":
            _print_devices(devices, service.registry.selected)
            return 0

        service.install_signal_handlers()
        result = service.record(device_id=args.device, seconds=args.seconds)
        if result is None:
            print(f"Recording did not start: {service.session.last_error}")
            return 1
        return _print_result(result, service)

    finally:
        service.shutdown()


if __name__ == "__main__":
    sys.exit(main())
