"""
Recording Session

The coordinator for one GPS-tagged recording at a time.

Owns the session state machine and all cross-cutting session fields;
transitions are the only way they change. Camera, GPS and upload are
collaborators that can each fail independently.

SOLID Principles:
- Single Responsibility: Only manages recording session lifecycle
- Open/Closed: Callbacks for state changes, ticks, limits and errors
- Dependency Inversion: Depends on CameraManager, GpsSampler, UploadHandoff
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from core.errors import (
    DeviceUnavailableError,
    ErrorKind,
    RecorderError,
    UploadFailedError,
)
from devices.controllers.device_registry import DeviceRegistry
from devices.models.device import Device
from gps.controllers.gps_sampler import GpsSampler
from gps.models.log_entry import GpsLogEntry
from recording.constants import (
    MAX_RECORDING_DURATION,
    MAX_RECORDING_SIZE_BYTES,
    TICK_INTERVAL,
    UPLOAD_IN_BACKGROUND,
    RecordingState,
    StopReason,
    format_duration,
)
from recording.controllers.camera_manager import CameraManager
from recording.models.artifact import CaptureLimits, RecordingArtifact
from recording.models.stop_result import StopResult
from recording.utils.recording_utils import new_session_id
from upload.constants import UploadStatus
from upload.controllers.upload_handoff import UploadHandoff
from upload.interfaces.uploader_interface import UploadResult
from upload.models.retained_upload import RetainedUpload
from upload.models.session_metadata import SessionMetadata


class RecordingSession:
    """
    Coordinates camera, GPS and upload for one recording.

    Lifecycle:
        IDLE -> STARTING -> ACTIVE -> STOPPING -> UPLOADING -> IDLE
        STARTING -> IDLE when the camera fails to start (GPS discarded)
        STOPPING -> FAILED -> IDLE when the camera fails to stop

    Rules:
    - start() is rejected unless IDLE with a selected device
    - GPS starts before the camera and stops after it
    - Duration/size caps and a camera that ends on its own all go through
      the same stop path as stop()
    - elapsed_seconds is a display counter; the artifact carries the
      camera-reported duration
    - Start and stop run to completion before another start/stop is served

    Usage:
        session = RecordingSession(registry, gps, camera, handoff)
        session.on_tick = lambda elapsed: print(format_duration(elapsed))
        session.on_upload_complete = lambda sid, result: print(result.success)

        if session.start():
            ...
            result = session.stop()
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        gps: GpsSampler,
        camera: CameraManager,
        handoff: UploadHandoff,
        max_duration_seconds: float = MAX_RECORDING_DURATION,
        max_size_bytes: int = MAX_RECORDING_SIZE_BYTES,
        tick_interval: float = TICK_INTERVAL,
        background_upload: bool = UPLOAD_IN_BACKGROUND,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize recording session.

        Args:
            registry: Source of the selected device
            gps: GPS sampler (owned by this session while recording)
            camera: Camera manager
            handoff: Upload handoff
            max_duration_seconds: Duration cap communicated to the camera
            max_size_bytes: Size cap communicated to the camera
            tick_interval: Seconds per elapsed-time tick
            background_upload: Run the upload on a worker thread
            clock: Time source for session timestamps
        """
        self.logger = logging.getLogger(__name__)
        self.registry = registry
        self.gps = gps
        self.camera = camera
        self.handoff = handoff
        self.limits = CaptureLimits(
            max_duration_seconds=max_duration_seconds,
            max_size_bytes=max_size_bytes,
        )
        self.tick_interval = tick_interval
        self.background_upload = background_upload
        self._clock = clock

        # State guarded by _lock; start/stop serialized by _transition_lock
        self._lock = threading.RLock()
        self._transition_lock = threading.RLock()

        self._state = RecordingState.IDLE
        self._session_id: Optional[str] = None
        self._device: Optional[Device] = None
        self._started_at: Optional[float] = None
        self._elapsed_seconds = 0
        self._last_error: Optional[RecorderError] = None
        self._last_artifact: Optional[RecordingArtifact] = None
        self._last_result: Optional[StopResult] = None

        self._ticker: Optional[threading.Thread] = None
        self._ticker_stop = threading.Event()
        self._upload_thread: Optional[threading.Thread] = None

        # Callbacks
        self.on_state_change: Optional[Callable[[RecordingState, RecordingState], None]] = None
        self.on_start: Optional[Callable[[str], None]] = None
        self.on_tick: Optional[Callable[[int], None]] = None
        self.on_limit_reached: Optional[Callable[[StopReason], None]] = None
        self.on_error: Optional[Callable[[ErrorKind, str], None]] = None
        self.on_upload_complete: Optional[Callable[[str, UploadResult], None]] = None

        self.logger.info(
            f"Recording Session initialized "
            f"(max: {format_duration(max_duration_seconds)} / "
            f"{max_size_bytes} bytes, background upload: {background_upload})",
        )

    # =========================================================================
    # START
    # =========================================================================

    def start(self) -> bool:
        """
        Start a recording with the registry's selected device.

        Returns:
            True if the session reached ACTIVE. False if rejected (not
            IDLE, no device) or if the camera failed to start; see
            last_error for the reason.
        """
        if not self._transition_lock.acquire(blocking=False):
            self.logger.warning("Cannot start: another transition is in progress")
            return False

        try:
            with self._lock:
                if self._state != RecordingState.IDLE:
                    self.logger.warning(f"Cannot start: session is {self._state.value}")
                    return False

                device = self.registry.selected
                if device is None:
                    self.logger.warning("Cannot start: no camera selected")
                    self._last_error = DeviceUnavailableError("No camera selected")
                    return False

                session_id = new_session_id()
                self._session_id = session_id
                self._device = device
                self._started_at = self._clock()
                self._elapsed_seconds = 0
                self._last_error = None
                self._last_artifact = None

            self._set_state(RecordingState.STARTING)
            self.logger.info(
                f"Starting session {session_id} on {device.display_name}",
            )

            # GPS first, best effort
            if not self.gps.start(session_id):
                self.logger.warning(
                    f"Recording without GPS: {self.gps.error_message}",
                )

            try:
                self.camera.start_recording(device, session_id, self.limits)
            except RecorderError as e:
                self._rollback_start(e)
                return False

            self._start_ticker(session_id)
            self._set_state(RecordingState.ACTIVE)
            self.logger.info(f"Session {session_id} recording")
            self._trigger_start(session_id)
            return True

        finally:
            self._transition_lock.release()

    def _rollback_start(self, error: RecorderError) -> None:
        """Camera failed: drop GPS data, confirm GPS stopped, back to IDLE"""
        self.logger.error(f"Camera start failed ({error.kind.value}): {error}")

        self.gps.discard()
        if self.gps.gps_enabled:
            self.logger.error("GPS still running after rollback")

        with self._lock:
            self._last_error = error
            self._clear_session()

        self._set_state(RecordingState.IDLE)
        self._trigger_error(error.kind, str(error))

    # =========================================================================
    # TICKER
    # =========================================================================

    def _start_ticker(self, session_id: str) -> None:
        self._ticker_stop.clear()
        self._ticker = threading.Thread(
            target=self._ticker_worker,
            args=(session_id,),
            daemon=True,
            name="RecordingSession-Ticker",
        )
        self._ticker.start()

    def _stop_ticker(self) -> None:
        self._ticker_stop.set()
        if (
            self._ticker
            and self._ticker.is_alive()
            and self._ticker is not threading.current_thread()
        ):
            self._ticker.join(timeout=self.tick_interval + 2.0)
        self._ticker = None

    def _ticker_worker(self, session_id: str) -> None:
        self.logger.debug(f"Ticker started for session {session_id}")
        while not self._ticker_stop.wait(self.tick_interval):
            if self._session_id != session_id:
                break
            if self.tick() is not None:
                break
        self.logger.debug(f"Ticker stopped for session {session_id}")

    def tick(self) -> Optional[StopResult]:
        """
        Advance the elapsed counter by one and enforce the caps.

        Called by the ticker thread every tick_interval.

        Returns:
            The StopResult if this tick stopped the session, else None
        """
        with self._lock:
            if self._state != RecordingState.ACTIVE:
                return None
            self._elapsed_seconds += 1
            elapsed = self._elapsed_seconds

        self._trigger_tick(elapsed)

        reason = self._check_limits()
        if reason is None:
            return None

        # A stop already running wins
        if not self._transition_lock.acquire(blocking=False):
            return None
        try:
            if self._state != RecordingState.ACTIVE:
                return None
            self.logger.info(f"Stopping session: {reason.value}")
            self._trigger_limit_reached(reason)
            return self._stop(reason)
        finally:
            self._transition_lock.release()

    def _check_limits(self) -> Optional[StopReason]:
        duration = self.camera.get_recording_duration()
        if self.limits.max_duration_seconds and duration >= self.limits.max_duration_seconds:
            return StopReason.MAX_DURATION

        size = self.camera.get_recording_size()
        if self.limits.max_size_bytes and size >= self.limits.max_size_bytes:
            return StopReason.MAX_SIZE

        if not self.camera.is_recording():
            return StopReason.CAPTURE_ENDED

        return None

    # =========================================================================
    # STOP
    # =========================================================================

    def stop(self) -> StopResult:
        """
        Stop the recording and hand it off for upload.

        Safe to call in any state: outside ACTIVE it returns
        StopResult(stopped=False, reason=NOTHING_TO_STOP).
        """
        with self._transition_lock:
            return self._stop(StopReason.MANUAL)

    def _stop(self, reason: StopReason) -> StopResult:
        """Single stop path for manual stops and cap trips"""
        result = self._stop_and_handoff(reason)
        if result.stopped:
            with self._lock:
                self._last_result = result
        return result

    def _stop_and_handoff(self, reason: StopReason) -> StopResult:
        with self._lock:
            if self._state != RecordingState.ACTIVE:
                self.logger.debug(f"Nothing to stop (session is {self._state.value})")
                return StopResult.nothing_to_stop()
            session_id = self._session_id
            device = self._device
            started_at = self._started_at

        self._set_state(RecordingState.STOPPING)
        self._stop_ticker()

        # Camera then GPS, both unconditionally
        artifact: Optional[RecordingArtifact] = None
        stop_error: Optional[RecorderError] = None
        try:
            capture = self.camera.stop_recording()
            artifact = RecordingArtifact.from_capture(
                capture,
                session_id=session_id,
                device_id=device.id,
                started_at=started_at,
            )
        except RecorderError as e:
            stop_error = e
        finally:
            gps_log = self.gps.stop()

        if stop_error is not None:
            return self._fail_stop(session_id, reason, stop_error, gps_log)

        with self._lock:
            self._last_artifact = artifact

        self.logger.info(
            f"Session {session_id} stopped ({reason.value}): "
            f"{artifact.duration_seconds:.1f}s, {artifact.size_bytes} bytes, "
            f"{len(gps_log)} GPS fix(es)",
        )

        metadata = self._build_metadata(artifact, device, gps_log)
        self._set_state(RecordingState.UPLOADING)

        if self.background_upload:
            self._upload_thread = threading.Thread(
                target=self._upload_worker,
                args=(artifact, gps_log, metadata),
                daemon=True,
                name="RecordingSession-Upload",
            )
            self._upload_thread.start()
            return StopResult(
                stopped=True,
                reason=reason,
                session_id=session_id,
                artifact=artifact,
                gps_log=gps_log,
            )

        upload = self._upload(artifact, gps_log, metadata)
        return StopResult(
            stopped=True,
            reason=reason,
            session_id=session_id,
            artifact=artifact,
            gps_log=gps_log,
            upload=upload,
            error_message=None if upload.success else upload.error_message,
        )

    def _fail_stop(
        self,
        session_id: str,
        reason: StopReason,
        error: RecorderError,
        gps_log: List[GpsLogEntry],
    ) -> StopResult:
        """Camera could not produce an artifact: report and reset"""
        self.logger.error(f"Camera stop failed for session {session_id}: {error}")

        with self._lock:
            self._last_error = error
        self._set_state(RecordingState.FAILED)
        self._trigger_error(error.kind, str(error))

        with self._lock:
            self._clear_session()
        self._set_state(RecordingState.IDLE)

        return StopResult(
            stopped=True,
            reason=reason,
            session_id=session_id,
            gps_log=gps_log,
            error_message=str(error),
        )

    def _build_metadata(
        self,
        artifact: RecordingArtifact,
        device: Device,
        gps_log: List[GpsLogEntry],
    ) -> SessionMetadata:
        return SessionMetadata(
            session_id=artifact.session_id,
            device_id=device.id,
            device_name=device.display_name,
            started_at=artifact.started_at,
            duration_seconds=artifact.duration_seconds,
            size_bytes=artifact.size_bytes,
            gps_fix_count=len(gps_log),
            gps_error=self.gps.error_message if self.gps.has_error else None,
        )

    # =========================================================================
    # UPLOAD
    # =========================================================================

    def _upload(
        self,
        artifact: RecordingArtifact,
        gps_log: List[GpsLogEntry],
        metadata: SessionMetadata,
    ) -> UploadResult:
        result = self.handoff.submit(artifact, gps_log, metadata)
        self._finish_upload(artifact.session_id, result)
        return result

    def _upload_worker(
        self,
        artifact: RecordingArtifact,
        gps_log: List[GpsLogEntry],
        metadata: SessionMetadata,
    ) -> None:
        try:
            self._upload(artifact, gps_log, metadata)
        except Exception as e:
            self.logger.error(f"Background upload crashed: {e}", exc_info=True)
            self._finish_upload(
                artifact.session_id,
                UploadResult.failure(artifact.session_id, f"Upload crashed: {e}"),
            )

    def _finish_upload(self, session_id: str, result: UploadResult) -> None:
        """Upload outcome: reset to IDLE if it belongs to the current session"""
        with self._lock:
            current = (
                session_id == self._session_id
                and self._state == RecordingState.UPLOADING
            )
            if current:
                if not result.success:
                    self._last_error = UploadFailedError(
                        result.error_message or "Upload failed",
                    )
                self._clear_session()

        if current:
            self._set_state(RecordingState.IDLE)
        else:
            self.logger.info(
                f"Upload outcome for previous session {session_id} "
                f"(success: {result.success}), current session unchanged",
            )

        if not result.success:
            self._trigger_error(
                ErrorKind.UPLOAD_FAILED,
                f"Upload failed for session {session_id}: {result.error_message}",
            )
        self._trigger_upload_complete(session_id, result)

    def wait_for_upload(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for a background upload to finish.

        Returns:
            True if no upload is running when this returns
        """
        thread = self._upload_thread
        if thread is None or thread is threading.current_thread():
            return True
        thread.join(timeout=timeout)
        return not thread.is_alive()

    def reset(self) -> bool:
        """
        Stop waiting for a background upload and return to IDLE.

        The upload keeps running; its outcome is still reported through
        on_upload_complete, and a failure is still retained by the handoff.

        Returns:
            True if the session was reset, False outside UPLOADING
        """
        with self._transition_lock:
            with self._lock:
                if self._state != RecordingState.UPLOADING:
                    return False
                abandoned = self._session_id
                self._clear_session()

            self.logger.warning(f"Session {abandoned} reset while upload in flight")
            self._set_state(RecordingState.IDLE)
            return True

    def retry_upload(self, session_id: str) -> UploadResult:
        """Resubmit a failed upload (same artifact and log, no re-recording)"""
        result = self.handoff.retry(session_id)
        if result.status != UploadStatus.REJECTED:
            self._trigger_upload_complete(session_id, result)
        return result

    def dismiss_upload(self, session_id: str) -> bool:
        """Forget a failed upload; the file stays on disk"""
        return self.handoff.dismiss(session_id)

    def get_retained_upload(self, session_id: str) -> Optional[RetainedUpload]:
        return self.handoff.get_retained(session_id)

    @property
    def failed_session_ids(self) -> List[str]:
        return self.handoff.retained_session_ids

    # =========================================================================
    # STATE
    # =========================================================================

    def _set_state(self, new_state: RecordingState) -> None:
        with self._lock:
            old_state = self._state
            self._state = new_state

        if old_state != new_state:
            self.logger.debug(f"State: {old_state.value} -> {new_state.value}")
            self._trigger_state_change(old_state, new_state)

    def _clear_session(self) -> None:
        """Drop per-session fields (caller holds _lock)"""
        self._session_id = None
        self._device = None
        self._started_at = None
        self._elapsed_seconds = 0

    # =========================================================================
    # CALLBACK TRIGGERS
    # =========================================================================

    def _trigger_state_change(self, old: RecordingState, new: RecordingState) -> None:
        if self.on_state_change:
            try:
                self.on_state_change(old, new)
            except Exception as e:
                self.logger.error(f"Error in state change callback: {e}")

    def _trigger_start(self, session_id: str) -> None:
        if self.on_start:
            try:
                self.on_start(session_id)
            except Exception as e:
                self.logger.error(f"Error in start callback: {e}")

    def _trigger_tick(self, elapsed: int) -> None:
        if self.on_tick:
            try:
                self.on_tick(elapsed)
            except Exception as e:
                self.logger.error(f"Error in tick callback: {e}")

    def _trigger_limit_reached(self, reason: StopReason) -> None:
        if self.on_limit_reached:
            try:
                self.on_limit_reached(reason)
            except Exception as e:
                self.logger.error(f"Error in limit callback: {e}")

    def _trigger_error(self, kind: ErrorKind, message: str) -> None:
        if self.on_error:
            try:
                self.on_error(kind, message)
            except Exception as e:
                self.logger.error(f"Error in error callback: {e}")

    def _trigger_upload_complete(self, session_id: str, result: UploadResult) -> None:
        if self.on_upload_complete:
            try:
                self.on_upload_complete(session_id, result)
            except Exception as e:
                self.logger.error(f"Error in upload complete callback: {e}")

    # =========================================================================
    # STATUS AND INFO
    # =========================================================================

    @property
    def state(self) -> RecordingState:
        return self._state

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def device(self) -> Optional[Device]:
        return self._device

    @property
    def started_at(self) -> Optional[float]:
        return self._started_at

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed_seconds

    @property
    def last_error(self) -> Optional[RecorderError]:
        return self._last_error

    @property
    def last_artifact(self) -> Optional[RecordingArtifact]:
        return self._last_artifact

    @property
    def last_result(self) -> Optional[StopResult]:
        """Result of the most recent stop, manual or cap-triggered"""
        return self._last_result

    def is_recording(self) -> bool:
        return self._state == RecordingState.ACTIVE

    def get_status(self) -> Dict[str, Any]:
        """
        Get session status for the presentation layer.

        Returns:
            Dictionary with state, timing, GPS health and upload info
        """
        with self._lock:
            error = self._last_error
            status = {
                "state": self._state.value,
                "session_id": self._session_id,
                "device": self._device.to_dict() if self._device else None,
                "elapsed_seconds": self._elapsed_seconds,
                "elapsed_formatted": format_duration(self._elapsed_seconds),
                "last_error": (
                    {"kind": error.kind.value, "message": str(error)} if error else None
                ),
            }

        status["gps_enabled"] = self.gps.gps_enabled
        status["has_gps_error"] = self.gps.has_error
        status["gps_error"] = self.gps.error_message
        status["gps_accuracy_m"] = self.gps.accuracy
        status["failed_uploads"] = self.failed_session_ids
        return status

    def cleanup(self) -> None:
        """
        Stop any recording in progress without uploading it.

        For shutdown: the artifact stays on disk.
        """
        self.logger.info("Cleaning up Recording Session")
        with self._transition_lock:
            self._stop_ticker()
            if self._state == RecordingState.ACTIVE:
                try:
                    self.camera.stop_recording()
                except RecorderError as e:
                    self.logger.error(f"Camera stop during cleanup failed: {e}")
                self.gps.stop()
                with self._lock:
                    self._clear_session()
                self._set_state(RecordingState.IDLE)
