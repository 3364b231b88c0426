"""
GPS Sampler

Collects position fixes into an ordered, session-owned log.

Provider callbacks only enqueue fixes. A background thread drains the
queue on a steady cadence and is the single writer of the log.

SOLID Principles:
- Single Responsibility: Only manages the GPS log and GPS health flags
- Dependency Inversion: Depends on PositionProviderInterface
"""

import logging
import queue
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional, TextIO, Tuple

from core.errors import ErrorKind, RecorderError
from gps.constants import (
    GPS_JOURNAL_DIR,
    GPS_JOURNAL_SUFFIX,
    GPS_SAMPLE_INTERVAL,
    GpsState,
)
from gps.interfaces.position_provider_interface import PositionProviderInterface
from gps.models.log_entry import GpsLogEntry, PositionFix
from gps.utils.log_format import format_entry


class GpsSampler:
    """
    Background GPS sampler.

    Rules:
    - Entries are non-decreasing in timestamp. A fix older than the last
      accepted entry is dropped (and counted), never re-sorted.
    - Fixes older than the sampler's start time are dropped.
    - Fixes from a previous start/stop cycle are ignored.
    - Permission denial and provider failures never raise; they set
      has_error / error_message and sampling stays off.

    Usage:
        sampler = GpsSampler(provider)
        if not sampler.start(session_id="abc123"):
            print(f"No GPS: {sampler.error_message}")

        # Live health, any time
        print(sampler.gps_enabled, sampler.accuracy)

        log = sampler.stop()  # Frozen, ordered list
    """

    def __init__(
        self,
        provider: PositionProviderInterface,
        sample_interval: float = GPS_SAMPLE_INTERVAL,
        journal_dir: Optional[str] = GPS_JOURNAL_DIR,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize GPS sampler.

        Args:
            provider: Position provider implementation
            sample_interval: Seconds between queue drains
            journal_dir: Directory for crash-recovery journals (None/"" = off)
            clock: Time source for the sampling window start
        """
        self.logger = logging.getLogger(__name__)
        self.provider = provider
        self.sample_interval = sample_interval
        self.journal_dir = Path(journal_dir) if journal_dir else None
        self._clock = clock

        self._lock = threading.Lock()
        self._state = GpsState.STOPPED
        self._generation = 0
        self._session_id: Optional[str] = None
        self._window_start: Optional[float] = None

        self._entries: List[GpsLogEntry] = []
        self._pending: "queue.Queue[Tuple[int, PositionFix]]" = queue.Queue()
        self._dropped = 0

        self._worker: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

        self._journal: Optional[TextIO] = None
        self._journal_path: Optional[Path] = None

        # Health flags
        self._has_error = False
        self._error_message: Optional[str] = None
        self._error_kind: Optional[ErrorKind] = None
        self._accuracy: Optional[float] = None

        self.logger.info(
            f"GPS Sampler initialized (interval: {sample_interval}s, "
            f"journal: {self.journal_dir or 'off'})",
        )

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self, session_id: Optional[str] = None) -> bool:
        """
        Start sampling.

        Args:
            session_id: Session the log belongs to (names the journal)

        Returns:
            True if sampling began, False otherwise (see error flags)
        """
        with self._lock:
            if self._state != GpsState.STOPPED:
                self.logger.warning(f"Cannot start GPS: sampler is {self._state.value}")
                return False

            self._state = GpsState.STARTING
            self._generation += 1
            generation = self._generation
            self._session_id = session_id or f"gps-{generation}"
            self._window_start = self._clock()
            self._entries = []
            self._dropped = 0
            self._accuracy = None
            self._clear_error()

        self.logger.info(f"Starting GPS sampling for session {self._session_id}")

        try:
            granted = self.provider.request_permission()
        except RecorderError as e:
            self._fail_start(e.kind, f"Location permission check failed: {e}")
            return False

        if not granted:
            self._fail_start(ErrorKind.PERMISSION_DENIED, "Location permission denied")
            return False

        self._open_journal()

        try:
            self.provider.start_updates(
                lambda fix: self._receive_fix(generation, fix),
                lambda message: self._receive_error(generation, message),
            )
        except RecorderError as e:
            self._close_journal()
            self._fail_start(e.kind, str(e))
            return False
        except Exception as e:
            self._close_journal()
            self._fail_start(ErrorKind.GPS_UNAVAILABLE, f"GPS provider failed: {e}")
            return False

        self._stop_event.clear()
        self._worker = threading.Thread(
            target=self._sampling_worker,
            daemon=True,
            name="GpsSampler",
        )
        self._worker.start()

        with self._lock:
            self._state = GpsState.ACTIVE

        self.logger.info("GPS sampling active")
        return True

    def stop(self) -> List[GpsLogEntry]:
        """
        Stop sampling and hand over the log.

        Returns:
            The ordered log as a new list ([] if already stopped).
            The sampler keeps no reference to it.
        """
        if self._state == GpsState.STOPPED:
            return []

        log = self._shutdown()
        self.logger.info(
            f"GPS sampling stopped: {len(log)} fix(es), {self._dropped} dropped",
        )
        return log

    def discard(self) -> None:
        """
        Stop sampling and throw the partial log away.

        Also deletes the journal file, if any.
        """
        if self._state == GpsState.STOPPED:
            return

        journal_path = self._journal_path
        discarded = self._shutdown()

        if journal_path is not None:
            try:
                journal_path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                self.logger.warning(f"Could not delete GPS journal {journal_path}: {e}")

        self.logger.info(f"GPS sampling discarded ({len(discarded)} fix(es) dropped)")

    def flush(self) -> int:
        """
        Move received fixes into the log now instead of at the next tick.

        Returns:
            Number of entries accepted
        """
        return self._drain()

    def _shutdown(self) -> List[GpsLogEntry]:
        """Stop provider and worker, freeze the log, reset for reuse"""
        with self._lock:
            # No more fixes accepted for this generation after this point
            generation = self._generation

        try:
            self.provider.stop_updates()
        except Exception as e:
            self.logger.error(f"Error stopping position provider: {e}")

        self._stop_event.set()
        if (
            self._worker
            and self._worker.is_alive()
            and self._worker is not threading.current_thread()
        ):
            self._worker.join(timeout=self.sample_interval + 2.0)
        self._worker = None

        self._drain()

        with self._lock:
            frozen = list(self._entries)
            self._entries = []
            self._generation = generation + 1
            self._state = GpsState.STOPPED
            self._window_start = None

        self._close_journal()
        return frozen

    # =========================================================================
    # FIX HANDLING
    # =========================================================================

    def _receive_fix(self, generation: int, fix: PositionFix) -> None:
        """Provider callback: enqueue only, the worker appends"""
        if generation != self._generation:
            self.logger.debug("Ignoring fix from a previous GPS session")
            return

        self._pending.put((generation, fix))

    def _receive_error(self, generation: int, message: str) -> None:
        """Provider callback for mid-stream failures"""
        if generation != self._generation:
            return

        self.logger.warning(f"GPS error during sampling: {message}")
        with self._lock:
            self._set_error(ErrorKind.GPS_UNAVAILABLE, message)

    def _sampling_worker(self) -> None:
        """Drain pending fixes every sample_interval until stopped"""
        self.logger.debug("GPS sampling worker started")
        while not self._stop_event.wait(self.sample_interval):
            self._drain()
        self.logger.debug("GPS sampling worker stopped")

    def _drain(self) -> int:
        accepted = 0
        while True:
            try:
                generation, fix = self._pending.get_nowait()
            except queue.Empty:
                break
            if self._append(generation, fix):
                accepted += 1
        return accepted

    def _append(self, generation: int, fix: PositionFix) -> bool:
        with self._lock:
            if generation != self._generation:
                return False

            if self._window_start is not None and fix.timestamp < self._window_start:
                self._dropped += 1
                self.logger.debug(f"Dropped fix before session start ({fix.timestamp})")
                return False

            if self._entries and fix.timestamp < self._entries[-1].timestamp:
                self._dropped += 1
                self.logger.debug(
                    f"Dropped out-of-order fix ({fix.timestamp} < "
                    f"{self._entries[-1].timestamp})",
                )
                return False

            entry = GpsLogEntry.from_fix(fix)
            self._entries.append(entry)
            self._accuracy = entry.accuracy_m
            self._write_journal(entry)
            return True

    # =========================================================================
    # JOURNAL
    # =========================================================================

    def _open_journal(self) -> None:
        if self.journal_dir is None:
            return

        path = self.journal_dir / f"{self._session_id}{GPS_JOURNAL_SUFFIX}"
        try:
            self.journal_dir.mkdir(parents=True, exist_ok=True)
            self._journal = open(path, "a", encoding="utf-8", buffering=1)
            self._journal_path = path
            self.logger.debug(f"GPS journal: {path}")
        except OSError as e:
            self.logger.warning(f"GPS journal disabled, cannot open {path}: {e}")
            self._journal = None
            self._journal_path = None

    def _write_journal(self, entry: GpsLogEntry) -> None:
        if self._journal is None:
            return
        try:
            self._journal.write(format_entry(entry))
        except OSError as e:
            self.logger.warning(f"GPS journal write failed, disabling journal: {e}")
            self._close_journal()

    def _close_journal(self) -> None:
        if self._journal is not None:
            try:
                self._journal.close()
            except OSError as e:
                self.logger.warning(f"Error closing GPS journal: {e}")
        self._journal = None
        self._journal_path = None

    # =========================================================================
    # ERROR FLAGS
    # =========================================================================

    def _fail_start(self, kind: ErrorKind, message: str) -> None:
        self.logger.warning(f"GPS not started ({kind.value}): {message}")
        with self._lock:
            self._set_error(kind, message)
            self._state = GpsState.STOPPED

    def _set_error(self, kind: ErrorKind, message: str) -> None:
        self._has_error = True
        self._error_kind = kind
        self._error_message = message

    def _clear_error(self) -> None:
        self._has_error = False
        self._error_kind = None
        self._error_message = None

    # =========================================================================
    # STATUS AND INFO
    # =========================================================================

    @property
    def state(self) -> GpsState:
        return self._state

    @property
    def gps_enabled(self) -> bool:
        """True while sampling is running"""
        return self._state == GpsState.ACTIVE

    @property
    def has_error(self) -> bool:
        return self._has_error

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self._error_kind

    @property
    def accuracy(self) -> Optional[float]:
        """Accuracy of the most recent accepted fix in meters"""
        return self._accuracy

    @property
    def fix_count(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def dropped_fixes(self) -> int:
        return self._dropped

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    def get_status(self) -> dict:
        """
        Get sampler status.

        Returns:
            Dictionary with live GPS health
        """
        with self._lock:
            return {
                "state": self._state.value,
                "gps_enabled": self._state == GpsState.ACTIVE,
                "has_error": self._has_error,
                "error_message": self._error_message,
                "error_kind": self._error_kind.value if self._error_kind else None,
                "accuracy_m": self._accuracy,
                "fix_count": len(self._entries),
                "dropped_fixes": self._dropped,
                "session_id": self._session_id,
            }
