"""
Mock Position Provider

Simulated GPS for tests and machines without a receiver.

This is a "Fake" (test double): fixes can be injected by hand with
emit_fix(), or generated in the background with simulate_fixes=True.
"""

import logging
import random
import threading
import time
from typing import Callable, List, Optional

from core.errors import GpsUnavailableError, RecorderError
from gps.interfaces.position_provider_interface import (
    FixCallback,
    PositionProviderInterface,
    ProviderErrorCallback,
)
from gps.models.log_entry import PositionFix


class MockPositionProvider(PositionProviderInterface):
    """
    Mock position provider.

    Usage:
        provider = MockPositionProvider()
        sampler = GpsSampler(provider)
        sampler.start()
        provider.emit_fix(48.85, 2.35, accuracy_m=4.0, timestamp=1.0)

        # Permission scenarios
        denied = MockPositionProvider(permission_granted=False)
    """

    def __init__(
        self,
        permission_granted: bool = True,
        simulate_fixes: bool = False,
        fix_interval: float = 1.0,
        start_latitude: float = 48.8566,
        start_longitude: float = 2.3522,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize mock provider.

        Args:
            permission_granted: Result of request_permission()
            simulate_fixes: If True, emit a random-walk fix every fix_interval
            fix_interval: Seconds between simulated fixes
            start_latitude: Simulated starting position
            start_longitude: Simulated starting position
            clock: Time source for fixes without an explicit timestamp
        """
        self.logger = logging.getLogger(__name__)
        self.permission_granted = permission_granted
        self.simulate_fixes = simulate_fixes
        self.fix_interval = fix_interval
        self._clock = clock

        self._latitude = start_latitude
        self._longitude = start_longitude

        self._on_fix: Optional[FixCallback] = None
        self._on_error: Optional[ProviderErrorCallback] = None
        self._start_failure: Optional[RecorderError] = None

        self._sim_thread: Optional[threading.Thread] = None
        self._sim_stop = threading.Event()

        # Tracking for tests
        self.registered_callbacks: List[FixCallback] = []
        self.permission_requests = 0
        self.start_count = 0
        self.stop_count = 0

        self.logger.info(
            f"Mock Position Provider initialized "
            f"(permission: {permission_granted}, simulate: {simulate_fixes})",
        )

    def request_permission(self) -> bool:
        self.permission_requests += 1
        if not self.permission_granted:
            self.logger.warning("[MOCK] Location permission denied")
        return self.permission_granted

    def start_updates(
        self,
        on_fix: FixCallback,
        on_error: Optional[ProviderErrorCallback] = None,
    ) -> None:
        if self._start_failure is not None:
            failure, self._start_failure = self._start_failure, None
            self.logger.error(f"[MOCK] Simulated provider start failure: {failure}")
            raise failure

        self._on_fix = on_fix
        self._on_error = on_error
        self.registered_callbacks.append(on_fix)
        self.start_count += 1

        if self.simulate_fixes:
            self._sim_stop.clear()
            self._sim_thread = threading.Thread(
                target=self._simulation_worker,
                daemon=True,
                name="MockGps-Worker",
            )
            self._sim_thread.start()

        self.logger.info("[MOCK] Position updates started")

    def stop_updates(self) -> None:
        if self._on_fix is None:
            return

        self._sim_stop.set()
        if (
            self._sim_thread
            and self._sim_thread.is_alive()
            and self._sim_thread is not threading.current_thread()
        ):
            self._sim_thread.join(timeout=2.0)
        self._sim_thread = None

        self._on_fix = None
        self._on_error = None
        self.stop_count += 1
        self.logger.info("[MOCK] Position updates stopped")

    def is_available(self) -> bool:
        return True

    def _simulation_worker(self) -> None:
        """Emit a random-walk fix every fix_interval seconds"""
        while not self._sim_stop.wait(self.fix_interval):
            self._latitude += random.uniform(-0.0001, 0.0001)
            self._longitude += random.uniform(-0.0001, 0.0001)
            self.emit_fix(
                self._latitude,
                self._longitude,
                accuracy_m=random.uniform(3.0, 12.0),
            )

    # =========================================================================
    # TESTING HELPER METHODS (not part of PositionProviderInterface)
    # =========================================================================

    @property
    def is_updating(self) -> bool:
        return self._on_fix is not None

    def emit_fix(
        self,
        latitude: float,
        longitude: float,
        accuracy_m: Optional[float] = 5.0,
        timestamp: Optional[float] = None,
    ) -> bool:
        """
        Deliver one fix to the current listener.

        Returns:
            True if delivered, False if updates are not running
        """
        callback = self._on_fix
        if callback is None:
            self.logger.debug("[MOCK] Fix dropped, updates not running")
            return False

        fix = PositionFix(
            latitude=latitude,
            longitude=longitude,
            accuracy_m=accuracy_m,
            timestamp=self._clock() if timestamp is None else timestamp,
        )
        callback(fix)
        return True

    def emit_error(self, message: str = "Simulated signal loss") -> bool:
        """Report a mid-stream failure to the current listener"""
        callback = self._on_error
        if callback is None:
            return False
        callback(message)
        return True

    def simulate_start_failure(self, error: Optional[RecorderError] = None) -> None:
        """Make the next start_updates() call raise"""
        self._start_failure = error or GpsUnavailableError("Simulated GPS unavailable")
