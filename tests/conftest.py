"""
Shared Test Configuration and Fixtures

Fixtures used across the devices, gps, recording and upload tests.
"""

import pytest


class FakeClock:
    """
    Manually advanced time source.

    Pass `clock=fake_clock` to anything that takes a clock, then move
    time with advance() instead of sleeping.
    """

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now

    def set(self, value: float) -> None:
        self.now = value


class CallbackTracker:
    """Records callback invocations"""

    def __init__(self):
        self.calls = []

    def track(self, *args, **kwargs):
        """Record a callback invocation"""
        self.calls.append({"args": args, "kwargs": kwargs})

    def was_called(self) -> bool:
        return len(self.calls) > 0

    def get_call_count(self) -> int:
        return len(self.calls)

    def get_last_call(self):
        """Get arguments from last call"""
        return self.calls[-1] if self.calls else None

    def get_all_args(self):
        return [call["args"] for call in self.calls]

    def reset(self):
        self.calls.clear()


@pytest.fixture
def fake_clock():
    """
    Provide a FakeClock starting at t=0.

    Usage:
        def test_timing(fake_clock):
            fake_clock.advance(3.5)
    """
    return FakeClock()


@pytest.fixture
def callback_tracker():
    """
    Provide helper for tracking callback calls.

    Usage:
        def test_callback(recording_session, callback_tracker):
            recording_session.on_tick = callback_tracker.track
            recording_session.tick()
            assert callback_tracker.was_called()
    """
    return CallbackTracker()


@pytest.fixture
def make_tracker():
    """Factory for tests that need more than one tracker"""
    return CallbackTracker


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests (real time)")
    config.addinivalue_line("markers", "requires_ffmpeg: Tests requiring FFmpeg")
