"""
Recording Test Configuration and Fixtures

Shared fixtures for recording module tests. Everything runs on mocks and
a FakeClock, so no test sleeps.
"""

import pytest

from devices.controllers.device_registry import DeviceRegistry
from devices.implementations.mock_camera_source import MockCameraSource
from devices.implementations.mock_usb_bus import MockUsbBus
from gps.controllers.gps_sampler import GpsSampler
from gps.implementations.mock_position_provider import MockPositionProvider
from recording.controllers.camera_manager import CameraManager
from recording.controllers.recording_session import RecordingSession
from recording.implementations.mock_capture import MockCapture
from upload.controllers.upload_handoff import UploadHandoff
from upload.implementations.mock_uploader import MockUploader

# Large enough that background threads never fire on their own;
# tests call tick() / flush() explicitly
MANUAL_INTERVAL = 3600.0


# =============================================================================
# CAPTURE FIXTURES
# =============================================================================


@pytest.fixture
def mock_capture(fake_clock):
    """
    Provide MockCapture driven by the fake clock (500 kB/s simulated).

    Usage:
        def test_capture(mock_capture, fake_clock):
            mock_capture.start_capture("/dev/video0", path, CaptureLimits(10))
            fake_clock.advance(3)
    """
    capture = MockCapture(clock=fake_clock)
    yield capture
    capture.cleanup()


@pytest.fixture
def camera_manager(mock_capture, tmp_path):
    """Provide CameraManager writing into a temporary directory"""
    manager = CameraManager(capture=mock_capture, recordings_dir=tmp_path / "recordings")
    yield manager
    manager.cleanup()


# =============================================================================
# COLLABORATOR FIXTURES
# =============================================================================


@pytest.fixture
def registry():
    """Registry scanned once, with the USB camera usb-1 selected"""
    registry = DeviceRegistry(MockCameraSource(), MockUsbBus(), auto_select=False)
    registry.scan()
    registry.select("usb-1")
    return registry


@pytest.fixture
def mock_provider(fake_clock):
    return MockPositionProvider(clock=fake_clock)


@pytest.fixture
def gps_sampler(mock_provider, fake_clock):
    sampler = GpsSampler(
        mock_provider,
        sample_interval=MANUAL_INTERVAL,
        journal_dir=None,
        clock=fake_clock,
    )
    yield sampler
    sampler.stop()


@pytest.fixture
def mock_uploader():
    uploader = MockUploader()
    yield uploader
    uploader.release()


@pytest.fixture
def upload_handoff(mock_uploader, fake_clock):
    return UploadHandoff(mock_uploader, clock=fake_clock)


# =============================================================================
# RECORDING SESSION FIXTURES
# =============================================================================


@pytest.fixture
def make_session(registry, gps_sampler, camera_manager, upload_handoff, fake_clock):
    """
    Factory for RecordingSession with manual ticking.

    Usage:
        def test_caps(make_session):
            session = make_session(max_duration_seconds=10)
    """
    sessions = []

    def _make(gps=None, **kwargs):
        options = {
            "tick_interval": MANUAL_INTERVAL,
            "background_upload": False,
            "clock": fake_clock,
        }
        options.update(kwargs)
        session = RecordingSession(
            registry,
            gps or gps_sampler,
            camera_manager,
            upload_handoff,
            **options,
        )
        sessions.append(session)
        return session

    yield _make

    for session in sessions:
        session.cleanup()
        session.wait_for_upload(timeout=5.0)


@pytest.fixture
def recording_session(make_session):
    """
    Provide RecordingSession with default caps and synchronous upload.

    Usage:
        def test_session(recording_session):
            recording_session.start()
    """
    return make_session()
