"""
GPS Sampler Tests

Tests for GpsSampler showing:
- Lifecycle (STOPPED -> STARTING -> ACTIVE -> STOPPED)
- Out-of-order fixes are dropped, never reordered
- Fixes from a previous generation never reach the current log
- GPS failures are flags, never exceptions
- Crash-recovery journal

To run:
    pytest tests/gps/controllers/test_gps_sampler.py -v
"""

import pytest

from core.errors import ErrorKind, PermissionDeniedError
from gps.constants import GpsState
from gps.controllers.gps_sampler import GpsSampler
from gps.implementations.mock_position_provider import MockPositionProvider
from gps.models.log_entry import PositionFix
from gps.utils.log_format import read_gps_journal

# =============================================================================
# LIFECYCLE TESTS
# =============================================================================


@pytest.mark.unit
def test_sampler_starts_stopped(gps_sampler):
    assert gps_sampler.state == GpsState.STOPPED
    assert gps_sampler.gps_enabled is False
    assert gps_sampler.has_error is False


@pytest.mark.unit
def test_start_activates_sampling(gps_sampler, mock_provider):
    assert gps_sampler.start("session-1") is True

    assert gps_sampler.state == GpsState.ACTIVE
    assert gps_sampler.gps_enabled is True
    assert gps_sampler.session_id == "session-1"
    assert mock_provider.is_updating
    assert mock_provider.permission_requests == 1


@pytest.mark.unit
def test_start_twice_is_rejected(gps_sampler, mock_provider):
    gps_sampler.start()

    assert gps_sampler.start() is False
    assert mock_provider.start_count == 1


@pytest.mark.unit
def test_stop_returns_ordered_log(gps_sampler, mock_provider):
    gps_sampler.start()
    for t in (1.0, 2.0, 3.0):
        mock_provider.emit_fix(48.0 + t / 1000, 2.0, accuracy_m=4.0, timestamp=t)

    log = gps_sampler.stop()

    assert [e.timestamp for e in log] == [1.0, 2.0, 3.0]
    assert log[0].accuracy_m == 4.0
    assert gps_sampler.state == GpsState.STOPPED
    assert not mock_provider.is_updating


@pytest.mark.unit
def test_stop_when_stopped_returns_empty(gps_sampler):
    assert gps_sampler.stop() == []


@pytest.mark.unit
def test_stopped_log_is_not_shared(gps_sampler, mock_provider):
    """The caller owns the returned list; a new session starts empty."""
    gps_sampler.start()
    mock_provider.emit_fix(48.0, 2.0, timestamp=1.0)
    first = gps_sampler.stop()

    gps_sampler.start()
    second = gps_sampler.stop()

    assert len(first) == 1
    assert second == []


@pytest.mark.unit
def test_fix_count_after_flush(gps_sampler, mock_provider):
    gps_sampler.start()
    mock_provider.emit_fix(48.0, 2.0, timestamp=1.0)
    mock_provider.emit_fix(48.0, 2.0, timestamp=2.0)

    assert gps_sampler.flush() == 2
    assert gps_sampler.fix_count == 2


@pytest.mark.unit
def test_accuracy_tracks_latest_fix(gps_sampler, mock_provider):
    gps_sampler.start()
    mock_provider.emit_fix(48.0, 2.0, accuracy_m=12.0, timestamp=1.0)
    mock_provider.emit_fix(48.0, 2.0, accuracy_m=3.5, timestamp=2.0)
    gps_sampler.flush()

    assert gps_sampler.accuracy == 3.5


@pytest.mark.unit
def test_accuracy_ignores_dropped_fix(gps_sampler, mock_provider):
    gps_sampler.start()
    mock_provider.emit_fix(48.0, 2.0, accuracy_m=4.0, timestamp=5.0)
    gps_sampler.flush()

    mock_provider.emit_fix(48.0, 2.0, accuracy_m=90.0, timestamp=3.0)
    gps_sampler.flush()

    assert gps_sampler.dropped_fixes == 1
    assert gps_sampler.accuracy == 4.0


# =============================================================================
# ORDERING TESTS
# =============================================================================


@pytest.mark.unit
def test_out_of_order_fix_is_dropped(gps_sampler, mock_provider):
    gps_sampler.start()
    mock_provider.emit_fix(48.0, 2.0, timestamp=1.0)
    mock_provider.emit_fix(48.0, 2.0, timestamp=3.0)
    mock_provider.emit_fix(48.0, 2.0, timestamp=2.0)  # late

    log = gps_sampler.stop()

    assert [e.timestamp for e in log] == [1.0, 3.0]
    assert gps_sampler.dropped_fixes == 1


@pytest.mark.unit
def test_equal_timestamps_are_kept(gps_sampler, mock_provider):
    gps_sampler.start()
    mock_provider.emit_fix(48.0, 2.0, timestamp=1.0)
    mock_provider.emit_fix(48.1, 2.0, timestamp=1.0)

    assert len(gps_sampler.stop()) == 2


@pytest.mark.unit
def test_fix_before_session_start_is_dropped(gps_sampler, mock_provider, fake_clock):
    fake_clock.set(100.0)
    gps_sampler.start()
    mock_provider.emit_fix(48.0, 2.0, timestamp=99.0)
    mock_provider.emit_fix(48.0, 2.0, timestamp=101.0)

    log = gps_sampler.stop()

    assert [e.timestamp for e in log] == [101.0]


@pytest.mark.unit
def test_callback_from_previous_session_is_ignored(gps_sampler, mock_provider):
    """A provider callback captured before stop() cannot leak into the next run."""
    gps_sampler.start()
    stale_callback = mock_provider.registered_callbacks[-1]
    gps_sampler.stop()

    gps_sampler.start()
    stale_callback(PositionFix(latitude=48.0, longitude=2.0, accuracy_m=5.0, timestamp=5.0))
    mock_provider.emit_fix(48.0, 2.0, timestamp=6.0)

    log = gps_sampler.stop()

    assert [e.timestamp for e in log] == [6.0]


# =============================================================================
# ERROR FLAG TESTS
# =============================================================================


@pytest.mark.unit
def test_permission_denied_sets_flags_without_raising(fake_clock):
    provider = MockPositionProvider(permission_granted=False, clock=fake_clock)
    sampler = GpsSampler(provider, journal_dir=None, clock=fake_clock)

    assert sampler.start() is False

    assert sampler.state == GpsState.STOPPED
    assert sampler.gps_enabled is False
    assert sampler.has_error is True
    assert sampler.error_kind == ErrorKind.PERMISSION_DENIED
    assert provider.start_count == 0
    assert sampler.stop() == []


@pytest.mark.unit
def test_provider_start_failure_sets_flags(gps_sampler, mock_provider):
    mock_provider.simulate_start_failure()

    assert gps_sampler.start() is False

    assert gps_sampler.has_error is True
    assert gps_sampler.error_kind == ErrorKind.GPS_UNAVAILABLE
    assert gps_sampler.state == GpsState.STOPPED


@pytest.mark.unit
def test_provider_permission_error_on_start(gps_sampler, mock_provider):
    mock_provider.simulate_start_failure(PermissionDeniedError("port locked"))

    gps_sampler.start()

    assert gps_sampler.error_kind == ErrorKind.PERMISSION_DENIED


@pytest.mark.unit
def test_mid_stream_error_keeps_sampling(gps_sampler, mock_provider):
    gps_sampler.start()
    mock_provider.emit_fix(48.0, 2.0, timestamp=1.0)
    mock_provider.emit_error("signal lost")
    mock_provider.emit_fix(48.0, 2.0, timestamp=2.0)

    assert gps_sampler.has_error is True
    assert gps_sampler.error_message == "signal lost"
    assert gps_sampler.gps_enabled is True
    assert len(gps_sampler.stop()) == 2


@pytest.mark.unit
def test_restart_clears_error_flags(gps_sampler, mock_provider):
    mock_provider.simulate_start_failure()
    gps_sampler.start()

    assert gps_sampler.start() is True
    assert gps_sampler.has_error is False


# =============================================================================
# DISCARD AND JOURNAL TESTS
# =============================================================================


@pytest.mark.unit
def test_discard_drops_log(gps_sampler, mock_provider):
    gps_sampler.start()
    mock_provider.emit_fix(48.0, 2.0, timestamp=1.0)

    gps_sampler.discard()

    assert gps_sampler.state == GpsState.STOPPED
    assert not mock_provider.is_updating
    assert gps_sampler.stop() == []


@pytest.mark.unit
def test_journal_records_accepted_fixes(tmp_path, mock_provider, fake_clock):
    sampler = GpsSampler(
        mock_provider,
        sample_interval=3600.0,
        journal_dir=str(tmp_path),
        clock=fake_clock,
    )
    sampler.start("abc123")
    mock_provider.emit_fix(48.0, 2.0, timestamp=1.0)
    mock_provider.emit_fix(48.0, 2.0, timestamp=0.5)  # dropped
    mock_provider.emit_fix(48.1, 2.1, timestamp=2.0)
    log = sampler.stop()

    recovered = read_gps_journal(tmp_path / "abc123.gps.jsonl")

    assert recovered == log
    assert [e.timestamp for e in recovered] == [1.0, 2.0]


@pytest.mark.unit
def test_discard_removes_journal(tmp_path, mock_provider, fake_clock):
    sampler = GpsSampler(mock_provider, journal_dir=str(tmp_path), clock=fake_clock)
    sampler.start("gone")
    mock_provider.emit_fix(48.0, 2.0, timestamp=1.0)
    sampler.flush()

    sampler.discard()

    assert not (tmp_path / "gone.gps.jsonl").exists()


@pytest.mark.unit
def test_get_status(gps_sampler, mock_provider):
    gps_sampler.start("s1")
    mock_provider.emit_fix(48.0, 2.0, accuracy_m=7.0, timestamp=1.0)
    gps_sampler.flush()

    status = gps_sampler.get_status()

    assert status["state"] == "active"
    assert status["gps_enabled"] is True
    assert status["fix_count"] == 1
    assert status["accuracy_m"] == 7.0
    assert status["session_id"] == "s1"
