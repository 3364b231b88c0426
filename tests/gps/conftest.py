"""
GPS Test Configuration and Fixtures
"""

import pytest

from gps.controllers.gps_sampler import GpsSampler
from gps.implementations.mock_position_provider import MockPositionProvider

# Long enough that the background drain never runs during a test;
# tests drain explicitly with flush() or stop()
NO_BACKGROUND_DRAIN = 3600.0


@pytest.fixture
def mock_provider(fake_clock):
    """Provider with permission granted and no background fixes"""
    return MockPositionProvider(clock=fake_clock)


@pytest.fixture
def gps_sampler(mock_provider, fake_clock):
    """
    Provide GpsSampler with manual draining and no journal.

    Usage:
        def test_fix(gps_sampler, mock_provider):
            gps_sampler.start()
            mock_provider.emit_fix(48.0, 2.0, timestamp=1.0)
    """
    sampler = GpsSampler(
        mock_provider,
        sample_interval=NO_BACKGROUND_DRAIN,
        journal_dir=None,
        clock=fake_clock,
    )
    yield sampler
    sampler.stop()
