"""
GPS Factory

Factory pattern for creating position providers.
Automatically selects the serial receiver or the mock based on availability.
"""

import logging
from typing import Literal

from gps.constants import GPS_SERIAL_PORT
from gps.controllers.gps_sampler import GpsSampler
from gps.implementations.mock_position_provider import MockPositionProvider
from gps.implementations.nmea_serial_provider import NmeaSerialProvider
from gps.interfaces.position_provider_interface import PositionProviderInterface

# Type alias for better type hints
GpsMode = Literal["auto", "real", "mock"]


class GpsFactory:
    """
    Factory for creating position providers.

    Usage:
        # Auto-detect (serial receiver if the port exists, mock otherwise)
        provider = GpsFactory.create_provider()

        # Force mock mode (useful for testing)
        provider = GpsFactory.create_provider(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_provider(
        cls,
        mode: GpsMode = "auto",
        port: str = GPS_SERIAL_PORT,
    ) -> PositionProviderInterface:
        """
        Create a position provider.

        Args:
            mode: "auto", "real", or "mock"
            port: Serial port of the GPS receiver

        Raises:
            RuntimeError: If mode="real" but the serial port does not exist
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Position Provider (forced)")
            return MockPositionProvider(simulate_fixes=True)

        provider = NmeaSerialProvider(port=port)
        if mode == "real":
            if not provider.is_available():
                raise RuntimeError(f"GPS serial port not found: {port}")
            cls._logger.info("Creating NMEA Serial Provider (forced)")
            return provider

        if provider.is_available():
            cls._logger.info("Creating NMEA Serial Provider (auto-detected)")
            return provider

        cls._logger.warning(
            f"GPS receiver not found on {port}, using Mock Position Provider",
        )
        return MockPositionProvider(simulate_fixes=True)


# Convenience function for quick creation

def create_gps_sampler(force_mock: bool = False, **kwargs) -> GpsSampler:
    """
    Quick creation of a sampler with an auto-selected provider.

    Example:
        sampler = create_gps_sampler(force_mock=True)
    """
    mode: GpsMode = "mock" if force_mock else "auto"
    return GpsSampler(GpsFactory.create_provider(mode=mode), **kwargs)
