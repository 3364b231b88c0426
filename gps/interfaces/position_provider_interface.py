"""
Position Provider Interface

Abstract interface for anything that produces GPS fixes.

GpsSampler depends on this abstraction, not on a serial receiver, so the
sampler's ordering and ownership rules can be tested with injected fixes.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from gps.models.log_entry import PositionFix

FixCallback = Callable[[PositionFix], None]
ProviderErrorCallback = Callable[[str], None]


class PositionProviderInterface(ABC):
    """
    Abstract base class for position providers.
    """

    @abstractmethod
    def request_permission(self) -> bool:
        """
        Ask for access to location data.

        Returns:
            True if granted, False if denied
        """

    @abstractmethod
    def start_updates(
        self,
        on_fix: FixCallback,
        on_error: Optional[ProviderErrorCallback] = None,
    ) -> None:
        """
        Begin delivering fixes.

        Should return once updates are flowing (or at least the source is
        open); fixes are then delivered from a background thread.

        Args:
            on_fix: Called once per fix
            on_error: Called with a message if the source fails mid-stream

        Raises:
            GpsUnavailableError: If the source cannot be opened
            PermissionDeniedError: If access is refused at open time
        """

    @abstractmethod
    def stop_updates(self) -> None:
        """
        Stop delivering fixes.

        Safe to call when not started. After this returns, no further
        callbacks are made.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the provider's source exists.

        Returns:
            True if start_updates() is expected to work
        """
