"""
NMEA Serial Provider

Real position provider for serial GPS receivers (NMEA 0183 over UART/USB).

A reader thread consumes sentences and reports one fix per valid GGA
sentence. Accuracy is estimated as HDOP x UERE.
"""

import logging
import os
import threading
import time
from typing import Callable, Optional

import serial

from core.errors import GpsUnavailableError, PermissionDeniedError
from gps.constants import (
    GPS_BAUDRATE,
    GPS_READ_TIMEOUT,
    GPS_SERIAL_PORT,
    GPS_UERE_METERS,
)
from gps.interfaces.position_provider_interface import (
    FixCallback,
    PositionProviderInterface,
    ProviderErrorCallback,
)
from gps.models.log_entry import PositionFix
from gps.utils.nmea import parse_gga


class NmeaSerialProvider(PositionProviderInterface):
    """
    Position provider reading NMEA from a serial port.

    Usage:
        provider = NmeaSerialProvider(port="/dev/ttyUSB0", baudrate=9600)
        provider.start_updates(lambda fix: print(fix))
        ...
        provider.stop_updates()
    """

    def __init__(
        self,
        port: str = GPS_SERIAL_PORT,
        baudrate: int = GPS_BAUDRATE,
        uere_meters: float = GPS_UERE_METERS,
        clock: Callable[[], float] = time.time,
    ):
        self.logger = logging.getLogger(__name__)
        self.port = port
        self.baudrate = baudrate
        self.uere_meters = uere_meters
        self._clock = clock

        self._serial: Optional[serial.Serial] = None
        self._reader_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._on_fix: Optional[FixCallback] = None
        self._on_error: Optional[ProviderErrorCallback] = None

        self.logger.info(f"NMEA Serial Provider initialized ({port} @ {baudrate} baud)")

    def request_permission(self) -> bool:
        # Denied only when the port exists but this user cannot open it
        if not os.path.exists(self.port):
            return True
        granted = os.access(self.port, os.R_OK)
        if not granted:
            self.logger.warning(
                f"No read access to {self.port} "
                "(add user to the 'dialout' group)",
            )
        return granted

    def start_updates(
        self,
        on_fix: FixCallback,
        on_error: Optional[ProviderErrorCallback] = None,
    ) -> None:
        if self._reader_thread and self._reader_thread.is_alive():
            self.logger.warning("Updates already running")
            return

        try:
            self._serial = serial.Serial(
                self.port,
                self.baudrate,
                timeout=GPS_READ_TIMEOUT,
            )
        except PermissionError as e:
            raise PermissionDeniedError(f"Cannot open {self.port}: {e}") from e
        except (serial.SerialException, OSError) as e:
            raise GpsUnavailableError(f"GPS receiver not available on {self.port}: {e}") from e

        self._on_fix = on_fix
        self._on_error = on_error
        self._stop_event.clear()
        self._reader_thread = threading.Thread(
            target=self._read_loop,
            daemon=True,
            name="NmeaReader",
        )
        self._reader_thread.start()
        self.logger.info(f"Reading NMEA from {self.port}")

    def stop_updates(self) -> None:
        self._stop_event.set()

        if self._reader_thread and self._reader_thread.is_alive():
            self._reader_thread.join(timeout=GPS_READ_TIMEOUT * 2)
        self._reader_thread = None

        if self._serial is not None:
            try:
                self._serial.close()
            except (serial.SerialException, OSError) as e:
                self.logger.warning(f"Error closing {self.port}: {e}")
            self._serial = None

        self._on_fix = None
        self._on_error = None

    def is_available(self) -> bool:
        return os.path.exists(self.port)

    def _read_loop(self) -> None:
        """Read sentences until stopped; one fix per valid GGA"""
        sentence_count = 0
        try:
            while not self._stop_event.is_set():
                raw = self._serial.readline()
                if not raw:
                    continue

                sentence = raw.decode("ascii", errors="ignore").strip()
                sentence_count += 1

                gga = parse_gga(sentence)
                if gga is None:
                    continue

                accuracy = (
                    gga["hdop"] * self.uere_meters if gga["hdop"] is not None else None
                )
                fix = PositionFix(
                    latitude=gga["latitude"],
                    longitude=gga["longitude"],
                    accuracy_m=accuracy,
                    timestamp=self._clock(),
                )

                callback = self._on_fix
                if callback is not None:
                    callback(fix)

        except (serial.SerialException, OSError) as e:
            self.logger.error(f"GPS read loop error: {e}")
            callback = self._on_error
            if callback is not None:
                callback(f"GPS receiver error: {e}")
        finally:
            self.logger.info(f"GPS read loop stopped ({sentence_count} sentences)")
