"""
GPS Module

Background GPS sampling bound to a recording session.

Public API:
    - GpsSampler: Collects an ordered fix log while active
    - GpsLogEntry / PositionFix: Log and provider models
    - serialize_gps_log / parse_gps_log: JSON Lines log format
    - GpsFactory / create_gps_sampler: Serial receiver or mock

Usage:
    from gps import create_gps_sampler

    sampler = create_gps_sampler()
    sampler.start(session_id="abc123")
    ...
    log = sampler.stop()
"""

from gps.constants import GpsState
from gps.controllers.gps_sampler import GpsSampler
from gps.factory import GpsFactory, create_gps_sampler
from gps.models.log_entry import GpsLogEntry, PositionFix
from gps.utils.log_format import parse_gps_log, read_gps_journal, serialize_gps_log

__all__ = [
    "GpsFactory",
    "GpsLogEntry",
    "GpsSampler",
    "GpsState",
    "PositionFix",
    "create_gps_sampler",
    "parse_gps_log",
    "read_gps_journal",
    "serialize_gps_log",
]
