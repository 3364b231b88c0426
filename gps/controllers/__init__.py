"""GPS controllers"""

from gps.controllers.gps_sampler import GpsSampler

__all__ = ["GpsSampler"]
