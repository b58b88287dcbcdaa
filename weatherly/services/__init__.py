"""Services layer - Application orchestration.

Available services:
- ResolutionCoordinator: selection state machine driving lookups and forecasts
- TaskScheduler: cancellable delayed tasks keyed by monotonic tokens
"""

from .resolution_coordinator import (
    ResolutionCoordinator,
    describe_geolocation_error,
    is_loopback_host,
)
from .scheduler import TaskScheduler

__all__ = [
    "ResolutionCoordinator",
    "TaskScheduler",
    "describe_geolocation_error",
    "is_loopback_host",
]
