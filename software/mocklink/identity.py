"""
Identity and mutable state of the simulated vehicle.
"""

import itertools
import threading
from dataclasses import dataclass

from .config import INITIAL_BASE_MODE, INITIAL_SYSTEM_STATUS


class LinkIdAllocator:
    """
    Thread-safe source of unique link ids.

    Pass the same allocator to every link that must have distinct ids.
    """

    def __init__(self, start: int = 0):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            return next(self._counter)


# Process-wide allocator used by create_mock_link() unless one is injected
default_link_ids = LinkIdAllocator()


@dataclass(frozen=True)
class Identity:
    """Addressing of the simulated vehicle."""
    link_id: int
    system_id: int
    component_id: int


@dataclass
class EndpointState:
    """Current state of the simulated vehicle. Owned by the link worker."""
    connected: bool = False
    in_nsh: bool = False
    mavlink_started: bool = False
    base_mode: int = INITIAL_BASE_MODE
    system_status: int = INITIAL_SYSTEM_STATUS
