"""
Periodic heartbeat task.
"""

import logging
import time
from typing import Callable, Optional

from .config import AUTOPILOT_TYPE, VEHICLE_TYPE
from .emitter import ResponseEmitter
from .identity import EndpointState

logger = logging.getLogger(__name__)


class HeartbeatScheduler:
    """
    Emits a HEARTBEAT once per interval while mavlink is started.

    The scheduler does not own a thread: the link worker polls it between
    inbound chunks, so heartbeats and frame handling never overlap.
    """

    def __init__(self, state: EndpointState, emitter: ResponseEmitter,
                 interval: float = 1.0,
                 clock: Callable[[], float] = time.monotonic):
        self.state = state
        self.emitter = emitter
        self.interval = interval
        self.clock = clock
        self._next_due: Optional[float] = None

    def start(self, now: Optional[float] = None):
        """Arm the scheduler; the first tick is due one interval from now."""
        if now is None:
            now = self.clock()
        self._next_due = now + self.interval

    def time_until_due(self, now: Optional[float] = None) -> float:
        """Seconds until the next tick, never negative."""
        if self._next_due is None:
            self.start(now)
        if now is None:
            now = self.clock()
        return max(0.0, self._next_due - now)

    def poll(self, now: Optional[float] = None) -> bool:
        """
        Run the tick if it is due.

        Missed periods collapse into a single tick.

        Args:
            now: Current clock reading (defaults to ``clock()``)

        Returns:
            True if a period elapsed, whether or not a heartbeat was sent
        """
        if now is None:
            now = self.clock()
        if self._next_due is None:
            self.start(now)
            return False
        if now < self._next_due:
            return False

        self._next_due += self.interval
        if self._next_due <= now:
            self._next_due = now + self.interval

        if self.state.mavlink_started:
            self.send_heartbeat()
        return True

    def send_heartbeat(self):
        """Emit one HEARTBEAT reflecting the current mode and status."""
        mav = self.emitter.mav
        self.emitter.emit(mav.heartbeat_encode(
            VEHICLE_TYPE,
            AUTOPILOT_TYPE,
            self.state.base_mode,
            0,  # custom mode
            self.state.system_status,
        ))
