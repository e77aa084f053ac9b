"""
Command dispatcher.

Routes each decoded frame to the handler for its message type after
giving every registered observer a look at it.
"""

import logging
from typing import Callable, List

from pymavlink.dialects.v20 import common as mavlink

from .errors import InvalidTargetSystem, MockLinkFault, ProtocolErrorEvent
from .handlers import MissionHandler, ModeHandler, ParamHandler
from .identity import Identity

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """
    Message router for the mock vehicle.

    Observers are objects with a ``handle_message(msg)`` method. They are
    notified in registration order before the built-in handling runs.
    """

    def __init__(self, identity: Identity, mode: ModeHandler, params: ParamHandler,
                 missions: MissionHandler,
                 report_error: Callable[[ProtocolErrorEvent], None]):
        self.identity = identity
        self.mode = mode
        self.params = params
        self.missions = missions
        self.report_error = report_error
        self._observers: List = []

    def add_observer(self, observer):
        """Register an observer for every decoded frame."""
        self._observers.append(observer)

    def _notify_observers(self, msg):
        for observer in self._observers:
            try:
                observer.handle_message(msg)
            except MockLinkFault:
                raise
            except Exception as e:
                logger.error(f"Observer {type(observer).__name__} error: {e}")

    def check_target(self, msg) -> bool:
        """
        Check that a request is addressed to this vehicle.

        Reports an InvalidTargetSystem error when it is not.
        """
        if msg.target_system == self.identity.system_id:
            return True
        self.report_error(InvalidTargetSystem(
            msg.target_system, self.identity.system_id, msg.get_type()))
        return False

    def dispatch(self, msg):
        """
        Handle one decoded frame.

        Args:
            msg: pymavlink message
        """
        self._notify_observers(msg)

        msg_id = msg.get_msgId()

        if msg_id == mavlink.MAVLINK_MSG_ID_HEARTBEAT:
            # Ground station heartbeats carry nothing the vehicle needs
            pass

        elif msg_id == mavlink.MAVLINK_MSG_ID_SET_MODE:
            if self.check_target(msg):
                self.mode.handle_set_mode(msg)

        elif msg_id == mavlink.MAVLINK_MSG_ID_PARAM_REQUEST_LIST:
            if self.check_target(msg):
                self.params.handle_request_list(msg)

        elif msg_id == mavlink.MAVLINK_MSG_ID_PARAM_SET:
            if self.check_target(msg):
                self.params.handle_set(msg)

        elif msg_id == mavlink.MAVLINK_MSG_ID_PARAM_REQUEST_READ:
            if self.check_target(msg):
                self.params.handle_request_read(msg)

        elif msg_id == mavlink.MAVLINK_MSG_ID_MISSION_REQUEST_LIST:
            if self.check_target(msg):
                self.missions.handle_request_list(msg)

        elif msg_id == mavlink.MAVLINK_MSG_ID_MISSION_REQUEST:
            if self.check_target(msg):
                self.missions.handle_request(msg)

        elif msg_id == mavlink.MAVLINK_MSG_ID_MISSION_ITEM:
            if self.check_target(msg):
                self.missions.handle_item(msg)

        else:
            logger.debug(f"Unhandled MAVLink message {msg.get_type()} (id {msg_id})")
