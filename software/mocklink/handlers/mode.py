"""
SET_MODE handler.
"""

import logging

from ..identity import EndpointState

logger = logging.getLogger(__name__)


class ModeHandler:
    """Applies SET_MODE requests to the vehicle state. Never responds."""

    def __init__(self, state: EndpointState):
        self.state = state

    def handle_set_mode(self, msg):
        logger.debug(f"SET_MODE base_mode=0x{msg.base_mode:02X}")
        self.state.base_mode = msg.base_mode
