"""
Response emitter.

Serializes outgoing MAVLink messages with the vehicle's identity and
publishes the resulting bytes to a sink (the link's bytes_received event).
"""

import logging
from typing import Callable

from pymavlink.dialects.v20 import common as mavlink

from .identity import Identity

logger = logging.getLogger(__name__)


class _SinkFile:
    """File-like adapter so pymavlink's send() writes into a callback."""

    def __init__(self, sink: Callable[[bytes], None]):
        self._sink = sink

    def write(self, buf):
        self._sink(bytes(buf))


class ResponseEmitter:
    """
    Packs messages from this vehicle and hands the bytes to ``sink``.

    ``mav`` exposes pymavlink's ``*_encode`` helpers for building messages.
    """

    def __init__(self, identity: Identity, sink: Callable[[bytes], None]):
        self.identity = identity
        self.mav = mavlink.MAVLink(
            _SinkFile(sink),
            srcSystem=identity.system_id,
            srcComponent=identity.component_id,
        )
        self.sent = 0

    def emit(self, msg):
        """
        Send one message.

        Args:
            msg: pymavlink message built with ``self.mav.*_encode``
        """
        logger.debug(f"Link {self.identity.link_id} -> {msg.get_type()}")
        self.mav.send(msg)
        self.sent += 1
