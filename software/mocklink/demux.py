"""
Byte stream demultiplexer.

Inbound bytes are either NuttX shell (NSH) text or MAVLink. Three
carriage returns at the start of a chunk switch to the shell; a 4 byte
chunk starting with the same escape switches back.
"""

import logging
from typing import Callable

from .config import NSH_ESCAPE, NSH_MAVLINK_START
from .identity import EndpointState

logger = logging.getLogger(__name__)


class NshCommandMatcher:
    """
    Minimal NSH emulation.

    Only recognises the escape back to MAVLink and the command that starts
    mavlink on the USB port.
    """

    def __init__(self, state: EndpointState):
        self.state = state

    def handle_bytes(self, data: bytes):
        """
        Process shell input.

        Args:
            data: Shell bytes (escape prefix already removed on entry)
        """
        # Drop back out of NSH
        if len(data) == 4 and data.startswith(NSH_ESCAPE):
            self.state.in_nsh = False
            logger.debug("Leaving NSH")
            return

        if not data:
            return

        logger.debug(f"NSH: {data!r}")
        if data == NSH_MAVLINK_START:
            self.state.mavlink_started = True
            logger.info("MAVLink started from NSH")


class ByteStreamDemux:
    """
    Routes inbound chunks to the shell matcher and/or the frame sink.

    A chunk that enters the shell is still handed to the frame sink in
    full, so both paths can see the same chunk.
    """

    def __init__(self, state: EndpointState, shell: NshCommandMatcher,
                 frame_sink: Callable[[bytes], None]):
        self.state = state
        self.shell = shell
        self.frame_sink = frame_sink

    def feed(self, data: bytes):
        """
        Route one inbound chunk.

        Args:
            data: Bytes exactly as written by the client
        """
        if self.state.in_nsh:
            self.shell.handle_bytes(data)
            return

        if data.startswith(NSH_ESCAPE):
            self.state.in_nsh = True
            logger.debug("Entering NSH")
            self.shell.handle_bytes(data[len(NSH_ESCAPE):])

        self.frame_sink(data)
