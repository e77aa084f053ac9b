"""
Incremental MAVLink frame decoder.

Feed raw bytes in arbitrary chunks and get complete, checksum-validated
messages back. Garbage between frames and frames with a bad CRC are
dropped and decoding resumes at the next byte.
"""

import logging
from typing import Generator, Iterable

from pymavlink.dialects.v20 import common as mavlink

logger = logging.getLogger(__name__)


class FrameDecoder:
    """
    Stateful MAVLink decoder for one link.

    Feed bytes one chunk at a time and collect complete frames.
    """

    def __init__(self, link_id: int):
        self.link_id = link_id
        self.dropped = 0
        # robust_parsing turns decode failures into BAD_DATA results
        # instead of exceptions
        self._parser = mavlink.MAVLink(None)
        self._parser.robust_parsing = True

    def decode_byte(self, byte: int):
        """
        Process a single byte.

        Args:
            byte: Input byte (0-255)

        Returns:
            Decoded message if a frame is complete, None otherwise
        """
        msg = self._parser.parse_char(bytes([byte]))
        if msg is None:
            return None
        if msg.get_type() == "BAD_DATA":
            self.dropped += 1
            return None
        return msg

    def feed(self, data: bytes) -> Generator:
        """
        Decode a chunk of bytes.

        Args:
            data: Raw bytes from the transport

        Yields:
            Each message completed by this chunk, in order
        """
        for byte in data:
            msg = self.decode_byte(byte)
            if msg is not None:
                yield msg

    def frames(self, chunks: Iterable[bytes]) -> Generator:
        """
        Generator that yields complete frames as chunks arrive.

        Args:
            chunks: Byte chunks, possibly unbounded

        Yields:
            Decoded messages
        """
        for chunk in chunks:
            yield from self.feed(chunk)
