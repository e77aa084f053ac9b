"""
Mission upload session.

Drives the vehicle side of the MISSION_COUNT upload handshake: after a
count arrives the vehicle pulls each item with MISSION_REQUEST and closes
the transfer with MISSION_ACK. Registered as a link observer, so it sees
every frame before the built-in handlers. While a transfer is active the
session owns the mission store: it stores the items it requested and
claims every other addressed MISSION_ITEM so the built-in handler leaves
it alone.
"""

import logging
from typing import Optional

from pymavlink.dialects.v20 import common as mavlink

from ..emitter import ResponseEmitter
from ..missions import MissionItem, MissionStore

logger = logging.getLogger(__name__)


class MissionUploadSession:
    """Vehicle side of a mission upload, one transfer at a time."""

    def __init__(self, system_id: int, store: MissionStore, emitter: ResponseEmitter):
        self.system_id = system_id
        self.store = store
        self.emitter = emitter
        self.expected_count = 0
        self.next_seq: Optional[int] = None
        self._peer = (0, 0)
        self._claimed = None

    @property
    def active(self) -> bool:
        return self.next_seq is not None

    def claims(self, msg) -> bool:
        """True if the last observed frame was a MISSION_ITEM taken by this session."""
        return msg is self._claimed

    def handle_message(self, msg):
        """Observe one decoded frame."""
        self._claimed = None
        msg_id = msg.get_msgId()
        if msg_id == mavlink.MAVLINK_MSG_ID_MISSION_COUNT:
            self._handle_count(msg)
        elif msg_id == mavlink.MAVLINK_MSG_ID_MISSION_ITEM:
            self._handle_item(msg)

    def _handle_count(self, msg):
        if msg.target_system != self.system_id:
            logger.debug(f"MISSION_COUNT for system {msg.target_system} ignored")
            return

        if self.active:
            logger.warning(
                f"Mission upload restarted at item {self.next_seq} of {self.expected_count}")

        self._peer = (msg.get_srcSystem(), msg.get_srcComponent())
        self.expected_count = msg.count
        self.store.clear()
        logger.info(f"Mission upload started: {msg.count} items")

        if msg.count == 0:
            self._finish()
            return
        self.next_seq = 0
        self._request(0)

    def _handle_item(self, msg):
        if not self.active or msg.target_system != self.system_id:
            return
        self._claimed = msg
        if msg.seq != self.next_seq:
            logger.warning(f"Mission upload expected item {self.next_seq}, got {msg.seq}")
            return

        self.store.put(MissionItem.from_message(msg))
        self.next_seq += 1
        if self.next_seq < self.expected_count:
            self._request(self.next_seq)
        else:
            self._finish()

    def _request(self, seq: int):
        mav = self.emitter.mav
        self.emitter.emit(mav.mission_request_encode(self._peer[0], self._peer[1], seq))

    def _finish(self):
        mav = self.emitter.mav
        self.emitter.emit(mav.mission_ack_encode(
            self._peer[0], self._peer[1], mavlink.MAV_MISSION_ACCEPTED))
        logger.info(f"Mission upload complete: {self.expected_count} items")
        self.next_seq = None
