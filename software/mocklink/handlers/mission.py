"""
Mission protocol handler.

Minimal in-vehicle mission handling: report the item count, return stored
items on request and store uploaded items.
"""

import logging
from typing import Callable

from ..emitter import ResponseEmitter
from ..errors import DuplicateMissionSeq, MissionSeqOutOfRange, ProtocolErrorEvent
from ..missions import MissionItem, MissionStore

logger = logging.getLogger(__name__)


class MissionHandler:
    """
    Handler for MISSION_REQUEST_LIST, MISSION_REQUEST and MISSION_ITEM.

    Responses are addressed to the sender of the request.
    """

    def __init__(self, store: MissionStore, emitter: ResponseEmitter,
                 report_error: Callable[[ProtocolErrorEvent], None]):
        self.store = store
        self.emitter = emitter
        self.report_error = report_error
        self.upload_session = None

    def handle_request_list(self, msg):
        mav = self.emitter.mav
        self.emitter.emit(mav.mission_count_encode(
            msg.get_srcSystem(),    # target is the original sender
            msg.get_srcComponent(),
            len(self.store),
        ))

    def handle_request(self, msg):
        item = self.store.get(msg.seq)
        if item is None:
            self.report_error(MissionSeqOutOfRange(msg.seq, len(self.store)))
            return

        mav = self.emitter.mav
        self.emitter.emit(mav.mission_item_encode(
            msg.get_srcSystem(),
            msg.get_srcComponent(),
            item.seq,
            item.frame,
            item.command,
            int(item.current),
            int(item.autocontinue),
            item.param1, item.param2, item.param3, item.param4,
            item.x, item.y, item.z,
        ))

    def handle_item(self, msg):
        """
        Store an uploaded item.

        Raises:
            DuplicateMissionItem: seq already stored under the STRICT policy
        """
        if self.upload_session is not None and self.upload_session.claims(msg):
            return
        item = MissionItem.from_message(msg)
        if not self.store.add(item):
            self.report_error(DuplicateMissionSeq(item.seq))
            return
        logger.debug(f"Stored mission item {item.seq} (cmd {item.command})")
