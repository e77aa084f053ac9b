"""
Mission item table of the simulated vehicle.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .config import DuplicatePolicy
from .errors import DuplicateMissionItem

logger = logging.getLogger(__name__)


@dataclass
class MissionItem:
    """One waypoint-like mission item, as carried by MISSION_ITEM."""
    seq: int
    frame: int = 0
    command: int = 0
    current: bool = False
    autocontinue: bool = True
    param1: float = 0.0
    param2: float = 0.0
    param3: float = 0.0
    param4: float = 0.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_message(cls, msg) -> "MissionItem":
        """Build an item from a decoded MISSION_ITEM message."""
        return cls(
            seq=msg.seq,
            frame=msg.frame,
            command=msg.command,
            current=bool(msg.current),
            autocontinue=bool(msg.autocontinue),
            param1=msg.param1,
            param2=msg.param2,
            param3=msg.param3,
            param4=msg.param4,
            x=msg.x,
            y=msg.y,
            z=msg.z,
        )


class MissionStore:
    """
    seq -> MissionItem mapping.

    Re-uploading a stored seq is handled according to ``policy``.
    """

    def __init__(self, policy: DuplicatePolicy = DuplicatePolicy.STRICT):
        self.policy = policy
        self._items: Dict[int, MissionItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, seq: int) -> bool:
        return seq in self._items

    def get(self, seq: int) -> Optional[MissionItem]:
        return self._items.get(seq)

    def add(self, item: MissionItem) -> bool:
        """
        Store an uploaded item.

        Args:
            item: Item to store under item.seq

        Returns:
            True if stored, False if rejected as a duplicate

        Raises:
            DuplicateMissionItem: duplicate seq under the STRICT policy
        """
        if item.seq in self._items:
            if self.policy is DuplicatePolicy.STRICT:
                raise DuplicateMissionItem(item.seq)
            if self.policy is DuplicatePolicy.REJECT:
                return False
            logger.debug(f"Overwriting mission item {item.seq}")

        self._items[item.seq] = item
        return True

    def clear(self):
        """Drop every stored item."""
        self._items.clear()

    def put(self, item: MissionItem):
        """Store an item, replacing whatever is stored under item.seq."""
        self._items[item.seq] = item
