"""
MockLink configuration.

Protocol constants shared by the responder and a ``MockLinkConfig``
dataclass holding the per-link settings the CLI can override.
"""

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pymavlink.dialects.v20 import common as mavlink

# Vehicle addressing (matches the PX4 defaults the ground station expects)
DEFAULT_SYSTEM_ID = 128
DEFAULT_COMPONENT_ID = 200

# Heartbeat identity
VEHICLE_TYPE = mavlink.MAV_TYPE_QUADROTOR
AUTOPILOT_TYPE = mavlink.MAV_AUTOPILOT_PX4

# Initial vehicle state
INITIAL_BASE_MODE = mavlink.MAV_MODE_FLAG_MANUAL_INPUT_ENABLED
INITIAL_SYSTEM_STATUS = mavlink.MAV_STATE_STANDBY

# NuttX shell escape: three carriage returns
NSH_ESCAPE = b"\r\r\r"
# Shell command that starts mavlink on the USB port
NSH_MAVLINK_START = b"sh /etc/init.d/rc.usb\n"

# Width of the param_id field in PARAM_* messages
PARAM_ID_LEN = 16

DEFAULT_PARAM_FILE = Path(__file__).resolve().parent / "data" / "mocklink.params"


class DuplicatePolicy(enum.Enum):
    """What to do when a mission item arrives for an already stored seq."""
    STRICT = "strict"        # fatal, raises DuplicateMissionItem
    OVERWRITE = "overwrite"  # replace the stored item
    REJECT = "reject"        # keep the stored item, report an error event


@dataclass
class MockLinkConfig:
    """Settings for one simulated vehicle link."""
    system_id: int = DEFAULT_SYSTEM_ID
    component_id: int = DEFAULT_COMPONENT_ID
    heartbeat_interval: float = 1.0
    param_file: Optional[Path] = None
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.STRICT
    join_timeout: float = 2.0
    mission_upload: bool = True

    def resolved_param_file(self) -> Path:
        """Parameter fixture to load, falling back to the bundled one."""
        if self.param_file is None:
            return DEFAULT_PARAM_FILE
        return Path(self.param_file)
