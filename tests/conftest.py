"""Shared fixtures for the mock vehicle tests."""

import sys
from pathlib import Path

import pytest
from pymavlink.dialects.v20 import common as mavlink

_SOFTWARE = Path(__file__).resolve().parents[1] / "software"
if str(_SOFTWARE) not in sys.path:
    sys.path.insert(0, str(_SOFTWARE))

from mocklink.config import MockLinkConfig  # noqa: E402
from mocklink.identity import LinkIdAllocator  # noqa: E402
from mocklink.mock_link import MockLink  # noqa: E402
from mocklink.params import Parameter, ParameterStore  # noqa: E402

VEHICLE_SYSTEM_ID = 128
VEHICLE_COMPONENT_ID = 200
GCS_SYSTEM_ID = 255
GCS_COMPONENT_ID = 190

FIXTURE_LINES = [
    "# Onboard parameters",
    "# Vehicle-Id\tComponent-Id\tName\tValue\tType",
    "128\t200\tSYS_AUTOSTART\t4001\t6",
    "128\t200\tBAT_V_CHARGED\t4.2\t9",
    "128\t200\tCOM_RC_IN_MODE\t1\t2",
    "128\t200\tPWM_MAIN_RATE\t400\t5",
    "128\t200\tMC_ROLL_P\t6.5\t9",
]


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class Harness:
    """Client side of a MockLink driven on the test thread."""

    def __init__(self, link: MockLink):
        self.link = link
        self.gcs = mavlink.MAVLink(None, srcSystem=GCS_SYSTEM_ID, srcComponent=GCS_COMPONENT_ID)
        self.output = []
        self.errors = []
        link.register_bytes_callback(lambda link_id, data: self.output.append(data))
        link.register_error_callback(self.errors.append)

    def pack(self, msg) -> bytes:
        return msg.pack(self.gcs)

    def send(self, msg):
        self.send_bytes(self.pack(msg))

    def send_bytes(self, data: bytes):
        self.link.write_bytes(data)
        self.link.run_pending()

    def received(self):
        """Decode and clear everything the vehicle has sent."""
        parser = mavlink.MAVLink(None)
        messages = []
        for byte in b"".join(self.output):
            msg = parser.parse_char(bytes([byte]))
            if msg is not None:
                messages.append(msg)
        self.output.clear()
        return messages


def make_store() -> ParameterStore:
    return ParameterStore([
        Parameter("SYS_AUTOSTART", 4001, mavlink.MAV_PARAM_TYPE_INT32),
        Parameter("BAT_V_CHARGED", 4.2, mavlink.MAV_PARAM_TYPE_REAL32),
        Parameter("COM_RC_IN_MODE", 1, mavlink.MAV_PARAM_TYPE_INT8),
        Parameter("PWM_MAIN_RATE", 400, mavlink.MAV_PARAM_TYPE_UINT32),
        Parameter("MC_ROLL_P", 6.5, mavlink.MAV_PARAM_TYPE_REAL32),
    ])


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return MockLinkConfig()


@pytest.fixture
def link(config, clock):
    return MockLink(LinkIdAllocator(), config, parameters=make_store(), clock=clock)


@pytest.fixture
def harness(link):
    return Harness(link)
