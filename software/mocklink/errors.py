"""
Error events and faults raised by the mock vehicle link.

Protocol violations made by the client under test are reported as
``ProtocolErrorEvent`` instances through the link's error callbacks and
never stop the worker. Conditions that leave the simulation in an
inconsistent state are ``MockLinkFault`` exceptions.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProtocolErrorEvent:
    """Base class for non-fatal protocol errors."""

    @property
    def message(self) -> str:
        return "protocol error"

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class InvalidTargetSystem(ProtocolErrorEvent):
    """Request addressed to a system id other than the vehicle's."""
    received: int
    expected: int
    msg_type: str = "UNKNOWN"

    @property
    def message(self) -> str:
        return (f"MSG_ID_{self.msg_type} received incorrect target system: "
                f"actual({self.received}) expected({self.expected})")


@dataclass(frozen=True)
class UnknownParameter(ProtocolErrorEvent):
    """PARAM_SET for a name that is not in the parameter table."""
    name: str

    @property
    def message(self) -> str:
        return f"MSG_ID_PARAM_SET requested unknown param id ({self.name})"


@dataclass(frozen=True)
class ParamIndexOutOfRange(ProtocolErrorEvent):
    """PARAM_REQUEST_READ with an index outside the parameter table."""
    requested: int
    count: int

    @property
    def message(self) -> str:
        return (f"MSG_ID_PARAM_REQUEST_READ requested unknown index: "
                f"requested({self.requested}) count({self.count})")


@dataclass(frozen=True)
class MissionSeqOutOfRange(ProtocolErrorEvent):
    """MISSION_REQUEST for a sequence number that was never uploaded."""
    requested: int
    count: int

    @property
    def message(self) -> str:
        return (f"MSG_ID_MISSION_REQUEST requested unknown sequence number: "
                f"requested({self.requested}) count({self.count})")


@dataclass(frozen=True)
class DuplicateMissionSeq(ProtocolErrorEvent):
    """MISSION_ITEM rejected because its sequence number is already stored."""
    seq: int

    @property
    def message(self) -> str:
        return f"MSG_ID_MISSION_ITEM duplicate sequence number rejected: seq({self.seq})"


class MockLinkFault(Exception):
    """Fatal condition: the link cannot continue in a consistent state."""


class ParamFileError(MockLinkFault):
    """Malformed parameter fixture."""

    def __init__(self, line_number: int, reason: str):
        super().__init__(f"param file line {line_number}: {reason}")
        self.line_number = line_number
        self.reason = reason


class DuplicateMissionItem(MockLinkFault):
    """Mission item uploaded twice for the same sequence number."""

    def __init__(self, seq: int):
        super().__init__(f"mission item seq {seq} uploaded twice")
        self.seq = seq
