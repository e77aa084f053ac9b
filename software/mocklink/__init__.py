"""
MockLink - simulated MAVLink vehicle for ground-station tests.
"""

from .config import DuplicatePolicy, MockLinkConfig
from .errors import (
    DuplicateMissionItem,
    DuplicateMissionSeq,
    InvalidTargetSystem,
    MissionSeqOutOfRange,
    MockLinkFault,
    ParamFileError,
    ParamIndexOutOfRange,
    ProtocolErrorEvent,
    UnknownParameter,
)
from .identity import LinkIdAllocator, default_link_ids
from .missions import MissionItem, MissionStore
from .mock_link import MockLink, create_mock_link
from .params import Parameter, ParameterStore, load_param_file, parse_param_records

__all__ = [
    'DuplicatePolicy', 'MockLinkConfig',
    'DuplicateMissionItem', 'DuplicateMissionSeq', 'InvalidTargetSystem',
    'MissionSeqOutOfRange', 'MockLinkFault', 'ParamFileError',
    'ParamIndexOutOfRange', 'ProtocolErrorEvent', 'UnknownParameter',
    'LinkIdAllocator', 'default_link_ids',
    'MissionItem', 'MissionStore',
    'MockLink', 'create_mock_link',
    'Parameter', 'ParameterStore', 'load_param_file', 'parse_param_records',
]
