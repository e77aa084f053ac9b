"""
Message handlers for the mock vehicle link.

Each handler owns one part of the simulated vehicle (mode, parameters,
mission items) and answers the MAVLink requests that touch it.
"""

from .mode import ModeHandler
from .params import ParamHandler
from .mission import MissionHandler
from .mission_upload import MissionUploadSession

__all__ = ['ModeHandler', 'ParamHandler', 'MissionHandler', 'MissionUploadSession']
