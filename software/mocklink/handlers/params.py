"""
Parameter protocol handler.

Answers PARAM_REQUEST_LIST, PARAM_REQUEST_READ and PARAM_SET from the
parameter store with PARAM_VALUE messages.
"""

import logging
from typing import Callable

from ..emitter import ResponseEmitter
from ..errors import ParamIndexOutOfRange, ProtocolErrorEvent, UnknownParameter
from ..params import Parameter, ParameterStore, bounded_param_id

logger = logging.getLogger(__name__)

# param_index value meaning "look up by param_id"
READ_BY_NAME = -1


class ParamHandler:
    """
    Handler for the parameter protocol.

    Requests are assumed to be addressed to this vehicle; the dispatcher
    checks the target system before calling in.
    """

    def __init__(self, store: ParameterStore, emitter: ResponseEmitter,
                 report_error: Callable[[ProtocolErrorEvent], None]):
        self.store = store
        self.emitter = emitter
        self.report_error = report_error

    def _send_param_value(self, param: Parameter, index: int):
        mav = self.emitter.mav
        self.emitter.emit(mav.param_value_encode(
            param.name.encode("ascii"),
            param.as_float(),
            param.param_type,
            len(self.store),
            index,
        ))

    def handle_request_list(self, msg):
        """Send every parameter, in store order."""
        logger.debug(f"PARAM_REQUEST_LIST: sending {len(self.store)} parameters")
        for index, param in enumerate(self.store):
            self._send_param_value(param, index)

    def handle_request_read(self, msg):
        """
        Send one parameter, looked up by index or by name.

        An index outside the table is reported as an error. A name that is
        not in the table is ignored without a response or an error.
        """
        if msg.param_index == READ_BY_NAME:
            name = bounded_param_id(msg.param_id)
            param = self.store.get(name)
            if param is None:
                logger.debug(f"PARAM_REQUEST_READ unknown name {name!r} ignored")
                return
            self._send_param_value(param, self.store.index_of(name))
            return

        index = msg.param_index
        if not 0 <= index < len(self.store):
            self.report_error(ParamIndexOutOfRange(index, len(self.store)))
            return
        self._send_param_value(self.store.at(index), index)

    def handle_set(self, msg):
        """Update a parameter and echo its new value."""
        name = bounded_param_id(msg.param_id)
        if name not in self.store:
            self.report_error(UnknownParameter(name))
            return

        param = self.store.set_value(name, msg.param_value)
        logger.debug(f"PARAM_SET {name} = {msg.param_value}")
        self._send_param_value(param, self.store.index_of(name))
