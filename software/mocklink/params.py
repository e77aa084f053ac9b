"""
Parameter table of the simulated vehicle.

Parameters keep the order they were loaded in; that order defines the
index used by PARAM_REQUEST_READ and reported in PARAM_VALUE.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from pymavlink.dialects.v20 import common as mavlink

from .config import PARAM_ID_LEN
from .errors import ParamFileError

logger = logging.getLogger(__name__)

ParamValue = Union[float, int]

# Fixture columns: sysid, compid, name, value, type
PARAM_FIELD_COUNT = 5


def _parse_int8(text: str) -> int:
    # Stored as a single byte on the vehicle
    value = int(text) & 0xFF
    return value - 0x100 if value > 0x7F else value


def _parse_uint32(text: str) -> int:
    value = int(text)
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"{value} out of range for uint32")
    return value


def _parse_int32(text: str) -> int:
    value = int(text)
    if not -0x80000000 <= value <= 0x7FFFFFFF:
        raise ValueError(f"{value} out of range for int32")
    return value


PARAM_PARSERS = {
    mavlink.MAV_PARAM_TYPE_REAL32: float,
    mavlink.MAV_PARAM_TYPE_UINT32: _parse_uint32,
    mavlink.MAV_PARAM_TYPE_INT32: _parse_int32,
    mavlink.MAV_PARAM_TYPE_INT8: _parse_int8,
}


def bounded_param_id(raw: Union[str, bytes, bytearray]) -> str:
    """
    Convert a param_id field to a string.

    The field is a fixed 16 byte buffer that is only NUL terminated when
    the name is shorter than the buffer.

    Args:
        raw: Field as decoded (str) or as raw bytes

    Returns:
        Name truncated at the first NUL and at 16 characters
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw[:PARAM_ID_LEN]).split(b"\x00", 1)[0]
        return raw.decode("ascii", errors="replace")
    return raw.split("\x00", 1)[0][:PARAM_ID_LEN]


@dataclass
class Parameter:
    """A single named, typed vehicle parameter."""
    name: str
    value: ParamValue
    param_type: int = mavlink.MAV_PARAM_TYPE_REAL32

    def as_float(self) -> float:
        """Value as carried in the float param_value field."""
        return float(self.value)


class ParameterStore:
    """
    Ordered name -> Parameter mapping.

    The set of names is fixed once loaded; only values change.
    """

    def __init__(self, parameters: Iterable[Parameter] = ()):
        self._params: Dict[str, Parameter] = {}
        self._names: List[str] = []
        for param in parameters:
            if len(param.name) > PARAM_ID_LEN:
                raise ValueError(
                    f"parameter name {param.name!r} longer than {PARAM_ID_LEN} characters")
            if param.name in self._params:
                logger.warning(f"Duplicate parameter {param.name}, keeping last value")
                self._params[param.name] = param
                continue
            self._params[param.name] = param
            self._names.append(param.name)

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[Parameter]:
        for name in self._names:
            yield self._params[name]

    def __contains__(self, name: str) -> bool:
        return name in self._params

    def get(self, name: str) -> Optional[Parameter]:
        return self._params.get(name)

    def at(self, index: int) -> Parameter:
        """Parameter at a 0-based ordinal index."""
        if not 0 <= index < len(self._names):
            raise IndexError(index)
        return self._params[self._names[index]]

    def index_of(self, name: str) -> int:
        return self._names.index(name)

    def set_value(self, name: str, value: ParamValue) -> Parameter:
        """
        Update the value of an existing parameter.

        Raises:
            KeyError: if the name is not in the table
        """
        param = self._params[name]
        param.value = value
        return param


def parse_param_records(lines: Iterable[str]) -> List[Parameter]:
    """
    Parse parameter fixture lines.

    Each record is tab separated: sysid, compid, name, value, type.
    Lines starting with '#' and blank lines are skipped.

    Args:
        lines: Fixture text lines

    Returns:
        Parameters in file order

    Raises:
        ParamFileError: on a malformed record
    """
    params = []
    for line_number, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if line.startswith("#") or not line.strip():
            continue

        fields = line.split("\t")
        if len(fields) != PARAM_FIELD_COUNT:
            raise ParamFileError(
                line_number, f"expected {PARAM_FIELD_COUNT} fields, got {len(fields)}")

        name = fields[2]
        if len(name) > PARAM_ID_LEN:
            raise ParamFileError(line_number, f"name longer than {PARAM_ID_LEN} characters")
        value_text = fields[3]
        try:
            param_type = int(fields[4])
        except ValueError:
            raise ParamFileError(line_number, f"bad type tag {fields[4]!r}") from None

        parser = PARAM_PARSERS.get(param_type)
        if parser is None:
            raise ParamFileError(line_number, f"unsupported param type {param_type}")
        try:
            value = parser(value_text)
        except ValueError as e:
            raise ParamFileError(line_number, f"bad value {value_text!r}: {e}") from None

        params.append(Parameter(name, value, param_type))

    return params


def load_param_file(path: Union[str, Path]) -> ParameterStore:
    """Load a parameter fixture file into a store."""
    with open(path, "r", encoding="ascii") as f:
        params = parse_param_records(f)
    logger.info(f"Loaded {len(params)} parameters from {path}")
    return ParameterStore(params)
