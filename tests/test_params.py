"""Parameter fixture parsing and the ordered parameter store."""

import pytest
from pymavlink.dialects.v20 import common as mavlink

from conftest import FIXTURE_LINES
from mocklink.config import DEFAULT_PARAM_FILE
from mocklink.errors import ParamFileError
from mocklink.params import (
    Parameter,
    ParameterStore,
    bounded_param_id,
    load_param_file,
    parse_param_records,
)


def test_parse_skips_comments_and_keeps_file_order():
    params = parse_param_records(FIXTURE_LINES)

    assert [p.name for p in params] == [
        "SYS_AUTOSTART", "BAT_V_CHARGED", "COM_RC_IN_MODE", "PWM_MAIN_RATE", "MC_ROLL_P",
    ]
    assert params[0].value == 4001
    assert params[0].param_type == mavlink.MAV_PARAM_TYPE_INT32
    assert params[1].value == pytest.approx(4.2)
    assert params[1].param_type == mavlink.MAV_PARAM_TYPE_REAL32
    assert params[3].param_type == mavlink.MAV_PARAM_TYPE_UINT32


def test_parse_skips_blank_lines():
    params = parse_param_records(["", "128\t200\tA\t1\t6\n", "   \n"])
    assert [p.name for p in params] == ["A"]


def test_int8_values_wrap_to_a_signed_byte():
    params = parse_param_records(["1\t1\tLOW\t200\t2", "1\t1\tNEG\t-3\t2"])
    assert [p.value for p in params] == [-56, -3]


@pytest.mark.parametrize("line, reason", [
    ("128\t200\tSYS_AUTOSTART\t4001", "expected 5 fields"),
    ("128\t200\tSYS_AUTOSTART\t4001\t6\textra", "expected 5 fields"),
    ("128\t200\tSYS_AUTOSTART\t4001\t10", "unsupported param type 10"),
    ("128\t200\tSYS_AUTOSTART\t4001\tfloat", "bad type tag"),
    ("128\t200\tSYS_AUTOSTART\tfour\t6", "bad value"),
    ("128\t200\tPWM_MAIN_RATE\t-1\t5", "bad value"),
    ("128\t200\tABCDEFGHIJKLMNOPQRS\t1\t6", "name longer than 16 characters"),
])
def test_malformed_records_are_fatal(line, reason):
    with pytest.raises(ParamFileError) as excinfo:
        parse_param_records(["# header", line])

    assert excinfo.value.line_number == 2
    assert reason in str(excinfo.value)


def test_bundled_fixture_loads():
    store = load_param_file(DEFAULT_PARAM_FILE)

    assert len(store) > 0
    assert store.get("MAV_SYS_ID").value == 128
    assert store.index_of(store.at(0).name) == 0


def test_load_param_file_from_disk(tmp_path):
    path = tmp_path / "vehicle.params"
    path.write_text("\n".join(FIXTURE_LINES) + "\n", encoding="ascii")

    store = load_param_file(path)

    assert [p.name for p in store][-1] == "MC_ROLL_P"
    assert len(store) == 5


def test_store_indexes_follow_insertion_order():
    store = ParameterStore([Parameter("Z", 1.0), Parameter("A", 2.0), Parameter("M", 3.0)])

    assert [store.index_of(name) for name in ("Z", "A", "M")] == [0, 1, 2]
    assert store.at(1).name == "A"
    with pytest.raises(IndexError):
        store.at(3)


def test_set_value_keeps_index_and_count():
    store = ParameterStore([Parameter("A", 1.0), Parameter("B", 2.0)])

    store.set_value("B", 9.5)

    assert store.get("B").value == 9.5
    assert store.index_of("B") == 1
    assert len(store) == 2
    with pytest.raises(KeyError):
        store.set_value("C", 1.0)


def test_duplicate_fixture_names_keep_first_position():
    store = ParameterStore([Parameter("A", 1.0), Parameter("B", 2.0), Parameter("A", 3.0)])

    assert len(store) == 2
    assert store.index_of("A") == 0
    assert store.get("A").value == 3.0


@pytest.mark.parametrize("raw, expected", [
    ("MC_ROLL_P", "MC_ROLL_P"),
    ("MC_ROLL_P\x00\x00junk", "MC_ROLL_P"),
    (b"MC_ROLL_P\x00\x00\x00", "MC_ROLL_P"),
    (b"MPC_Z_VEL_MAX_UPxxxx", "MPC_Z_VEL_MAX_UP"),
    ("MPC_Z_VEL_MAX_UPxxxx", "MPC_Z_VEL_MAX_UP"),
])
def test_bounded_param_id(raw, expected):
    assert bounded_param_id(raw) == expected


def test_sixteen_character_names_are_accepted():
    (param,) = parse_param_records(["1\t1\tABCDEFGHIJKLMNOP\t1\t6"])
    assert param.name == "ABCDEFGHIJKLMNOP"


def test_store_rejects_names_that_cannot_be_addressed():
    with pytest.raises(ValueError):
        ParameterStore([Parameter("ABCDEFGHIJKLMNOPQRS", 1.0)])
