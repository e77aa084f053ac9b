"""Requests addressed to another system are dropped and reported."""

import pytest
from pymavlink.dialects.v20 import common as mavlink

from conftest import VEHICLE_COMPONENT_ID, VEHICLE_SYSTEM_ID
from mocklink.errors import InvalidTargetSystem

OTHER_SYSTEM = 1

REQUESTS = {
    "SET_MODE": lambda gcs, target: gcs.set_mode_encode(target, 0x81, 0),
    "PARAM_REQUEST_LIST": lambda gcs, target: gcs.param_request_list_encode(
        target, VEHICLE_COMPONENT_ID),
    "PARAM_SET": lambda gcs, target: gcs.param_set_encode(
        target, VEHICLE_COMPONENT_ID, b"MC_ROLL_P", 1.0, mavlink.MAV_PARAM_TYPE_REAL32),
    "PARAM_REQUEST_READ": lambda gcs, target: gcs.param_request_read_encode(
        target, VEHICLE_COMPONENT_ID, b"MC_ROLL_P", -1),
    "MISSION_REQUEST_LIST": lambda gcs, target: gcs.mission_request_list_encode(
        target, VEHICLE_COMPONENT_ID),
    "MISSION_REQUEST": lambda gcs, target: gcs.mission_request_encode(
        target, VEHICLE_COMPONENT_ID, 0),
    "MISSION_ITEM": lambda gcs, target: gcs.mission_item_encode(
        target, VEHICLE_COMPONENT_ID, 0, 0, mavlink.MAV_CMD_NAV_WAYPOINT, 0, 1,
        0.0, 0.0, 0.0, 0.0, 1.0, 2.0, 3.0),
}


@pytest.mark.parametrize("msg_type", sorted(REQUESTS))
def test_wrong_target_is_reported_and_dropped(harness, msg_type):
    harness.send(REQUESTS[msg_type](harness.gcs, OTHER_SYSTEM))

    assert harness.received() == []
    assert harness.errors == [InvalidTargetSystem(OTHER_SYSTEM, VEHICLE_SYSTEM_ID, msg_type)]
    assert f"actual({OTHER_SYSTEM}) expected({VEHICLE_SYSTEM_ID})" in str(harness.errors[0])


@pytest.mark.parametrize("msg_type", sorted(REQUESTS))
def test_wrong_target_leaves_vehicle_state_alone(harness, msg_type):
    link = harness.link
    base_mode = link.state.base_mode

    harness.send(REQUESTS[msg_type](harness.gcs, OTHER_SYSTEM))

    assert link.state.base_mode == base_mode
    assert link.parameters.get("MC_ROLL_P").value == 6.5
    assert len(link.missions) == 0


def test_mode_set_on_matching_target(harness):
    harness.send(REQUESTS["SET_MODE"](harness.gcs, VEHICLE_SYSTEM_ID))

    assert harness.link.state.base_mode == 0x81
    assert harness.errors == []


def test_heartbeat_from_the_client_is_ignored(harness):
    harness.send(harness.gcs.heartbeat_encode(
        mavlink.MAV_TYPE_GCS, mavlink.MAV_AUTOPILOT_INVALID, 0, 0, mavlink.MAV_STATE_ACTIVE))

    assert harness.received() == []
    assert harness.errors == []


def test_unhandled_message_is_dropped(harness):
    harness.send(harness.gcs.command_long_encode(
        VEHICLE_SYSTEM_ID, VEHICLE_COMPONENT_ID, mavlink.MAV_CMD_COMPONENT_ARM_DISARM,
        0, 1, 0, 0, 0, 0, 0, 0))

    assert harness.received() == []
    assert harness.errors == []
