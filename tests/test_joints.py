import pytest

from quadarm.joints import (
    JOINT_NAMES,
    JointId,
    JointState,
    PlanningJoint,
    base_transform,
)


def test_joint_state_covers_all_names_uniquely():
    names = list(JointState().as_dict())
    assert len(names) == len(JOINT_NAMES) == len(JointId)
    assert set(names) == set(JOINT_NAMES)
    assert len(set(names)) == len(names)


def test_joint_names_match_ids():
    assert JointId(0).joint_name == "Joint_platform"
    assert JointId(16).joint_name == "Link2_finger_joint"
    assert JointId(40).joint_name == "Joint4_platlink2"
    assert JointId(22).joint_name == "Joint3_5"


def test_planning_joint_names():
    assert PlanningJoint(0).joint_name == "Joint1_1"
    assert PlanningJoint(23).joint_name == "Joint4_6"
    assert PlanningJoint(18) is PlanningJoint.JOINT4_1
    with pytest.raises(ValueError):
        PlanningJoint(24)


def test_default_pose():
    state = JointState().as_dict()
    assert state["Joint1_0"] == 1.5708
    assert state["Joint4_0"] == 1.5708
    assert state["Joint2_platlink"] == -0.847454
    assert state["Joint3_platlink2"] == -2.41825
    assert state["Joint_platform"] == 0.077888
    assert state["Joint1_3"] == 0.0


def test_update_from_motor_state_maps_branches():
    state = JointState()
    data = [float(i) / 10 for i in range(28)]
    state.update_from_motor_state(data)
    result = state.as_dict()
    assert result["Joint1_1"] == data[0]
    assert result["Joint1_6"] == data[5]
    assert result["Link1_finger_joint"] == 1.0 - data[6]
    assert result["Joint2_1"] == data[7]
    assert result["Joint3_4"] == data[17]
    assert result["Joint4_6"] == data[26]
    assert result["Link4_finger_joint"] == 1.0 - data[27]


def test_update_keeps_fixed_joints():
    state = JointState()
    before = state.as_dict()
    state.update_from_motor_state([0.5] * 28)
    after = state.as_dict()
    for name in ("Joint1_0", "Joint_platform", "Joint2_platlink2"):
        assert after[name] == before[name]


def test_update_rejects_short_data():
    with pytest.raises(ValueError):
        JointState().update_from_motor_state([0.0] * 27)


def test_base_transform():
    transform = base_transform([1, 2, 3], [0, 0, 0, 1])
    assert transform["frame_id"] == "world"
    assert transform["child_frame_id"] == "base_link"
    assert transform["translation"] == (1.0, 2.0, 3.0)
    assert transform["rotation"] == (0.0, 0.0, 0.0, 1.0)


def test_base_transform_rejects_bad_lengths():
    with pytest.raises(ValueError):
        base_transform([1, 2], [0, 0, 0, 1])
    with pytest.raises(ValueError):
        base_transform([1, 2, 3], [0, 0, 1])