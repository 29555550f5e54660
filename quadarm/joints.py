"""Joint naming for the four-branch robot and the joint state built from motor readings."""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum

BRANCH_COUNT = 4
MOTORS_PER_BRANCH = 7
ARM_JOINTS_PER_BRANCH = MOTORS_PER_BRANCH - 1


class JointId(IntEnum):
    """Index of every joint in the published joint state."""

    JOINT_PLATFORM = 0

    JOINT1_0 = 1
    JOINT1_1 = 2
    JOINT1_2 = 3
    JOINT1_3 = 4
    JOINT1_4 = 5
    JOINT1_5 = 6
    JOINT1_6 = 7
    LINK1_FINGER = 8

    JOINT2_0 = 9
    JOINT2_1 = 10
    JOINT2_2 = 11
    JOINT2_3 = 12
    JOINT2_4 = 13
    JOINT2_5 = 14
    JOINT2_6 = 15
    LINK2_FINGER = 16

    JOINT3_0 = 17
    JOINT3_1 = 18
    JOINT3_2 = 19
    JOINT3_3 = 20
    JOINT3_4 = 21
    JOINT3_5 = 22
    JOINT3_6 = 23
    LINK3_FINGER = 24

    JOINT4_0 = 25
    JOINT4_1 = 26
    JOINT4_2 = 27
    JOINT4_3 = 28
    JOINT4_4 = 29
    JOINT4_5 = 30
    JOINT4_6 = 31
    LINK4_FINGER = 32

    JOINT1_PLATLINK = 33
    JOINT1_PLATLINK2 = 34
    JOINT2_PLATLINK = 35
    JOINT2_PLATLINK2 = 36
    JOINT3_PLATLINK = 37
    JOINT3_PLATLINK2 = 38
    JOINT4_PLATLINK = 39
    JOINT4_PLATLINK2 = 40

    @property
    def joint_name(self) -> str:
        """Name of the joint in the robot description."""
        return JOINT_NAMES[self]


def _robot_joint_names() -> tuple[str, ...]:
    names = ["Joint_platform"]
    for branch in range(1, BRANCH_COUNT + 1):
        names.extend(f"Joint{branch}_{k}" for k in range(MOTORS_PER_BRANCH))
        names.append(f"Link{branch}_finger_joint")
    for branch in range(1, BRANCH_COUNT + 1):
        names.extend((f"Joint{branch}_platlink", f"Joint{branch}_platlink2"))
    return tuple(names)


JOINT_NAMES: tuple[str, ...] = _robot_joint_names()


class PlanningJoint(IntEnum):
    """Index of each actuated arm joint in a planned joint-angle vector."""

    JOINT1_1 = 0
    JOINT1_2 = 1
    JOINT1_3 = 2
    JOINT1_4 = 3
    JOINT1_5 = 4
    JOINT1_6 = 5

    JOINT2_1 = 6
    JOINT2_2 = 7
    JOINT2_3 = 8
    JOINT2_4 = 9
    JOINT2_5 = 10
    JOINT2_6 = 11

    JOINT3_1 = 12
    JOINT3_2 = 13
    JOINT3_3 = 14
    JOINT3_4 = 15
    JOINT3_5 = 16
    JOINT3_6 = 17

    JOINT4_1 = 18
    JOINT4_2 = 19
    JOINT4_3 = 20
    JOINT4_4 = 21
    JOINT4_5 = 22
    JOINT4_6 = 23

    @property
    def joint_name(self) -> str:
        """Name of the joint in the robot description."""
        branch, k = divmod(int(self), ARM_JOINTS_PER_BRANCH)
        return f"Joint{branch + 1}_{k + 1}"


_BASE_ANGLE = 1.5708
_PLATLINK_ANGLE = -0.847454
_PLATLINK2_ANGLE = -2.41825
_PLATFORM_ANGLE = 0.077888


class JointState:
    """Positions of all robot joints, starting from the assembled pose."""

    def __init__(self) -> None:
        self.names: list[str] = list(JOINT_NAMES)
        self.positions: list[float] = [0.0] * len(JointId)
        for branch in range(BRANCH_COUNT):
            start = self._branch_start(branch)
            self.positions[start] = _BASE_ANGLE
        for branch in range(1, BRANCH_COUNT + 1):
            self.positions[JointId[f"JOINT{branch}_PLATLINK"]] = _PLATLINK_ANGLE
            self.positions[JointId[f"JOINT{branch}_PLATLINK2"]] = _PLATLINK2_ANGLE
        self.positions[JointId.JOINT_PLATFORM] = _PLATFORM_ANGLE

    @staticmethod
    def _branch_start(branch: int) -> int:
        return JointId.JOINT1_0 + branch * (MOTORS_PER_BRANCH + 1)

    def update_from_motor_state(self, data: Sequence[float]) -> None:
        """Apply a flat motor state: per branch six joint angles then a gripper opening.

        The finger joint is closed by the gripper opening, so it gets ``1 - opening``.
        """
        needed = BRANCH_COUNT * MOTORS_PER_BRANCH
        if len(data) < needed:
            raise ValueError(f"motor state needs {needed} values, got {len(data)}")
        for branch in range(BRANCH_COUNT):
            values = data[branch * MOTORS_PER_BRANCH : (branch + 1) * MOTORS_PER_BRANCH]
            start = self._branch_start(branch)
            for offset, angle in enumerate(values[:ARM_JOINTS_PER_BRANCH], start=1):
                self.positions[start + offset] = float(angle)
            self.positions[start + MOTORS_PER_BRANCH] = 1.0 - float(values[-1])

    def as_dict(self) -> dict[str, float]:
        """Joint name to position, in joint order."""
        return dict(zip(self.names, self.positions))


def base_transform(position: Sequence[float], orientation: Sequence[float]) -> dict:
    """Transform of ``base_link`` in ``world`` from a position and an ``(x, y, z, w)`` quaternion."""
    if len(position) != 3:
        raise ValueError("position needs three values")
    if len(orientation) != 4:
        raise ValueError("orientation needs four values (x, y, z, w)")
    return {
        "frame_id": "world",
        "child_frame_id": "base_link",
        "translation": tuple(float(v) for v in position),
        "rotation": tuple(float(v) for v in orientation),
    }