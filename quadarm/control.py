"""Top-level control loop: state readout, homing, planned grasp execution and gripper presets.

The controller does one cycle per call to :meth:`RobotController.step`, and is
meant to run at :data:`LOOP_RATE_HZ`. Publishing goes through plain callables:

* ``publish_state(values)`` gets the 28 joint values, branch by branch.
* ``publish_base(pose)`` gets ``(x, y, z, qx, qy, qz, qw)``.
* ``publish_gripper(commands)`` gets one opening per gripper.

The planner is an object with ``plan() -> (success, message)`` and
``base_link_pose(branch1_angles, branch4_angles) -> pose``. Either method
raises ``OSError`` when the service cannot be reached.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Protocol

import yaml

from .joints import ARM_JOINTS_PER_BRANCH, BRANCH_COUNT, MOTORS_PER_BRANCH
from .motors import INITIAL_POSITIONS, MotorGroup

logger = logging.getLogger(__name__)

LOOP_RATE_HZ = 200
HOME_STEPS = 2000
_POINT_LENGTH = BRANCH_COUNT * ARM_JOINTS_PER_BRANCH
_POSE_LENGTH = 7
_BRANCH4_OFFSET = 3 * ARM_JOINTS_PER_BRANCH

_GRIPPER_PRESETS = {
    101: (1.0, 1.0, 1.0, 1.0),
    102: (0.0, 0.5, 0.5, 0.0),
}


class ControlMode(IntEnum):
    """Values of the control flag understood by the controller."""

    READ_STATE = 0
    MOVE_HOME = 1
    GRASP = 2
    GRIPPER_OPEN = 101
    GRIPPER_HOLD = 102


@dataclass
class PlanningResult:
    """Planned joint-angle points and the matching floating-base poses."""

    joint_angles: list[list[float]] = field(default_factory=list)
    floating_base: list[list[float]] = field(default_factory=list)


class Planner(Protocol):
    def plan(self) -> tuple[bool, str]: ...

    def base_link_pose(
        self, branch1: Sequence[float], branch4: Sequence[float]
    ) -> Sequence[float]: ...


def interpolate(start, target, ratio: float) -> list[list[float]]:
    """Row-wise linear blend ``start + ratio * (target - start)``."""
    if len(start) != len(target):
        raise ValueError("start and target have different numbers of rows")
    result = []
    for start_row, target_row in zip(start, target):
        if len(start_row) != len(target_row):
            raise ValueError("start and target rows have different lengths")
        result.append([a + ratio * (b - a) for a, b in zip(start_row, target_row)])
    return result


def flatten_state(q) -> list[float]:
    """Joint values of every branch in one flat list, branch by branch."""
    return [float(value) for row in q for value in row]


def _float_rows(node) -> list[list[float]]:
    if node is None:
        return []
    return [[float(value) for value in row] for row in node]


def load_planning_result(path: str | Path) -> PlanningResult:
    """Read ``joint_angle_sequence`` and ``floating_base_sequence`` from a YAML file."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: planning result must be a mapping")
    return PlanningResult(
        joint_angles=_float_rows(data.get("joint_angle_sequence")),
        floating_base=_float_rows(data.get("floating_base_sequence")),
    )


def _zero_state() -> list[list[float]]:
    return [[0.0] * MOTORS_PER_BRANCH for _ in range(BRANCH_COUNT)]


def _pose_tuple(pose: Sequence[float]) -> tuple[float, ...]:
    if len(pose) < _POSE_LENGTH:
        raise ValueError(f"pose needs {_POSE_LENGTH} values, got {len(pose)}")
    return tuple(float(v) for v in pose[:_POSE_LENGTH])


class RobotController:
    """State machine driven by the control flag, one cycle per :meth:`step`."""

    def __init__(
        self,
        simulation: bool,
        motors: MotorGroup | None,
        planner: Planner,
        publish_state: Callable[[list[float]], None],
        publish_base: Callable[[tuple[float, ...]], None],
        publish_gripper: Callable[[list[float]], None],
        result_path: str | Path,
    ) -> None:
        if not simulation and motors is None:
            raise ValueError("hardware mode needs a motor group")
        self.simulation = simulation
        self.motors = motors
        self.planner = planner
        self.publish_state = publish_state
        self.publish_base = publish_base
        self.publish_gripper = publish_gripper
        self.result_path = Path(result_path)

        if motors is not None:
            self.q_send = motors.q_send
            self.q_recv = motors.q_recv
        else:
            self.q_send = _zero_state()
            self.q_recv = _zero_state()
        self.q_init = [list(row) for row in INITIAL_POSITIONS]

        self.flag = int(ControlMode.READ_STATE)
        self._home_start: list[list[float]] | None = None
        self._home_step = 0
        self._planning_requested = False
        self._planning_completed = False
        self._plan = PlanningResult()
        self._trajectory_index = 0

    @property
    def mode(self) -> ControlMode | None:
        """The current flag as a :class:`ControlMode`, or ``None`` if it is not one."""
        try:
            return ControlMode(self.flag)
        except ValueError:
            return None

    def set_mode(self, flag: int) -> None:
        """Set the control flag."""
        self.flag = int(flag)
        logger.info("Received control_flag: %d", self.flag)

    def on_gripper_state(self, data: Sequence[float]) -> None:
        """Store the measured gripper openings, one per branch."""
        if len(data) < BRANCH_COUNT:
            raise ValueError(f"gripper state needs {BRANCH_COUNT} values, got {len(data)}")
        for row, value in zip(self.q_recv, data):
            row[MOTORS_PER_BRANCH - 1] = float(value)

    def step(self) -> None:
        """Run one control cycle for the current flag."""
        if self.flag == ControlMode.READ_STATE:
            self._read_state()
        elif self.flag == ControlMode.MOVE_HOME:
            self._move_home()
        elif self.flag == ControlMode.GRASP:
            self._grasp()
        elif self.flag in _GRIPPER_PRESETS:
            self._gripper_preset(_GRIPPER_PRESETS[self.flag])

    def _publish(self) -> None:
        self.publish_state(flatten_state(self.q_recv))

    def _set_send(self, rows) -> None:
        for row, values in zip(self.q_send, rows):
            row[:] = values

    def _mirror_arm_joints(self) -> None:
        for recv_row, send_row in zip(self.q_recv, self.q_send):
            recv_row[:ARM_JOINTS_PER_BRANCH] = send_row[:ARM_JOINTS_PER_BRANCH]

    def _read_state(self) -> None:
        if not self.simulation:
            self.motors.receive()
        self._publish()

    def _move_home(self) -> None:
        if self._home_start is None:
            self._home_start = copy.deepcopy(self.q_recv)
            self._home_step = 0
        ratio = self._home_step / HOME_STEPS
        self._set_send(interpolate(self._home_start, self.q_init, ratio))
        if self.simulation:
            self._mirror_arm_joints()
        else:
            self.motors.send_receive()
        self._home_step += 1
        if self._home_step >= HOME_STEPS:
            self._set_send(self.q_init)
            self._home_step = HOME_STEPS
        self._publish()

    def _grasp(self) -> None:
        if not self._planning_requested:
            self._request_plan()
        elif not self._planning_completed:
            self._load_plan()
        elif self._trajectory_index < len(self._plan.joint_angles):
            self._execute_point(self._trajectory_index)
            self._trajectory_index += 1
        else:
            logger.info("Trajectory execution completed")
            self.flag = int(ControlMode.READ_STATE)
            self._planning_requested = False
            self._planning_completed = False
            self._trajectory_index = 0

    def _request_plan(self) -> None:
        try:
            success, message = self.planner.plan()
        except OSError as exc:
            logger.error("Failed to call planning service: %s", exc)
            self.flag = int(ControlMode.READ_STATE)
            return
        if success:
            logger.info("Planning request sent successfully")
            self._planning_requested = True
        else:
            logger.error("Planning request failed: %s", message)
            self.flag = int(ControlMode.READ_STATE)

    def _load_plan(self) -> None:
        if not self.result_path.is_file():
            return
        self._plan = load_planning_result(self.result_path)
        logger.info("Loaded %d joint angle points", len(self._plan.joint_angles))
        logger.info("Loaded %d floating base poses", len(self._plan.floating_base))
        self._planning_completed = True
        self._trajectory_index = 0

    def _execute_point(self, index: int) -> None:
        point = self._plan.joint_angles[index]
        if len(point) < _POINT_LENGTH:
            raise ValueError(f"trajectory point needs {_POINT_LENGTH} values, got {len(point)}")
        for branch, row in enumerate(self.q_send):
            start = branch * ARM_JOINTS_PER_BRANCH
            row[:ARM_JOINTS_PER_BRANCH] = point[start : start + ARM_JOINTS_PER_BRANCH]

        if self.simulation:
            self._mirror_arm_joints()
            self.publish_base(_pose_tuple(self._plan.floating_base[index]))
        else:
            self.motors.send_receive()
            branch1 = list(point[:ARM_JOINTS_PER_BRANCH])
            branch4 = list(point[_BRANCH4_OFFSET : _BRANCH4_OFFSET + ARM_JOINTS_PER_BRANCH])
            try:
                pose = self.planner.base_link_pose(branch1, branch4)
            except OSError as exc:
                logger.error("Failed to call service get_base_link_pose: %s", exc)
            else:
                pose = _pose_tuple(pose)
                logger.info("Base link pose calculated: %s", pose)
                self.publish_base(pose)
        self._publish()

    def _gripper_preset(self, openings: tuple[float, ...]) -> None:
        self.publish_gripper(list(openings))
        for row, value in zip(self.q_recv, openings):
            row[MOTORS_PER_BRANCH - 1] = value
        self._publish()