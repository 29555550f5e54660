"""Joint-space control of the branch actuators through an actuator controller.

The controller is any object offering the methods of :class:`ActuatorController`.
Joint angles are in radians; actuator positions are in motor revolutions,
scaled by the gear reduction and corrected by a per-motor sign and offset.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from .joints import BRANCH_COUNT, MOTORS_PER_BRANCH

logger = logging.getLogger(__name__)

REDUCTION_RATIO_PROXIMAL = 101.0
REDUCTION_RATIO_DISTAL = 36.0

MOTOR_ID_MAP: tuple[tuple[int, ...], ...] = (
    (1, 2, 3, 4, 5, 6, 7),
    (8, 9, 10, 11, 12, 13, 14),
    (15, 16, 17, 18, 19, 20, 21),
    (22, 23, 24, 25, 26, 27, 28),
)

MOTOR_SIGN: tuple[tuple[int, ...], ...] = ((1, 1, -1, -1, -1, -1, -1),) * BRANCH_COUNT

MOTOR_OFFSET: tuple[tuple[float, ...], ...] = ((0.0, 0.0, 0.0, -9.0, 0.0, -9.0, 0.0),) * BRANCH_COUNT

INITIAL_POSITIONS: tuple[tuple[float, ...], ...] = (
    (1.597743, 0.2950242, 2.156446, 3.101645, -0.4948243, -0.01648967, 1.0),
    (2.041711, -0.616538, 2.032447, -1.33452, 1.159544, -2.898303, 1.0),
    (-2.041711, -0.616538, 2.032447, 1.33452, 1.159544, -0.24329, 1.0),
    (-1.597743, 0.295025, 2.156445, -0.04025241, 0.4948952, 0.01637039, 1.0),
)

# Actuator ids driven as arm joints in each branch; the gripper id is excluded.
_BRANCH_RANGES = {0: (1, 6), 1: (8, 13), 2: (15, 20), 3: (22, 27)}

_CONNECTION_ERRORS = {
    0x803: "Communication with ECB (ECU) failed.",
    0x802: "Communication with actuator failed.",
}


class MotorError(Exception):
    """Raised when actuators cannot be found, addressed or located."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class Actuator:
    """An actuator reported by the controller."""

    actuator_id: int
    ip_address: str


class ActuatorController(Protocol):
    def lookup_actuators(self) -> tuple[Sequence[Actuator], int]: ...

    def enable_actuator(self, actuator_id: int, ip_address: str) -> bool: ...

    def disable_actuator(self, actuator_id: int, ip_address: str) -> bool: ...

    def activate_position_mode(self, actuator_id: int) -> None: ...

    def set_position(self, actuator_id: int, value: float) -> None: ...

    def get_position(self, actuator_id: int, ip_address: str) -> float: ...


def branch_range(branch: int) -> tuple[int, int]:
    """First and last actuator id of the arm joints in ``branch``."""
    try:
        return _BRANCH_RANGES[branch]
    except KeyError:
        raise MotorError("Invalid branch index. Valid values are 0-3.") from None


def find_motor(actuator_id: int) -> tuple[int, int]:
    """Branch and body index of the motor with ``actuator_id``."""
    for branch, ids in enumerate(MOTOR_ID_MAP):
        if actuator_id in ids:
            return branch, ids.index(actuator_id)
    raise MotorError(f"Failed to find branch and body for actuator ID: {actuator_id}")


def _reduction_ratio(body: int) -> float:
    return REDUCTION_RATIO_PROXIMAL if body <= 2 else REDUCTION_RATIO_DISTAL


def joint_to_actuator(branch: int, body: int, angle: float) -> float:
    """Actuator position commanding joint ``angle`` on motor ``(branch, body)``."""
    sign = MOTOR_SIGN[branch][body]
    return sign * (angle / (2 * math.pi)) * _reduction_ratio(body) + MOTOR_OFFSET[branch][body]


def actuator_to_joint(branch: int, body: int, position: float) -> float:
    """Joint angle of motor ``(branch, body)`` at actuator ``position``."""
    sign = MOTOR_SIGN[branch][body]
    offset = MOTOR_OFFSET[branch][body]
    return sign * ((position - offset) / _reduction_ratio(body)) * math.pi * 2


def _zero_state() -> list[list[float]]:
    return [[0.0] * MOTORS_PER_BRANCH for _ in range(BRANCH_COUNT)]


class MotorGroup:
    """All branch actuators, with commanded (``q_send``) and measured (``q_recv``) joint angles."""

    def __init__(self, controller: ActuatorController) -> None:
        self.controller = controller
        self.actuators: list[Actuator] = []
        self.enabled = False
        self.q_send = _zero_state()
        self.q_recv = _zero_state()

    def connect(self) -> list[int]:
        """Look up the connected actuators and return their ids."""
        found, code = self.controller.lookup_actuators()
        found = list(found)
        if not found:
            detail = _CONNECTION_ERRORS.get(code, f"Unknown error code: {code:x}")
            raise MotorError(f"Connection error: {detail}", code)
        for actuator in found:
            logger.info(
                "Actuator ID: %d, IP Address: %s", actuator.actuator_id, actuator.ip_address
            )
        self.actuators = found
        return [actuator.actuator_id for actuator in found]

    def _branch_actuators(self, branch: int) -> list[tuple[Actuator, int]]:
        start, end = branch_range(branch)
        return [
            (actuator, actuator.actuator_id - start)
            for actuator in self.actuators
            if start <= actuator.actuator_id <= end
        ]

    def set_branch_enabled(self, branch: int, enabled: bool) -> None:
        """Enable or disable the arm actuators of one branch."""
        members = self._branch_actuators(branch)
        if not self.actuators:
            raise MotorError("No actuators found or communication error")
        switch = self.controller.enable_actuator if enabled else self.controller.disable_actuator
        action = "enabled" if enabled else "disabled"
        for actuator, _ in members:
            if switch(actuator.actuator_id, actuator.ip_address):
                logger.info(
                    "Successfully %s actuator with ID %d in branch %d.",
                    action,
                    actuator.actuator_id,
                    branch,
                )
            else:
                logger.error(
                    "Error %s actuator with ID %d",
                    "enabling" if enabled else "disabling",
                    actuator.actuator_id,
                )
        self.enabled = enabled

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable every branch."""
        for branch in range(BRANCH_COUNT):
            self.set_branch_enabled(branch, enabled)

    def set_position_mode(self) -> None:
        """Switch every arm actuator to position mode; does nothing while disabled."""
        if not self.enabled:
            return
        for branch in range(BRANCH_COUNT):
            for actuator, _ in self._branch_actuators(branch):
                self.controller.activate_position_mode(actuator.actuator_id)
                logger.info("Set actuator %d to POSITION mode.", actuator.actuator_id)

    def _read(self, actuator: Actuator) -> None:
        position = self.controller.get_position(actuator.actuator_id, actuator.ip_address)
        branch, body = find_motor(actuator.actuator_id)
        self.q_recv[branch][body] = actuator_to_joint(branch, body, position)

    def send_receive(self) -> None:
        """Command ``q_send`` to every arm actuator and read back into ``q_recv``."""
        if not self.enabled:
            return
        for branch in range(BRANCH_COUNT):
            for actuator, local in self._branch_actuators(branch):
                value = joint_to_actuator(branch, local, self.q_send[branch][local])
                logger.debug(
                    "branch %d, id %d, set_value %f", branch, actuator.actuator_id, value
                )
                self.controller.set_position(actuator.actuator_id, value)
                self._read(actuator)

    def receive(self) -> None:
        """Read every arm actuator into ``q_recv``."""
        if not self.enabled:
            return
        for branch in range(BRANCH_COUNT):
            for actuator, _ in self._branch_actuators(branch):
                self._read(actuator)