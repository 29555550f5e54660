"""Gripper command encoding, status decoding and a driver over a CAN transport.

A transport is any object with ``send(send_id, frame_text)`` and
``receive() -> bytes``; it raises ``OSError`` when the link fails.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

logger = logging.getLogger(__name__)

_ID_TO_BRANCH = {"01": 0, "02": 1, "03": 2, "04": 3}
_STATUS_LENGTH = 9


class GripperError(Exception):
    """Raised when a gripper frame cannot be sent, received or understood."""


class Transport(Protocol):
    def send(self, send_id: str, frame: str) -> None: ...

    def receive(self) -> bytes: ...


def _scale(value: float, label: str) -> int:
    scaled = int(value * 255.0)
    if not 0 <= scaled <= 255:
        raise ValueError(f"{label} command {value} is outside [0, 1]")
    return scaled


def encode_command(pos: float, vel: float, force: float, acc: float, dec: float) -> bytes:
    """Eight-byte command frame; every argument is a fraction in [0, 1]."""
    return bytes(
        [
            0x00,
            _scale(pos, "position"),
            _scale(force, "force"),
            _scale(vel, "velocity"),
            _scale(acc, "acceleration"),
            _scale(dec, "deceleration"),
            0x00,
            0x00,
        ]
    )


def format_frame(data: bytes) -> str:
    """Bytes as space-separated upper-case hex pairs."""
    return " ".join(f"{byte:02X}" for byte in data)


def parse_status_frame(frame: bytes) -> float:
    """Gripper position, normalised to [0, 1], from a status frame."""
    if not frame or frame[0] == 0:
        raise GripperError("Invalid frame")
    if len(frame) < _STATUS_LENGTH:
        raise GripperError(f"status frame too short: {len(frame)} bytes")
    return frame[6] / 255.0


def branch_for_id(send_id: str) -> int:
    """Branch index served by the gripper with CAN id ``send_id``; unknown ids map to 0."""
    return _ID_TO_BRANCH.get(send_id, 0)


class Gripper:
    """One gripper reached through a transport under a CAN id."""

    def __init__(self, transport: Transport, send_id: str) -> None:
        self.transport = transport
        self.send_id = send_id

    def branch(self) -> int:
        """Branch index this gripper belongs to."""
        return branch_for_id(self.send_id)

    def control(self, pos: float, vel: float, force: float, acc: float, dec: float) -> float:
        """Send one command and return the position the gripper reports."""
        text = format_frame(encode_command(pos, vel, force, acc, dec))
        logger.debug("Sending CAN frame: %s", text)
        try:
            self.transport.send(self.send_id, text)
        except OSError as exc:
            raise GripperError(f"Error injecting data frame: {exc}") from exc
        try:
            frame = bytes(self.transport.receive())
        except OSError as exc:
            raise GripperError(f"Error receiving frame: {exc}") from exc
        if frame:
            logger.debug("Received frame of length %d: %s", len(frame), format_frame(frame))
        return parse_status_frame(frame)


class GripperBank:
    """A fixed set of grippers commanded together."""

    def __init__(self, grippers: Sequence[Gripper]) -> None:
        self.grippers = list(grippers)

    def command(self, positions: Sequence[float]) -> list[float]:
        """Drive each gripper to its position at full speed and force; return actual positions."""
        if len(positions) != len(self.grippers):
            raise ValueError(
                f"Received {len(positions)} gripper commands, "
                f"but have {len(self.grippers)} grippers"
            )
        return [
            gripper.control(pos, 1.0, 1.0, 1.0, 1.0)
            for gripper, pos in zip(self.grippers, positions)
        ]