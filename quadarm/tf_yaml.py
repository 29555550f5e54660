"""Homogeneous transforms from frame lookups, stored as target poses in YAML files.

Quaternions here follow the transform-message order ``(x, y, z, w)``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from pathlib import Path

import numpy as np
import yaml

from .rotations import quaternion_to_rotation, rotation_to_euler

logger = logging.getLogger(__name__)


class _FlowList(list):
    """Sequence written in flow style."""


class _Dumper(yaml.SafeDumper):
    pass


def _represent_flow(dumper: yaml.SafeDumper, data: _FlowList) -> yaml.Node:
    return dumper.represent_sequence("tag:yaml.org,2002:seq", data, flow_style=True)


_Dumper.add_representer(_FlowList, _represent_flow)


def _styled(node):
    """Sequences of scalars become flow sequences; everything else stays block style."""
    if isinstance(node, dict):
        return {key: _styled(value) for key, value in node.items()}
    if isinstance(node, (list, tuple)):
        items = [_styled(value) for value in node]
        if all(not isinstance(value, (dict, list)) for value in items):
            return _FlowList(items)
        return items
    return node


def _write(path: str | Path, data: dict) -> None:
    text = yaml.dump(_styled(data), Dumper=_Dumper, sort_keys=False, default_flow_style=False)
    Path(path).write_text(text, encoding="utf-8")


def _unit_rotation(quaternion: Sequence[float]) -> np.ndarray:
    x, y, z, w = (float(v) for v in quaternion)
    norm = math.sqrt(x * x + y * y + z * z + w * w)
    if norm == 0.0:
        raise ValueError("quaternion has zero length")
    return quaternion_to_rotation((w / norm, x / norm, y / norm, z / norm))


def transform_matrix(translation: Sequence[float], quaternion: Sequence[float]) -> np.ndarray:
    """4x4 homogeneous transform from a translation and an ``(x, y, z, w)`` quaternion."""
    if len(translation) != 3:
        raise ValueError("translation needs three values")
    if len(quaternion) != 4:
        raise ValueError("quaternion needs four values (x, y, z, w)")
    matrix = np.eye(4)
    matrix[:3, :3] = _unit_rotation(quaternion)
    matrix[:3, 3] = [float(v) for v in translation]
    return matrix


def _pose(transform) -> dict:
    m = np.asarray(transform, dtype=float)
    if m.shape != (4, 4):
        raise ValueError(f"transform must be 4x4, got shape {m.shape}")
    return {
        "position": [float(v) for v in m[:3, 3]],
        "orientation": [[float(v) for v in row] for row in m[:3, :3]],
    }


def save_target_poses(path: str | Path, left, right) -> None:
    """Overwrite ``path`` with the right and left target poses."""
    _write(path, {"target_pose_R": _pose(right), "target_pose_L": _pose(left)})
    logger.info("Saved latest transformation to %s", path)


def save_named_transform(path: str | Path, transform, name: str) -> None:
    """Store ``transform`` under ``name`` in ``path``, keeping the other entries.

    An unreadable existing file is replaced.
    """
    path = Path(path)
    pose = _pose(transform)
    root: dict = {}
    if path.exists():
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            logger.warning("Failed to load existing YAML, creating new file. Error: %s", exc)
            loaded = None
        if isinstance(loaded, dict):
            root = loaded
    entry = root.get(name)
    if not isinstance(entry, dict):
        entry = root[name] = {}
    target = entry.get("target_pose")
    if not isinstance(target, dict):
        target = entry["target_pose"] = {}
    target["position"] = pose["position"]
    target["orientation"] = pose["orientation"]
    _write(path, root)
    logger.info("Saved transformation %s to %s", name, path)


def quaternion_to_rpy(quat: Sequence[float]) -> tuple[float, float, float]:
    """Roll, pitch and yaw in radians of an ``(x, y, z, w)`` quaternion."""
    roll, pitch, yaw = rotation_to_euler(_unit_rotation(quat))
    return float(roll), float(pitch), float(yaw)


def describe_transform(translation: Sequence[float], quaternion: Sequence[float]) -> str:
    """Human-readable report of the ``world`` to ``dummy_point3`` transform."""
    x, y, z = (float(v) for v in translation)
    qx, qy, qz, qw = (float(v) for v in quaternion)
    roll, pitch, yaw = (math.degrees(v) for v in quaternion_to_rpy(quaternion))
    return (
        "--- TF: world → dummy_point3 ---\n"
        f"Translation : [x: {x:.4f}, y: {y:.4f}, z: {z:.4f}]\n"
        f"Quaternion  : [x: {qx:.4f}, y: {qy:.4f}, z: {qz:.4f}, w: {qw:.4f}]\n"
        f"RPY (deg)   : [roll: {roll:.4f}, pitch: {pitch:.4f}, yaw: {yaw:.4f}]\n"
    )