import math

import numpy as np
import pytest
import yaml

from quadarm.rotations import euler_to_quaternion, rotation_to_euler
from quadarm.tf_yaml import (
    describe_transform,
    quaternion_to_rpy,
    save_named_transform,
    save_target_poses,
    transform_matrix,
)


def xyzw(roll, pitch, yaw):
    w, x, y, z = euler_to_quaternion(roll, pitch, yaw)
    return (x, y, z, w)


def test_identity_quaternion():
    m = transform_matrix((1.0, 2.0, 3.0), (0.0, 0.0, 0.0, 1.0))
    assert np.allclose(m[:3, :3], np.eye(3))
    assert np.allclose(m[:3, 3], [1.0, 2.0, 3.0])
    assert np.allclose(m[3], [0.0, 0.0, 0.0, 1.0])


def test_quaternion_is_normalised():
    m = transform_matrix((0.0, 0.0, 0.0), (0.0, 0.0, 0.0, 2.0))
    assert np.allclose(m[:3, :3], np.eye(3))


def test_rotation_is_orthonormal_and_matches_euler():
    q = xyzw(0.3, -0.2, 1.1)
    m = transform_matrix((0.0, 0.0, 0.0), q)
    r = m[:3, :3]
    assert np.allclose(r @ r.T, np.eye(3))
    assert np.allclose(rotation_to_euler(r), [0.3, -0.2, 1.1])


def test_bad_lengths():
    with pytest.raises(ValueError):
        transform_matrix((0.0, 0.0), (0.0, 0.0, 0.0, 1.0))
    with pytest.raises(ValueError):
        transform_matrix((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))


def test_save_target_poses(tmp_path):
    path = tmp_path / "transform.yaml"
    left = transform_matrix((0.1, 0.2, 0.3), xyzw(0.0, 0.0, 0.5))
    right = transform_matrix((-0.1, -0.2, -0.3), xyzw(0.4, 0.0, 0.0))
    save_target_poses(path, left, right)
    text = path.read_text()
    data = yaml.safe_load(text)
    assert list(data) == ["target_pose_R", "target_pose_L"]
    assert data["target_pose_R"]["position"] == pytest.approx([-0.1, -0.2, -0.3])
    assert np.allclose(data["target_pose_L"]["orientation"], left[:3, :3])
    assert "position: [" in text
    assert "- [" in text


def test_save_target_poses_overwrites(tmp_path):
    path = tmp_path / "transform.yaml"
    path.write_text("stale: true\n")
    eye = np.eye(4)
    save_target_poses(path, eye, eye)
    assert "stale" not in yaml.safe_load(path.read_text())


def test_save_named_transform_keeps_other_entries(tmp_path):
    path = tmp_path / "tf_using.yaml"
    first = transform_matrix((1.0, 0.0, 0.0), (0.0, 0.0, 0.0, 1.0))
    second = transform_matrix((0.0, 1.0, 0.0), xyzw(0.0, 0.2, 0.0))
    save_named_transform(path, first, "tf_mat_world_flan1")
    save_named_transform(path, second, "tf_mat_world_flan4")
    data = yaml.safe_load(path.read_text())
    assert list(data) == ["tf_mat_world_flan1", "tf_mat_world_flan4"]
    assert data["tf_mat_world_flan1"]["target_pose"]["position"] == [1.0, 0.0, 0.0]
    assert np.allclose(data["tf_mat_world_flan4"]["target_pose"]["orientation"], second[:3, :3])


def test_save_named_transform_replaces_same_name(tmp_path):
    path = tmp_path / "tf_using.yaml"
    save_named_transform(path, np.eye(4), "tf")
    moved = transform_matrix((0.5, 0.5, 0.5), (0.0, 0.0, 0.0, 1.0))
    save_named_transform(path, moved, "tf")
    data = yaml.safe_load(path.read_text())
    assert list(data) == ["tf"]
    assert data["tf"]["target_pose"]["position"] == [0.5, 0.5, 0.5]


def test_save_named_transform_recovers_from_broken_file(tmp_path):
    path = tmp_path / "tf_using.yaml"
    path.write_text("key: [unclosed\n")
    save_named_transform(path, np.eye(4), "tf")
    data = yaml.safe_load(path.read_text())
    assert list(data) == ["tf"]
    assert data["tf"]["target_pose"]["orientation"] == [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]


def test_save_named_transform_rejects_wrong_shape(tmp_path):
    with pytest.raises(ValueError):
        save_named_transform(tmp_path / "x.yaml", np.eye(3), "tf")


@pytest.mark.parametrize("angles", [(0.0, 0.0, 0.0), (0.3, -0.4, 2.0), (-1.0, 0.7, -2.5)])
def test_quaternion_to_rpy_round_trip(angles):
    assert quaternion_to_rpy(xyzw(*angles)) == pytest.approx(angles, abs=1e-9)


def test_describe_transform():
    text = describe_transform((1.0, 2.0, 3.0), (0.0, 0.0, 0.0, 1.0))
    lines = text.splitlines()
    assert lines[0] == "--- TF: world → dummy_point3 ---"
    assert lines[1] == "Translation : [x: 1.0000, y: 2.0000, z: 3.0000]"
    assert lines[2] == "Quaternion  : [x: 0.0000, y: 0.0000, z: 0.0000, w: 1.0000]"


def test_describe_transform_degrees():
    q = xyzw(0.0, 0.0, math.pi / 2)
    line = describe_transform((0.0, 0.0, 0.0), q).splitlines()[3]
    assert line == "RPY (deg)   : [roll: 0.0000, pitch: 0.0000, yaw: 90.0000]"