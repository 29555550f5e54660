"""Rotation, quaternion and pseudo-inverse helpers.

Quaternions are numpy arrays ordered ``(w, x, y, z)``.
"""

from __future__ import annotations

import math

import numpy as np


def pseudo_inverse_svd(mat):
    """Moore-Penrose pseudo-inverse through a full singular value decomposition."""
    mat = np.atleast_2d(np.asarray(mat, dtype=float))
    rows, cols = mat.shape
    u, singular, vh = np.linalg.svd(mat, full_matrices=True)
    largest = max((float(s) for s in singular), default=0.0)
    largest = max(largest, 0.0)
    tolerance = np.finfo(float).eps * max(rows, cols) * largest
    inverse = np.zeros((cols, rows))
    for i, value in enumerate(singular):
        if value > tolerance:
            inverse[i, i] = 1.0 / value
    return vh.conj().T @ inverse @ u.conj().T


def pseudo_inverse_right(m):
    """Right pseudo-inverse ``M^T (M M^T)^-1``."""
    m = np.atleast_2d(np.asarray(m, dtype=float))
    gram = m @ m.T
    return m.T @ np.linalg.solve(gram, np.eye(gram.shape[0]))


def pseudo_inverse_right_weighted(m, w):
    """Weighted right pseudo-inverse ``W^-1 M^T (M W^-1 M^T)^+``.

    ``w`` is the diagonal of the weight matrix, or the matrix itself.
    """
    m = np.atleast_2d(np.asarray(m, dtype=float))
    weights = np.asarray(w, dtype=float)
    if weights.ndim == 2:
        weights = np.diag(weights)
    w_inv = np.diag(1.0 / weights)
    gram = m @ w_inv @ m.T
    return w_inv @ m.T @ np.linalg.pinv(gram)


def dyn_pseudo_inverse(m, dyn_m, is_minv):
    """Dynamically consistent pseudo-inverse with mass matrix ``dyn_m``.

    When ``is_minv`` is true, ``dyn_m`` is already the inverse mass matrix.
    """
    m = np.atleast_2d(np.asarray(m, dtype=float))
    dyn_m = np.atleast_2d(np.asarray(dyn_m, dtype=float))
    if is_minv:
        m_inv = dyn_m
    else:
        lower = np.linalg.cholesky(dyn_m)
        lower_inv = np.linalg.solve(lower, np.eye(lower.shape[0]))
        m_inv = lower_inv.T @ lower_inv
    projected = m @ m_inv @ m.T
    return m_inv @ m.T @ np.linalg.pinv(projected)


def rot_x(theta):
    """Rotation matrix about the x axis."""
    c, s = math.cos(theta), math.sin(theta)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def rot_y(theta):
    """Rotation matrix about the y axis."""
    c, s = math.cos(theta), math.sin(theta)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def rot_z(theta):
    """Rotation matrix about the z axis."""
    c, s = math.cos(theta), math.sin(theta)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def euler_to_rotation(roll, pitch, yaw):
    """Rotation matrix ``Rz(yaw) Ry(pitch) Rx(roll)``."""
    return rot_z(yaw) @ rot_y(pitch) @ rot_x(roll)


def rotation_to_euler(rot):
    """Roll, pitch and yaw of a ``Rz Ry Rx`` rotation matrix."""
    r = np.asarray(rot, dtype=float)
    roll = math.atan2(r[2, 1], r[2, 2])
    pitch = math.atan2(-r[2, 0], math.hypot(r[2, 1], r[2, 2]))
    yaw = math.atan2(r[1, 0], r[0, 0])
    return np.array([roll, pitch, yaw])


def rotation_to_quaternion(rot):
    """Quaternion ``(w, x, y, z)`` of a rotation matrix."""
    m = np.asarray(rot, dtype=float)
    diag_sum = m[0, 0] + m[1, 1] + m[2, 2]
    if diag_sum > 0.0:
        t = math.sqrt(diag_sum + 1.0)
        w = 0.5 * t
        t = 0.5 / t
        return np.array(
            [w, (m[2, 1] - m[1, 2]) * t, (m[0, 2] - m[2, 0]) * t, (m[1, 0] - m[0, 1]) * t]
        )
    i = 0
    if m[1, 1] > m[0, 0]:
        i = 1
    if m[2, 2] > m[i, i]:
        i = 2
    j = (i + 1) % 3
    k = (j + 1) % 3
    t = math.sqrt(m[i, i] - m[j, j] - m[k, k] + 1.0)
    vector = np.zeros(3)
    vector[i] = 0.5 * t
    t = 0.5 / t
    w = (m[k, j] - m[j, k]) * t
    vector[j] = (m[j, i] + m[i, j]) * t
    vector[k] = (m[k, i] + m[i, k]) * t
    return np.array([w, *vector])


def quaternion_to_rotation(quat):
    """Rotation matrix of a quaternion ``(w, x, y, z)``; the quaternion is not normalised."""
    w, x, y, z = (float(v) for v in quat)
    tx, ty, tz = 2.0 * x, 2.0 * y, 2.0 * z
    twx, twy, twz = tx * w, ty * w, tz * w
    txx, txy, txz = tx * x, ty * x, tz * x
    tyy, tyz, tzz = ty * y, tz * y, tz * z
    return np.array(
        [
            [1.0 - (tyy + tzz), txy - twz, txz + twy],
            [txy + twz, 1.0 - (txx + tzz), tyz - twx],
            [txz - twy, tyz + twx, 1.0 - (txx + tyy)],
        ]
    )


def euler_to_quaternion(roll, pitch, yaw):
    """Quaternion ``(w, x, y, z)`` of the ``Rz Ry Rx`` rotation."""
    return rotation_to_quaternion(euler_to_rotation(roll, pitch, yaw))


def _is_diagonal(mat, precision):
    largest = np.max(np.abs(np.diag(mat)))
    off_diagonal = mat - np.diag(np.diag(mat))
    return bool(np.all(np.abs(off_diagonal) <= largest * precision))


def diff_rotation(r_cur, r_des):
    """Angular error vector, in the world frame, taking ``r_cur`` to ``r_des``."""
    r_cur = np.asarray(r_cur, dtype=float)
    r = r_cur.T @ np.asarray(r_des, dtype=float)
    diagonal = np.diag(r)
    if _is_diagonal(r, 1e-5) and np.sum(np.abs(diagonal)) - 3.0 < 1e-3:
        w = np.zeros(3)
    elif _is_diagonal(r, 1e-5):
        w = (diagonal + 1.0) * 3.1415 / 2.0
    else:
        axis = np.array([r[2, 1] - r[1, 2], r[0, 2] - r[2, 0], r[1, 0] - r[0, 1]])
        norm = np.linalg.norm(axis)
        angle = math.atan2(norm, float(np.sum(diagonal)) - 1.0)
        w = angle * axis / norm
    return r_cur @ w


def quaternion_to_axis_angle(quat):
    """Axis and angle ``(ax, ay, az, angle)`` of a unit quaternion ``(w, x, y, z)``.

    For a rotation-free quaternion the axis is reported as ``(x, y, 1)``.
    """
    w, x, y, z = (float(v) for v in quat)
    angle = 2.0 * math.acos(w)
    s = math.sqrt(1.0 - w * w)
    if s < 1e-8:
        return np.array([x, y, 1.0, angle])
    return np.array([x / s, y / s, z / s, angle])


def integrate_quaternion(quat, w):
    """Rotate ``quat`` by the rotation vector ``w`` expressed in its local frame."""
    q = np.asarray(quat, dtype=float)
    r_cur = quaternion_to_rotation(q / np.linalg.norm(q))
    increment = np.eye(3)
    w = np.asarray(w, dtype=float)
    theta = float(np.linalg.norm(w))
    if theta > 1e-4:
        n = w / theta
        a = np.array(
            [
                [0.0, -n[2], n[1]],
                [n[0], 0.0, -n[0]],
                [-n[1], n[0], 0.0],
            ]
        )
        increment = np.eye(3) + a * math.sin(theta) + a @ a * (1.0 - math.cos(theta))
    return rotation_to_quaternion(r_cur @ increment)


def skew(a):
    """Cross-product matrix of a 3-vector."""
    x, y, z = (float(v) for v in a)
    return np.array([[0.0, -z, y], [z, 0.0, -x], [-y, x, 0.0]])


def ramp(u, tgt, inc):
    """Move ``u`` towards ``tgt`` by at most ``inc``."""
    if abs(u - tgt) < inc:
        return tgt
    if u < tgt - inc:
        return u + inc
    if u > tgt + inc:
        return u - inc
    return tgt


def clamp(value, upper, lower):
    """Limit ``value`` to ``[lower, upper]``; the lower bound wins if they cross."""
    if value > upper:
        value = upper
    if value < lower:
        value = lower
    return value


def sign(x):
    """Sign of ``x`` as a float: 1.0, -1.0 or 0.0."""
    if x > 0:
        return 1.0
    if x < 0:
        return -1.0
    return 0.0