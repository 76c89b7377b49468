"""Vector, basis and quaternion math.

Quaternions are stored in glTF order ``(x, y, z, w)``. Forward is the
negative local Z axis throughout.
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np

from orienty.conventions import DOT_THRESHOLD

IDENTITY_QUAT = np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float64)


class Basis(NamedTuple):
    right: np.ndarray
    up: np.ndarray
    forward: np.ndarray


def vec3(x: float, y: float, z: float) -> np.ndarray:
    return np.array([x, y, z], dtype=np.float64)


def normalize(vec: np.ndarray) -> np.ndarray:
    """Return ``vec`` scaled to unit length; a zero vector is returned as-is."""
    vec = np.asarray(vec, dtype=np.float64)
    norm = np.linalg.norm(vec)
    if norm == 0:
        return vec.copy()
    return vec / norm


# ---------------------------------------------------------------------------
# Quaternion helpers, (x, y, z, w) convention
# ---------------------------------------------------------------------------


def quat_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product ``a * b`` (apply ``b`` first, then ``a``)."""
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return np.array(
        [
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
            aw * bw - ax * bx - ay * by - az * bz,
        ],
        dtype=np.float64,
    )


def quat_to_matrix(q: np.ndarray) -> np.ndarray:
    """Convert a unit quaternion to a 3x3 rotation matrix."""
    x, y, z, w = np.asarray(q, dtype=np.float64)
    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z
    return np.array(
        [
            [1.0 - 2.0 * (yy + zz), 2.0 * (xy - wz), 2.0 * (xz + wy)],
            [2.0 * (xy + wz), 1.0 - 2.0 * (xx + zz), 2.0 * (yz - wx)],
            [2.0 * (xz - wy), 2.0 * (yz + wx), 1.0 - 2.0 * (xx + yy)],
        ],
        dtype=np.float64,
    )


def quat_rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector ``v`` by unit quaternion ``q``."""
    return quat_to_matrix(q) @ np.asarray(v, dtype=np.float64)


def quaternion_from_axis_angle(axis: np.ndarray, degrees: float) -> np.ndarray:
    axis = normalize(axis)
    half = math.radians(degrees) / 2.0
    s = math.sin(half)
    return np.array([axis[0] * s, axis[1] * s, axis[2] * s, math.cos(half)], dtype=np.float64)


def quaternion_from_euler_degrees(x: float, y: float, z: float) -> np.ndarray:
    """Build a quaternion from XYZ-order Euler angles in degrees.

    Rotations are applied about X first, then Y, then Z.
    """
    qx = quaternion_from_axis_angle(vec3(1, 0, 0), x)
    qy = quaternion_from_axis_angle(vec3(0, 1, 0), y)
    qz = quaternion_from_axis_angle(vec3(0, 0, 1), z)
    return quat_multiply(qz, quat_multiply(qy, qx))


def compose_matrix(
    translation: np.ndarray,
    rotation: np.ndarray,
    scale: np.ndarray,
) -> np.ndarray:
    """Compose a 4x4 affine matrix as T @ R @ S."""
    mat = np.eye(4, dtype=np.float64)
    mat[:3, :3] = quat_to_matrix(rotation) * np.asarray(scale, dtype=np.float64)
    mat[:3, 3] = translation
    return mat


# ---------------------------------------------------------------------------
# Basis and comparison
# ---------------------------------------------------------------------------


def extract_basis_vectors(rotation: np.ndarray) -> Basis:
    """Extract (right, up, forward) from a rotation quaternion.

    right = +X, up = +Y and forward = -Z, each transformed by the rotation.
    """
    m = quat_to_matrix(rotation)
    return Basis(right=m[:, 0].copy(), up=m[:, 1].copy(), forward=-m[:, 2])


def vectors_approximately_equal(
    a: np.ndarray, b: np.ndarray, threshold: float = DOT_THRESHOLD
) -> bool:
    """Return True if the normalized vectors have ``dot >= threshold``."""
    return float(np.dot(normalize(a), normalize(b))) >= threshold


def matrix3x3_determinant(matrix: np.ndarray) -> float:
    """Determinant of the upper-left 3x3 block of a 3x3 or 4x4 matrix.

    Positive means right-handed, negative means mirrored.
    """
    m = np.asarray(matrix, dtype=np.float64)[:3, :3]
    return float(
        m[0, 0] * (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1])
        - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
        + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
    )


def angle_between_vectors(a: np.ndarray, b: np.ndarray) -> float:
    """Angle between two vectors in radians."""
    d = float(np.dot(normalize(a), normalize(b)))
    return math.acos(max(-1.0, min(1.0, d)))


def deviation_degrees(a: np.ndarray, b: np.ndarray) -> float:
    return math.degrees(angle_between_vectors(a, b))


def to_list(vec: np.ndarray) -> list[float]:
    return [float(v) for v in np.asarray(vec).tolist()]


def rounded(vec: np.ndarray, digits: int = 3) -> dict[str, float]:
    """Axis-keyed dict of ``vec`` rounded for reports."""
    return {
        "x": round(float(vec[0]), digits),
        "y": round(float(vec[1]), digits),
        "z": round(float(vec[2]), digits),
    }
