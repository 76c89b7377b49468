"""Orientation from skeleton bone positions.

UP is the hips-to-head direction, RIGHT runs from the left shoulder to the
right shoulder and FORWARD is ``up x right``. With up=+Y and right=+X that
cross product is -Z, matching the target convention.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np

from orienty.math_utils import normalize, quat_rotate, vec3
from orienty.scene import SceneNode
from orienty.skeleton import StandardBones

ConfidenceTier = Literal["high", "medium", "low"]

_LOCAL_FORWARD = vec3(0.0, 0.0, -1.0)


@dataclass(frozen=True)
class OrientationResult:
    up_vector: np.ndarray
    forward_vector: np.ndarray
    right_vector: np.ndarray
    confidence: ConfidenceTier
    method: str


def calculate_skeleton_orientation(bones: StandardBones) -> OrientationResult | None:
    """Reconstruct an up/forward/right basis from the richest bone subset.

    Returns None when hips is missing or no bone above it is available.
    """
    left = bones.left_shoulder or bones.left_upper_arm
    right = bones.right_shoulder or bones.right_upper_arm

    if bones.hips is not None and bones.head is not None and left is not None and right is not None:
        return _from_full_skeleton(bones.hips, bones.head, left, right)

    if bones.hips is not None and bones.head is not None:
        return _from_spine(
            bones.hips,
            bones.head,
            confidence="medium",
            method="Spine only (hips to head, forward from hips orientation)",
        )

    top = bones.neck or bones.chest or bones.spine
    if bones.hips is not None and top is not None:
        return _from_spine(
            bones.hips,
            top,
            confidence="low",
            method="Partial spine (limited bone data)",
        )

    return None


def _from_full_skeleton(
    hips: SceneNode, head: SceneNode, left: SceneNode, right: SceneNode
) -> OrientationResult:
    up = normalize(head.world_position() - hips.world_position())
    right_vec = normalize(right.world_position() - left.world_position())
    forward = normalize(np.cross(up, right_vec))
    # forward and up are kept; right is rebuilt so the basis is orthonormal
    right_vec = normalize(np.cross(forward, up))

    return OrientationResult(
        up_vector=up,
        forward_vector=forward,
        right_vector=right_vec,
        confidence="high",
        method="Full skeleton (hips, head, shoulders)",
    )


def _from_spine(
    hips: SceneNode, top: SceneNode, *, confidence: ConfidenceTier, method: str
) -> OrientationResult:
    up = normalize(top.world_position() - hips.world_position())

    # Hips -Z hint, projected onto the plane perpendicular to up
    hint = quat_rotate(hips.world_quaternion(), _LOCAL_FORWARD)
    forward = normalize(hint - up * np.dot(hint, up))
    right_vec = normalize(np.cross(up, forward))

    return OrientationResult(
        up_vector=up,
        forward_vector=forward,
        right_vector=right_vec,
        confidence=confidence,
        method=method,
    )
