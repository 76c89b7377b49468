"""Orientation heuristics from bounding-box proportions.

For upright models Y should be the tallest axis. A tallest Z usually means
a Z-up (Blender-style) export. A tallest X is ambiguous: wide props such as
tables keep a substantial height, while a model lying on its side has
almost none.
"""

from __future__ import annotations

from typing import Literal

import numpy as np

from orienty.analysis import GeometryAnalysisResult
from orienty.conventions import (
    BBOX_Y_UP_CAP,
    BBOX_Z_UP_CAP,
    SIDEWAYS_CONFIDENCE,
    WIDE_PROP_CONFIDENCE,
    WIDE_PROP_RATIO,
)
from orienty.math_utils import vec3
from orienty.scene import SceneNode, compute_bounding_box

_RATIO_EPSILON = 0.001


def analyze_bounding_box(root: SceneNode) -> GeometryAnalysisResult | None:
    """Infer orientation from the world-space box of ``root``.

    Returns None when the box is empty or has zero extent.
    """
    box = compute_bounding_box(root)
    if box is None:
        return None
    size = box.size
    if np.linalg.norm(size) == 0:
        return None

    width, height, depth = (float(v) for v in size)
    dims = {"x": width, "y": height, "z": depth}
    tallest = get_tallest_axis(width, height, depth)
    max_horizontal = max(width, depth)
    height_ratio = height / (max_horizontal + _RATIO_EPSILON)

    if tallest == "y":
        return GeometryAnalysisResult(
            method="bounding-box",
            confidence=min(BBOX_Y_UP_CAP, 0.3 + (height_ratio - 1.0) * 0.15),
            detected_forward=vec3(0, 0, -1),
            detected_up=vec3(0, 1, 0),
            metadata={
                "dimensions": dims,
                "tallestAxis": "Y",
                "heightRatio": height_ratio,
                "issue": "none",
            },
        )

    if tallest == "z":
        # A flat (zero-height) box saturates at the cap
        spread = abs(depth / height - 1.0) if height > 0 else float("inf")
        return GeometryAnalysisResult(
            method="bounding-box",
            confidence=min(BBOX_Z_UP_CAP, 0.4 + spread * 0.2),
            detected_forward=vec3(0, -1, 0),
            detected_up=vec3(0, 0, 1),
            metadata={
                "dimensions": dims,
                "tallestAxis": "Z",
                "heightRatio": depth / max_horizontal,
                "issue": "z-up",
                "suggestedFix": "Rotate -90° around X axis",
            },
        )

    y_to_x_ratio = height / width
    if y_to_x_ratio > WIDE_PROP_RATIO:
        return GeometryAnalysisResult(
            method="bounding-box",
            confidence=WIDE_PROP_CONFIDENCE,
            detected_forward=vec3(0, 0, -1),
            detected_up=vec3(0, 1, 0),
            metadata={
                "dimensions": dims,
                "tallestAxis": "X",
                "yToXRatio": y_to_x_ratio,
                "issue": "none",
                "note": "Wide prop - X is longest but Y-up appears correct",
            },
        )

    return GeometryAnalysisResult(
        method="bounding-box",
        confidence=SIDEWAYS_CONFIDENCE,
        detected_forward=vec3(0, 0, -1),
        detected_up=vec3(1, 0, 0),
        metadata={
            "dimensions": dims,
            "tallestAxis": "X",
            "yToXRatio": y_to_x_ratio,
            "issue": "possibly-sideways",
            "suggestedFix": "Model might be lying sideways (Y is very small compared to X)",
        },
    )


def get_tallest_axis(width: float, height: float, depth: float) -> Literal["x", "y", "z"]:
    """Tallest axis; ties resolve Y, then Z, then X."""
    if height >= width and height >= depth:
        return "y"
    if depth >= width and depth >= height:
        return "z"
    return "x"
