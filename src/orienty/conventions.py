"""Target convention and tolerance constants.

Target: right-handed, +Y up, -Z forward, +X right, uniform scale 1,
pivot at the bottom-center of the bounding box.
"""

from __future__ import annotations

import numpy as np

TARGET_UP = np.array([0.0, 1.0, 0.0], dtype=np.float64)
TARGET_FORWARD = np.array([0.0, 0.0, -1.0], dtype=np.float64)
TARGET_RIGHT = np.array([1.0, 0.0, 0.0], dtype=np.float64)

# cos(5 deg)
DOT_THRESHOLD = 0.996
# Looser alignment used to recognise a forward vector pointing down (-Y)
DOWNWARD_DOT_THRESHOLD = 0.9

SCALE_TOLERANCE = 0.01
PIVOT_TOLERANCE = 0.05

# Orientation checks report errors only at or above this detection confidence
LOW_CONFIDENCE_THRESHOLD = 0.5

SKELETON_TIER_CONFIDENCE: dict[str, float] = {
    "high": 0.85,
    "medium": 0.70,
    "low": 0.50,
}
TRANSFORM_CONFIDENCE = 0.3

# Cross-validation bands
SKELETON_CONFIDENCE_CAP = 0.85
BOOSTED_CONFIDENCE_CAP = 0.95
STRONG_AGREEMENT = 0.9
MILD_AGREEMENT = 0.7
PARTIAL_AGREEMENT = 0.5
CONFIDENT_BBOX = 0.6

# Bounding-box heuristics
BBOX_Y_UP_CAP = 0.6
BBOX_Z_UP_CAP = 0.7
WIDE_PROP_RATIO = 0.3
WIDE_PROP_CONFIDENCE = 0.3
SIDEWAYS_CONFIDENCE = 0.25

TARGET_DISPLAY_SIZE = 2.0
