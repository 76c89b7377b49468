"""Convention checks: scale, handedness, up, forward and pivot.

Each check reads the scene and returns a ``ValidationCheckResult``. A model
breaking a convention is reported as a failed result, never raised.
"""

from __future__ import annotations

import numpy as np

from orienty.analysis import OrientationDetectionResult
from orienty.conventions import (
    DOT_THRESHOLD,
    DOWNWARD_DOT_THRESHOLD,
    LOW_CONFIDENCE_THRESHOLD,
    PIVOT_TOLERANCE,
    SCALE_TOLERANCE,
    TARGET_FORWARD,
    TARGET_UP,
)
from orienty.math_utils import (
    compose_matrix,
    deviation_degrees,
    matrix3x3_determinant,
    normalize,
    rounded,
    vec3,
    vectors_approximately_equal,
)
from orienty.orientation import detect_model_orientation
from orienty.results import (
    RotateCorrection,
    ScaleCorrection,
    Severity,
    TranslateCorrection,
    ValidationCheckResult,
)
from orienty.scene import SceneNode, compute_bounding_box

_EXPECTED_UP = {"x": 0.0, "y": 1.0, "z": 0.0}
_EXPECTED_FORWARD = {"x": 0.0, "y": 0.0, "z": -1.0}

_Z_UP = vec3(0, 0, 1)
_DOWN = vec3(0, -1, 0)
_X_AXIS = vec3(1, 0, 0)
_BACKWARD = vec3(0, 0, 1)


def check_scale(root: SceneNode) -> ValidationCheckResult:
    """Root scale must be uniform and equal to 1."""
    scale = root.scale
    measured = rounded(scale)
    expected = {"x": 1.0, "y": 1.0, "z": 1.0}

    is_uniform = float(scale.max() - scale.min()) < SCALE_TOLERANCE
    is_normalized = bool(np.all(np.abs(scale - 1.0) < SCALE_TOLERANCE))

    if is_uniform and is_normalized:
        return ValidationCheckResult(
            check_id="scale",
            name="Scale",
            passed=True,
            severity="info",
            message="Uniform scale (1, 1, 1)",
            measured_value=measured,
            expected_value=expected,
        )

    issues: list[str] = []
    if not is_uniform:
        issues.append("non-uniform")
    if not is_normalized:
        issues.append("not normalized")

    x, y, z = (float(v) for v in scale)
    return ValidationCheckResult(
        check_id="scale",
        name="Scale",
        passed=False,
        severity="warning",
        message=f"Scale ({x:.2f}, {y:.2f}, {z:.2f}) - {', '.join(issues)}",
        measured_value=measured,
        expected_value=expected,
        corrective_transform=ScaleCorrection(x=_inverse(x), y=_inverse(y), z=_inverse(z)),
        metadata={"issues": issues},
    )


def _inverse(value: float) -> float:
    # A collapsed axis cannot be restored by scaling; leave it alone
    return 1.0 / value if value != 0 else 1.0


def check_handedness(root: SceneNode) -> ValidationCheckResult:
    """The root rotation+scale basis must have a positive determinant."""
    matrix = compose_matrix(np.zeros(3), root.rotation, root.scale)
    det = matrix3x3_determinant(matrix)
    expected = {"determinant": "> 0", "handedness": "right"}

    if det > 0:
        return ValidationCheckResult(
            check_id="handedness",
            name="Handedness",
            passed=True,
            severity="info",
            message="Right-handed coordinate system (correct)",
            measured_value={"determinant": round(det, 3), "handedness": "right"},
            expected_value=expected,
        )

    return ValidationCheckResult(
        check_id="handedness",
        name="Handedness",
        passed=False,
        severity="error",
        message="Left-handed system. Scale X by -1.",
        measured_value={"determinant": round(det, 3), "handedness": "left"},
        expected_value=expected,
        corrective_transform=ScaleCorrection(x=-1.0, y=1.0, z=1.0),
    )


def _orientation_severity(detection: OrientationDetectionResult) -> Severity:
    """Errors need a confident, skeleton-backed detection; otherwise warn."""
    if detection.confidence >= LOW_CONFIDENCE_THRESHOLD and detection.has_method("skeleton"):
        return "error"
    return "warning"


def _detection_metadata(
    detection: OrientationDetectionResult, vector: str, **extra: object
) -> dict[str, object]:
    metadata: dict[str, object] = {
        "detectionMethod": detection.method,
        "confidence": float(detection.confidence),
        "allResults": [
            {
                "method": r.method,
                "confidence": float(r.confidence),
                vector: rounded(r.detected_forward if vector == "forward" else r.detected_up),
            }
            for r in detection.all_results
        ],
    }
    metadata.update(extra)
    return metadata


def check_up_direction(
    root: SceneNode, *, detection: OrientationDetectionResult | None = None
) -> ValidationCheckResult:
    """Detected up must be +Y.

    Recognises Z-up, upside-down and sideways models and proposes the
    matching rotation. Severity drops to warning for ambiguous detections.
    """
    if detection is None:
        detection = detect_model_orientation(root)
    up = normalize(detection.detected_up)
    measured = rounded(up)

    if vectors_approximately_equal(up, TARGET_UP, DOT_THRESHOLD):
        return ValidationCheckResult(
            check_id="up-direction",
            name="Up Direction",
            passed=True,
            severity="info",
            message=f"Model up is +Y (correct). Detected via {detection.method}.",
            measured_value=measured,
            expected_value=_EXPECTED_UP,
            metadata=_detection_metadata(detection, "up"),
        )

    deviation = deviation_degrees(up, TARGET_UP)
    severity = _orientation_severity(detection)
    ambiguous = severity == "warning"

    if vectors_approximately_equal(up, _Z_UP, DOT_THRESHOLD):
        issue = "z-up"
        message = "Model is Z-up (Blender). Rotate -90° around X."
        correction: RotateCorrection | None = RotateCorrection(axis="x", angle_degrees=-90.0)
    elif vectors_approximately_equal(up, -TARGET_UP, DOT_THRESHOLD):
        issue = "upside-down"
        message = "Model is upside down (-Y up). Rotate 180° around Z."
        correction = RotateCorrection(axis="z", angle_degrees=180.0)
    elif abs(float(np.dot(up, _X_AXIS))) >= DOT_THRESHOLD:
        issue = "sideways"
        angle = 90.0 if up[0] > 0 else -90.0
        side = "+X" if up[0] > 0 else "-X"
        message = f"Model is lying sideways ({side} up). Rotate {angle:+.0f}° around Z."
        correction = RotateCorrection(axis="z", angle_degrees=angle)
    else:
        issue = "misaligned"
        message = f"Up is ({up[0]:.2f}, {up[1]:.2f}, {up[2]:.2f}). {deviation:.1f}° off."
        correction = None

    if ambiguous:
        message += " Low-confidence detection; this may be an ambiguous prop."

    return ValidationCheckResult(
        check_id="up-direction",
        name="Up Direction",
        passed=False,
        severity=severity,
        message=message,
        measured_value=measured,
        expected_value=_EXPECTED_UP,
        corrective_transform=correction,
        deviation_angle_degrees=deviation,
        metadata=_detection_metadata(detection, "up", issue=issue, ambiguous=ambiguous),
    )


def check_forward_direction(
    root: SceneNode, *, detection: OrientationDetectionResult | None = None
) -> ValidationCheckResult:
    """Detected forward must be -Z."""
    if detection is None:
        detection = detect_model_orientation(root)
    forward = normalize(detection.detected_forward)
    measured = rounded(forward)

    if vectors_approximately_equal(forward, TARGET_FORWARD, DOT_THRESHOLD):
        return ValidationCheckResult(
            check_id="forward-direction",
            name="Forward Direction",
            passed=True,
            severity="info",
            message=f"Model faces -Z (correct). Detected via {detection.method}.",
            measured_value=measured,
            expected_value=_EXPECTED_FORWARD,
            metadata=_detection_metadata(detection, "forward"),
        )

    deviation = deviation_degrees(forward, TARGET_FORWARD)
    severity = _orientation_severity(detection)
    ambiguous = severity == "warning"

    if vectors_approximately_equal(forward, _BACKWARD, DOT_THRESHOLD):
        issue = "backwards"
        message = "Model faces +Z (backwards). Rotate 180° around Y axis."
        correction: RotateCorrection | None = RotateCorrection(axis="y", angle_degrees=180.0)
    elif float(np.dot(forward, _DOWN)) >= DOWNWARD_DOT_THRESHOLD:
        issue = "z-up-export"
        message = "Model faces -Y (Z-up export issue). Rotate -90° around X axis."
        correction = RotateCorrection(axis="x", angle_degrees=-90.0)
    else:
        issue = "misaligned"
        message = (
            f"Forward is ({forward[0]:.2f}, {forward[1]:.2f}, {forward[2]:.2f}). "
            f"{deviation:.1f}° off."
        )
        correction = None

    if ambiguous:
        message += " Low-confidence detection; this may be an ambiguous prop."

    return ValidationCheckResult(
        check_id="forward-direction",
        name="Forward Direction",
        passed=False,
        severity=severity,
        message=message,
        measured_value=measured,
        expected_value=_EXPECTED_FORWARD,
        corrective_transform=correction,
        deviation_angle_degrees=deviation,
        metadata=_detection_metadata(detection, "forward", issue=issue, ambiguous=ambiguous),
    )


def check_pivot_position(root: SceneNode) -> ValidationCheckResult:
    """The pivot must sit at the bottom-center of the bounding box."""
    box = compute_bounding_box(root)
    if box is None:
        min_y, center_x, center_z = 0.0, 0.0, 0.0
    else:
        min_y = float(box.min[1])
        center_x = float(box.center[0])
        center_z = float(box.center[2])

    measured = {
        "minY": round(min_y, 3),
        "centerX": round(center_x, 3),
        "centerZ": round(center_z, 3),
    }
    expected = {"minY": 0.0, "centerX": 0.0, "centerZ": 0.0}

    issues: list[str] = []
    if abs(min_y) >= PIVOT_TOLERANCE:
        issues.append(f"Y min={min_y:.2f}")
    if abs(center_x) >= PIVOT_TOLERANCE:
        issues.append(f"X center={center_x:.2f}")
    if abs(center_z) >= PIVOT_TOLERANCE:
        issues.append(f"Z center={center_z:.2f}")

    if not issues:
        return ValidationCheckResult(
            check_id="pivot-position",
            name="Pivot Position",
            passed=True,
            severity="info",
            message="Pivot at bottom-center (correct)",
            measured_value=measured,
            expected_value=expected,
        )

    return ValidationCheckResult(
        check_id="pivot-position",
        name="Pivot Position",
        passed=False,
        severity="warning",
        message=f"Pivot offset: {', '.join(issues)}",
        measured_value=measured,
        expected_value=expected,
        corrective_transform=TranslateCorrection(x=-center_x, y=-min_y, z=-center_z),
    )
