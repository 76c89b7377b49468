"""Multi-strategy orientation detection.

Strategies, from most to least reliable for humanoids:

1. Skeleton analysis, cross-validated against the bounding box
2. Bounding-box proportions
3. Root transform (always available fallback)

Each strategy returns a ``GeometryAnalysisResult`` or None. The detector
sorts every produced result by confidence and reports the best one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

import numpy as np

from orienty.analysis import GeometryAnalysisResult, OrientationDetectionResult
from orienty.bounding_box import analyze_bounding_box
from orienty.conventions import (
    BOOSTED_CONFIDENCE_CAP,
    CONFIDENT_BBOX,
    DOT_THRESHOLD,
    MILD_AGREEMENT,
    PARTIAL_AGREEMENT,
    SKELETON_CONFIDENCE_CAP,
    SKELETON_TIER_CONFIDENCE,
    STRONG_AGREEMENT,
    TARGET_FORWARD,
    TARGET_UP,
    TRANSFORM_CONFIDENCE,
)
from orienty.math_utils import deviation_degrees, extract_basis_vectors
from orienty.scene import SceneNode
from orienty.skeleton import analyze_skeleton, find_standard_bones
from orienty.skeleton_orientation import calculate_skeleton_orientation

logger = logging.getLogger(__name__)

Strategy = Callable[[SceneNode], GeometryAnalysisResult | None]


def skeleton_strategy(root: SceneNode) -> GeometryAnalysisResult | None:
    """Raw (not yet cross-validated) skeleton result."""
    analysis = analyze_skeleton(root)
    if not analysis.has_skeleton:
        return None

    standard = find_standard_bones(analysis.bones_by_name)
    orientation = calculate_skeleton_orientation(standard)
    if orientation is None:
        return None

    return GeometryAnalysisResult(
        method="skeleton",
        confidence=SKELETON_TIER_CONFIDENCE[orientation.confidence],
        detected_forward=orientation.forward_vector,
        detected_up=orientation.up_vector,
        metadata={
            "rigType": analysis.detected_rig_type,
            "boneCount": len(analysis.all_bones),
            "standardBones": standard.found(),
            "analysisMethod": orientation.method,
            "confidenceTier": orientation.confidence,
        },
    )


def bounding_box_strategy(root: SceneNode) -> GeometryAnalysisResult | None:
    return analyze_bounding_box(root)


def transform_strategy(root: SceneNode) -> GeometryAnalysisResult | None:
    basis = extract_basis_vectors(root.rotation)
    return GeometryAnalysisResult(
        method="transform",
        confidence=TRANSFORM_CONFIDENCE,
        detected_forward=basis.forward,
        detected_up=basis.up,
        metadata={
            "note": "Based on root transform only - may not reflect visual orientation",
        },
    )


def agreement_score(a: GeometryAnalysisResult, b: GeometryAnalysisResult) -> float:
    """Agreement in [0, 1]: 1 aligned, 0.5 perpendicular, 0 opposite."""
    forward = (float(np.dot(a.detected_forward, b.detected_forward)) + 1.0) / 2.0
    up = (float(np.dot(a.detected_up, b.detected_up)) + 1.0) / 2.0
    return (forward + up) / 2.0


def cross_validate(
    skeleton: GeometryAnalysisResult,
    bbox: GeometryAnalysisResult | None,
) -> GeometryAnalysisResult:
    """Adjust a skeleton result's confidence by its agreement with the bbox.

    Returns a new result; the input is left untouched. The metadata records
    the original confidence, the agreement score and the band applied.
    """
    original = skeleton.confidence
    agreement: float | None = None

    if bbox is None:
        confidence = min(original, SKELETON_CONFIDENCE_CAP)
        adjustment = "no-bounding-box"
    else:
        agreement = agreement_score(skeleton, bbox)
        if agreement >= STRONG_AGREEMENT:
            confidence = min(original * 1.05, BOOSTED_CONFIDENCE_CAP)
            adjustment = "strong-agreement"
        elif agreement >= MILD_AGREEMENT:
            confidence = min(original, SKELETON_CONFIDENCE_CAP)
            adjustment = "mild-agreement"
        elif agreement >= PARTIAL_AGREEMENT:
            confidence = original * 0.7
            adjustment = "partial-disagreement"
        elif bbox.confidence > CONFIDENT_BBOX:
            confidence = original * 0.4
            adjustment = "strong-disagreement"
        else:
            confidence = original * 0.6
            adjustment = "weak-disagreement"

    logger.debug(
        "Skeleton confidence %.3f -> %.3f (%s, agreement=%s)",
        original,
        confidence,
        adjustment,
        agreement,
    )
    metadata = dict(skeleton.metadata)
    metadata.update(
        {
            "originalConfidence": original,
            "agreement": agreement,
            "adjustment": adjustment,
        }
    )
    return replace(skeleton, confidence=confidence, metadata=metadata)


def _run_strategy(
    name: str, strategy: Strategy, root: SceneNode
) -> GeometryAnalysisResult | None:
    """Run one strategy; any failure means "no result from this strategy"."""
    try:
        return strategy(root)
    except Exception as e:
        logger.warning("%s analysis failed: %s", name, e)
        return None


def detect_model_orientation(root: SceneNode) -> OrientationDetectionResult:
    """Detect the orientation of the model under ``root``.

    Never raises: when no strategy produces a result the identity
    orientation (+Y up, -Z forward) is returned with confidence 0.
    """
    skeleton = _run_strategy("Skeleton", skeleton_strategy, root)
    bbox = _run_strategy("Bounding box", bounding_box_strategy, root)
    transform = _run_strategy("Transform", transform_strategy, root)

    results: list[GeometryAnalysisResult] = []
    if skeleton is not None:
        results.append(cross_validate(skeleton, bbox))
    if bbox is not None:
        results.append(bbox)
    if transform is not None:
        results.append(transform)

    if not results:
        return OrientationDetectionResult.identity()

    results.sort(key=lambda r: r.confidence, reverse=True)
    best = results[0]
    return OrientationDetectionResult(
        detected_forward=best.detected_forward,
        detected_up=best.detected_up,
        confidence=best.confidence,
        method=best.method,
        all_results=results,
    )


@dataclass(frozen=True)
class AxisMatch:
    is_correct: bool
    deviation: float  # degrees
    detected: np.ndarray


@dataclass(frozen=True)
class OrientationMatch:
    forward: AxisMatch
    up: AxisMatch
    detection: OrientationDetectionResult


def analyze_orientation_match(root: SceneNode) -> OrientationMatch:
    """Compare the detected orientation with the target convention."""
    detection = detect_model_orientation(root)

    def match(detected: np.ndarray, expected: np.ndarray) -> AxisMatch:
        return AxisMatch(
            is_correct=float(np.dot(detected, expected)) >= DOT_THRESHOLD,
            deviation=deviation_degrees(detected, expected),
            detected=detected,
        )

    return OrientationMatch(
        forward=match(detection.detected_forward, TARGET_FORWARD),
        up=match(detection.detected_up, TARGET_UP),
        detection=detection,
    )
