"""Value types shared by the orientation detection strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

import numpy as np

from orienty.conventions import TARGET_FORWARD, TARGET_UP

AnalysisMethod = Literal["skeleton", "bounding-box", "transform", "none"]


@dataclass(frozen=True)
class GeometryAnalysisResult:
    """Orientation proposed by one detection strategy."""

    method: AnalysisMethod
    confidence: float  # 0.0 - 1.0
    detected_forward: np.ndarray
    detected_up: np.ndarray
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class OrientationDetectionResult:
    """Fused detection: the head of ``all_results`` (sorted by confidence)."""

    detected_forward: np.ndarray
    detected_up: np.ndarray
    confidence: float
    method: AnalysisMethod
    all_results: list[GeometryAnalysisResult] = field(default_factory=list)

    @classmethod
    def identity(cls) -> OrientationDetectionResult:
        return cls(
            detected_forward=TARGET_FORWARD.copy(),
            detected_up=TARGET_UP.copy(),
            confidence=0.0,
            method="none",
        )

    def has_method(self, method: AnalysisMethod) -> bool:
        return any(r.method == method for r in self.all_results)
