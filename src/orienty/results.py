"""Pydantic v2 models for validation reports.

Reports hold plain data only, so ``model_dump(mode="json")`` is always
serialization-ready.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["error", "warning", "info"]


class RotateCorrection(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Literal["rotate"] = "rotate"
    axis: Literal["x", "y", "z"]
    angle_degrees: float


class ScaleCorrection(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Literal["scale"] = "scale"
    x: float
    y: float
    z: float


class TranslateCorrection(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Literal["translate"] = "translate"
    x: float
    y: float
    z: float


CorrectionTransform = Annotated[
    Union[RotateCorrection, ScaleCorrection, TranslateCorrection],
    Field(discriminator="type"),
]

# Scale before rotation before translation
CORRECTION_PRIORITY: dict[str, int] = {"scale": 1, "rotate": 2, "translate": 3}


class ValidationCheckResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    check_id: str
    name: str
    passed: bool
    severity: Severity
    message: str
    measured_value: Any = None
    expected_value: Any = None
    corrective_transform: CorrectionTransform | None = None
    deviation_angle_degrees: float | None = None
    metadata: dict[str, Any] | None = None


class ModelValidationReport(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, protected_namespaces=())

    model_name: str
    timestamp: datetime
    checks: list[ValidationCheckResult]
    overall_passed: bool
    error_count: int
    warning_count: int
    suggested_corrections: list[CorrectionTransform] = []
