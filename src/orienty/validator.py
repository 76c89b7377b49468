"""Top-level validation orchestrator."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from orienty.checks import (
    check_forward_direction,
    check_handedness,
    check_pivot_position,
    check_scale,
    check_up_direction,
)
from orienty.orientation import detect_model_orientation
from orienty.results import (
    CORRECTION_PRIORITY,
    CorrectionTransform,
    ModelValidationReport,
    ValidationCheckResult,
)
from orienty.scene import SceneNode

logger = logging.getLogger(__name__)


class ModelValidator:
    """Validate a model against the target convention."""

    def validate(self, root: SceneNode, model_name: str) -> ModelValidationReport:
        """Run every check and assemble the report.

        Checks run scale, handedness, up, forward, pivot: the order
        corrections are applied in. Orientation detection is shared by the
        up and forward checks.
        """
        timestamp = datetime.now(timezone.utc)
        detection = detect_model_orientation(root)

        checks: list[ValidationCheckResult] = [
            check_scale(root),
            check_handedness(root),
            check_up_direction(root, detection=detection),
            check_forward_direction(root, detection=detection),
            check_pivot_position(root),
        ]

        error_count = 0
        warning_count = 0
        for check in checks:
            if check.passed:
                continue
            if check.severity == "error":
                error_count += 1
            elif check.severity == "warning":
                warning_count += 1

        logger.info(
            "Validated %s: %d error(s), %d warning(s)", model_name, error_count, warning_count
        )

        return ModelValidationReport(
            model_name=model_name,
            timestamp=timestamp,
            checks=checks,
            overall_passed=error_count == 0,
            error_count=error_count,
            warning_count=warning_count,
            suggested_corrections=order_corrections(checks),
        )


def order_corrections(checks: list[ValidationCheckResult]) -> list[CorrectionTransform]:
    """Corrections of failed checks, stably ordered scale -> rotate -> translate."""
    corrections = [
        check.corrective_transform
        for check in checks
        if not check.passed and check.corrective_transform is not None
    ]
    return sorted(corrections, key=lambda c: CORRECTION_PRIORITY[c.type])


def validate_model(root: SceneNode, model_name: str = "model") -> ModelValidationReport:
    return ModelValidator().validate(root, model_name)
