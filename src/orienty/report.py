"""Human-readable rendering of validation reports and detection results."""

from __future__ import annotations

import json
from typing import Any

from orienty.analysis import OrientationDetectionResult
from orienty.math_utils import rounded
from orienty.results import CorrectionTransform, ModelValidationReport


def summarize(report: ModelValidationReport) -> dict[str, int]:
    """Check counts plus a health percentage (share of passed checks)."""
    total = len(report.checks)
    passed = sum(1 for c in report.checks if c.passed)
    return {
        "total_checks": total,
        "passed": passed,
        "failed": report.error_count,
        "warnings": report.warning_count,
        "health_percentage": round(passed / total * 100) if total else 100,
    }


def report_payload(report: ModelValidationReport) -> dict[str, Any]:
    payload = report.model_dump(mode="json")
    payload["summary"] = summarize(report)
    return payload


def describe_correction(correction: CorrectionTransform) -> str:
    match correction.type:
        case "rotate":
            return f"Rotate {correction.angle_degrees:g}° around {correction.axis.upper()}-axis"
        case "scale":
            return f"Scale by ({correction.x:g}, {correction.y:g}, {correction.z:g})"
        case "translate":
            return (
                f"Translate by ({correction.x:.3f}, {correction.y:.3f}, {correction.z:.3f})"
            )
    raise ValueError(f"Unknown correction type {correction.type!r}")


def format_value(value: Any) -> str:
    if isinstance(value, dict) and set(value) == {"x", "y", "z"}:
        return f"({value['x']}, {value['y']}, {value['z']})"
    return json.dumps(value)


_STATUS = {"error": "FAIL", "warning": "WARN", "info": "INFO"}


def render_text(report: ModelValidationReport) -> str:
    summary = summarize(report)
    lines = [
        f"model: {report.model_name}",
        f"result: {'PASS' if report.overall_passed else 'FAIL'}"
        f" ({summary['passed']}/{summary['total_checks']} passed,"
        f" {report.error_count} error(s), {report.warning_count} warning(s))",
        "checks:",
    ]
    for check in report.checks:
        status = "PASS" if check.passed else _STATUS[check.severity]
        lines.append(f"  [{status}] {check.name}: {check.message}")
    if report.suggested_corrections:
        lines.append("corrections:")
        for i, correction in enumerate(report.suggested_corrections, start=1):
            lines.append(f"  {i}. {describe_correction(correction)}")
    return "\n".join(lines) + "\n"


def detection_payload(detection: OrientationDetectionResult) -> dict[str, Any]:
    return {
        "method": detection.method,
        "confidence": float(detection.confidence),
        "detected_up": rounded(detection.detected_up),
        "detected_forward": rounded(detection.detected_forward),
        "all_results": [
            {
                "method": r.method,
                "confidence": float(r.confidence),
                "detected_up": rounded(r.detected_up),
                "detected_forward": rounded(r.detected_forward),
                "metadata": r.metadata,
            }
            for r in detection.all_results
        ],
    }


def render_detection_text(payload: dict[str, Any]) -> str:
    lines = [
        f"method: {payload['method']}",
        f"confidence: {payload['confidence']:.3f}",
        f"up: {format_value(payload['detected_up'])}",
        f"forward: {format_value(payload['detected_forward'])}",
        "results:",
    ]
    if not payload["all_results"]:
        lines.append("  []")
    for result in payload["all_results"]:
        lines.append(f"  - method: {result['method']}")
        lines.append(f"    confidence: {result['confidence']:.3f}")
        lines.append(f"    up: {format_value(result['detected_up'])}")
        lines.append(f"    forward: {format_value(result['detected_forward'])}")
    return "\n".join(lines) + "\n"
