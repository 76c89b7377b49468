"""Model statistics and display normalization for scene graphs."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from orienty.conventions import TARGET_DISPLAY_SIZE
from orienty.math_utils import to_list
from orienty.scene import MESH_KINDS, BoundingBox, SceneNode, compute_bounding_box
from orienty.skeleton import RigType, analyze_skeleton

_ACTUAL_SIZE_LOW = 0.99
_ACTUAL_SIZE_HIGH = 1.01
# Models up to 50% over the display size are left as they are
_NORMALIZATION_TOLERANCE = 1.5


@dataclass(frozen=True)
class ModelInfo:
    vertex_count: int
    mesh_count: int
    bone_count: int
    has_skeleton: bool
    rig_type: RigType | None
    dimensions: np.ndarray  # (width, height, depth)
    bounding_box: BoundingBox
    center: np.ndarray


@dataclass(frozen=True)
class NormalizationResult:
    """Display-only normalization; the scene itself is never modified."""

    scale_factor: float
    center_offset: np.ndarray
    original_dimensions: np.ndarray
    max_dimension: float
    original_bounding_box: BoundingBox
    original_center: np.ndarray


def _empty_box() -> BoundingBox:
    return BoundingBox(min=np.zeros(3, dtype=np.float64), max=np.zeros(3, dtype=np.float64))


def analyze_model(root: SceneNode) -> ModelInfo:
    """Count geometry and bones under ``root`` and measure its extent."""
    vertex_count = 0
    mesh_count = 0
    for node in root.traverse():
        if node.kind in MESH_KINDS:
            mesh_count += 1
            vertex_count += len(node.vertices)

    skeleton = analyze_skeleton(root)
    box = compute_bounding_box(root) or _empty_box()

    return ModelInfo(
        vertex_count=vertex_count,
        mesh_count=mesh_count,
        bone_count=len(skeleton.all_bones),
        has_skeleton=skeleton.has_skeleton,
        rig_type=skeleton.detected_rig_type if skeleton.all_bones else None,
        dimensions=box.size,
        bounding_box=box,
        center=box.center,
    )


def calculate_normalization(
    root: SceneNode, target_max_dimension: float = TARGET_DISPLAY_SIZE
) -> NormalizationResult:
    """Scale and offset that fit the model into ``target_max_dimension``.

    Large models are scaled down; small ones are never scaled up. The
    center offset moves the box center to the origin in original units.
    """
    box = compute_bounding_box(root)
    if box is None:
        zeros = np.zeros(3, dtype=np.float64)
        return NormalizationResult(
            scale_factor=1.0,
            center_offset=zeros.copy(),
            original_dimensions=zeros.copy(),
            max_dimension=0.0,
            original_bounding_box=_empty_box(),
            original_center=zeros.copy(),
        )

    size = box.size
    center = box.center
    max_dimension = float(size.max())
    if max_dimension > target_max_dimension:
        scale_factor = target_max_dimension / max_dimension
    else:
        scale_factor = 1.0

    return NormalizationResult(
        scale_factor=scale_factor,
        center_offset=-center,
        original_dimensions=size,
        max_dimension=max_dimension,
        original_bounding_box=box,
        original_center=center,
    )


def format_display_scale(scale_factor: float) -> str:
    """Human-readable ratio, e.g. ``0.01`` -> ``"1:100"``."""
    if _ACTUAL_SIZE_LOW <= scale_factor <= _ACTUAL_SIZE_HIGH:
        return "1:1 (Actual Size)"
    if scale_factor < 1:
        return f"1:{round(1 / scale_factor)}"
    return f"{round(scale_factor)}:1"


def needs_normalization(max_dimension: float, target_size: float = TARGET_DISPLAY_SIZE) -> bool:
    return max_dimension > target_size * _NORMALIZATION_TOLERANCE


def inspect_scene(root: SceneNode) -> dict[str, object]:
    """JSON-ready inspection payload for the ``inspect`` command."""
    info = analyze_model(root)
    norm = calculate_normalization(root)
    return {
        "model": {
            "vertex_count": info.vertex_count,
            "mesh_count": info.mesh_count,
            "bone_count": info.bone_count,
            "has_skeleton": info.has_skeleton,
            "rig_type": info.rig_type,
            "dimensions": to_list(info.dimensions),
            "bounds": {
                "min": to_list(info.bounding_box.min),
                "max": to_list(info.bounding_box.max),
            },
            "center": to_list(info.center),
        },
        "normalization": {
            "scale_factor": norm.scale_factor,
            "display_scale": format_display_scale(norm.scale_factor),
            "center_offset": to_list(norm.center_offset),
            "max_dimension": norm.max_dimension,
            "needs_normalization": needs_normalization(norm.max_dimension),
        },
    }


def render_text(payload: dict[str, object]) -> str:
    """Render human-readable text output for inspect diagnostics."""
    model = payload["model"]
    norm = payload["normalization"]
    lines = [
        "model:",
        f"  vertex_count: {model['vertex_count']}",
        f"  mesh_count: {model['mesh_count']}",
        f"  bone_count: {model['bone_count']}",
        f"  has_skeleton: {str(model['has_skeleton']).lower()}",
        f"  rig_type: {model['rig_type'] or '-'}",
        f"  dimensions: {_fmt_vec(model['dimensions'])}",
        f"  bounds.min: {_fmt_vec(model['bounds']['min'])}",
        f"  bounds.max: {_fmt_vec(model['bounds']['max'])}",
        f"  center: {_fmt_vec(model['center'])}",
        "normalization:",
        f"  display_scale: {norm['display_scale']}",
        f"  scale_factor: {norm['scale_factor']:.6g}",
        f"  center_offset: {_fmt_vec(norm['center_offset'])}",
        f"  needs_normalization: {str(norm['needs_normalization']).lower()}",
    ]
    return "\n".join(lines) + "\n"


def _fmt_vec(values: list[float]) -> str:
    return "[" + ", ".join(f"{v:.6g}" for v in values) + "]"
